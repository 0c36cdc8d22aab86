# common/prompt_utils.py
# -*- coding: utf-8 -*-
"""
Prompting helpers that work the same way in interactive and automated runs.
"""

import logging
from typing import Callable, Optional

from common.command_utils import log_installer

module_logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = ("y", "yes")


class InteractionPrompter:
    """
    Asks the operator one question at a time.

    In automated mode every question resolves to an empty answer without
    touching stdin, so callers fall back to their own defaults.
    """

    def __init__(
        self,
        automated: bool,
        input_func: Callable[[str], str] = input,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.automated = automated
        self._input = input_func
        self.logger = current_logger if current_logger else module_logger

    def ask(self, prompt_text: str) -> str:
        """Return the operator's answer, or "" in automated mode or on EOF."""
        if self.automated:
            return ""
        try:
            return self._input(prompt_text)
        except EOFError:
            log_installer(
                f"No user input (EOF), using the default answer for prompt: '{prompt_text.strip()}'",
                "warning",
                self.logger,
            )
            return ""

    def ask_with_default(self, prompt_text: str, default: str) -> str:
        answer = self.ask(prompt_text)
        return answer if answer else default

    def confirm(self, prompt_text: str) -> bool:
        """True only when the answer is "y" or "yes" (any case)."""
        return self.ask(prompt_text).strip().lower() in AFFIRMATIVE_ANSWERS
