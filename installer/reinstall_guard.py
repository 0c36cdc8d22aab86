# installer/reinstall_guard.py
# -*- coding: utf-8 -*-
"""
Handles an installation target that already exists on disk.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from common.command_utils import log_installer
from common.errors import InstallerError
from common.file_utils import remove_directory_tree
from common.prompt_utils import InteractionPrompter
from installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

REINSTALL_PROMPT = "Do you want to remove it and reinstall? (y/n): "


class ReinstallGuard:
    """Decides whether an existing target is removed before reinstalling."""

    def __init__(
        self,
        app_settings: AppSettings,
        prompter: InteractionPrompter,
        remover: Callable[..., None] = remove_directory_tree,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.prompter = prompter
        self.remover = remover
        self.logger = current_logger if current_logger else module_logger

    def _remove(self, target_path: Path) -> None:
        symbols = self.app_settings.symbols
        try:
            self.remover(target_path, self.app_settings, self.logger)
        except OSError as e:
            raise InstallerError(f"Could not remove {target_path}: {e}") from e
        log_installer(f"{symbols.get('success', '✅')} Removed successfully", "info",
                      self.logger, self.app_settings)

    def ensure_clean(self, target_path: Path) -> bool:
        """
        Make sure `target_path` can be (re)created.

        Returns:
            bool: True to proceed. False means the operator declined removal;
            callers treat that as a cancellation, not an error.

        Raises:
            InstallerError: The existing target could not be removed.
        """
        target_path = Path(target_path)
        if not target_path.exists() and not target_path.is_symlink():
            return True

        symbols = self.app_settings.symbols
        if self.app_settings.ci:
            log_installer(
                f"{symbols.get('trash', '🗑️')} Removing existing {target_path.name} (CI mode)...",
                "info",
                self.logger,
                self.app_settings,
            )
            self._remove(target_path)
            return True

        log_installer(
            f"\n{symbols.get('warning', '⚠️')} {target_path.name.capitalize()} directory already exists!",
            "warning",
            self.logger,
            self.app_settings,
        )
        if self.prompter.confirm(REINSTALL_PROMPT):
            log_installer(
                f"{symbols.get('trash', '🗑️')} Removing existing {target_path.name}...",
                "info",
                self.logger,
                self.app_settings,
            )
            self._remove(target_path)
            return True

        log_installer("Installation cancelled.", "info", self.logger, self.app_settings)
        return False
