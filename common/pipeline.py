# common/pipeline.py
# -*- coding: utf-8 -*-
"""
Sequential step pipeline for installer runs.

Steps run strictly in declared order. The first failing step stops the run
and is reported by label and position; completed steps are never rolled back.
"""

import enum
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from common.command_utils import log_installer
from common.errors import PipelineCancelled, PipelineError
from installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

StepAction = Callable[[], Any]

HEADER_RULE = "─" * 60


class PipelineState(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Step(BaseModel):
    """One labelled unit of work, numbered from 1."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: int
    total: int
    label: str
    action: StepAction


class StepPipeline:
    """Runs an ordered list of (label, action) pairs, halting on first failure."""

    def __init__(
        self,
        steps: Sequence[Tuple[str, StepAction]],
        app_settings: Optional[AppSettings] = None,
        pipeline_logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            steps: Ordered (label, action) pairs. An action fails by raising an
                exception or by returning False; any other return is success.
            app_settings: Installer settings, used for log symbols.
            pipeline_logger: An optional logger instance.
        """
        total = len(steps)
        self.steps: List[Step] = [
            Step(index=i + 1, total=total, label=label, action=action)
            for i, (label, action) in enumerate(steps)
        ]
        self.app_settings = app_settings
        self.logger = pipeline_logger or module_logger
        self.state = PipelineState.PENDING
        self.current_index = 1 if self.steps else 0
        self.executed: List[str] = []

    def _emit_header(self, step: Step) -> None:
        log_installer(
            f"\n[{step.index}/{step.total}] {step.label}",
            "info",
            self.logger,
            self.app_settings,
        )
        log_installer(HEADER_RULE, "info", self.logger, self.app_settings)

    def run(self) -> None:
        """
        Execute all steps in order.

        Raises:
            PipelineError: The first failing step, wrapped with its label.
            PipelineCancelled: A step reported a user-requested cancellation.
        """
        symbols = self.app_settings.symbols if self.app_settings else SYMBOLS_DEFAULT

        for step in self.steps:
            self.current_index = step.index
            self.state = PipelineState.RUNNING
            self._emit_header(step)
            try:
                result = step.action()
            except PipelineCancelled:
                self.state = PipelineState.CANCELLED
                log_installer(
                    f"{symbols.get('info', 'ℹ️')} Cancelled during step '{step.label}'.",
                    "info",
                    self.logger,
                    self.app_settings,
                )
                raise
            except Exception as e:
                self.state = PipelineState.FAILED
                log_installer(
                    f"{symbols.get('error', '❌')} Step {step.index}/{step.total} '{step.label}' failed: {e}",
                    "debug",
                    self.logger,
                    self.app_settings,
                    exc_info=True,
                )
                raise PipelineError(step.label, step.index, step.total, e) from e

            self.executed.append(step.label)
            if result is False:
                self.state = PipelineState.FAILED
                raise PipelineError(step.label, step.index, step.total)
            self.state = PipelineState.PENDING
            self.current_index = step.index + 1

        self.state = PipelineState.COMPLETED
        self.current_index = len(self.steps)
