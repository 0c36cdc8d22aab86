# common/errors.py
# -*- coding: utf-8 -*-
"""
Exception types shared by the installer components.
"""

from typing import Optional


class InstallerError(Exception):
    """Base class for fatal installer failures."""


class PrerequisiteError(InstallerError):
    """A required tool is missing or below its supported version."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name


class PipelineError(InstallerError):
    """A pipeline step failed; carries the failing step's position and label."""

    def __init__(
        self,
        step_label: str,
        step_index: int,
        total_steps: int,
        cause: Optional[BaseException] = None,
    ):
        self.step_label = step_label
        self.step_index = step_index
        self.total_steps = total_steps
        self.cause = cause
        reason = str(cause) if cause is not None and str(cause) else "step reported failure"
        super().__init__(f"{step_label}: {reason}")


class PipelineCancelled(Exception):
    """Raised by a step when the user declines to continue. Not an error."""
