# installer/main_installer.py
# -*- coding: utf-8 -*-
"""
Full workspace installation: prerequisites, root and storefront
dependencies, the backend, and a final verification of the workspace.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from common.command_utils import log_installer, run_command
from common.errors import InstallerError
from common.pipeline import StepPipeline
from common.prompt_utils import InteractionPrompter
from installer.backend_installer import BackendInstaller, CommandRunner
from installer.config_models import AppSettings
from installer.env_file import ENV_FILE_NAME
from installer.prerequisites import PrerequisiteChecker, ensure_prerequisites
from installer.reporting import print_final_instructions, print_workspace_banner

module_logger = logging.getLogger(__name__)

START_PROMPT = "Press Enter to start installation or Ctrl+C to cancel..."


def verify_workspace(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, bool]:
    """
    Report which parts of the workspace are in place. Never fails the run.

    Returns:
        Dict[str, bool]: Presence of each checked path, keyed by description.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    backend: Path = app_settings.backend_path
    storefront: Path = app_settings.storefront_path

    checks = {
        "Backend directory": backend.is_dir(),
        "Storefront dependencies": (storefront / "node_modules").is_dir(),
        "Backend dependencies": (backend / "node_modules").is_dir(),
        "Backend .env file": (backend / ENV_FILE_NAME).is_file(),
    }

    log_installer("\nWorkspace Status:", "info", logger_to_use, app_settings)
    for description, present in checks.items():
        if present:
            log_installer(f"  {description}: {symbols.get('success', '✅')}", "info", logger_to_use, app_settings)
        else:
            log_installer(f"  {description}: {symbols.get('error', '❌')}", "warning", logger_to_use, app_settings)

    if all(checks.values()):
        log_installer(f"\n{symbols.get('success', '✅')} Workspace setup verified!", "info",
                      logger_to_use, app_settings)
    else:
        log_installer(f"\n{symbols.get('warning', '⚠️')} Some components may not be properly installed",
                      "warning", logger_to_use, app_settings)
    return checks


class WorkspaceInstaller:
    """The full installation flow as a five-step pipeline."""

    def __init__(
        self,
        app_settings: AppSettings,
        prompter: Optional[InteractionPrompter] = None,
        checker: Optional[PrerequisiteChecker] = None,
        command_runner: CommandRunner = run_command,
        backend_installer: Optional[BackendInstaller] = None,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = current_logger if current_logger else module_logger
        self.prompter = prompter or InteractionPrompter(app_settings.ci, current_logger=self.logger)
        self.checker = checker or PrerequisiteChecker(app_settings, current_logger=self.logger)
        self.command_runner = command_runner
        self.backend_installer = backend_installer or BackendInstaller(
            app_settings,
            prompter=self.prompter,
            checker=self.checker,
            command_runner=command_runner,
            current_logger=self.logger,
            check_prerequisites=False,
        )

    def _npm_install(self, cwd: Path, failure_message: str) -> None:
        try:
            self.command_runner(["npm", "install"], self.app_settings, check=True,
                                current_logger=self.logger, cwd=cwd)
        except subprocess.CalledProcessError as e:
            raise InstallerError(f"{failure_message}: npm install exited with code {e.returncode}") from e
        except OSError as e:
            raise InstallerError(f"{failure_message}: {e}") from e

    def check_prerequisites(self) -> None:
        ensure_prerequisites(self.app_settings, self.checker, self.prompter, self.logger)
        if not self.app_settings.ci:
            self.prompter.ask(f"\n{START_PROMPT}")

    def install_root_dependencies(self) -> None:
        symbols = self.app_settings.symbols
        log_installer("Installing workspace dependencies...", "info", self.logger, self.app_settings)
        self._npm_install(self.app_settings.project_root, "Failed to install root dependencies")
        log_installer(f"\n{symbols.get('success', '✅')} Root dependencies installed", "info",
                      self.logger, self.app_settings)

    def install_storefront(self) -> None:
        symbols = self.app_settings.symbols
        storefront = self.app_settings.storefront_path
        if not storefront.is_dir():
            log_installer(f"{symbols.get('error', '❌')} Storefront directory not found!", "error",
                          self.logger, self.app_settings)
            log_installer("This should already exist in your repository.", "warning",
                          self.logger, self.app_settings)
            raise InstallerError("Storefront directory missing")
        log_installer("Installing Angular dependencies...", "info", self.logger, self.app_settings)
        self._npm_install(storefront, "Failed to install storefront")
        log_installer(f"\n{symbols.get('success', '✅')} Storefront dependencies installed", "info",
                      self.logger, self.app_settings)

    def install_backend(self) -> None:
        """
        Run the nested backend pipeline.

        A declined backend reinstall raises PipelineCancelled, which ends the
        whole workspace run here: verification and the final instructions are
        skipped and the entry point exits 0.
        """
        symbols = self.app_settings.symbols
        self.backend_installer.run()
        log_installer(f"\n{symbols.get('success', '✅')} Backend installed successfully", "info",
                      self.logger, self.app_settings)

    def verify(self) -> None:
        verify_workspace(self.app_settings, self.logger)

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        symbols = self.app_settings.symbols
        return [
            (f"{symbols.get('search', '🔍')} Checking Prerequisites", self.check_prerequisites),
            (f"{symbols.get('package', '📦')} Installing Root Dependencies", self.install_root_dependencies),
            ("⚡ Installing Storefront (Angular)", self.install_storefront),
            (f"{symbols.get('rocket', '🚀')} Installing Backend (Medusa)", self.install_backend),
            (f"{symbols.get('search', '🔍')} Verifying Workspace Setup", self.verify),
        ]

    def run(self) -> None:
        """
        Run the full installation.

        Raises:
            PipelineError: A step failed.
            PipelineCancelled: The operator declined to replace an existing backend.
        """
        print_workspace_banner(self.app_settings, self.logger)
        StepPipeline(self.steps(), self.app_settings, self.logger).run()
        print_final_instructions(self.app_settings, self.logger)
