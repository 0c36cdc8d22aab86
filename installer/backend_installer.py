# installer/backend_installer.py
# -*- coding: utf-8 -*-
"""
Installs the commerce backend: generates the application, writes its .env,
runs the build and migrations, and offers the optional admin user and seed
data steps.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from common.command_utils import log_installer, run_command
from common.errors import InstallerError, PipelineCancelled
from common.file_utils import copy_file_if_present
from common.pipeline import StepPipeline
from common.prompt_utils import InteractionPrompter
from installer.config_models import AppSettings, DatabaseConfig
from installer.database_config import collect_database_config
from installer.env_file import build_replacements, create_env_file
from installer.prerequisites import PrerequisiteChecker, ensure_prerequisites
from installer.reinstall_guard import ReinstallGuard
from installer.reporting import print_backend_banner, print_backend_next_steps

module_logger = logging.getLogger(__name__)

README_TEMPLATE_NAME = "README.backend.md"

CommandRunner = Callable[..., subprocess.CompletedProcess]


class BackendInstaller:
    """The backend installation flow as an ordered list of pipeline steps."""

    def __init__(
        self,
        app_settings: AppSettings,
        prompter: Optional[InteractionPrompter] = None,
        checker: Optional[PrerequisiteChecker] = None,
        guard: Optional[ReinstallGuard] = None,
        command_runner: CommandRunner = run_command,
        current_logger: Optional[logging.Logger] = None,
        check_prerequisites: bool = True,
    ):
        self.app_settings = app_settings
        self.logger = current_logger if current_logger else module_logger
        self.prompter = prompter or InteractionPrompter(app_settings.ci, current_logger=self.logger)
        self.checker = checker or PrerequisiteChecker(app_settings, current_logger=self.logger)
        self.guard = guard or ReinstallGuard(app_settings, self.prompter, current_logger=self.logger)
        self.command_runner = command_runner
        self.include_prerequisite_step = check_prerequisites

        self.db_config: Optional[DatabaseConfig] = None
        self.replacements: Optional[Dict[str, str]] = None

    @property
    def backend_path(self) -> Path:
        return self.app_settings.backend_path

    def _log(self, message: str, level: str = "info") -> None:
        log_installer(message, level, self.logger, self.app_settings)

    def _run_required(self, command: List[str], cwd: Path, failure_message: str) -> None:
        try:
            self.command_runner(command, self.app_settings, check=True, current_logger=self.logger, cwd=cwd)
        except subprocess.CalledProcessError as e:
            raise InstallerError(f"{failure_message} with code {e.returncode}") from e
        except OSError as e:
            raise InstallerError(f"{failure_message}: {e}") from e

    def _run_optional(self, command: List[str], cwd: Path) -> bool:
        try:
            self.command_runner(command, self.app_settings, check=True, current_logger=self.logger, cwd=cwd)
        except (subprocess.CalledProcessError, OSError) as e:
            self.logger.debug(f"Optional command failed: {e}")
            return False
        return True

    # --- steps -----------------------------------------------------------

    def check_prerequisites(self) -> None:
        ensure_prerequisites(self.app_settings, self.checker, self.prompter, self.logger)

    def check_existing_backend(self) -> None:
        if not self.guard.ensure_clean(self.backend_path):
            raise PipelineCancelled("Installation cancelled.")

    def collect_configuration(self) -> None:
        """Resolve database values and secrets before any installer runs."""
        self.db_config = collect_database_config(self.app_settings, self.prompter, self.logger)
        self.replacements = build_replacements(self.db_config, self.app_settings)

    def create_backend(self) -> None:
        symbols = self.app_settings.symbols
        self._log(f"\n{symbols.get('rocket', '🚀')} Installing Medusa backend...")
        self._log("This may take a few minutes...\n")
        self._run_required(
            [*self.app_settings.backend_create_command, self.app_settings.backend_dir_name],
            self.app_settings.project_root,
            "Installation failed",
        )
        if not self.backend_path.is_dir():
            raise InstallerError(
                f"Backend generator finished but {self.backend_path} was not created"
            )

    def write_env_file(self) -> None:
        if self.db_config is None or self.replacements is None:
            raise InstallerError("Database configuration was not collected")
        create_env_file(self.db_config, self.app_settings, self.logger, replacements=self.replacements)

    def run_migrations(self) -> None:
        symbols = self.app_settings.symbols
        self._log(f"\n{symbols.get('gear', '⚙️')} Running database migrations...")
        self._log("Building backend...")
        self._run_required(["npm", "run", "build"], self.backend_path, "Backend build failed")
        self._log("Running migrations...")
        self._run_required(["npx", "medusa", "migrations", "run"], self.backend_path, "Migration failed")
        self._log(f"{symbols.get('success', '✅')} Migrations completed successfully")

    def create_admin_user(self) -> None:
        symbols = self.app_settings.symbols
        if self.app_settings.ci or self.app_settings.skip_user_prompt:
            self._log(f"\n{symbols.get('skip', '⏭️')} Skipping admin user creation")
            return

        self._log(f"\n{symbols.get('user', '👤')} Create Admin User")
        if not self.prompter.confirm("Would you like to create an admin user now? (y/n): "):
            return

        email = self.prompter.ask("Admin email: ")
        password = self.prompter.ask("Admin password: ")
        if not email or not password:
            self._log(f"{symbols.get('warning', '⚠️')} Email and password are required. Skipping user creation.",
                      "warning")
            return

        if self._run_optional(["npx", "medusa", "user", "-e", email, "-p", password], self.backend_path):
            self._log(f"{symbols.get('success', '✅')} Admin user created successfully")
        else:
            self._log(f"{symbols.get('warning', '⚠️')} Failed to create admin user. You can create one later using:",
                      "warning")
            self._log(f"   cd {self.app_settings.backend_dir_name} && npx medusa user -e {email} -p <password>",
                      "warning")

    def seed_database(self) -> None:
        symbols = self.app_settings.symbols
        if self.app_settings.ci and self.app_settings.skip_seed_prompt:
            self._log(f"\n{symbols.get('skip', '⏭️')} Skipping database seeding (CI mode)")
            return

        if not self.app_settings.ci:
            self._log(f"\n{symbols.get('seed', '🌱')} Seed Database")
            if not self.prompter.confirm("Would you like to seed the database with sample data? (y/n): "):
                return

        self._log(f"\n{symbols.get('seed', '🌱')} Seeding database...")
        if self._run_optional(["npm", "run", "seed"], self.backend_path):
            self._log(f"{symbols.get('success', '✅')} Database seeded successfully")
        else:
            self._log(f"{symbols.get('warning', '⚠️')} Failed to seed database", "warning")
            if not self.app_settings.ci:
                self._log(f"You can seed it later using: cd {self.app_settings.backend_dir_name} && npm run seed",
                          "warning")

    def copy_additional_files(self) -> None:
        if self.app_settings.ci:
            return
        symbols = self.app_settings.symbols
        self._log(f"\n{symbols.get('memo', '📝')} Copying additional files...")
        source = Path(self.app_settings.templates_dir) / README_TEMPLATE_NAME
        try:
            copied = copy_file_if_present(source, self.backend_path / "README.md", self.app_settings, self.logger)
        except OSError as e:
            self._log(f"{symbols.get('warning', '⚠️')} Could not copy backend README: {e}", "warning")
            return
        if copied:
            self._log(f"{symbols.get('success', '✅')} Backend README copied")

    # --- pipeline --------------------------------------------------------

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        steps: List[Tuple[str, Callable[[], None]]] = []
        if self.include_prerequisite_step:
            steps.append(("Checking prerequisites", self.check_prerequisites))
        steps.extend([
            ("Checking for an existing backend", self.check_existing_backend),
            ("Collecting database configuration", self.collect_configuration),
            ("Generating the Medusa backend", self.create_backend),
            ("Creating the .env file", self.write_env_file),
            ("Building and running migrations", self.run_migrations),
            ("Creating an admin user", self.create_admin_user),
            ("Seeding the database", self.seed_database),
            ("Copying additional files", self.copy_additional_files),
        ])
        return steps

    def run(self) -> None:
        """
        Run the backend installation.

        Raises:
            PipelineError: A step failed.
            PipelineCancelled: The operator declined to replace an existing backend.
        """
        print_backend_banner(self.app_settings, self.logger)
        StepPipeline(self.steps(), self.app_settings, self.logger).run()
        print_backend_next_steps(self.app_settings, self.logger)
