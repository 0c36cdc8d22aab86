# installer/prerequisites.py
# -*- coding: utf-8 -*-
"""
Detection of the external tools the installer depends on.

Every tool is checked by running its ``--version`` subcommand. PostgreSQL gets
extra detection on Windows, where the server is often installed without its
``psql`` client being on PATH.
"""

import enum
import logging
import os
import platform
import re
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from common.command_utils import CommandOutcome, log_installer, probe_command
from common.errors import PrerequisiteError
from common.prompt_utils import InteractionPrompter
from installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

POSTGRES_SERVICE_PREFIX = "postgresql"
POSTGRES_WINDOWS_INSTALL_DIRS: Tuple[str, ...] = (
    r"C:\Program Files\PostgreSQL",
    r"C:\PostgreSQL",
)
POSTGRES_PATH_NOTE = "psql not in PATH, but PostgreSQL appears to be installed"

NODE_DOWNLOAD_URL = "https://nodejs.org/"
POSTGRES_DOWNLOAD_URL = "https://www.postgresql.org/download/"
GIT_DOWNLOAD_URL = "https://git-scm.com/downloads"

_VERSION_MAJOR_PATTERN = re.compile(r"(\d+)(?:\.\d+)*")


class Severity(str, enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"


class Readiness(str, enum.Enum):
    REQUIRED_MISSING = "required_missing"
    OPTIONAL_MISSING = "optional_missing"
    ALL_SATISFIED = "all_satisfied"


class ToolSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    command: str
    severity: Severity


class CheckResult(BaseModel):
    """Presence of one tool at the time of the check."""
    model_config = ConfigDict(frozen=True)

    name: str
    installed: bool
    version_label: Optional[str] = None
    severity: Severity = Severity.OPTIONAL
    display_name: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_outcome(cls, spec: ToolSpec, outcome: CommandOutcome) -> "CheckResult":
        return cls(
            name=spec.name,
            installed=outcome.ok,
            version_label=outcome.first_line if outcome.ok else None,
            severity=spec.severity,
            display_name=spec.display_name,
        )


TOOL_SPECS: Dict[str, ToolSpec] = {
    "node": ToolSpec(name="node", display_name="Node.js", command="node", severity=Severity.REQUIRED),
    "npm": ToolSpec(name="npm", display_name="npm", command="npm", severity=Severity.REQUIRED),
    "postgres": ToolSpec(name="postgres", display_name="PostgreSQL", command="psql", severity=Severity.OPTIONAL),
    "git": ToolSpec(name="git", display_name="Git", command="git", severity=Severity.OPTIONAL),
}


def parse_windows_services(sc_output: str) -> List[Tuple[str, str]]:
    """
    Parse ``sc query`` output into (service name, state) pairs.

    The state is the symbolic word of the STATE line, e.g. "RUNNING".
    """
    services: List[Tuple[str, str]] = []
    current_name: Optional[str] = None
    for raw_line in sc_output.splitlines():
        line = raw_line.strip()
        if line.upper().startswith("SERVICE_NAME:"):
            current_name = line.split(":", 1)[1].strip()
        elif line.upper().startswith("STATE") and current_name is not None:
            state_words = line.split(":", 1)[1].split()
            state = state_words[1] if len(state_words) > 1 else ""
            services.append((current_name, state.upper()))
            current_name = None
    return services


def parse_major_version(version_label: Optional[str]) -> Optional[int]:
    """Extract the major version from labels like "v20.11.1" or "10.2.4"."""
    if not version_label:
        return None
    match = _VERSION_MAJOR_PATTERN.search(version_label)
    return int(match.group(1)) if match else None


class PrerequisiteChecker:
    """Checks tool presence. All collaborators are injectable for testing."""

    def __init__(
        self,
        app_settings: AppSettings,
        runner: Callable[..., CommandOutcome] = probe_command,
        platform_name: Optional[str] = None,
        path_exists: Callable[[str], bool] = os.path.exists,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.runner = runner
        self.platform_name = platform_name if platform_name is not None else platform.system()
        self.path_exists = path_exists
        self.logger = current_logger if current_logger else module_logger

    @property
    def is_windows(self) -> bool:
        return self.platform_name.lower().startswith("win")

    def _probe_version(self, command: str) -> CommandOutcome:
        return self.runner(
            [command, "--version"],
            timeout=self.app_settings.command_timeout_seconds,
            current_logger=self.logger,
        )

    def check(self, tool_name: str) -> CheckResult:
        spec = TOOL_SPECS.get(tool_name) or ToolSpec(
            name=tool_name,
            display_name=tool_name,
            command=tool_name,
            severity=Severity.OPTIONAL,
        )
        if spec.name == "postgres" and self.is_windows:
            detected = self._detect_windows_postgres(spec)
            if detected is not None:
                return detected
        return CheckResult.from_outcome(spec, self._probe_version(spec.command))

    def _detect_windows_postgres(self, spec: ToolSpec) -> Optional[CheckResult]:
        outcome = self.runner(
            ["sc", "query", "type=", "service", "state=", "all"],
            timeout=self.app_settings.command_timeout_seconds,
            current_logger=self.logger,
        )
        if outcome.ok and outcome.output:
            for service_name, state in parse_windows_services(outcome.output):
                if service_name.lower().startswith(POSTGRES_SERVICE_PREFIX) and state == "RUNNING":
                    return CheckResult(
                        name=spec.name,
                        installed=True,
                        version_label=f"Service {service_name} detected (Windows)",
                        severity=spec.severity,
                        display_name=spec.display_name,
                    )

        for install_dir in POSTGRES_WINDOWS_INSTALL_DIRS:
            if self.path_exists(install_dir):
                return CheckResult(
                    name=spec.name,
                    installed=True,
                    version_label=f"Installation found at {install_dir}",
                    severity=spec.severity,
                    display_name=spec.display_name,
                    note=POSTGRES_PATH_NOTE,
                )
        return None

    def check_all(self) -> Dict[str, CheckResult]:
        return {name: self.check(name) for name in TOOL_SPECS}


def classify_readiness(results: Mapping[str, CheckResult]) -> Readiness:
    missing = [result for result in results.values() if not result.installed]
    if any(result.severity == Severity.REQUIRED for result in missing):
        return Readiness.REQUIRED_MISSING
    if missing:
        return Readiness.OPTIONAL_MISSING
    return Readiness.ALL_SATISFIED


def check_node_version_floor(result: CheckResult, minimum_major: int) -> None:
    """
    Raise PrerequisiteError if Node.js is older than `minimum_major`.

    An unparseable version label is not treated as a failure.
    """
    major = parse_major_version(result.version_label)
    if major is not None and major < minimum_major:
        raise PrerequisiteError(
            f"Node.js version {result.version_label} is too old! "
            f"Please upgrade to Node.js {minimum_major} or higher",
            tool_name=result.name,
        )


def report_check_results(
    results: Mapping[str, CheckResult],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Log one status line per tool."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    log_installer("\nSystem Check:", "info", logger_to_use, app_settings)
    for result in results.values():
        label = result.display_name or result.name
        if result.installed:
            log_installer(
                f"  {symbols.get('success', '✅')} {label}: {result.version_label or 'installed'}",
                "info",
                logger_to_use,
                app_settings,
            )
            if result.note:
                log_installer(f"     Note: {result.note}", "warning", logger_to_use, app_settings)
        elif result.severity == Severity.REQUIRED:
            log_installer(
                f"  {symbols.get('error', '❌')} {label}: Not installed",
                "error",
                logger_to_use,
                app_settings,
            )
        else:
            log_installer(
                f"  {symbols.get('warning', '⚠️')} {label}: Not detected",
                "warning",
                logger_to_use,
                app_settings,
            )


def report_missing_hints(
    results: Mapping[str, CheckResult],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Log where to get each missing tool."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    warning = symbols.get("warning", "⚠️")

    def missing(name: str) -> bool:
        return name in results and not results[name].installed

    if missing("node"):
        log_installer(f"  • Node.js {app_settings.node_min_major_version}+: {NODE_DOWNLOAD_URL}",
                      "error", logger_to_use, app_settings)
    if missing("npm"):
        log_installer("  • npm (comes with Node.js)", "error", logger_to_use, app_settings)
    if missing("postgres"):
        log_installer(f"\n{warning} PostgreSQL not detected:", "warning", logger_to_use, app_settings)
        log_installer("   PostgreSQL is required to run the backend.", "warning", logger_to_use, app_settings)
        log_installer(f"   Download: {POSTGRES_DOWNLOAD_URL}", "warning", logger_to_use, app_settings)
        log_installer("   If already installed, ensure it's running and accessible.",
                      "warning", logger_to_use, app_settings)
    if missing("git"):
        log_installer(f"\n{warning} Git not detected (optional):", "warning", logger_to_use, app_settings)
        log_installer("   Git is recommended but not required.", "warning", logger_to_use, app_settings)
        log_installer(f"   Download: {GIT_DOWNLOAD_URL}", "warning", logger_to_use, app_settings)


def run_prerequisite_check(
    app_settings: AppSettings,
    checker: Optional[PrerequisiteChecker] = None,
    current_logger: Optional[logging.Logger] = None,
) -> Readiness:
    """
    Standalone prerequisite check: report every tool and classify readiness.

    Returns the readiness; the caller decides the exit code.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    checker = checker or PrerequisiteChecker(app_settings, current_logger=logger_to_use)

    log_installer(f"\n{symbols.get('search', '🔍')} Checking System Prerequisites", "info",
                  logger_to_use, app_settings)
    results = checker.check_all()
    report_check_results(results, app_settings, logger_to_use)

    readiness = classify_readiness(results)
    log_installer(f"\n{symbols.get('clipboard', '📋')} Summary:", "info", logger_to_use, app_settings)
    if readiness == Readiness.ALL_SATISFIED:
        log_installer(f"{symbols.get('success', '✅')} All prerequisites are installed!", "info",
                      logger_to_use, app_settings)
        log_installer("You can proceed with installation.", "info", logger_to_use, app_settings)
    elif readiness == Readiness.OPTIONAL_MISSING:
        log_installer(f"{symbols.get('success', '✅')} Required prerequisites are installed!", "info",
                      logger_to_use, app_settings)
        report_missing_hints(results, app_settings, logger_to_use)
        log_installer(f"\n{symbols.get('tip', '💡')} You can still proceed with storefront installation.",
                      "info", logger_to_use, app_settings)
        log_installer("   Backend installation will require PostgreSQL.", "info", logger_to_use, app_settings)
    else:
        log_installer(f"{symbols.get('error', '❌')} Required prerequisites are missing!", "error",
                      logger_to_use, app_settings)
        report_missing_hints(results, app_settings, logger_to_use)
    return readiness


def ensure_prerequisites(
    app_settings: AppSettings,
    checker: PrerequisiteChecker,
    prompter: InteractionPrompter,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, CheckResult]:
    """
    Gate an installation on its prerequisites.

    Required tools must be present and Node.js must meet the version floor.
    A PostgreSQL that cannot be detected only stops an interactive run if the
    operator says it is not installed; automated runs continue.

    Raises:
        PrerequisiteError: A required tool is missing, too old, or the
            operator confirmed PostgreSQL is not available.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    results = checker.check_all()
    report_check_results(results, app_settings, logger_to_use)

    if classify_readiness(results) == Readiness.REQUIRED_MISSING:
        report_missing_hints(
            {name: result for name, result in results.items() if result.severity == Severity.REQUIRED},
            app_settings,
            logger_to_use,
        )
        missing = ", ".join(
            result.display_name or result.name
            for result in results.values()
            if result.severity == Severity.REQUIRED and not result.installed
        )
        raise PrerequisiteError(
            f"Node.js and npm are required! Missing: {missing}. "
            f"Please install Node.js {app_settings.node_min_major_version}+ from {NODE_DOWNLOAD_URL}",
            tool_name=missing,
        )

    check_node_version_floor(results["node"], app_settings.node_min_major_version)

    postgres = results.get("postgres")
    if postgres is not None and not postgres.installed and not app_settings.ci:
        log_installer(f"\n{symbols.get('warning', '⚠️')} PostgreSQL not detected in PATH", "warning",
                      logger_to_use, app_settings)
        if not prompter.confirm("Do you have PostgreSQL installed and running? (y/n): "):
            log_installer(f"Please install PostgreSQL before continuing: {POSTGRES_DOWNLOAD_URL}",
                          "warning", logger_to_use, app_settings)
            raise PrerequisiteError("PostgreSQL is required to install the backend.", tool_name="postgres")

    log_installer(f"\n{symbols.get('success', '✅')} All prerequisites satisfied!", "info",
                  logger_to_use, app_settings)
    return results
