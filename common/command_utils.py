# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing external commands and logging their output.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


class CommandOutcome(BaseModel):
    """Outcome of a probing command. `ok` is False for every failure cause."""
    model_config = ConfigDict(frozen=True)

    ok: bool
    output: Optional[str] = None
    reason: Optional[str] = None
    returncode: Optional[int] = None

    @property
    def first_line(self) -> Optional[str]:
        if not self.output:
            return None
        lines = self.output.strip().splitlines()
        return lines[0].strip() if lines else None


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs an installer message at the requested level.

    Args:
        message (str): The log message to be recorded.
        level (str): "debug", "info", "success", "warning", "error" or
            "critical". "success" and unknown levels are logged as info.
        current_logger (Optional[logging.Logger]): Logger to use. Falls back to
            the module logger.
        app_settings (Optional[AppSettings]): Installer settings, accepted so
            call sites can pass them through uniformly.
        exc_info (bool): Include exception details in the record.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def _symbols_for(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def _resolve_executable(command: List[str]) -> List[str]:
    # Windows ships npm/npx as .cmd shims that subprocess cannot run by bare name.
    if not command:
        return command
    resolved = shutil.which(str(command[0]))
    return [resolved, *command[1:]] if resolved else list(command)


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes an external command, logging the invocation and its result.

    Output is inherited from the terminal unless `capture_output` is set, so
    long-running installers can show their own progress.

    Args:
        command (List[str]): The command and its arguments.
        app_settings (Optional[AppSettings]): Installer settings (for symbols).
        check (bool): Raise CalledProcessError on a non-zero exit code.
        capture_output (bool): Capture stdout and stderr instead of inheriting.
        text (bool): Decode output streams as text.
        cmd_input (Optional[str]): Data passed to the command's stdin.
        current_logger (Optional[logging.Logger]): Logger to use.
        cwd (Optional[Union[str, Path]]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command.

    Returns:
        subprocess.CompletedProcess: The finished process.

    Raises:
        subprocess.CalledProcessError: Non-zero exit code while `check` is True.
        FileNotFoundError: The executable was not found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _symbols_for(app_settings)
    command_to_log_str = subprocess.list2cmdline([str(part) for part in command])

    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            _resolve_executable(command),
            check=check,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
        if capture_output and result.stdout and result.stdout.strip():
            log_installer(
                f"   stdout: {result.stdout.strip()}",
                "debug",
                effective_logger,
                app_settings,
            )
        return result
    except subprocess.CalledProcessError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if e.stderr and hasattr(e.stderr, "strip") and e.stderr.strip():
            log_installer(
                f"   stderr: {e.stderr.strip()}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command not found: {e.filename or command[0]}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise


def probe_command(
    command: List[str],
    timeout: Optional[float] = None,
    current_logger: Optional[logging.Logger] = None,
) -> CommandOutcome:
    """
    Runs a short, output-capturing command and reports how it went.

    Missing executables, non-zero exit codes, timeouts and OS errors are all
    returned as `ok=False` with a reason instead of being raised. Output bytes
    that do not decode in the locale encoding are replaced, not fatal.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        result = subprocess.run(
            _resolve_executable(command),
            check=False,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError:
        outcome = CommandOutcome(ok=False, reason="not found")
    except subprocess.TimeoutExpired:
        outcome = CommandOutcome(ok=False, reason=f"timed out after {timeout}s")
    except UnicodeDecodeError as e:
        outcome = CommandOutcome(ok=False, reason=f"produced unreadable output: {e}")
    except OSError as e:
        outcome = CommandOutcome(ok=False, reason=f"could not be run: {e}")
    else:
        if result.returncode != 0:
            outcome = CommandOutcome(
                ok=False,
                output=result.stdout,
                reason=f"exited with code {result.returncode}",
                returncode=result.returncode,
            )
        else:
            outcome = CommandOutcome(ok=True, output=result.stdout, returncode=0)

    if not outcome.ok:
        logger_to_use.debug(f"Probe `{' '.join(command)}` failed: {outcome.reason}")
    return outcome


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
