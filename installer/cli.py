# installer/cli.py
# -*- coding: utf-8 -*-
"""
Command-line interface for the workspace installer.

Exit codes: 0 on success or when the operator cancels, 1 on any fatal
failure (including a missing required tool).
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import click
from click.core import ParameterSource
from pydantic import ValidationError

from common.core_utils import setup_logging
from common.errors import PipelineCancelled
from installer.backend_installer import BackendInstaller
from installer.config_loader import load_app_settings
from installer.config_models import LOG_PREFIX_DEFAULT, AppSettings
from installer.main_installer import WorkspaceInstaller
from installer.prerequisites import Readiness, run_prerequisite_check
from installer.reporting import (
    handle_fatal_error,
    install_excepthook,
    print_postinstall_message,
    view_configuration,
)

logger = logging.getLogger("storefront_installer")

VERBOSE_LOG_FORMAT = "{log_prefix}%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def run_guarded(action: Callable[[], None], app_settings: Optional[AppSettings]) -> int:
    """
    Run `action` under the top-level error handler and return an exit code.
    """
    try:
        action()
    except PipelineCancelled:
        return 0
    except (Exception, KeyboardInterrupt) as e:
        logger.debug("Installer run failed", exc_info=True)
        return handle_fatal_error(e, app_settings, logger)
    return 0


@click.group()
@click.option(
    "--ci/--interactive",
    "ci",
    default=None,
    help="Run without prompts (defaults to the CI environment variable).",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root containing the storefront and backend directories.",
)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML settings file (default: installer.yaml in the project root).",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file.")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.pass_context
def cli(ctx, ci, project_root, config_file, log_file, verbose):
    """
    A command-line interface for the commerce starter installer.
    """
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        log_file=log_file,
        log_format_str=VERBOSE_LOG_FORMAT if verbose else None,
        log_prefix=LOG_PREFIX_DEFAULT,
    )
    if ctx.get_parameter_source("ci") == ParameterSource.DEFAULT:
        # Neither flag given: the CI environment variable decides.
        ci = None
    try:
        app_settings = load_app_settings(
            {"ci": ci, "project_root": project_root},
            config_file_path=config_file,
            current_logger=logger,
        )
    except ValidationError as e:
        ctx.exit(handle_fatal_error(e, None, logger))
    install_excepthook(app_settings, logger)
    ctx.obj = app_settings


@cli.command(name="check")
@click.pass_obj
def check_command(app_settings: AppSettings):
    """
    Check for Node.js, npm, PostgreSQL and Git.

    Exits with 1 when a required tool is missing.
    """
    readiness = run_prerequisite_check(app_settings, current_logger=logger)
    if readiness == Readiness.REQUIRED_MISSING:
        raise SystemExit(1)


@cli.command(name="postinstall")
@click.pass_obj
def postinstall_command(app_settings: AppSettings):
    """Print the next steps after dependencies are installed."""
    print_postinstall_message(app_settings, logger)


@cli.command(name="install-backend")
@click.pass_obj
def install_backend_command(app_settings: AppSettings):
    """Generate and configure the commerce backend."""
    exit_code = run_guarded(
        lambda: BackendInstaller(app_settings, current_logger=logger).run(),
        app_settings,
    )
    raise SystemExit(exit_code)


@cli.command(name="install")
@click.pass_obj
def install_command(app_settings: AppSettings):
    """Install the whole workspace: dependencies, storefront and backend."""
    exit_code = run_guarded(
        lambda: WorkspaceInstaller(app_settings, current_logger=logger).run(),
        app_settings,
    )
    raise SystemExit(exit_code)


@cli.command(name="show-config")
@click.pass_obj
def show_config_command(app_settings: AppSettings):
    """Show the effective installer configuration."""
    view_configuration(app_settings, logger)


def main() -> None:
    cli(prog_name="storefront-installer")


if __name__ == "__main__":
    main()
