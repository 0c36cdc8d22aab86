# installer/reporting.py
# -*- coding: utf-8 -*-
"""
Human-facing messages: banners, next steps and failure diagnostics.
"""

import logging
import sys
from typing import Optional

from common.command_utils import log_installer
from common.errors import PipelineError
from installer.config_models import SYMBOLS_DEFAULT, AppSettings, DatabaseEnvSettings

module_logger = logging.getLogger(__name__)

WIDE_RULE = "═" * 70
RULE = "=" * 60

BACKEND_TROUBLESHOOTING_URL = "https://docs.medusajs.com/troubleshooting"

GENERIC_REMEDIATION_HINTS = (
    "Ensure PostgreSQL is running",
    "Check database credentials",
    "Check your network connection",
    "Verify Node.js version (18+ required)",
    "Remove the backend directory and run the installer again",
)


def _emit(message: str, app_settings: Optional[AppSettings], logger: logging.Logger, level: str = "info") -> None:
    log_installer(message, level, logger, app_settings)


def print_workspace_banner(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    _emit("\n" + WIDE_RULE, app_settings, logger_to_use)
    _emit(f"                  {symbols.get('store', '🛍️')}  E-COMMERCE STARTER INSTALLATION",
          app_settings, logger_to_use)
    _emit("                   Angular + Medusa.js Full Stack", app_settings, logger_to_use)
    _emit(WIDE_RULE + "\n", app_settings, logger_to_use)
    if app_settings.ci:
        _emit(f"{symbols.get('robot', '🤖')} Running in CI mode", app_settings, logger_to_use)


def print_backend_banner(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    if app_settings.ci:
        _emit(f"\n{symbols.get('robot', '🤖')} Running in CI mode", app_settings, logger_to_use)
        return
    _emit("\n" + RULE, app_settings, logger_to_use)
    _emit(f"{symbols.get('store', '🛍️')}  Medusa Backend Installation", app_settings, logger_to_use)
    _emit(RULE + "\n", app_settings, logger_to_use)


def print_backend_next_steps(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    backend = app_settings.backend_dir_name
    storefront = app_settings.storefront_dir_name

    if app_settings.ci:
        _emit(f"\n{symbols.get('success', '✅')} Backend installed successfully (CI mode)",
              app_settings, logger_to_use)
        return

    lines = [
        "\n" + RULE,
        f"{symbols.get('party', '🎉')} Medusa backend installed successfully!",
        RULE,
        f"\n{symbols.get('clipboard', '📋')} Next Steps:\n",
        "1. Start the backend:",
        f"   cd {backend} && npm run dev",
        "\n2. Access Medusa Admin at:",
        "   http://localhost:9000/app",
        "\n3. Backend API available at:",
        "   http://localhost:9000",
        "\n4. Start your storefront:",
        f"   cd {storefront} && npm start",
        f"\n{symbols.get('tip', '💡')} Tip: Use \"npm run dev\" from the root to start both servers",
        f"\n{symbols.get('books', '📚')} Documentation:",
        "   https://docs.medusajs.com",
        "",
    ]
    for line in lines:
        _emit(line, app_settings, logger_to_use)


def print_final_instructions(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    backend = app_settings.backend_dir_name
    storefront = app_settings.storefront_dir_name

    lines = [
        "\n" + WIDE_RULE,
        f"                     {symbols.get('party', '🎉')} INSTALLATION COMPLETE!",
        WIDE_RULE + "\n",
        f"{symbols.get('clipboard', '📋')} Quick Start Guide:\n",
        "1. Start both servers (recommended):",
        "   npm run dev",
        "\n2. Or start individually:",
        "   Backend:     npm run dev:backend",
        "   Storefront:  npm run dev:storefront",
        f"\n{symbols.get('globe', '🌐')} Your Applications:",
        "   Storefront:    http://localhost:4200",
        "   Backend API:   http://localhost:9000",
        "   Admin Panel:   http://localhost:9000/app",
        f"\n{symbols.get('gear', '⚙️')} Useful Commands:",
        "   npm run build              - Build both projects",
        "   npm run lint               - Lint storefront code",
        "   npm run test               - Run storefront tests",
        "   npm run backend:seed       - Seed backend with sample data",
        "   npm run backend:migrations - Run backend migrations",
        f"\n{symbols.get('books', '📚')} Documentation:",
        "   Angular:  https://angular.io/docs",
        "   Medusa:   https://docs.medusajs.com",
        f"\n{symbols.get('tip', '💡')} Tips:",
        f"   • Review {backend}/.env for configuration options",
        f"   • Check {storefront}/src/environments/ for Angular config",
        "   • Use npm workspaces for managing dependencies",
        "\n" + WIDE_RULE + "\n",
    ]
    for line in lines:
        _emit(line, app_settings, logger_to_use)


def print_postinstall_message(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> bool:
    """
    Show what to do after the workspace dependencies are installed.

    Returns:
        bool: Whether the backend directory already exists.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    backend_exists = app_settings.backend_path.exists()

    _emit("\n" + "═" * 60, app_settings, logger_to_use)
    _emit(f"  {symbols.get('success', '✅')} Dependencies installed successfully!", app_settings, logger_to_use)
    _emit("═" * 60 + "\n", app_settings, logger_to_use)

    if not backend_exists:
        lines = [
            f"{symbols.get('clipboard', '📋')} Next Steps:",
            "",
            "  1. Ensure PostgreSQL is installed and running",
            "  2. Run the full installation:",
            "     storefront-installer install",
            "",
            "  Or install components separately:",
            "     storefront-installer install-backend   # Install Medusa backend",
            "     npm install --prefix storefront        # Install Angular storefront",
        ]
    else:
        lines = [
            f"{symbols.get('party', '🎉')} Everything is installed!",
            "",
            "  Start development with:",
            "     npm run dev",
            "",
            "  Or start individually:",
            "     npm run dev:backend     # Start Medusa (port 9000)",
            "     npm run dev:storefront  # Start Angular (port 4200)",
        ]
    for line in lines:
        _emit(line, app_settings, logger_to_use)
    _emit("\n" + "═" * 60 + "\n", app_settings, logger_to_use)
    return backend_exists


def handle_fatal_error(
    error: BaseException,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """
    Report a fatal failure with context and remediation hints.

    Returns:
        int: The process exit code (always 1).
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols if app_settings else SYMBOLS_DEFAULT

    if isinstance(error, KeyboardInterrupt):
        message = "Interrupted by user"
    else:
        message = str(error) or error.__class__.__name__
    _emit(f"\n{symbols.get('error', '❌')} Installation failed: {message}", app_settings, logger_to_use, "error")
    if isinstance(error, PipelineError):
        _emit(
            f"   Failed at step {error.step_index}/{error.total_steps}: {error.step_label}",
            app_settings,
            logger_to_use,
            "error",
        )
    _emit("\nPlease check the error above and try again.", app_settings, logger_to_use, "warning")

    if app_settings is None or not app_settings.ci:
        _emit(f"\n{symbols.get('tip', '💡')} Common Solutions:", app_settings, logger_to_use)
        for hint in GENERIC_REMEDIATION_HINTS:
            _emit(f"   • {hint}", app_settings, logger_to_use)
        _emit(f"\n{symbols.get('memo', '📝')} For help, visit: {BACKEND_TROUBLESHOOTING_URL}",
              app_settings, logger_to_use)
    return 1


def install_excepthook(
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Route faults that escape every handler to handle_fatal_error."""
    logger_to_use = current_logger if current_logger else module_logger

    def _hook(exc_type, exc_value, exc_traceback):
        logger_to_use.debug("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
        handle_fatal_error(exc_value, app_settings, logger_to_use)

    sys.excepthook = _hook


def view_configuration(app_settings: AppSettings, current_logger: Optional[logging.Logger] = None) -> None:
    """Display the effective installer configuration (secrets masked)."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Automated (CI) mode:           {app_settings.ci}\n"
    config_text += f"  Skip admin user prompt:        {app_settings.skip_user_prompt}\n"
    config_text += f"  Skip seed prompt:              {app_settings.skip_seed_prompt}\n"
    config_text += f"  Project root:                  {app_settings.project_root}\n"
    config_text += f"  Backend directory:             {app_settings.backend_path}\n"
    config_text += f"  Storefront directory:          {app_settings.storefront_path}\n"
    config_text += f"  Templates directory:           {app_settings.templates_dir}\n"
    config_text += f"  Secret length (bytes):         {app_settings.secret_byte_length}\n"
    config_text += f"  Minimum Node.js major version: {app_settings.node_min_major_version}\n"
    config_text += f"  Version probe timeout (s):     {app_settings.command_timeout_seconds}\n"
    config_text += f"  Backend generator:             {' '.join(app_settings.backend_create_command)}\n"

    if app_settings.ci:
        db_env = DatabaseEnvSettings()
        config_text += "\n  Database (from DB_* environment variables):\n"
        config_text += f"    Host:                        {db_env.host}\n"
        config_text += f"    Port:                        {db_env.port}\n"
        config_text += f"    User:                        {db_env.user}\n"
        config_text += f"    Password:                    {'[SET]' if db_env.password else '[EMPTY]'}\n"
        config_text += f"    Name:                        {db_env.name}\n"
    else:
        config_text += "\n  Database: prompted during installation.\n"

    _emit("Displaying current configuration:", app_settings, logger_to_use)
    _emit(f"\n{config_text}", app_settings, logger_to_use)
