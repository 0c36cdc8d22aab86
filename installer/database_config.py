# installer/database_config.py
# -*- coding: utf-8 -*-
"""
Collects the database connection values for the generated backend.
"""

import logging
from typing import Optional

from common.command_utils import log_installer
from common.prompt_utils import InteractionPrompter
from installer.config_models import (
    DB_HOST_DEFAULT,
    DB_NAME_INTERACTIVE_DEFAULT,
    DB_PORT_DEFAULT,
    DB_USER_DEFAULT,
    AppSettings,
    DatabaseConfig,
    DatabaseEnvSettings,
)

module_logger = logging.getLogger(__name__)


def collect_database_config(
    app_settings: AppSettings,
    prompter: InteractionPrompter,
    current_logger: Optional[logging.Logger] = None,
    env_settings: Optional[DatabaseEnvSettings] = None,
) -> DatabaseConfig:
    """
    Build the DatabaseConfig for this run.

    Automated runs take DB_HOST, DB_PORT, DB_USER, DB_PASSWORD and DB_NAME from
    the environment (with defaults) and never prompt. Interactive runs ask for
    each value in turn; an empty answer keeps the default shown in brackets.
    The password has no default.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    if app_settings.ci:
        env = env_settings if env_settings is not None else DatabaseEnvSettings()
        return DatabaseConfig(
            host=env.host,
            port=env.port,
            user=env.user,
            password=env.password,
            name=env.name,
        )

    log_installer(f"\n{symbols.get('info', 'ℹ️')} Database Configuration", "info", logger_to_use, app_settings)
    log_installer("Press Enter to use default values shown in [brackets]\n", "info", logger_to_use, app_settings)

    host = prompter.ask_with_default(f"Database host [{DB_HOST_DEFAULT}]: ", DB_HOST_DEFAULT)
    port = prompter.ask_with_default(f"Database port [{DB_PORT_DEFAULT}]: ", DB_PORT_DEFAULT)
    user = prompter.ask_with_default(f"Database user [{DB_USER_DEFAULT}]: ", DB_USER_DEFAULT)
    password = prompter.ask("Database password: ")
    name = prompter.ask_with_default(
        f"Database name [{DB_NAME_INTERACTIVE_DEFAULT}]: ", DB_NAME_INTERACTIVE_DEFAULT
    )

    return DatabaseConfig(host=host, port=port, user=user, password=password, name=name)
