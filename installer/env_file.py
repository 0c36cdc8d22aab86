# installer/env_file.py
# -*- coding: utf-8 -*-
"""
Writes the backend's .env file from a template.

All values, including secrets, are computed before anything is written.
Automated runs use fixed sentinel secrets so their output is reproducible.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from common.command_utils import log_installer
from common.file_utils import write_text_file
from common.secret_utils import SecretGenerator
from common.template_utils import find_unresolved_placeholders, render_template_file
from installer.config_models import (
    COOKIE_SECRET_SENTINEL,
    JWT_SECRET_SENTINEL,
    AppSettings,
    DatabaseConfig,
)

module_logger = logging.getLogger(__name__)

ENV_TEMPLATE_NAME = "env.template"
ENV_FILE_NAME = ".env"

FALLBACK_ENV_TEMPLATE = """\
# Database
DATABASE_URL={database_url}

# Redis (optional, but recommended for production)
REDIS_URL=redis://localhost:6379

# JWT Secret (change in production!)
JWT_SECRET={jwt_secret}

# Cookie Secret (change in production!)
COOKIE_SECRET={cookie_secret}

# Medusa Backend URL
MEDUSA_BACKEND_URL=http://localhost:9000

# Store CORS (add your storefront URL)
STORE_CORS=http://localhost:4200,http://localhost:3000

# Admin CORS
ADMIN_CORS=http://localhost:7001,http://localhost:7000,http://localhost:9000

# Admin URL
MEDUSA_ADMIN_BACKEND_URL=http://localhost:9000

# Node Environment
NODE_ENV=development
"""


def resolve_secrets(
    app_settings: AppSettings,
    secret_factory: Optional[Callable[[], str]] = None,
) -> Dict[str, str]:
    """Return JWT_SECRET and COOKIE_SECRET: sentinels in CI, fresh secrets otherwise."""
    if app_settings.ci:
        return {"JWT_SECRET": JWT_SECRET_SENTINEL, "COOKIE_SECRET": COOKIE_SECRET_SENTINEL}
    factory = secret_factory or SecretGenerator(app_settings.secret_byte_length)
    return {"JWT_SECRET": factory(), "COOKIE_SECRET": factory()}


def build_replacements(
    db_config: DatabaseConfig,
    app_settings: AppSettings,
    secret_factory: Optional[Callable[[], str]] = None,
) -> Dict[str, str]:
    replacements = {
        "DB_USER": db_config.user,
        "DB_PASSWORD": db_config.password,
        "DB_HOST": db_config.host,
        "DB_PORT": db_config.port,
        "DB_NAME": db_config.name,
    }
    replacements.update(resolve_secrets(app_settings, secret_factory))
    return replacements


def render_fallback_env(db_config: DatabaseConfig, replacements: Dict[str, str]) -> str:
    return FALLBACK_ENV_TEMPLATE.format(
        database_url=db_config.connection_url,
        jwt_secret=replacements["JWT_SECRET"],
        cookie_secret=replacements["COOKIE_SECRET"],
    )


def create_env_file(
    db_config: DatabaseConfig,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    replacements: Optional[Dict[str, str]] = None,
    target_dir: Optional[Path] = None,
) -> Path:
    """
    Write ``<backend>/.env``.

    Renders ``env.template`` from the templates directory; if the template is
    missing, writes a built-in minimal file with the same keys instead.

    Returns:
        Path: The written file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    replacements = replacements if replacements is not None else build_replacements(db_config, app_settings)
    env_path = Path(target_dir or app_settings.backend_path) / ENV_FILE_NAME
    template_path = Path(app_settings.templates_dir) / ENV_TEMPLATE_NAME

    log_installer(f"\n{symbols.get('memo', '📝')} Creating .env file from template...", "info",
                  logger_to_use, app_settings)

    if not template_path.is_file():
        log_installer(
            f"{symbols.get('warning', '⚠️')} Template file not found. Creating basic .env file...",
            "warning",
            logger_to_use,
            app_settings,
        )
        write_text_file(env_path, render_fallback_env(db_config, replacements), app_settings, logger_to_use)
        log_installer(f"{symbols.get('success', '✅')} Basic .env file created", "info",
                      logger_to_use, app_settings)
        return env_path

    content = render_template_file(template_path, replacements)
    unresolved = find_unresolved_placeholders(content)
    if unresolved:
        log_installer(
            f"{symbols.get('warning', '⚠️')} .env template has no values for: {', '.join(unresolved)}",
            "warning",
            logger_to_use,
            app_settings,
        )
    write_text_file(env_path, content, app_settings, logger_to_use)
    log_installer(f"{symbols.get('success', '✅')} .env file created from template", "info",
                  logger_to_use, app_settings)

    if not app_settings.ci:
        log_installer(
            f"\n{symbols.get('tip', '💡')} Tip: Review {app_settings.backend_dir_name}/.env "
            "and uncomment any plugins you want to use",
            "info",
            logger_to_use,
            app_settings,
        )
    return env_path
