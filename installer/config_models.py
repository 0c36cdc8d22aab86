# installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for installer configuration.

This module defines the structured settings for the installer,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[STORE-SETUP]"
BACKEND_DIR_NAME_DEFAULT: str = "backend"
STOREFRONT_DIR_NAME_DEFAULT: str = "storefront"
TEMPLATES_DIR_DEFAULT: Path = Path(__file__).resolve().parent / "templates"
SECRET_BYTE_LENGTH_DEFAULT: int = 32
NODE_MIN_MAJOR_VERSION_DEFAULT: int = 18
COMMAND_TIMEOUT_SECONDS_DEFAULT: int = 30
BACKEND_CREATE_COMMAND_DEFAULT: List[str] = [
    "npx",
    "create-medusa-app@latest",
    "--skip-db",
]

# Fixed values written instead of generated secrets in automated runs.
JWT_SECRET_SENTINEL: str = "test-jwt-secret"
COOKIE_SECRET_SENTINEL: str = "test-cookie-secret"

# Automated-mode database defaults (DB_* environment variables override).
DB_HOST_DEFAULT: str = "localhost"
DB_PORT_DEFAULT: str = "5432"
DB_USER_DEFAULT: str = "postgres"
DB_PASSWORD_DEFAULT: str = "postgres"
DB_NAME_DEFAULT: str = "medusa_test"

# Interactive prompt defaults differ only in the database name.
DB_NAME_INTERACTIVE_DEFAULT: str = "medusa-store"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛", "search": "🔍",
    "trash": "🗑️", "memo": "📝", "seed": "🌱", "user": "👤",
    "skip": "⏭️", "tip": "💡", "robot": "🤖", "store": "🛍️",
    "party": "🎉", "clipboard": "📋", "books": "📚", "globe": "🌐",
}


class DatabaseEnvSettings(BaseSettings):
    """Database connection values read from DB_* environment variables."""
    model_config = SettingsConfigDict(
        env_prefix='DB_',
        env_ignore_empty=True,
        extra='ignore'
    )

    host: str = Field(default=DB_HOST_DEFAULT, description="Database host.")
    port: str = Field(default=DB_PORT_DEFAULT, description="Database port.")
    user: str = Field(default=DB_USER_DEFAULT, description="Database user.")
    password: str = Field(default=DB_PASSWORD_DEFAULT, description="Database password.", exclude=True)
    name: str = Field(default=DB_NAME_DEFAULT, description="Database name.")


class DatabaseConfig(BaseModel):
    """Resolved database connection values for one installer run."""
    model_config = ConfigDict(frozen=True)

    host: str
    port: str
    user: str
    password: str
    name: str

    @property
    def connection_url(self) -> str:
        return f"postgres://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class AppSettings(BaseSettings):
    """Main installer settings."""
    model_config = SettingsConfigDict(extra='ignore')

    ci: bool = Field(default=False,
                     description="Automated (non-interactive) mode. Read from the CI environment variable.")
    skip_user_prompt: bool = Field(default=False,
                                   description="Skip the optional admin user creation step.")
    skip_seed_prompt: bool = Field(default=False,
                                   description="Skip database seeding in automated mode.")

    project_root: Path = Field(default_factory=Path.cwd,
                               description="Workspace root containing the storefront and backend directories.")
    backend_dir_name: str = Field(default=BACKEND_DIR_NAME_DEFAULT,
                                  description="Directory (under project_root) of the generated backend.")
    storefront_dir_name: str = Field(default=STOREFRONT_DIR_NAME_DEFAULT,
                                     description="Directory (under project_root) of the storefront.")
    templates_dir: Path = Field(default=TEMPLATES_DIR_DEFAULT,
                                description="Directory holding env.template and README.backend.md.")

    secret_byte_length: int = Field(default=SECRET_BYTE_LENGTH_DEFAULT, ge=1,
                                    description="Random bytes per generated secret (hex output is twice as long).")
    node_min_major_version: int = Field(default=NODE_MIN_MAJOR_VERSION_DEFAULT,
                                        description="Lowest supported Node.js major version.")
    command_timeout_seconds: int = Field(default=COMMAND_TIMEOUT_SECONDS_DEFAULT,
                                         description="Timeout for tool version probes.")
    backend_create_command: List[str] = Field(default_factory=lambda: list(BACKEND_CREATE_COMMAND_DEFAULT),
                                              description="Command that generates the backend; the backend directory name is appended.")

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages from the installer.")

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("ci", "skip_user_prompt", "skip_seed_prompt", mode="before")
    @classmethod
    def _parse_env_flag(cls, value: Any) -> Any:
        # Environment flags count as set only when literally "true".
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @property
    def backend_path(self) -> Path:
        return self.project_root / self.backend_dir_name

    @property
    def storefront_path(self) -> Path:
        return self.project_root / self.storefront_dir_name
