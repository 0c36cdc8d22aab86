# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from common.prompt_utils import InteractionPrompter
from installer.config_models import AppSettings

# Environment variables read by AppSettings / DatabaseEnvSettings. Cleared so
# a CI runner's own CI=true does not leak into the tests.
INSTALLER_ENV_VARS = (
    "CI",
    "SKIP_USER_PROMPT",
    "SKIP_SEED_PROMPT",
    "PROJECT_ROOT",
    "BACKEND_DIR_NAME",
    "STOREFRONT_DIR_NAME",
    "TEMPLATES_DIR",
    "SECRET_BYTE_LENGTH",
    "NODE_MIN_MAJOR_VERSION",
    "COMMAND_TIMEOUT_SECONDS",
    "BACKEND_CREATE_COMMAND",
    "LOG_PREFIX",
    "SYMBOLS",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
)


@pytest.fixture(autouse=True)
def clean_installer_env(monkeypatch):
    for name in INSTALLER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app_settings(tmp_path):
    """Interactive-mode settings rooted in a temporary workspace."""
    return AppSettings(ci=False, project_root=tmp_path)


@pytest.fixture
def ci_settings(tmp_path):
    """Automated-mode settings rooted in a temporary workspace."""
    return AppSettings(ci=True, project_root=tmp_path)


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def scripted_prompter():
    """
    Factory for an interactive prompter that replays the given answers.

    The prompts it was asked are recorded on ``prompter.prompts``.
    """

    def _factory(*answers):
        replies = iter(answers)
        prompts = []

        def _input(prompt_text):
            prompts.append(prompt_text)
            return next(replies)

        prompter = InteractionPrompter(False, input_func=_input)
        prompter.prompts = prompts
        return prompter

    return _factory


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging's changes to the root logger after a test."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)
