# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: removing directory trees and copying or
writing generated files.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from common.command_utils import log_installer
from installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def remove_directory_tree(
    dir_path: Path,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Recursively delete `dir_path`.

    Removing a path that is already gone (fully or partly) is not an error.

    Raises:
        OSError: The tree exists but could not be removed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(dir_path)
    if not path.exists() and not path.is_symlink():
        log_installer(f"{path} already removed.", "debug", logger_to_use, app_settings)
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        log_installer(f"{path} disappeared during removal.", "debug", logger_to_use, app_settings)


def copy_file_if_present(
    source: Path,
    destination: Path,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Copy `source` to `destination` if `source` exists.

    Returns:
        bool: True if the file was copied, False if there was nothing to copy.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if not Path(source).is_file():
        log_installer(f"No file to copy at {source}.", "debug", logger_to_use, app_settings)
        return False
    Path(destination).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    return True


def write_text_file(
    file_path: Path,
    content: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Write `content` as UTF-8, creating parent directories as needed."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols if app_settings else SYMBOLS_DEFAULT
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    log_installer(
        f"{symbols.get('memo', '📝')} Wrote {path}",
        "debug",
        logger_to_use,
        app_settings,
    )
