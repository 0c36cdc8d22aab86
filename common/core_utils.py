# common/core_utils.py
# -*- coding: utf-8 -*-
"""
Logging setup for the installer.

Installer output is human-facing, so the console format defaults to the bare
message; verbose runs switch to a detailed format with timestamps and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from installer.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

CONSOLE_LOG_FORMAT = "%(message)s"
DETAILED_LOG_FORMAT = (
    "{log_prefix}%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
)


class SymbolFormatter(logging.Formatter):
    """
    A formatter that exposes a per-level symbol as ``%(symbol)s``.
    """

    LEVEL_SYMBOL_KEYS = {
        logging.DEBUG: "debug",
        logging.INFO: "info",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "critical",
    }

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        key = self.LEVEL_SYMBOL_KEYS.get(record.levelno)
        record.symbol = self.symbols.get(key, "") if key else ""
        return super().format(record)


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_format_str: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures the root logger for an installer run.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        If given, records are also appended to this file using the detailed
        format.
    log_to_console: bool
        Whether to log to the console (stdout). Defaults to True.
    log_format_str: Optional[str]
        Console format. May contain a ``{log_prefix}`` placeholder. Defaults to
        the bare message.
    log_prefix: Optional[str]
        Prefix substituted for ``{log_prefix}`` in the formats.
    symbols: Optional[Dict[str, str]]
        Level symbols for ``%(symbol)s``.
    """
    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    console_format = (log_format_str or CONSOLE_LOG_FORMAT).replace(
        "{log_prefix}", actual_prefix
    )
    file_format = DETAILED_LOG_FORMAT.replace("{log_prefix}", actual_prefix)

    handlers: List[logging.Handler] = []
    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
            file_handler.setFormatter(
                SymbolFormatter(file_format, "%Y-%m-%d %H:%M:%S", symbols)
            )
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if log_to_console or not handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            SymbolFormatter(console_format, "%Y-%m-%d %H:%M:%S", symbols)
        )
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. Format: '{console_format}'"
    )
