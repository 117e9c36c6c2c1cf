# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Logging setup for NetQuota.

All modules log through named loggers below "netquota"; QuotaLogger attaches
the handlers to that root once.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class QuotaLogger:
    """
    Handler setup for the "netquota" logger tree.

    Features:
    - Console logging to stderr (stdout carries command output)
    - Optional rotating file log
    """

    def __init__(
        self,
        name: str = "netquota",
        level: str = "WARNING",
        log_dir: Optional[Path] = None,
        file_output: bool = False,
    ):
        self.name = name
        self.logger = logging.getLogger(name)

        # Clear any existing handlers
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if file_output else self._parse_level(level))

        console_formatter = logging.Formatter(
            fmt="[%(asctime)s] [%(name)s:%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_formatter = logging.Formatter(
            fmt="%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(self._parse_level(level))
        self.logger.addHandler(console_handler)

        if file_output:
            if log_dir is None:
                log_dir = Path.home() / ".netquota" / "logs"

            log_dir.mkdir(parents=True, exist_ok=True)

            # Rotate after 10MB, keep 5 backup files
            file_handler = RotatingFileHandler(
                log_dir / f"{name}.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(file_formatter)
            file_handler.setLevel(logging.DEBUG)  # File gets everything
            self.logger.addHandler(file_handler)

    @staticmethod
    def _parse_level(level: str) -> int:
        """Convert string level to logging constant"""
        return LEVELS.get(level.upper(), logging.INFO)


def setup_logging(
    level: str = "WARNING", log_dir: Optional[Path] = None, file_output: bool = False
) -> QuotaLogger:
    """Configure the "netquota" logger tree"""
    return QuotaLogger(level=level, log_dir=log_dir, file_output=file_output)
