from __future__ import annotations

import logging
import sys

from batchslack.settings import default_settings


def configure_logging(level: str | None = None) -> None:
    """Configures the root logger for the application.

    Without a level, the one from `Settings` is used.
    """
    if level is None:
        level = default_settings().log_level
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        print(f"Invalid log level: {level}, defaulting to INFO")
        numeric_level = logging.INFO

    # Format: "2026-10-19 10:00:00 [INFO] batchslack.data.records: Loaded 412 lead time rows"
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates when called twice
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(handler)

    # openpyxl is chatty about workbook styles on legacy exports
    logging.getLogger("openpyxl").setLevel(logging.WARNING)
