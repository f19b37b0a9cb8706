# src/qwix_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "qwix.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Modules that log on every scheduling query; console shows them only from WARNING.
_PER_QUERY_LOGGERS = (
    "qwix_planner.tasks.task_graph",
    "qwix_planner.tasks.task_activation",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console-side filter:
    - qwix_planner records pass, except per-query graph/activation chatter below WARNING
    - everything else (third-party loggers, captured py.warnings) only from ERROR
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("qwix_planner."):
            if record.name.startswith(_PER_QUERY_LOGGERS):
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/qwix",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the planner's two root handlers and return the log file path.

    The console (stderr) gets the filtered view at `console_level`; `<log_dir>/qwix.log`
    gets every record from `file_level` up. Existing root handlers are replaced, so calling
    this twice does not double the output.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
