# ========================
# ev_insights/utils/logging_setup.py
# ========================

"""
Logging Configuration

Root-logger setup shared by the CLI and the API server. Handlers installed
here are tagged with HANDLER_NAME so that calling setup_logging again swaps
them out without touching handlers owned by anything else (uvicorn, test
runners).
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "ev_insights"

# Third-party loggers that are chatty at INFO/DEBUG
QUIET_LOGGERS = ('urllib3', 'requests', 'httpx')

logger = logging.getLogger(__name__)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def _install(root: logging.Logger, handler: logging.Handler,
             level: int, formatter: logging.Formatter) -> None:
    handler.set_name(HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def _remove_installed(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_dir: Union[str, Path] = "logs") -> Optional[Path]:
    """
    Configure console logging and, optionally, a debug-level log file.

    Args:
        log_level (str): Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional log file name, created under `log_dir`
        log_dir (str): Directory for log files

    Returns:
        Path: the log file path, or None when logging to the console only

    Raises:
        ValueError: if `log_level` is not a known level name
    """
    level = _resolve_level(log_level)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root_logger = logging.getLogger()
    _remove_installed(root_logger)
    _install(root_logger, logging.StreamHandler(sys.stdout), level, formatter)

    file_path = None
    if log_file:
        file_path = Path(log_dir) / log_file
        file_path.parent.mkdir(parents=True, exist_ok=True)
        # The file keeps everything; the console stays at `level`
        _install(root_logger, logging.FileHandler(file_path, encoding='utf-8'), logging.DEBUG, formatter)
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if file_path:
        logger.info(f"Logging to file: {file_path}")
    logger.info(f"Logging initialized - Level: {logging.getLevelName(level)}")
    return file_path
