"""Shared logging utilities: the process-wide log file.

Application code that wants a single log file for the whole process uses the
module-level functions here, which all delegate to ``default_logger``:

    import log_utils

    log_utils.start_from_env()
    log_utils.info("Service ready")
    log_utils.warn("Disk almost full")   # written as [WARNING]
    log_utils.dispose()

Lines are tagged with the module and function that called these functions.
Libraries and tests that need an isolated log should create their own
``FileLogger`` instead.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from file_logger import DEFAULT_FILE_NAME, DEFAULT_TIME_FORMAT, FileLogger

# Single shared logger for ALL modules of the process
default_logger = FileLogger()


@dataclass(frozen=True)
class LogSettings:
    """Where and how the process-wide log file is written."""

    directory: Path
    file_name: str = DEFAULT_FILE_NAME
    time_format: str = DEFAULT_TIME_FORMAT
    clear_existing: bool = True


def settings_from_env() -> LogSettings:
    """Read log settings from the environment (and a .env file, if present).

    Variables:
        LOG_DIR             Directory of the log file (default: ./logs)
        LOG_FILE_NAME       File name without extension (default: Log)
        LOG_TIME_FORMAT     Timestamp pattern (default: yyyy-MM-dd HH:mm:ss.fff)
        LOG_CLEAR_EXISTING  "true" to truncate an existing file (default: true)
    """
    load_dotenv()

    return LogSettings(
        directory=Path(os.getenv("LOG_DIR", "./logs")),
        file_name=os.getenv("LOG_FILE_NAME") or DEFAULT_FILE_NAME,
        time_format=os.getenv("LOG_TIME_FORMAT") or DEFAULT_TIME_FORMAT,
        clear_existing=os.getenv("LOG_CLEAR_EXISTING", "true").strip().lower() == "true",
    )


def start_from_env(create_dir: bool = True) -> Path:
    """Start the process-wide logger with settings from the environment."""
    settings = settings_from_env()
    if create_dir:
        settings.directory.mkdir(parents=True, exist_ok=True)
    return default_logger.start(
        settings.directory,
        file_name=settings.file_name,
        time_format=settings.time_format,
        clear_existing=settings.clear_existing,
    )


def start(
    directory: str | Path,
    file_name: str = DEFAULT_FILE_NAME,
    time_format: str = DEFAULT_TIME_FORMAT,
    clear_existing: bool = True,
) -> Path:
    return default_logger.start(directory, file_name, time_format, clear_existing)


def dispose() -> None:
    default_logger.dispose()


def log_file_path() -> Path | None:
    return default_logger.log_file_path


# stacklevel=2 skips these wrappers so lines carry the caller's tag
def trace(text: str | None, *, caller: str | None = None) -> None:
    default_logger.trace(text, caller=caller, stacklevel=2)


def info(text: str | None, *, caller: str | None = None) -> None:
    default_logger.info(text, caller=caller, stacklevel=2)


def debug(text: str | None, *, caller: str | None = None) -> None:
    default_logger.debug(text, caller=caller, stacklevel=2)


def warn(text: str | None, *, caller: str | None = None) -> None:
    default_logger.warn(text, caller=caller, stacklevel=2)


def error(text: str | None, *, caller: str | None = None) -> None:
    default_logger.error(text, caller=caller, stacklevel=2)


def fatal(text: str | None, *, caller: str | None = None) -> None:
    default_logger.fatal(text, caller=caller, stacklevel=2)
