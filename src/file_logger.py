"""
File Logger - Thread-safe, line-oriented logging to a single text file.

A FileLogger owns one log file at a time. Every entry is rendered as

    <timestamp> [<LEVEL>] (<caller file>.<caller function>) <message>

and appended to the file while holding the instance lock, so lines written
from concurrent threads never interleave and appear in the order their
timestamps were taken.

Lifecycle:
    start()    -> opens the session: builds <directory>/<name>.log, optionally
                  clears it, and writes "Log Created." as the first entry
    trace() .. fatal() -> append one line each
    dispose()  -> closes the session; start() may be called again afterwards

Instances are independent. The process-wide shared instance lives in
``log_utils``.
"""

import logging
import sys
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path

from time_format import format_timestamp, validate_pattern

logger = logging.getLogger(__name__)

LOG_FILE_EXT = ".log"
DEFAULT_FILE_NAME = "Log"
DEFAULT_TIME_FORMAT = "yyyy-MM-dd HH:mm:ss.fff"
CREATED_MESSAGE = "Log Created."


class LogLevel(Enum):
    """Severity of a log entry. The value is the tag written to the file."""

    TRACE = "TRACE"
    INFO = "INFO"
    DEBUG = "DEBUG"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class LoggerStateError(RuntimeError):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class AlreadyInitializedError(LoggerStateError):
    """start() was called on a logger that has not been disposed."""


class NotInitializedError(LoggerStateError):
    """A log entry was written before start() or after dispose()."""


def caller_tag_from_frame(frame) -> str:
    """Build ``<file stem>.<function name>`` for a stack frame."""
    code = frame.f_code
    return f"{Path(code.co_filename).stem}.{code.co_name}"


def format_line(
    level: LogLevel,
    text: str,
    caller_tag: str,
    timestamp: datetime,
    time_format: str = DEFAULT_TIME_FORMAT,
) -> str:
    """Render one log line, without the line terminator."""
    return f"{format_timestamp(timestamp, time_format)} [{level.value}] ({caller_tag}) {text}"


class FileLogger:
    """Writes leveled, timestamped lines to one log file.

    The caller tag of each line is taken from the code that called the
    leveled method. Pass ``caller="module.function"`` to set it explicitly,
    or ``stacklevel`` (as with the ``logging`` module) to attribute the line
    to a caller further up the stack when logging through a wrapper.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._file_path: Path | None = None
        self._time_format: str | None = None
        self._initialized = False

    @property
    def log_file_path(self) -> Path | None:
        """Path of the active log file, or None when not started."""
        with self._lock:
            return self._file_path

    @property
    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def start(
        self,
        directory: str | Path,
        file_name: str = DEFAULT_FILE_NAME,
        time_format: str = DEFAULT_TIME_FORMAT,
        clear_existing: bool = True,
    ) -> Path:
        """Open a logging session on ``<directory>/<file_name>.log``.

        Args:
            directory: Existing, writable directory for the log file
            file_name: File name without extension
            time_format: Timestamp pattern, e.g. ``yyyy-MM-dd HH:mm:ss.fff``
            clear_existing: Truncate an existing file instead of appending to it

        Returns:
            The absolute path of the log file.

        Raises:
            AlreadyInitializedError: The logger is already started.
            ValueError: ``time_format`` is not a valid pattern.
            OSError: The file could not be cleared or written. The logger
                is left uninitialized.
        """
        with self._lock:
            if self._initialized:
                raise AlreadyInitializedError(
                    "Logger was already initialized. Re-initialization is not allowed.",
                    details=str(self._file_path),
                )

            validate_pattern(time_format)
            file_path = (Path(directory) / f"{file_name}{LOG_FILE_EXT}").absolute()

            self._file_path = file_path
            self._time_format = time_format
            self._initialized = True

            try:
                if clear_existing:
                    self._clear_file(file_path)
                self._append_locked(
                    LogLevel.INFO, CREATED_MESSAGE, caller_tag_from_frame(sys._getframe())
                )
            except OSError:
                logger.warning(f"Could not start log file {file_path}, logger left uninitialized")
                self._reset_locked()
                raise

            logger.debug(f"Log file started: {file_path}")
            return file_path

    def dispose(self) -> None:
        """End the session. Safe to call when not started."""
        with self._lock:
            if self._initialized:
                logger.debug(f"Log file closed: {self._file_path}")
            self._reset_locked()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False

    def write_log(self, level: LogLevel, text: str | None, caller_tag: str) -> None:
        """Append one entry to the log file.

        Raises NotInitializedError when the logger is not started. Empty
        text writes nothing.
        """
        with self._lock:
            self._append_locked(level, text, caller_tag)

    def trace(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.TRACE, text, caller, stacklevel)

    def info(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.INFO, text, caller, stacklevel)

    def debug(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.DEBUG, text, caller, stacklevel)

    def warn(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        """Log a warning. The entry is tagged WARNING."""
        self._log(LogLevel.WARNING, text, caller, stacklevel)

    def error(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.ERROR, text, caller, stacklevel)

    def fatal(self, text: str | None, *, caller: str | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.FATAL, text, caller, stacklevel)

    def _log(self, level: LogLevel, text: str | None, caller: str | None, stacklevel: int) -> None:
        if caller is None:
            # Frame 1 is the leveled method; step up from there to its caller
            frame = sys._getframe(1)
            for _ in range(max(stacklevel, 1)):
                if frame.f_back is None:
                    break
                frame = frame.f_back
            caller = caller_tag_from_frame(frame)
        self.write_log(level, text, caller)

    def _append_locked(self, level: LogLevel, text: str | None, caller_tag: str) -> None:
        """Render and append a line. The caller must hold ``self._lock``."""
        if not self._initialized:
            raise NotInitializedError("Logger is not initialized.")

        if not text:
            return

        line = format_line(level, text, caller_tag, datetime.now(), self._time_format)
        with open(self._file_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    @staticmethod
    def _clear_file(file_path: Path) -> None:
        if file_path.exists():
            # Write-only mode truncates without needing read access
            with open(file_path, "wb"):
                pass
            logger.debug(f"Cleared existing log file: {file_path}")

    def _reset_locked(self) -> None:
        self._initialized = False
        self._file_path = None
        self._time_format = None
