"""Tiny leveled logger writing to optional files with console fallback."""

import sys
from typing import Optional, TextIO

COLOR_RESET = "\x1b[0m"
COLOR_YELLOW = "\x1b[33m"
COLOR_RED = "\x1b[31m"


def _emit(stream: TextIO, prefix: Optional[str], message: str) -> None:
    console = stream is sys.stdout or stream is sys.stderr
    if console:
        stream.write(COLOR_RESET)
    if prefix:
        stream.write(f"{prefix}: ")
    stream.write(message)
    if console:
        stream.write(COLOR_RESET)
    stream.flush()


def _open(path) -> Optional[TextIO]:
    if path is None:
        return None
    try:
        return open(path, "a", encoding="utf-8")
    except OSError:
        return None


class Log:
    """A logger with separate debug, warning and error destinations.

    Each path is opened for appending; a path that cannot be opened makes
    that level fall back to standard output (debug) or standard error.
    """

    def __init__(self, debug=None, warn=None, err=None):
        self.debug_file = _open(debug)
        self.warn_file = _open(warn)
        self.err_file = _open(err)
        self.initialized = True

    def _debug_stream(self) -> TextIO:
        return self.debug_file or sys.stdout

    def debug(self, message: str) -> None:
        _emit(self._debug_stream(), "[DEBUG]", message)

    def debug_inline(self, message: str) -> None:
        """Write ``message`` to the debug destination with no prefix or colour."""
        stream = self._debug_stream()
        stream.write(message)
        stream.flush()

    def warn(self, message: str) -> None:
        _emit(self.warn_file or sys.stderr, "[WARN]", message)

    def err(self, message: str) -> None:
        _emit(self.err_file or sys.stderr, "[ERROR]", message)

    def close(self) -> None:
        """Close every opened file; further messages go to the console."""
        if not self.initialized:
            return
        for name in ("debug_file", "warn_file", "err_file"):
            handle = getattr(self, name)
            if handle is not None:
                handle.close()
                setattr(self, name, None)
        self.initialized = False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False


def log_stdout(message: str) -> None:
    """Write an informational message to standard output."""
    _emit(sys.stdout, "[INFO]", message)


def log_stderr(message: str) -> None:
    """Write an error message to standard error."""
    _emit(sys.stderr, "[ERROR]", message)