"""
Logging configuration for shipflow.

stdout carries the run's progress output, so log records go to stderr and,
optionally, to a file. Set SHIPFLOW_LOG_FSYNC=1 to fsync the log file after
every record, e.g. while tailing it during a long remote run.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FSYNC_ENV = "SHIPFLOW_LOG_FSYNC"


class SyncedFileHandler(logging.FileHandler):
    """FileHandler whose flush also pushes the file to disk when ``sync`` is set."""

    def __init__(self, filename, *, sync: bool = False):
        super().__init__(filename, mode="a", encoding="utf-8")
        self.sync = sync

    def flush(self):
        super().flush()
        if self.sync and self.stream is not None:
            os.fsync(self.stream.fileno())


def _truthy_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() not in ("", "0", "false", "no", "off")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    console_level: Optional[str] = None,
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path; no file handler when omitted
        format_string: Custom format string
        console_level: Level of the stderr handler (default WARNING)

    Returns:
        The ``shipflow`` logger
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for h in list(root.handlers):
        root.removeHandler(h)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = SyncedFileHandler(log_path, sync=_truthy_env(FSYNC_ENV))
        fh.setFormatter(logging.Formatter(format_string))
        fh.setLevel(getattr(logging, level.upper()))
        root.addHandler(fh)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(getattr(logging, (console_level or "WARNING").upper()))
    ch.setFormatter(logging.Formatter(format_string))
    root.addHandler(ch)

    return logging.getLogger("shipflow")
