"""
Logging setup for the hybridrank CLI

Two destinations:
- stderr: short level-prefixed lines (stdout carries the JSON/context output)
- session file: one file per process start under the log directory, verbose,
  size-rotated, only the newest KEEP_SESSION_LOGS sessions are kept
"""
import glob
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

KEEP_SESSION_LOGS = 5
MAX_LOG_BYTES = 10 * 1024 * 1024
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

# Driver/SDK loggers that are too chatty below WARNING
QUIET_LOGGERS = ("asyncpg", "httpx", "httpcore", "google_genai")


def _prune_sessions(log_path: Path) -> List[Path]:
    """Delete old session files so that, with the new one, KEEP_SESSION_LOGS remain"""
    sessions = sorted(glob.glob(str(log_path.parent / f"{log_path.stem}_*.log")), reverse=True)
    removed = []
    for stale in sessions[KEEP_SESSION_LOGS - 1:]:
        try:
            Path(stale).unlink()
            removed.append(Path(stale))
        except OSError:
            pass  # Still open elsewhere or already gone
    return removed


def _file_handler(session_log: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(session_log, maxBytes=MAX_LOG_BYTES, backupCount=10, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    log_file: str = "logs/hybrid-rank.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure root logging for one CLI run.

    Args:
        log_file: Base log path; sessions are written as <stem>_<timestamp>.log
            next to it
        console_level: Minimum level printed to stderr
        file_level: Minimum level written to the session file

    Returns:
        Path of this session's log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    removed = _prune_sessions(log_path)

    session_log = log_path.parent / f"{log_path.stem}_{datetime.now():%Y%m%d_%H%M%S}.log"

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(min(console_level, file_level))
    root.addHandler(console)
    root.addHandler(_file_handler(session_log, file_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Session log {session_log} (console={logging.getLevelName(console_level)}, "
        f"file={logging.getLevelName(file_level)}, pruned={len(removed)})"
    )
    return session_log
