"""Logging configuration: brief console output plus a detailed per-session log file"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

SESSION_LOGS_KEPT = 5
MAX_LOG_BYTES = 10 * 1024 * 1024


def level_from_name(name: Union[str, int], default: int = logging.INFO) -> int:
    """Map "debug"/"INFO"/20 to a logging level, falling back to default"""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def _prune_session_logs(log_path: Path, keep: int) -> None:
    """Delete old session logs so that at most `keep` remain after this session starts"""
    existing = sorted(log_path.parent.glob(f"{log_path.stem}_*.log"), reverse=True)
    for old_log in existing[keep - 1:]:
        try:
            old_log.unlink()
        except OSError:
            pass  # Another process may hold or have removed it


def setup_logging(
    log_file: Optional[str] = "logs/legalsearch.log",
    console_level: Union[str, int] = logging.INFO,
    file_level: Union[str, int] = logging.DEBUG,
) -> Optional[Path]:
    """
    Configure the root logger.

    - Console: "LEVEL: message" at console_level
    - File: timestamped session file next to log_file, rotated at 10MB,
      last 5 sessions kept. Skipped when log_file is None.

    Args:
        log_file: Base path of the log file (session suffix is added)
        console_level: Console level (name or number)
        file_level: File level (name or number)

    Returns:
        Path of the session log file, or None when file logging is off
    """
    console_level = level_from_name(console_level)
    file_level = level_from_name(file_level, default=logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    if log_file is None:
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _prune_session_logs(log_path, SESSION_LOGS_KEPT)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=MAX_LOG_BYTES,
        backupCount=10,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(file_handler)

    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log} ({logging.getLevelName(file_level)})"
    )

    return session_log
