"""
Environment-driven configuration.

Environment variables (all optional):
    CHUNKS_PATH          Corpus file candidates, separated by os.pathsep
                         (default: ./data/chunks.json, <project>/data/chunks.json,
                         /var/task/data/chunks.json)
    SEARCH_MAX_RESULTS   Default result cap (default: 15)
    SEARCH_MIN_SCORE     Default minimum score floor (default: 30)
    LOG_LEVEL            Console log level (default: INFO)
    LOG_FILE             Base log file path (default: logs/legalsearch.log)

Local overrides go into .env.local (highest priority) or .env at the project root.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_MAX_RESULTS = 15
DEFAULT_MIN_SCORE = 30.0


def load_environment(project_root: Path = PROJECT_ROOT) -> Optional[Path]:
    """
    Load .env.local (preferred) or .env into os.environ.

    Returns:
        The file that was loaded, or None if neither exists
    """
    for name in (".env.local", ".env"):
        env_file = project_root / name
        if env_file.exists():
            load_dotenv(env_file, override=True)
            logger.debug(f"Loaded environment from {env_file}")
            return env_file
    return None


def default_corpus_candidates() -> List[Path]:
    return [
        Path.cwd() / "data" / "chunks.json",
        PROJECT_ROOT / "data" / "chunks.json",
        Path("/var/task") / "data" / "chunks.json",
    ]


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class Settings:
    corpus_candidates: List[Path] = field(default_factory=default_corpus_candidates)
    max_results: int = DEFAULT_MAX_RESULTS
    min_score: float = DEFAULT_MIN_SCORE
    log_level: str = "INFO"
    log_file: str = "logs/legalsearch.log"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment"""
        chunks_path = os.getenv("CHUNKS_PATH", "")
        candidates = [Path(p) for p in chunks_path.split(os.pathsep) if p.strip()]

        return cls(
            corpus_candidates=candidates or default_corpus_candidates(),
            max_results=_env_number("SEARCH_MAX_RESULTS", DEFAULT_MAX_RESULTS, int),
            min_score=_env_number("SEARCH_MIN_SCORE", DEFAULT_MIN_SCORE, float),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", "logs/legalsearch.log"),
        )
