"""
Domain heuristics layered on top of BM25.

- rules: immutable synonym, keyword-weight, topic-boost and backfill tables
- booster: scores a chunk against the raw query using those tables
"""

from .rules import BackfillRule, BoostRule, DEFAULT_RULES, RuleSet
from .booster import HeuristicBooster, chunk_fields

__all__ = [
    "BackfillRule",
    "BoostRule",
    "DEFAULT_RULES",
    "RuleSet",
    "HeuristicBooster",
    "chunk_fields",
]
