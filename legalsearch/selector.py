"""
Result selection: combine scores, cut at a dynamic threshold, dedupe, backfill.

Threshold:
    short query (<= 2 distinct terms): alpha = 0.4, floor = max(20, min_score - 10)
    otherwise:                         alpha = 0.5, floor = min_score
    threshold = max(floor, floor(top_score × alpha))

If nothing clears the threshold, the two best chunks with a positive score
are returned instead, so an unusual query still yields some signal.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Set

from .bm25.tokenizer import clean_for_index
from .corpus import Chunk
from .heuristics.booster import chunk_fields
from .heuristics.rules import RuleSet

logger = logging.getLogger(__name__)

BM25_WEIGHT = 1.0
HEURISTIC_WEIGHT = 0.2

SHORT_QUERY_TERMS = 2
SHORT_QUERY_ALPHA = 0.4
LONG_QUERY_ALPHA = 0.5
SHORT_QUERY_MIN_FLOOR = 20
SHORT_QUERY_FLOOR_DISCOUNT = 10

FALLBACK_RESULTS = 2


@dataclass(frozen=True)
class ScoredChunk:
    """Chunk with its scores for a single search call"""
    chunk: Chunk
    doc_id: int
    bm25_score: float
    heuristic_score: float

    @property
    def score(self) -> float:
        return combine_scores(self.bm25_score, self.heuristic_score)


def combine_scores(bm25_score: float, heuristic_score: float) -> float:
    return bm25_score * BM25_WEIGHT + heuristic_score * HEURISTIC_WEIGHT


def rank(scored: Sequence[ScoredChunk]) -> List[ScoredChunk]:
    """Sort by combined score, best first (stable: ties keep corpus order)"""
    return sorted(scored, key=lambda item: item.score, reverse=True)


def dynamic_threshold(top_score: float, term_count: int, min_score: float) -> float:
    """
    Acceptance threshold relative to the best score.

    Examples:
        >>> dynamic_threshold(100.0, term_count=3, min_score=30)
        50
        >>> dynamic_threshold(100.0, term_count=1, min_score=30)
        40
        >>> dynamic_threshold(10.0, term_count=1, min_score=25)
        20
    """
    if term_count <= SHORT_QUERY_TERMS:
        alpha = SHORT_QUERY_ALPHA
        floor_score = max(SHORT_QUERY_MIN_FLOOR, min_score - SHORT_QUERY_FLOOR_DISCOUNT)
    else:
        alpha = LONG_QUERY_ALPHA
        floor_score = min_score
    return max(floor_score, math.floor(top_score * alpha))


def select_results(
    ranked: Sequence[ScoredChunk],
    term_count: int,
    max_results: int,
    min_score: float,
) -> List[ScoredChunk]:
    """
    Apply the dynamic threshold to a ranking.

    Args:
        ranked: Output of rank() (descending combined score)
        term_count: Number of distinct BM25 query terms
        max_results: Result cap
        min_score: Caller's minimum score floor

    Returns:
        Accepted results in ranking order, or the zero-match fallback
        (at most 2 positive-score results), or [] if nothing scored
    """
    if max_results <= 0 or not ranked:
        return []

    top_score = ranked[0].score
    threshold = dynamic_threshold(top_score, term_count, min_score)

    selected = [item for item in ranked if item.score > 0 and item.score >= threshold][:max_results]

    logger.debug(
        f"Threshold {threshold} (top={top_score:.2f}, terms={term_count}): "
        f"{len(selected)} of {len(ranked)} chunks accepted"
    )

    if selected:
        return selected

    fallback = [item for item in ranked if item.score > 0][:min(FALLBACK_RESULTS, max_results)]
    if fallback:
        logger.debug(f"No chunk cleared threshold, falling back to top {len(fallback)}")
    return fallback


def dedupe_by_source(chunks: Sequence[Chunk]) -> List[Chunk]:
    """Keep the first chunk per source key (see Chunk.source_key), order preserved"""
    seen: Set[str] = set()
    unique = []
    for chunk in chunks:
        key = chunk.source_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(chunk)
    return unique


def backfill(
    selected: Sequence[Chunk],
    corpus_chunks: Sequence[Chunk],
    query: str,
    rules: RuleSet,
    max_results: int,
    corpus_fields: Optional[Sequence[Mapping[str, str]]] = None,
) -> List[Chunk]:
    """
    Append topic chunks for known high-value topics mentioned in the query.

    For every backfill rule the query triggers, the first `rule.limit` corpus
    chunks matching the rule's indicators are appended (skipping source keys
    already present) while fewer than max_results chunks are selected.
    Existing results are never removed or reordered. corpus_fields, when
    given, holds chunk_fields() of corpus_chunks in the same order.
    """
    results = list(selected)
    normalized_query = clean_for_index(query)
    triggered = [rule for rule in rules.backfill_rules if rule.triggered_by(normalized_query)]
    if not triggered:
        return results

    seen = {chunk.source_key for chunk in results}
    if corpus_fields is None:
        corpus_fields = [chunk_fields(chunk) for chunk in corpus_chunks]

    for rule in triggered:
        if len(results) >= max_results:
            break

        candidates = [
            chunk for chunk, fields in zip(corpus_chunks, corpus_fields) if rule.indicated_by(fields)
        ][:rule.limit]
        appended = 0

        for chunk in candidates:
            if len(results) >= max_results:
                break
            key = chunk.source_key
            if key in seen:
                continue
            seen.add(key)
            results.append(chunk)
            appended += 1

        if appended:
            logger.debug(f"Backfill '{rule.name}' appended {appended} chunk(s)")

    return results
