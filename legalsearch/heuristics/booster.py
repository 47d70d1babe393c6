"""
Heuristic relevance booster.

Scores a chunk against the raw query using the static tables in rules.py:

    for each query word (plus synonyms):
        title hit     +20 × weight
        category hit  +10 × weight
        filename hit  +12 × weight
        content       +3 × weight per occurrence
    whole query found in content      +50
    each topic rule that fires        +bonus (100-200)

Query words are split on whitespace only (no punctuation stripping), so
"공무원의," and "공무원의" are different words here.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..bm25.tokenizer import clean_for_index
from ..corpus import Chunk
from .rules import DEFAULT_RULES, FIELDS, RuleSet

logger = logging.getLogger(__name__)


def chunk_fields(chunk: Chunk) -> Dict[str, str]:
    """Normalized (invisible characters stripped, lowercased) matchable fields"""
    metadata = chunk.metadata
    values = {
        "title": metadata.title,
        "category": metadata.category,
        "filename": metadata.file_name,
        "content": chunk.content,
    }
    return {name: clean_for_index(values[name] or "") for name in FIELDS}


class HeuristicBooster:
    """Domain keyword/topic scorer layered on top of BM25"""

    def __init__(self, rules: RuleSet = DEFAULT_RULES):
        self.rules = rules

    def query_words(self, query: str) -> List[str]:
        """Whitespace-split lowercase words (length > 1), synonym-expanded"""
        words = [word for word in clean_for_index(query).split() if len(word) > 1]
        return list(self.rules.expand(words))

    def boost(self, chunk: Chunk, query: str, fields: Optional[Mapping[str, str]] = None) -> float:
        """
        Compute the heuristic score of a chunk for a query.

        Args:
            chunk: Chunk to score
            query: Raw user query
            fields: Precomputed chunk_fields(chunk), normalized once per load

        Returns:
            Non-negative score (0.0 when nothing matches)
        """
        if fields is None:
            fields = chunk_fields(chunk)
        return self._score(self.query_words(query), clean_for_index(query), fields)

    def boost_all(self, corpus_fields: Sequence[Mapping[str, str]], query: str) -> List[float]:
        """Scores for every chunk given its precomputed fields, in corpus order"""
        words = self.query_words(query)
        normalized_query = clean_for_index(query)
        return [self._score(words, normalized_query, fields) for fields in corpus_fields]

    def _score(self, words: Sequence[str], normalized_query: str, fields: Mapping[str, str]) -> float:
        field_weights = self.rules.field_weights
        content = fields["content"]

        score = 0.0

        for word in words:
            weight = self.rules.keyword_weight(word)

            for name in ("title", "category", "filename"):
                if word in fields[name]:
                    score += field_weights.get(name, 0) * weight

            score += content.count(word) * field_weights.get("content", 0) * weight

        if normalized_query.strip() and normalized_query in content:
            score += self.rules.verbatim_bonus

        score += self._topic_bonus(normalized_query, fields)

        return score

    def _topic_bonus(self, normalized_query: str, fields: Mapping[str, str]) -> float:
        bonus = 0.0

        for rule in self.rules.boost_rules:
            try:
                if rule.triggered_by(normalized_query) and rule.indicated_by(fields):
                    bonus += rule.bonus
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed boost rule {rule!r}: {e}")

        return bonus
