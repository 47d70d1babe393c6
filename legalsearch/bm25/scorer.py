"""
Okapi BM25 scorer over an in-memory inverted index.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    idf(term) = ln(1 + (N - n + 0.5) / (n + 0.5))
    score(term, doc) = idf × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))

Where:
    N = number of documents in the corpus
    n = number of documents containing the term
    tf = term frequency in document
    k1 = term frequency saturation parameter (1.2)
    b = length normalization parameter (0.75)
    dl = document length (number of tokens)
    avgdl = average document length across the corpus
"""

import math
from typing import Dict, Iterable

from .index_builder import BM25Index

# Floor for the BM25 denominator (guards degenerate zero-length documents)
MIN_DENOMINATOR = 1e-6


class BM25Scorer:
    """
    Okapi BM25 with corpus-wide IDF.

    Stateless apart from its parameters; the index is passed per call so one
    scorer can be shared across index reloads.
    """

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        """
        Initialize BM25 scorer.

        Args:
            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)
        """
        self.k1 = k1
        self.b = b

    def idf(self, term: str, index: BM25Index) -> float:
        """Inverse document frequency (0.0 for unknown terms)"""
        n = index.document_frequency(term)
        if n == 0:
            return 0.0
        return math.log(1 + (index.num_docs - n + 0.5) / (n + 0.5))

    def score(self, query_terms: Iterable[str], index: BM25Index) -> Dict[int, float]:
        """
        Compute BM25 scores for every document touched by the query terms.

        Repeated query terms count once.

        Args:
            query_terms: Tokenized query (see tokenizer.tokenize)
            index: Index to score against

        Returns:
            {doc_id: score} for documents with at least one matching term;
            documents without matches are absent (implicit score 0)

        Example:
            >>> index = build_bm25_index(["집회 신고", "후원금 한도", "선거운동 기간"])
            >>> BM25Scorer().score(["집회", "집회"], index)
            {0: 0.9808...}
        """
        scores: Dict[int, float] = {}
        avg_doc_len = max(1.0, index.avg_doc_len)

        for term in dict.fromkeys(query_terms):
            plist = index.postings.get(term)
            if not plist:
                continue

            idf = self.idf(term, index)

            for doc_id, tf in plist.items():
                dl = index.doc_lengths[doc_id]
                denominator = tf + self.k1 * (1 - self.b + self.b * (dl / avg_doc_len))
                term_score = idf * (tf * (self.k1 + 1)) / max(MIN_DENOMINATOR, denominator)
                scores[doc_id] = scores.get(doc_id, 0.0) + term_score

        return scores
