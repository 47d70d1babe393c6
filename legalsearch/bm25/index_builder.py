"""
BM25 index builder - inverted index over corpus chunks.

Builds an immutable in-memory index from chunk contents:
- postings: term -> {doc_id: term frequency}
- doc_lengths: token count per chunk
- avg_doc_len: mean token count across the corpus

Doc ids are positions in the chunk sequence (0..N-1), so an index is only
meaningful together with the exact chunk sequence it was built from.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Tuple

from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BM25Index:
    """Read-only inverted index with document length statistics"""
    postings: Mapping[str, Mapping[int, int]]
    doc_lengths: Tuple[int, ...]
    avg_doc_len: float
    num_docs: int

    def document_frequency(self, term: str) -> int:
        """Number of documents containing term (0 if unknown)"""
        return len(self.postings.get(term, ()))

    def term_frequency(self, term: str, doc_id: int) -> int:
        return self.postings.get(term, {}).get(doc_id, 0)

    @property
    def vocabulary_size(self) -> int:
        return len(self.postings)


def build_bm25_index(contents: Sequence[str]) -> BM25Index:
    """
    Build a BM25 inverted index from chunk texts.

    Always produces a brand new index object; a previously built index is
    never touched, so readers holding it keep a consistent view.

    Args:
        contents: Chunk texts in corpus order (position = doc id)

    Returns:
        BM25Index

    Example:
        >>> index = build_bm25_index(["집회 신고 집회", "후원금 한도"])
        >>> dict(index.postings["집회"])
        {0: 2}
        >>> index.doc_lengths
        (3, 2)
        >>> index.avg_doc_len
        2.5
    """
    postings: Dict[str, Dict[int, int]] = {}
    doc_lengths = []

    for doc_id, content in enumerate(contents):
        tokens = tokenize(content or "")
        doc_lengths.append(len(tokens))

        for term, count in Counter(tokens).items():
            postings.setdefault(term, {})[doc_id] = count

    num_docs = len(doc_lengths)
    avg_doc_len = sum(doc_lengths) / max(1, num_docs)

    index = BM25Index(
        postings=MappingProxyType({
            term: MappingProxyType(plist) for term, plist in postings.items()
        }),
        doc_lengths=tuple(doc_lengths),
        avg_doc_len=avg_doc_len,
        num_docs=num_docs,
    )

    logger.debug(
        f"Built BM25 index: {index.vocabulary_size} unique terms from {num_docs} chunks "
        f"(avg length {avg_doc_len:.1f} tokens)"
    )

    return index
