"""
BM25 (Best Match 25) ranking over an in-memory inverted index.

Components:
- tokenizer: invisible-character stripping and Unicode-aware term extraction
- index_builder: postings and document length statistics for a corpus
- scorer: Okapi BM25 (k1=1.2, b=0.75) with corpus-wide IDF
"""

from .tokenizer import clean_for_index, clean_text, tokenize
from .index_builder import BM25Index, build_bm25_index
from .scorer import BM25Scorer

__all__ = [
    "tokenize",
    "clean_for_index",
    "clean_text",
    "BM25Index",
    "build_bm25_index",
    "BM25Scorer",
]
