"""
legalsearch - hybrid retrieval over pre-chunked election-law reference documents.

Pipeline per query:
    tokenize -> BM25 (postings) + heuristic booster (synonyms, keyword weights,
    topic rules) -> combined score -> dynamic threshold -> dedupe/backfill

Usage:
    from legalsearch import ChunkSearchEngine

    engine = ChunkSearchEngine()
    engine.load("data/chunks.json")
    for chunk in engine.search("SNS 선거운동", max_results=8, min_score=40):
        print(chunk.metadata.file_name, chunk.metadata.page)
"""

from .corpus import Chunk, ChunkMetadata, Corpus, CorpusMetadata, CorpusNotFoundError, CorpusParseError
from .engine import ChunkSearchEngine, EngineNotLoadedError, EngineState, EngineStatus, get_engine
from .selector import ScoredChunk

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "Corpus",
    "CorpusMetadata",
    "CorpusNotFoundError",
    "CorpusParseError",
    "ChunkSearchEngine",
    "EngineNotLoadedError",
    "EngineState",
    "EngineStatus",
    "ScoredChunk",
    "get_engine",
]
