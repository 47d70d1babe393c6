"""
Chunk search engine: corpus lifecycle plus the search entry points.

Lifecycle:
    UNLOADED --load()--> LOADING --ok--> READY
                                 --error--> FAILED (or back to READY if an
                                            earlier load is still published)

The corpus, its BM25 index and its normalized match fields are published
together as one immutable IndexSnapshot through a single attribute
assignment. A search reads the snapshot reference once and works on it to
the end, so a concurrent reload can never pair a corpus with another corpus's index. Loads are serialized by
a lock; ensure_loaded() is the one guarded lazy-initialization path.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Set, Tuple, Union

from pydantic import BaseModel

from .bm25 import BM25Index, BM25Scorer, build_bm25_index, tokenize
from .config import Settings
from .corpus import Chunk, Corpus, load_first_available
from .heuristics import DEFAULT_RULES, HeuristicBooster, RuleSet, chunk_fields
from .selector import ScoredChunk, backfill as backfill_topics, dedupe_by_source, rank, select_results

logger = logging.getLogger(__name__)

CorpusSource = Union[Corpus, str, Path, None]


class EngineState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EngineNotLoadedError(RuntimeError):
    """Search or lookup attempted before any corpus was loaded successfully"""

    def __init__(self, message: str = "Chunks are not loaded; call load() first"):
        super().__init__(message)


@dataclass(frozen=True)
class IndexSnapshot:
    """A corpus, its index and its normalized match fields, published as one unit"""
    corpus: Corpus
    index: BM25Index
    fields: Tuple[Mapping[str, str], ...]
    source: Optional[Path]
    loaded_at: datetime


class EngineStatus(BaseModel):
    state: EngineState
    chunks: int = 0
    categories: int = 0
    source: Optional[str] = None
    loaded_at: Optional[datetime] = None
    last_error: Optional[str] = None


class ChunkSearchEngine:
    """
    In-process hybrid (BM25 + heuristic) retrieval over a chunk corpus.

    Usage:
        engine = ChunkSearchEngine()
        engine.load()                      # configured candidate paths
        chunks = engine.search("선거운동의 정의", max_results=8, min_score=40)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rules: RuleSet = DEFAULT_RULES,
        scorer: Optional[BM25Scorer] = None,
    ):
        self.settings = settings or Settings()
        self.rules = rules
        self.scorer = scorer or BM25Scorer()
        self.booster = HeuristicBooster(rules)

        self._lock = threading.RLock()
        self._snapshot: Optional[IndexSnapshot] = None
        self._state = EngineState.UNLOADED
        self._last_error: Optional[str] = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    def load(self, source: CorpusSource = None) -> None:
        """
        Load a corpus and build its index, then publish both atomically.

        Args:
            source: Corpus instance, path to a chunks.json file, or None to
                try the configured candidate paths in order

        Raises:
            CorpusNotFoundError: No readable corpus file
            CorpusParseError: Corpus file malformed

        On failure the previously published corpus/index (if any) stays live.
        """
        with self._lock:
            self._state = EngineState.LOADING
            try:
                corpus, path = self._read_corpus(source)
                index = build_bm25_index([chunk.content for chunk in corpus.chunks])
                fields = tuple(MappingProxyType(chunk_fields(chunk)) for chunk in corpus.chunks)
            except Exception as e:
                self._last_error = str(e)
                self._state = EngineState.READY if self._snapshot is not None else EngineState.FAILED
                logger.error(f"Corpus load failed: {e}")
                raise

            self._snapshot = IndexSnapshot(
                corpus=corpus,
                index=index,
                fields=fields,
                source=path,
                loaded_at=datetime.now(timezone.utc),
            )
            self._state = EngineState.READY
            self._last_error = None

        logger.info(f"Chunks loaded: {len(corpus.chunks)} (path={path or 'in-memory'})")

    def ensure_loaded(self) -> None:
        """Load from configured candidates unless a corpus is already published"""
        if self._snapshot is not None:
            return
        with self._lock:
            if self._snapshot is None:
                self.load()

    def _read_corpus(self, source: CorpusSource) -> Tuple[Corpus, Optional[Path]]:
        if isinstance(source, Corpus):
            return source, None
        if source is None:
            return load_first_available(self.settings.corpus_candidates)
        return load_first_available([source])

    def _require_snapshot(self) -> IndexSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise EngineNotLoadedError()
        return snapshot

    def _rank(self, snapshot: IndexSnapshot, query: str) -> Tuple[List[ScoredChunk], int]:
        query_terms = list(dict.fromkeys(tokenize(query)))
        bm25_scores = self.scorer.score(query_terms, snapshot.index)
        heuristic_scores = self.booster.boost_all(snapshot.fields, query)

        scored = [
            ScoredChunk(
                chunk=chunk,
                doc_id=doc_id,
                bm25_score=bm25_scores.get(doc_id, 0.0),
                heuristic_score=heuristic_scores[doc_id],
            )
            for doc_id, chunk in enumerate(snapshot.corpus.chunks)
        ]
        return rank(scored), len(query_terms)

    def rank(self, query: str) -> List[ScoredChunk]:
        """Every chunk with its scores, best first (no threshold applied)"""
        ranked, _ = self._rank(self._require_snapshot(), query)
        return ranked

    def search(
        self,
        query: str,
        max_results: Optional[int] = None,
        min_score: Optional[float] = None,
        dedupe: bool = False,
        backfill: bool = False,
    ) -> List[Chunk]:
        """
        Find the chunks most relevant to a query.

        Args:
            query: Free-text user query
            max_results: Result cap (default: settings.max_results)
            min_score: Minimum score floor (default: settings.min_score)
            dedupe: Collapse chunks sharing a source key (citable sources)
            backfill: Append topic chunks for known high-value topics

        Returns:
            Chunks, most relevant first; empty if nothing scored

        Raises:
            EngineNotLoadedError: No corpus loaded yet
        """
        snapshot = self._require_snapshot()
        max_results = self.settings.max_results if max_results is None else max_results
        min_score = self.settings.min_score if min_score is None else min_score

        ranked, term_count = self._rank(snapshot, query)
        results = [item.chunk for item in select_results(ranked, term_count, max_results, min_score)]

        if dedupe:
            results = dedupe_by_source(results)
        if backfill:
            results = backfill_topics(
                results, snapshot.corpus.chunks, query, self.rules, max_results, corpus_fields=snapshot.fields
            )

        logger.debug(f"Search {query!r}: {term_count} terms, {len(results)} results")

        return results

    def list_categories(self) -> Set[str]:
        return self._require_snapshot().corpus.categories()

    def get_chunks_by_category(self, category: str) -> List[Chunk]:
        """Chunks whose category equals `category` (case-insensitive), corpus order"""
        wanted = category.lower()
        return [
            chunk for chunk in self._require_snapshot().corpus.chunks
            if chunk.metadata.category and chunk.metadata.category.lower() == wanted
        ]

    def status(self) -> EngineStatus:
        """Health summary; never raises"""
        snapshot = self._snapshot
        if snapshot is None:
            return EngineStatus(state=self._state, last_error=self._last_error)
        return EngineStatus(
            state=self._state,
            chunks=len(snapshot.corpus.chunks),
            categories=len(snapshot.corpus.categories()),
            source=str(snapshot.source) if snapshot.source else None,
            loaded_at=snapshot.loaded_at,
            last_error=self._last_error,
        )


_default_engine: Optional[ChunkSearchEngine] = None
_default_engine_lock = threading.Lock()


def get_engine() -> ChunkSearchEngine:
    """Process-wide engine configured from the environment (not loaded yet)"""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = ChunkSearchEngine(settings=Settings.from_env())
        return _default_engine
