"""Unit test fixtures - small in-memory corpora and corpus files"""

import json
import logging

import pytest

from legalsearch.corpus import Chunk, ChunkMetadata, Corpus, CorpusMetadata


def _corpus_payload(chunks):
    """JSON-ready corpus dict in the wire format (camelCase metadata keys)"""
    return {
        "metadata": {
            "source": "nec-casebook",
            "title": "정치관계법 사례예시집",
            "totalChunks": len(chunks),
            "createdAt": "2025-04-01T00:00:00Z",
        },
        "chunks": chunks,
    }


@pytest.fixture
def corpus_payload():
    return _corpus_payload


@pytest.fixture
def make_chunk():
    """Factory: make_chunk(content, index, title=..., file_name=..., ...)"""
    def _make(content, index, **metadata):
        return Chunk(content=content, index=index, metadata=ChunkMetadata(**metadata))
    return _make


@pytest.fixture
def make_corpus(make_chunk):
    """Factory: corpus from plain strings (index = position) or Chunk objects"""
    def _make(items):
        chunks = tuple(
            item if isinstance(item, Chunk) else make_chunk(item, position)
            for position, item in enumerate(items)
        )
        return Corpus(
            metadata=CorpusMetadata(source="test", title="test corpus", total_chunks=len(chunks)),
            chunks=chunks,
        )
    return _make


@pytest.fixture
def sample_chunks():
    """Wire-format chunk records covering the common metadata fields"""
    return [
        {
            "content": "공개장소에서의 연설·대담은 확성장치를 사용할 수 있다.",
            "index": 0,
            "metadata": {
                "category": "법조문",
                "title": "공개장소 연설",
                "page": 12,
                "fileName": "정치관계법_사례예시집.pdf",
                "pdfUrl": "https://example.org/casebook.pdf#page=12",
            },
        },
        {
            "content": "후보자는 인터넷 홈페이지와 SNS를 이용하여 선거운동을 할 수 있다.",
            "index": 1,
            "metadata": {
                "category": "사례",
                "caseNumber": "사례 3-1",
                "fileName": "정치관계법_사례예시집.pdf",
            },
        },
        {
            "content": "재외선거인은 재외공관에서 투표한다.",
            "index": 2,
            "metadata": {"fileName": "재외선거_안내.pdf", "page": 3, "note": "요약본"},
        },
    ]


@pytest.fixture
def write_corpus(tmp_path):
    """Factory: write a corpus payload (or raw text) to a file, return its path"""
    def _write(payload, name="chunks.json"):
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def corpus_file(write_corpus, sample_chunks):
    return write_corpus(_corpus_payload(sample_chunks))


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() side effects on the root logger"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
