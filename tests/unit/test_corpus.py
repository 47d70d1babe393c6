"""
Unit tests for corpus models and loading.
"""

import logging

import pytest
from pydantic import ValidationError

from legalsearch.corpus import (
    Chunk,
    CorpusNotFoundError,
    CorpusParseError,
    load_corpus,
    load_first_available,
)


class TestLoadCorpus:
    """Test reading and validating chunks.json"""

    def test_load_valid_file(self, corpus_file):
        corpus = load_corpus(corpus_file)

        assert len(corpus) == 3
        assert corpus.metadata.title == "정치관계법 사례예시집"
        assert corpus.metadata.total_chunks == 3
        first, second, third = corpus.chunks
        assert first.metadata.page == 12
        assert first.metadata.file_name == "정치관계법_사례예시집.pdf"
        assert first.metadata.pdf_url.endswith("#page=12")
        assert second.metadata.case_number == "사례 3-1"
        assert third.metadata.note == "요약본"
        assert third.metadata.category is None

    def test_categories(self, corpus_file):
        assert load_corpus(corpus_file).categories() == {"법조문", "사례"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_corpus(tmp_path / "missing.json")

    def test_invalid_json(self, write_corpus):
        path = write_corpus("{not json")
        with pytest.raises(CorpusParseError) as exc_info:
            load_corpus(path)
        assert exc_info.value.path == path

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "chunks.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(CorpusParseError):
            load_corpus(path)

    def test_missing_chunks(self, write_corpus):
        path = write_corpus({"metadata": {"source": "x", "title": "y"}})
        with pytest.raises(CorpusParseError):
            load_corpus(path)

    def test_chunk_without_content(self, write_corpus, corpus_payload):
        path = write_corpus(corpus_payload([{"index": 0, "metadata": {}}]))
        with pytest.raises(CorpusParseError):
            load_corpus(path)

    def test_wrong_field_type(self, write_corpus, corpus_payload):
        path = write_corpus(corpus_payload([{"content": "x", "index": 0, "metadata": {"page": "twelve"}}]))
        with pytest.raises(CorpusParseError):
            load_corpus(path)

    def test_duplicate_index(self, write_corpus, corpus_payload):
        path = write_corpus(corpus_payload([
            {"content": "a", "index": 0, "metadata": {}},
            {"content": "b", "index": 0, "metadata": {}},
        ]))
        with pytest.raises(CorpusParseError, match="duplicate chunk index"):
            load_corpus(path)

    def test_parse_error_is_value_error(self, write_corpus):
        with pytest.raises(ValueError):
            load_corpus(write_corpus("[]"))

    def test_total_chunks_mismatch_warns(self, write_corpus, corpus_payload, sample_chunks, caplog):
        payload = corpus_payload(sample_chunks)
        payload["metadata"]["totalChunks"] = 99
        with caplog.at_level(logging.WARNING, logger="legalsearch.corpus"):
            corpus = load_corpus(write_corpus(payload))
        assert len(corpus) == 3
        assert "totalChunks=99" in caplog.text

    def test_chunks_are_frozen(self, corpus_file):
        chunk = load_corpus(corpus_file).chunks[0]
        with pytest.raises(ValidationError):
            chunk.content = "changed"

    def test_populate_by_field_name(self):
        chunk = Chunk.model_validate({"content": "x", "index": 1, "metadata": {"file_name": "a.pdf"}})
        assert chunk.metadata.file_name == "a.pdf"


class TestLoadFirstAvailable:
    """Test candidate path resolution"""

    def test_skips_missing_candidates(self, tmp_path, corpus_file):
        corpus, path = load_first_available([tmp_path / "nope.json", corpus_file])
        assert path == corpus_file
        assert len(corpus) == 3

    def test_first_valid_wins(self, write_corpus, corpus_payload, sample_chunks):
        first = write_corpus(corpus_payload(sample_chunks[:1]), name="first.json")
        second = write_corpus(corpus_payload(sample_chunks), name="second.json")
        corpus, path = load_first_available([first, second])
        assert path == first
        assert len(corpus) == 1

    def test_skips_malformed_candidate(self, write_corpus, corpus_file):
        broken = write_corpus("{", name="broken.json")
        _, path = load_first_available([broken, corpus_file])
        assert path == corpus_file

    def test_nothing_found(self, tmp_path):
        with pytest.raises(CorpusNotFoundError) as exc_info:
            load_first_available([tmp_path / "a.json", tmp_path / "b.json"])
        assert isinstance(exc_info.value, FileNotFoundError)
        assert "a.json" in str(exc_info.value)

    def test_no_candidates(self):
        with pytest.raises(CorpusNotFoundError):
            load_first_available([])

    def test_only_malformed(self, tmp_path, write_corpus):
        broken = write_corpus("{", name="broken.json")
        with pytest.raises(CorpusParseError):
            load_first_available([tmp_path / "missing.json", broken])
