"""
Unit tests for the BM25 inverted index builder.
"""

import dataclasses

import pytest
from legalsearch.bm25.index_builder import BM25Index, build_bm25_index


class TestBuildIndex:
    """Test postings and length statistics"""

    def test_postings_and_lengths(self):
        """Test term frequencies per document and document lengths"""
        index = build_bm25_index(["집회 신고 집회", "후원금 한도"])

        assert dict(index.postings["집회"]) == {0: 2}
        assert dict(index.postings["신고"]) == {0: 1}
        assert dict(index.postings["후원금"]) == {1: 1}
        assert index.doc_lengths == (3, 2)
        assert index.avg_doc_len == pytest.approx(2.5)
        assert index.num_docs == 2

    def test_term_in_multiple_documents(self):
        """Test posting list spanning several documents"""
        index = build_bm25_index(["집회 신고", "집회 장소 집회", "투표"])
        assert dict(index.postings["집회"]) == {0: 1, 1: 2}
        assert index.document_frequency("집회") == 2
        assert index.term_frequency("집회", 1) == 2
        assert index.term_frequency("집회", 2) == 0

    def test_unknown_term(self):
        index = build_bm25_index(["집회 신고"])
        assert index.document_frequency("후원금") == 0
        assert index.term_frequency("후원금", 0) == 0

    def test_empty_corpus(self):
        """Test that an empty corpus does not divide by zero"""
        index = build_bm25_index([])
        assert index.num_docs == 0
        assert index.avg_doc_len == 0.0
        assert index.vocabulary_size == 0

    def test_empty_document(self):
        """Test documents without tokens have length 0"""
        index = build_bm25_index(["", "집회 신고", None])
        assert index.doc_lengths == (0, 2, 0)
        assert index.avg_doc_len == pytest.approx(2 / 3)

    def test_lengths_use_tokenizer(self):
        """Test that single characters and punctuation do not count"""
        index = build_bm25_index(["법 §58 - 선거운동"])
        assert index.doc_lengths == (2,)
        assert set(index.postings) == {"58", "선거운동"}


class TestIndexImmutability:
    """Test that a published index cannot be modified"""

    def test_postings_read_only(self):
        index = build_bm25_index(["집회 신고"])
        with pytest.raises(TypeError):
            index.postings["후원금"] = {0: 1}
        with pytest.raises(TypeError):
            index.postings["집회"][0] = 5

    def test_frozen_fields(self):
        index = build_bm25_index(["집회 신고"])
        with pytest.raises(dataclasses.FrozenInstanceError):
            index.num_docs = 10

    def test_rebuild_creates_new_index(self):
        """Test that rebuilding leaves the previous index untouched"""
        first = build_bm25_index(["집회 신고"])
        second = build_bm25_index(["후원금 한도", "후원금 기부"])

        assert first is not second
        assert isinstance(second, BM25Index)
        assert first.num_docs == 1
        assert "후원금" not in first.postings
        assert dict(first.postings["집회"]) == {0: 1}
