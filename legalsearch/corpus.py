"""
Corpus models and loading.

The corpus is produced offline (PDF pages / case-study excerpts already split
into chunks) and shipped as a single JSON file:

{
    "metadata": {"source": "...", "title": "...", "totalChunks": 2, "createdAt": "..."},
    "chunks": [
        {"content": "...", "index": 0, "metadata": {"fileName": "...", "page": 12, ...}},
        ...
    ]
}

Models are frozen pydantic models: a loaded corpus is never mutated, a reload
replaces it wholesale.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CorpusNotFoundError(FileNotFoundError):
    """No readable corpus file at any candidate location"""


class CorpusParseError(ValueError):
    """Corpus file is not valid JSON or does not have the expected shape"""

    def __init__(self, path: PathLike, message: str):
        self.path = Path(path)
        super().__init__(f"Invalid corpus at {path}: {message}")


class ChunkMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: Optional[str] = None
    title: Optional[str] = None
    type: Optional[str] = None
    page: Optional[int] = None
    case_number: Optional[str] = Field(None, alias="caseNumber")
    file_name: Optional[str] = Field(None, alias="fileName")
    pdf_url: Optional[str] = Field(None, alias="pdfUrl")
    note: Optional[str] = None


class Chunk(BaseModel):
    """One indexable passage (a PDF page or a case-study excerpt)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: str
    index: int
    metadata: ChunkMetadata

    @property
    def source_key(self) -> str:
        """
        Citable-source identity used for de-duplication.

        External locator when present, else "<fileName>-<page>-<index>", with a
        missing or zero page left empty.
        """
        if self.metadata.pdf_url:
            return self.metadata.pdf_url
        file_name = self.metadata.file_name or ""
        page = self.metadata.page or ""
        return f"{file_name}-{page}-{self.index}"


class CorpusMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = ""
    title: str = ""
    total_chunks: Optional[int] = Field(None, alias="totalChunks")
    created_at: Optional[str] = Field(None, alias="createdAt")
    pdf_url: Optional[str] = Field(None, alias="pdfUrl")
    disclaimer: Optional[str] = None


class Corpus(BaseModel):
    """Top-level metadata plus chunks in corpus order"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    metadata: CorpusMetadata
    chunks: Tuple[Chunk, ...]

    @model_validator(mode="after")
    def _check_unique_indexes(self) -> "Corpus":
        seen: Set[int] = set()
        for chunk in self.chunks:
            if chunk.index in seen:
                raise ValueError(f"duplicate chunk index {chunk.index}")
            seen.add(chunk.index)
        return self

    def categories(self) -> Set[str]:
        return {chunk.metadata.category for chunk in self.chunks if chunk.metadata.category}

    def __len__(self) -> int:
        return len(self.chunks)


def load_corpus(path: PathLike) -> Corpus:
    """
    Read and validate a corpus JSON file.

    Raises:
        OSError: File missing or unreadable
        CorpusParseError: Invalid JSON or wrong structure
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CorpusParseError(path, f"not UTF-8 text ({e.reason})") from e

    try:
        corpus = Corpus.model_validate_json(raw)
    except ValidationError as e:
        raise CorpusParseError(path, f"{e.error_count()} validation error(s): {e}") from e

    declared = corpus.metadata.total_chunks
    if declared is not None and declared != len(corpus.chunks):
        logger.warning(f"Corpus {path} declares totalChunks={declared} but contains {len(corpus.chunks)} chunks")

    return corpus


def load_first_available(candidates: Iterable[PathLike]) -> Tuple[Corpus, Path]:
    """
    Load the corpus from the first candidate path that parses.

    Unreadable candidates are skipped. A candidate that exists but fails to
    parse is also skipped, so a later good copy still wins.

    Returns:
        (corpus, path it was loaded from)

    Raises:
        CorpusParseError: Every readable candidate was malformed (last error)
        CorpusNotFoundError: No candidate could be read at all
    """
    tried: List[str] = []
    parse_error: Optional[CorpusParseError] = None

    for candidate in candidates:
        path = Path(candidate)
        tried.append(str(path))
        try:
            corpus = load_corpus(path)
        except OSError as e:
            logger.debug(f"Corpus candidate {path} not readable: {e}")
            continue
        except CorpusParseError as e:
            logger.warning(str(e))
            parse_error = e
            continue
        return corpus, path

    if parse_error is not None:
        raise parse_error
    raise CorpusNotFoundError(f"chunks.json not found (tried: {', '.join(tried) or 'no candidates'})")
