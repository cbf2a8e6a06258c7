# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Data model shared by the chunker, the search index and the tool layer.

Chunks are immutable pydantic models so the same class validates fresh
chunker output and records read back from a persisted snapshot.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ChunkKind = Literal["markdown", "code", "text"]

SNAPSHOT_VERSION = 1


def make_chunk_id(collection_id: str, path: str, start_line: int) -> str:
    return f"{collection_id}:{path}:{start_line}"


class ChunkMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    kind: ChunkKind
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_span(self) -> "ChunkMetadata":
        if self.start_line > self.end_line:
            raise ValueError(
                f"start_line {self.start_line} is after end_line {self.end_line}"
            )
        return self


class Chunk(BaseModel):
    """Atomic retrievable unit: a span of one source document."""
    model_config = ConfigDict(frozen=True)

    id: str
    collection_id: str = Field(min_length=1)
    path: str
    content: str
    metadata: ChunkMetadata

    @classmethod
    def build(
        cls, collection_id: str, path: str, content: str, kind: ChunkKind,
        start_line: int, end_line: int, title: Optional[str] = None,
    ) -> "Chunk":
        return cls(
            id=make_chunk_id(collection_id, path, start_line),
            collection_id=collection_id,
            path=path,
            content=content,
            metadata=ChunkMetadata(
                title=title, kind=kind,
                start_line=start_line, end_line=end_line,
            ),
        )


# ── Match details ────────────────────────────────────


@dataclass(frozen=True)
class ExactMatch:
    term: str
    match_type: ClassVar[str] = "exact"

    def to_dict(self) -> dict:
        return {"term": self.term, "match_type": self.match_type}


@dataclass(frozen=True)
class FuzzyMatch:
    term: str
    match_type: ClassVar[str] = "fuzzy"

    def to_dict(self) -> dict:
        return {"term": self.term, "match_type": self.match_type}


MatchDetail = Union[ExactMatch, FuzzyMatch]


@dataclass
class SearchResult:
    chunk: Chunk
    score: float
    match_details: list[MatchDetail] = field(default_factory=list)

    def to_dict(self) -> dict:
        meta = self.chunk.metadata
        return {
            "id": self.chunk.id,
            "collection_id": self.chunk.collection_id,
            "path": self.chunk.path,
            "title": meta.title,
            "kind": meta.kind,
            "start_line": meta.start_line,
            "end_line": meta.end_line,
            "content": self.chunk.content,
            "score": round(self.score, 4),
            "match_details": [m.to_dict() for m in self.match_details],
        }


class IndexSnapshot(BaseModel):
    """On-disk form of the whole index: collection id -> chunk records."""
    version: Literal[1] = SNAPSHOT_VERSION
    collections: dict[str, list[Chunk]] = Field(default_factory=dict)
