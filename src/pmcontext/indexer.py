# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
In-memory search index: collection id -> chunks, persisted as one JSON
snapshot file.

Ranking is BM25 over raw character lengths with substring document
frequency, falling back to Levenshtein-fuzzy token matches for terms
that never occur verbatim in a chunk. Chunks whose title contains a
query term get a flat boost, and chunks from the requested collection
get their whole score multiplied.

Every mutation rewrites the snapshot. A missing or unreadable snapshot
just means an empty index.
"""
import math
import os
import re
import sys
import threading
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import Config
from .models import Chunk, ExactMatch, FuzzyMatch, IndexSnapshot, MatchDetail, SearchResult
from .tokenizer import is_fuzzy_match, tokenize

BM25_K1 = 1.2
BM25_B = 0.75
TITLE_BOOST = 2.0
COLLECTION_BOOST = 1.5


def _log(message: str):
    print(message, file=sys.stderr)


class SearchIndex:
    def __init__(self, snapshot_path: str | Path | None = None):
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._collections: dict[str, list[Chunk]] = {}
        self._lock = threading.Lock()
        self.load()

    @classmethod
    def from_config(cls, config: Config) -> "SearchIndex":
        return cls(config.index_path)

    @property
    def snapshot_path(self) -> Optional[Path]:
        return self._snapshot_path

    # ── Persistence ──────────────────────────────────────

    def load(self) -> bool:
        """Populate the index from the snapshot. Returns True if one was read."""
        path = self._snapshot_path
        if path is None or not path.exists():
            return False
        try:
            snapshot = IndexSnapshot.model_validate_json(path.read_bytes())
        except (OSError, ValidationError, ValueError) as e:
            _log(f"Warning: Failed to load search index from {path}: {e}")
            with self._lock:
                self._collections = {}
            return False
        with self._lock:
            self._collections = {
                cid: list(chunks) for cid, chunks in snapshot.collections.items()
            }
        total = sum(len(c) for c in snapshot.collections.values())
        _log(f"Loaded search index from {path} "
             f"({len(snapshot.collections)} collections, {total} chunks)")
        return True

    def save(self):
        with self._lock:
            self._save_locked()

    def _save_locked(self):
        path = self._snapshot_path
        if path is None:
            return
        snapshot = IndexSnapshot(collections=self._collections)
        tmp = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(snapshot.model_dump_json(), encoding="utf-8")
            os.replace(tmp, path)
        except (OSError, ValueError) as e:
            # ValueError covers PydanticSerializationError (e.g. lone surrogates)
            _log(f"Warning: Failed to save search index to {path}: {e}")

    # ── Indexing ─────────────────────────────────────────

    def index_collection(self, collection_id: str, chunks: list[Chunk]):
        """Replace every chunk of *collection_id* with *chunks*."""
        with self._lock:
            self._collections[collection_id] = list(chunks)
            self._save_locked()
        _log(f"Indexed {len(chunks)} chunks for collection {collection_id}")

    def clear_collection(self, collection_id: str) -> bool:
        with self._lock:
            existed = self._collections.pop(collection_id, None) is not None
            self._save_locked()
        if existed:
            _log(f"Cleared collection {collection_id}")
        return existed

    @property
    def collections(self) -> list[str]:
        with self._lock:
            return sorted(self._collections)

    def get_chunks(self, collection_id: str) -> list[Chunk]:
        with self._lock:
            return list(self._collections.get(collection_id, []))

    @property
    def stats(self) -> dict:
        with self._lock:
            counts = {cid: len(chunks) for cid, chunks in self._collections.items()}
        return {
            "total_chunks": sum(counts.values()),
            "collections": dict(sorted(counts.items())),
            "snapshot_path": str(self._snapshot_path) if self._snapshot_path else None,
        }

    # ── Search ───────────────────────────────────────────

    def _candidates(self, collection_id: Optional[str]) -> list[Chunk]:
        """Requested collection first, then every other collection."""
        candidates: list[Chunk] = []
        if collection_id and collection_id in self._collections:
            candidates.extend(self._collections[collection_id])
            for cid, chunks in self._collections.items():
                if cid != collection_id:
                    candidates.extend(chunks)
        else:
            for chunks in self._collections.values():
                candidates.extend(chunks)
        return candidates

    @staticmethod
    def _term_frequency(term: str, content_lower: str, content: str) -> tuple[int, Optional[MatchDetail]]:
        exact = len(re.findall(re.escape(term), content_lower))
        if exact:
            return exact, ExactMatch(term)
        # fuzzy only when the term never occurs verbatim
        fuzzy = sum(1 for token in tokenize(content) if is_fuzzy_match(term, token))
        if fuzzy:
            return fuzzy, FuzzyMatch(term)
        return 0, None

    def search(
        self, query: str, collection_id: Optional[str] = None, limit: int = 5,
    ) -> list[SearchResult]:
        if limit <= 0:
            return []
        with self._lock:
            candidates = self._candidates(collection_id)
        if not candidates:
            return []

        query_terms = tokenize(query)
        if not query_terms:
            return []

        n = len(candidates)
        avg_doc_length = sum(len(c.content) for c in candidates) / n
        lowered = [c.content.lower() for c in candidates]

        idf: dict[str, float] = {}
        for term in query_terms:
            df = sum(1 for content_lower in lowered if term in content_lower)
            idf[term] = math.log(1 + (n - df + 0.5) / (df + 0.5))

        results: list[SearchResult] = []
        for chunk, content_lower in zip(candidates, lowered):
            score = 0.0
            details: list[MatchDetail] = []
            doc_length = len(chunk.content)
            # all chunks empty -> avg 0; treat length ratio as 1
            length_ratio = doc_length / avg_doc_length if avg_doc_length else 1.0

            for term in query_terms:
                tf, detail = self._term_frequency(term, content_lower, chunk.content)
                if tf > 0:
                    numerator = idf[term] * tf * (BM25_K1 + 1)
                    denominator = tf + BM25_K1 * (1 - BM25_B + BM25_B * length_ratio)
                    score += numerator / denominator
                    details.append(detail)

            title_lower = (chunk.metadata.title or "").lower()
            for term in query_terms:
                if term in title_lower:
                    score += TITLE_BOOST

            if collection_id and chunk.collection_id == collection_id:
                score *= COLLECTION_BOOST

            if score > 0:
                results.append(SearchResult(chunk=chunk, score=score, match_details=details))

        # sorted() is stable, ties keep candidate order
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[:limit]
