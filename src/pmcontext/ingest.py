# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Local ingestion: walk a checked-out repository, chunk every readable
file and hand the batch to the index as one collection.
"""
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

from .chunker import CODE_WINDOW_LINES, CODE_WINDOW_STEP, TEXT_MAX_CHARS, chunk_document
from .indexer import SearchIndex
from .models import Chunk

EXCLUDED_DIRS: frozenset[str] = frozenset({
    "node_modules", "dist", "build", ".git", "coverage",
})
DEFAULT_MAX_FILE_BYTES = 1_000_000


@dataclass
class IngestResult:
    collection_id: str
    files_processed: int = 0
    files_skipped: int = 0
    chunks_indexed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def iter_files(root: Path):
    """Yield files under *root* in sorted order, skipping excluded dirs."""
    for p in sorted(root.rglob("*")):
        rel_parts = p.relative_to(root).parts
        if any(part in EXCLUDED_DIRS for part in rel_parts[:-1]):
            continue
        if p.is_file():
            yield p


def ingest_directory(
    index: SearchIndex,
    collection_id: str,
    root: str | Path,
    *,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    code_window_lines: int = CODE_WINDOW_LINES,
    code_window_step: int = CODE_WINDOW_STEP,
    text_max_chars: int = TEXT_MAX_CHARS,
) -> IngestResult:
    """Re-index *collection_id* from every file under *root*.

    Raises FileNotFoundError / NotADirectoryError for a bad root; per-file
    read problems are logged and the file is skipped.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Path does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    print(f"Starting ingest of {root} into collection {collection_id}...", file=sys.stderr)
    result = IngestResult(collection_id=collection_id)
    chunks: list[Chunk] = []

    for path in iter_files(root):
        rel_path = path.relative_to(root).as_posix()
        try:
            if path.stat().st_size > max_file_bytes:
                result.files_skipped += 1
                continue
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Warning: Skipping {rel_path}: {e}", file=sys.stderr)
            result.files_skipped += 1
            continue

        chunks.extend(chunk_document(
            collection_id, rel_path, content,
            code_window_lines=code_window_lines,
            code_window_step=code_window_step,
            text_max_chars=text_max_chars,
        ))
        result.files_processed += 1

    index.index_collection(collection_id, chunks)
    result.chunks_indexed = len(chunks)
    print(
        f"Ingest complete: {result.files_processed} files "
        f"({result.files_skipped} skipped) -> {result.chunks_indexed} chunks",
        file=sys.stderr,
    )
    return result


def merge_document(
    index: SearchIndex, collection_id: str, path: str, content: str, **chunk_options,
) -> int:
    """Chunk one document and swap it into *collection_id*, replacing that
    path's previous chunks. Returns the number of chunks written."""
    new_chunks = chunk_document(collection_id, path, content, **chunk_options)
    kept = [c for c in index.get_chunks(collection_id) if c.path != path]
    index.index_collection(collection_id, kept + new_chunks)
    return len(new_chunks)
