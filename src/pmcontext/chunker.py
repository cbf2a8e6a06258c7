# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Raw document -> Chunks

Strategy is picked from the file extension:
- markdown: split at #, ## and ### headings, text before the first
            heading becomes an "Introduction" chunk
- code:     sliding window of 50 lines, stepping 40 (10 lines overlap)
- text:     one chunk, capped at 10,000 characters

Chunk IDs are positional (collection:path:start_line), so re-chunking an
unchanged document reproduces the same IDs.
"""
import re

from .models import Chunk

MARKDOWN_EXTENSIONS = {"md", "markdown"}
CODE_EXTENSIONS = {"ts", "js", "py", "java", "go", "rs", "c", "cpp", "h"}

CODE_WINDOW_LINES = 50
CODE_WINDOW_STEP = 40
TEXT_MAX_CHARS = 10_000

INTRO_TITLE = "Introduction"

_HEADING_RE = re.compile(r"^#{1,3}\s")
_HEADING_MARKER_RE = re.compile(r"^#+\s")


def detect_kind(path: str) -> str:
    """Return "markdown", "code" or "text" for *path*."""
    ext = path.rsplit(".", 1)[-1].lower()
    if ext in MARKDOWN_EXTENSIONS:
        return "markdown"
    if ext in CODE_EXTENSIONS:
        return "code"
    return "text"


def chunk_document(
    collection_id: str,
    path: str,
    content: str,
    *,
    code_window_lines: int = CODE_WINDOW_LINES,
    code_window_step: int = CODE_WINDOW_STEP,
    text_max_chars: int = TEXT_MAX_CHARS,
) -> list[Chunk]:
    kind = detect_kind(path)
    if kind == "markdown":
        return chunk_markdown(collection_id, path, content)
    if kind == "code":
        return chunk_code(
            collection_id, path, content,
            window=code_window_lines, step=code_window_step,
        )
    return chunk_text(collection_id, path, content, max_chars=text_max_chars)


def chunk_markdown(collection_id: str, path: str, content: str) -> list[Chunk]:
    lines = content.split("\n")
    chunks: list[Chunk] = []
    current_lines: list[str] = []
    current_title = INTRO_TITLE
    start_line = 1

    for line_num, line in enumerate(lines, start=1):
        if _HEADING_RE.match(line):
            if current_lines:
                chunks.append(Chunk.build(
                    collection_id, path, "\n".join(current_lines), "markdown",
                    start_line, line_num - 1, title=current_title,
                ))
            current_title = _HEADING_MARKER_RE.sub("", line, count=1).strip()
            current_lines = [line]
            start_line = line_num
        else:
            current_lines.append(line)

    if current_lines:
        chunks.append(Chunk.build(
            collection_id, path, "\n".join(current_lines), "markdown",
            start_line, len(lines), title=current_title,
        ))

    return chunks


def chunk_code(
    collection_id: str, path: str, content: str,
    window: int = CODE_WINDOW_LINES, step: int = CODE_WINDOW_STEP,
) -> list[Chunk]:
    lines = content.split("\n")
    total = len(lines)
    chunks: list[Chunk] = []

    for start in range(0, total, step):
        end = min(start + window, total)
        chunks.append(Chunk.build(
            collection_id, path, "\n".join(lines[start:end]), "code",
            start + 1, end,
        ))
        if end == total:
            break

    return chunks


def chunk_text(
    collection_id: str, path: str, content: str,
    max_chars: int = TEXT_MAX_CHARS,
) -> list[Chunk]:
    # end_line counts the untruncated input even when content is cut
    return [Chunk.build(
        collection_id, path, content[:max_chars], "text",
        1, len(content.split("\n")),
    )]
