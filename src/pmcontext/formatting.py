# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""Turn search results into compact text for an LLM client."""
from typing import Optional

from .models import SearchResult

SNIPPET_LINES_BEFORE = 1
SNIPPET_LINES_AFTER = 3


def extract_snippet(result: SearchResult) -> str:
    """A few lines around the first line mentioning the first matched term."""
    lines = result.chunk.content.split("\n")
    best = 0
    if result.match_details:
        first_term = result.match_details[0].term
        for i, line in enumerate(lines):
            if first_term in line.lower():
                best = i
                break
    start = max(0, best - SNIPPET_LINES_BEFORE)
    end = min(len(lines), best + SNIPPET_LINES_AFTER)
    return "\n".join(lines[start:end])


def format_results(
    results: list[SearchResult], query: str, collection_id: Optional[str] = None,
) -> str:
    if not results:
        scope = f"collection {collection_id}" if collection_id else "any collection"
        return (
            f'No results found for "{query}" in {scope}. '
            "Make sure to run index_directory first."
        )

    blocks = []
    for i, r in enumerate(results, 1):
        meta = r.chunk.metadata
        heading = f"Section: {meta.title}\n" if meta.title else ""
        blocks.append(
            f"[Result {i}] (Score: {r.score:.2f})\n"
            f"Collection: {r.chunk.collection_id}\n"
            f"File: {r.chunk.path} (Lines {meta.start_line}-{meta.end_line})\n"
            f"{heading}"
            f"Snippet:\n{extract_snippet(r)}\n..."
        )
    return f"Found {len(results)} matches:\n\n" + "\n---\n\n".join(blocks)
