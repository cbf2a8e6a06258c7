# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
MCP Server factory – creates a FastMCP instance with tools
that share one SearchIndex with the web API.

Tools:
  - search_context: Ranked keyword search, optionally boosting one collection
  - index_directory: (Re-)index a local checkout as a collection
  - index_document: Add or replace a single document in a collection
  - clear_collection: Drop a collection from the index
  - get_index_stats: Index statistics
"""
import json
import threading
from typing import Optional

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import Config
from .formatting import format_results
from .health import HealthTracker
from .indexer import SearchIndex
from .ingest import ingest_directory, merge_document


def create_mcp_server(
    config: Config,
    index: SearchIndex,
    index_lock: Optional[threading.Lock] = None,
    health: HealthTracker | None = None,
) -> FastMCP:
    """Factory: returns a configured FastMCP server that shares state with web.py."""
    index_lock = index_lock or threading.Lock()

    mcp = FastMCP(
        "pmcontext",
        instructions=(
            "Keyword search over crawled project-management context "
            "(repositories, issues, design notes).\n\n"
            "WORKFLOW for the agent:\n"
            "1. index_directory() once per collection before searching\n"
            "2. search_context() with specific terms; pass collection_id to "
            "prioritise one project\n"
            "3. Prefer 2-3 targeted searches over one vague query"
        ),
    )

    @mcp.tool()
    def search_context(query: str, collection_id: str = "", limit: int = 0) -> str:
        """Search indexed context. Results from collection_id (if given) are
        ranked first, but other collections are still searched.

        Args:
            query: Keywords to look for (identifiers, camelCase names work)
            collection_id: Optional collection to prioritise
            limit: Max number of results (default from config)

        Returns:
            Ranked matches with file, line span and snippet
        """
        results = index.search(
            query, collection_id=collection_id or None,
            limit=limit if limit > 0 else config.search_limit,
        )
        if health:
            health.record_search("search_context", bool(results))
        return format_results(results, query, collection_id or None)

    @mcp.tool()
    def index_directory(collection_id: str = "", path: str = "") -> str:
        """Crawl a local directory and replace the collection's chunks with it.

        Args:
            collection_id: Collection to (re-)build (default from config)
            path: Directory to crawl (default: configured docs_path)
        """
        collection_id = collection_id or config.default_collection
        root = path or config.docs_path
        with index_lock:
            try:
                result = ingest_directory(
                    index, collection_id, root,
                    max_file_bytes=config.max_file_bytes,
                    **config.chunking_options(),
                )
            except (FileNotFoundError, NotADirectoryError) as e:
                if health:
                    health.record_index(ok=False, collection=collection_id, error=str(e))
                return f"Error indexing {root}: {e}"
        if health:
            health.record_index(
                ok=True, collection=collection_id,
                chunks=result.chunks_indexed, files=result.files_processed,
            )
        return (
            f"Indexed collection {collection_id}: {result.files_processed} files, "
            f"{result.chunks_indexed} chunks ({result.files_skipped} files skipped)"
        )

    @mcp.tool()
    def index_document(collection_id: str, path: str, content: str) -> str:
        """Index one document, replacing any earlier version of the same path.

        Args:
            collection_id: Collection the document belongs to
            path: Document path; its extension picks the chunking strategy
            content: Full document text
        """
        if not collection_id:
            return "Error: collection_id must not be empty."
        with index_lock:
            count = merge_document(
                index, collection_id, path, content, **config.chunking_options(),
            )
        if health:
            health.record_index(ok=True, collection=collection_id, chunks=count, files=1)
        return f"Indexed {path} into {collection_id} ({count} chunks)"

    @mcp.tool()
    def clear_collection(collection_id: str) -> str:
        """Remove a collection and all of its chunks from the index."""
        with index_lock:
            existed = index.clear_collection(collection_id)
        if health:
            health.record_clear(collection_id)
        if not existed:
            return f"Collection {collection_id} was not indexed."
        return f"Cleared collection {collection_id}."

    @mcp.tool()
    def get_index_stats() -> str:
        """Chunk counts per collection plus server health."""
        stats = index.stats
        stats["version"] = __version__
        if health:
            stats["health"] = health.status
        return json.dumps(stats, indent=2)

    return mcp
