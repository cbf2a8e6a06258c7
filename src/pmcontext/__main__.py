# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Unified entry point: python -m pmcontext

Runs the MCP server (stdio or SSE) and, optionally, the web API in a
background thread. Both share one SearchIndex.
"""
import sys
import threading

import uvicorn

from .config import Config
from .health import HealthTracker
from .indexer import SearchIndex
from .server import create_mcp_server
from .web import create_web_app


def _log(message: str):
    print(message, file=sys.stderr)


def _run_mcp_sse(mcp_server, host: str, port: int):
    """Run MCP server via SSE, compatible with both old and new mcp SDK versions."""
    try:
        sse_app = mcp_server.sse_app()
        uvicorn.run(sse_app, host=host, port=port, log_level="warning")
    except AttributeError:
        mcp_server.settings.host = host
        mcp_server.settings.port = port
        mcp_server.run(transport="sse")


def main():
    config = Config.load()
    if "--stdio" in sys.argv[1:]:
        config.transport = "stdio"

    missing = config.missing_credentials()
    if missing:
        _log(f"Warning: Missing optional configuration for: {', '.join(missing)}. "
             f"Related tools may not work.")

    index_lock = threading.Lock()
    health = HealthTracker()
    index = SearchIndex.from_config(config)
    _log(f"Search index ready: {index.stats['total_chunks']} chunks "
         f"in {len(index.collections)} collections")

    mcp_server = create_mcp_server(config, index, index_lock, health)

    if config.web_enabled:
        web_app = create_web_app(config, index, index_lock, health)

        def run_web():
            uvicorn.run(
                web_app, host="0.0.0.0", port=config.web_port,
                log_level="warning",
            )

        web_thread = threading.Thread(target=run_web, daemon=True)
        web_thread.start()
        _log(f"Web API running on http://0.0.0.0:{config.web_port}")

    _log(f"MCP server starting ({config.transport} transport)...")
    if config.transport == "sse":
        _run_mcp_sse(mcp_server, "0.0.0.0", config.sse_port)
    else:
        mcp_server.run(transport="stdio")


if __name__ == "__main__":
    main()
