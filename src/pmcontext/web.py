# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Web API (FastAPI) – health, index stats and test search.
Runs in a background thread alongside the MCP server.

All state (config, index, health) is injected via create_web_app().
"""
import threading
from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field

from . import __version__
from .config import Config
from .health import HealthTracker
from .indexer import SearchIndex


class SearchRequest(BaseModel):
    query: str
    collection_id: Optional[str] = None
    limit: int = Field(default=5, gt=0, le=100)


def create_web_app(
    config: Config,
    index: SearchIndex,
    index_lock: Optional[threading.Lock] = None,
    health: HealthTracker | None = None,
) -> FastAPI:
    """Factory: returns a FastAPI app that shares state with the MCP server."""
    index_lock = index_lock or threading.Lock()

    app = FastAPI(
        title="PMContext",
        description="Search API over indexed project-management context",
    )

    @app.get("/health")
    async def health_check():
        status = health.status if health else {}
        return {
            "status": "ok" if (not health or health.is_healthy) else "degraded",
            "version": __version__,
            "chunks": index.stats["total_chunks"],
            "last_index_at": status.get("last_index_at"),
            "last_index_ok": status.get("last_index_ok"),
        }

    @app.get("/api/stats")
    async def stats():
        return {
            **index.stats,
            "config": config.to_safe_dict(),
            "health": health.status if health else {},
        }

    @app.post("/api/search")
    async def search(req: SearchRequest):
        results = index.search(req.query, collection_id=req.collection_id, limit=req.limit)
        if health:
            health.record_search("web_search", bool(results))
        return {"results": [r.to_dict() for r in results]}

    @app.delete("/api/collections/{collection_id}")
    async def clear(collection_id: str):
        with index_lock:
            existed = index.clear_collection(collection_id)
        if health:
            health.record_clear(collection_id)
        return {"status": "success", "cleared": existed}

    return app
