# PMContext – Project-management context gateway for AI agents
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Centralized health/status tracker – shared by the MCP tools and web API.
Thread-safe, no external dependencies.
"""
import threading
from datetime import datetime, timezone

SEARCH_TOOLS = ("search_context", "web_search")


class HealthTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._data = {
            "last_index_at": None,
            "last_index_ok": False,
            "last_index_collection": None,
            "last_index_chunks": 0,
            "last_index_files": 0,
            "last_index_error": None,

            "last_clear_at": None,
            "last_clear_collection": None,

            "started_at": datetime.now(timezone.utc).isoformat(),

            "searches_total": 0,
            "searches_hits": 0,
            "searches_misses": 0,
            "searches_by_tool": {tool: 0 for tool in SEARCH_TOOLS},
            "last_search_at": None,
        }

    def record_index(
        self, ok: bool, collection: str | None = None, chunks: int = 0,
        files: int = 0, error: str | None = None,
    ):
        with self._lock:
            self._data["last_index_at"] = datetime.now(timezone.utc).isoformat()
            self._data["last_index_ok"] = ok
            self._data["last_index_collection"] = collection
            self._data["last_index_chunks"] = chunks
            self._data["last_index_files"] = files
            self._data["last_index_error"] = error

    def record_clear(self, collection: str):
        with self._lock:
            self._data["last_clear_at"] = datetime.now(timezone.utc).isoformat()
            self._data["last_clear_collection"] = collection

    def record_search(self, tool: str, hit: bool):
        with self._lock:
            self._data["searches_total"] += 1
            if hit:
                self._data["searches_hits"] += 1
            else:
                self._data["searches_misses"] += 1
            by_tool = self._data["searches_by_tool"]
            if tool in by_tool:
                by_tool[tool] += 1
            self._data["last_search_at"] = datetime.now(timezone.utc).isoformat()

    @property
    def status(self) -> dict:
        with self._lock:
            data = dict(self._data)
            data["searches_by_tool"] = dict(self._data["searches_by_tool"])
            return data

    @property
    def is_healthy(self) -> bool:
        """Healthy unless the most recent indexing run failed."""
        with self._lock:
            return self._data["last_index_ok"] or self._data["last_index_at"] is None
