# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Centralized health/status tracker – shared by the entry point and the MCP tools.
Thread-safe, no external dependencies.
"""
import threading
from datetime import datetime, timezone

TRACKED_TOOLS = ("search_ton_documentation",)


class HealthTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._data = {
            "last_load_at": None,
            "last_load_ok": False,
            "last_load_source": None,
            "last_load_documents": 0,
            "last_load_chunks": 0,
            "last_load_error": None,

            "started_at": datetime.now(timezone.utc).isoformat(),

            "searches_total": 0,
            "searches_hits": 0,
            "searches_misses": 0,
            "searches_by_tool": {tool: 0 for tool in TRACKED_TOOLS},
            "last_search_at": None,
        }

    def record_load(
        self, ok: bool, source: str | None = None, documents: int = 0,
        chunks: int = 0, error: str | None = None,
    ):
        with self._lock:
            self._data["last_load_at"] = datetime.now(timezone.utc).isoformat()
            self._data["last_load_ok"] = ok
            self._data["last_load_source"] = source
            self._data["last_load_documents"] = documents
            self._data["last_load_chunks"] = chunks
            self._data["last_load_error"] = error

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
        with self._lock:
            return self._data["last_load_ok"]
