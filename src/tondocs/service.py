# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
DocsSearchService – corpus lifecycle, ranked search and runtime edits.

Sources -> chunks -> FuzzyIndex, held as one immutable snapshot. Every
edit builds a complete new snapshot and swaps the reference, so readers
never see a half-built index.

search() pipeline:
  1. normalize the query, append category/tag clauses
  2. primary fuzzy search, capped at limit
  3. on zero hits: retry with the raw query, then term by term
  4. drop hits above the relevance ceiling (and above min_score)
  5. re-rank by score minus official-source and exact-tag boosts
"""
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional
from urllib.parse import urlparse

from loguru import logger

from .config import Config
from .documents import split_document
from .fuzzy import FuzzyIndex, scoped_query
from .models import DocumentChunk, SearchResult
from .normalizer import normalize_query
from .sources import CorpusLoader


@dataclass(frozen=True)
class _Snapshot:
    chunks: tuple[DocumentChunk, ...]
    index: FuzzyIndex


class DocsSearchService:
    def __init__(self, config: Config, loader: Optional[CorpusLoader] = None):
        self.config = config
        self.loader = loader or CorpusLoader.from_config(config)
        self.last_source: Optional[str] = None
        self._lock = threading.RLock()
        self._snapshot: Optional[_Snapshot] = None

    @property
    def is_initialized(self) -> bool:
        return self._snapshot is not None

    @property
    def documents(self) -> tuple[DocumentChunk, ...]:
        return self._current().chunks

    # ── Corpus lifecycle ─────────────────────────────

    def initialize(self) -> dict:
        """(Re-)load the corpus from sources and rebuild the index."""
        with self._lock:
            result = self.loader.load()
            chunks: list[DocumentChunk] = []
            for doc in result.documents:
                if doc.content.strip():
                    chunks.extend(split_document(doc, self.config.chunk_size))
            chunks = self._unique(chunks)
            self._swap(chunks)
            self.last_source = result.source
            logger.info(
                f"Search index ready: {len(chunks)} chunks from "
                f"{len(result.documents)} documents (source: {result.source or 'builtin'})"
            )
            return {
                "status": "success",
                "source": result.source or "builtin",
                "documents": len(result.documents),
                "chunks": len(chunks),
            }

    @staticmethod
    def _unique(chunks: Iterable[DocumentChunk]) -> list[DocumentChunk]:
        seen: dict[str, DocumentChunk] = {}
        for chunk in chunks:
            if chunk.id in seen:
                logger.warning(f"Duplicate document id '{chunk.id}', keeping the first")
                continue
            seen[chunk.id] = chunk
        return list(seen.values())

    def _swap(self, chunks: list[DocumentChunk]):
        index = FuzzyIndex(
            chunks,
            self.config.field_weights(),
            threshold=self.config.fuzzy_threshold,
            min_term_length=self.config.min_term_length,
        )
        self._snapshot = _Snapshot(tuple(chunks), index)

    def _current(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self.initialize()
                snapshot = self._snapshot
        return snapshot

    # ── Search ───────────────────────────────────────

    def search(
        self,
        query: str,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
    ) -> list[SearchResult]:
        if not isinstance(query, str) or not query.strip():
            return []
        limit = limit if limit and limit > 0 else self.config.default_limit
        index = self._current().index

        normalized = normalize_query(query)
        results = index.search(scoped_query(normalized, category, tags), limit)

        if not results:
            results = self._fallback(index, query, normalized, category, tags)

        ceiling = self.config.relevance_ceiling
        results = [
            r for r in results
            if r.score <= ceiling and (min_score is None or r.score <= min_score)
        ]

        lowered = query.lower()
        for r in results:
            r.boosted_score = r.score - self._boost(r.document, lowered)
        results.sort(key=lambda r: r.rank_score)
        return results[:limit]

    def _fallback(
        self, index: FuzzyIndex, query: str, normalized: str,
        category: Optional[str], tags: Optional[list[str]],
    ) -> list[SearchResult]:
        raw = query.strip().lower()
        if raw != normalized:
            results = index.search(scoped_query(raw, category, tags), self.config.default_limit)
            if results:
                logger.debug(f"Raw query fallback matched for '{query}'")
                return results

        best: dict[str, SearchResult] = {}
        for term in query.split():
            if len(term) <= 2:
                continue
            hits = index.search(
                scoped_query(term.lower(), category, tags), self.config.term_fallback_limit,
            )
            for hit in hits:
                current = best.get(hit.document.id)
                if current is None or hit.score < current.score:
                    best[hit.document.id] = hit
        if best:
            logger.debug(f"Term fallback matched {len(best)} chunks for '{query}'")
        return sorted(best.values(), key=lambda r: r.score)

    def _boost(self, doc: DocumentChunk, lowered_query: str) -> float:
        boost = 0.0
        if doc.url and self._is_official(doc.url):
            boost += self.config.official_boost
        if any(tag.lower() in lowered_query for tag in doc.tags):
            boost += self.config.tag_boost
        return boost

    def _is_official(self, url: str) -> bool:
        host = (urlparse(url).hostname or "").lower()
        official = self.config.official_host.lower()
        return host == official or host.endswith(f".{official}")

    # ── Browsing ─────────────────────────────────────

    def get_documents_by_category(self, category: str, limit: int = 10) -> list[DocumentChunk]:
        chunks = self._current().chunks
        return [c for c in chunks if c.category == category][:limit]

    def get_related_documents(self, document_id: str, limit: int = 5) -> list[DocumentChunk]:
        """Documents sharing at least one tag with *document_id*, excluding itself."""
        chunks = self._current().chunks
        source = next((c for c in chunks if c.id == document_id), None)
        if source is None:
            return []
        source_tags = set(source.tags)
        return [
            c for c in chunks
            if c.id != document_id and source_tags.intersection(c.tags)
        ][:limit]

    def get_stats(self) -> dict:
        chunks = self._current().chunks
        categories: dict[str, int] = {}
        all_tags: set[str] = set()
        for chunk in chunks:
            categories[chunk.category] = categories.get(chunk.category, 0) + 1
            all_tags.update(chunk.tags)
        return {
            "total_documents": len(chunks),
            "categories": categories,
            "total_tags": len(all_tags),
        }

    # ── Runtime edits ────────────────────────────────

    def add_document(
        self,
        title: str,
        content: str,
        category: str = "general",
        tags: Iterable[str] = (),
        url: Optional[str] = None,
        last_updated: Optional[str] = None,
    ) -> str:
        """Index a new document under a fresh id, split like a loaded one.

        Content longer than ``chunk_size`` becomes ``<id>-chunk-<n>`` chunks;
        the returned id removes all of them.
        """
        if not isinstance(content, str) or not content.strip():
            raise ValueError("content must be a non-empty string")

        doc_id = f"custom-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
        doc = DocumentChunk(
            id=doc_id,
            title=title,
            content=content.strip(),
            category=category,
            tags=list(tags),
            url=url,
            last_updated=last_updated or datetime.now(timezone.utc).isoformat(),
        )
        chunks = split_document(doc, self.config.chunk_size)
        with self._lock:
            snapshot = self._current()
            self._swap([*snapshot.chunks, *chunks])
        logger.debug(f"Added document {doc_id} ({title}, {len(chunks)} chunks)")
        return doc_id

    def remove_document(self, document_id: str) -> bool:
        """Remove a chunk, or every chunk of a split document, by id."""
        if not isinstance(document_id, str):
            raise TypeError(f"document_id must be str, got {type(document_id).__name__}")

        prefix = f"{document_id}-chunk-"
        with self._lock:
            snapshot = self._current()
            remaining = [
                c for c in snapshot.chunks
                if c.id != document_id and not c.id.startswith(prefix)
            ]
            if len(remaining) == len(snapshot.chunks):
                return False
            self._swap(remaining)
        logger.debug(f"Removed document {document_id}")
        return True
