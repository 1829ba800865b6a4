# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Corpus sources, tried in priority order until one yields documents:

1. Pre-built JSON index (docs-index.json), looked up at several locations
   so it is found both from an installed package and from a source checkout
2. Remote JSON indexes fetched over HTTP (optional)
3. Markdown files under the per-category resource directories

The built-in reference documents are appended afterwards in every case,
so the corpus is never empty.

Index format: a JSON array of
  {id, title, url, content, category, tags: [str], lastUpdated}
"""
import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

import httpx
from loguru import logger

from . import __version__
from .config import Config
from .documents import extract_tags, extract_title, fill_metadata
from .models import DocumentChunk

PACKAGE_DIR = Path(__file__).resolve().parent
INDEX_FILENAME = "docs-index.json"


def index_candidates(index_file: str = "") -> list[Path]:
    """Locations checked for a pre-built index, explicit path first."""
    paths = [Path(index_file)] if index_file else []
    paths += [
        Path.cwd() / INDEX_FILENAME,
        PACKAGE_DIR / INDEX_FILENAME,
        PACKAGE_DIR.parent / INDEX_FILENAME,
        PACKAGE_DIR.parents[1] / INDEX_FILENAME,
    ]
    return list(dict.fromkeys(paths))


def _make_doc_id(origin: str, title: str, content: str) -> str:
    digest = hashlib.sha256(f"{origin}\n{title}\n{content}".encode()).hexdigest()[:16]
    return f"doc-{digest}"


def parse_index_entries(raw, origin: str) -> list[DocumentChunk]:
    """Turn a decoded JSON index into documents, skipping malformed entries."""
    if not isinstance(raw, list):
        logger.warning(f"Index {origin} is not a JSON array, ignoring")
        return []

    docs: list[DocumentChunk] = []
    skipped = 0
    for entry in raw:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        try:
            doc = DocumentChunk.from_dict(entry)
            if not doc.content.strip():
                skipped += 1
                continue
            if not doc.id:
                doc.id = _make_doc_id(origin, doc.title, doc.content)
            if not doc.title:
                doc.title = doc.url or doc.id
            docs.append(fill_metadata(doc))
        except (TypeError, ValueError) as e:
            logger.debug(f"Index {origin}: bad entry {entry.get('id')!r}: {e}")
            skipped += 1

    if skipped:
        logger.warning(f"Index {origin}: skipped {skipped} malformed entries")
    return docs


class CorpusSource(ABC):
    name = "source"

    @abstractmethod
    def try_load(self) -> Optional[list[DocumentChunk]]:
        """Return documents, or None/empty when this source has nothing."""


class PrebuiltIndexSource(CorpusSource):
    name = "prebuilt-index"

    def __init__(self, candidates: Sequence[Path]):
        self.candidates = list(candidates)

    def try_load(self) -> Optional[list[DocumentChunk]]:
        for path in self.candidates:
            if not path.is_file():
                continue
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Pre-built index {path} unreadable: {e}")
                continue
            docs = parse_index_entries(raw, origin=str(path))
            if docs:
                logger.info(f"Pre-built index {path}: {len(docs)} documents")
                return docs
            logger.warning(f"Pre-built index {path} has no usable entries")
        return None


class RemoteIndexSource(CorpusSource):
    """Fetch JSON indexes over HTTP. A failing URL is skipped, not fatal."""

    name = "remote-index"

    def __init__(
        self, urls: Sequence[str], timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.urls = list(urls)
        self.timeout = timeout
        self.transport = transport

    def try_load(self) -> Optional[list[DocumentChunk]]:
        if not self.urls:
            return None

        docs: list[DocumentChunk] = []
        with httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            headers={"User-Agent": f"tondocs/{__version__}"},
        ) as client:
            for url in self.urls:
                try:
                    response = client.get(url)
                    response.raise_for_status()
                    raw = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(f"Remote index {url} skipped: {e}")
                    continue
                fetched = parse_index_entries(raw, origin=url)
                logger.info(f"Remote index {url}: {len(fetched)} documents")
                docs.extend(fetched)
        return docs or None


class MarkdownDirectorySource(CorpusSource):
    """Read ``<root>/<category>/*.md``; the directory name is the category."""

    name = "markdown"

    def __init__(self, root: Path, categories: Sequence[str], base_url: str = ""):
        self.root = Path(root)
        self.categories = list(categories)
        self.base_url = base_url.rstrip("/")

    def try_load(self) -> Optional[list[DocumentChunk]]:
        if not self.root.is_dir():
            logger.warning(f"Resources directory not found: {self.root}")
            return None

        docs: list[DocumentChunk] = []
        for category in self.categories:
            category_dir = self.root / category
            if not category_dir.is_dir():
                continue
            for path in sorted(category_dir.glob("*.md")):
                try:
                    content = path.read_text(encoding="utf-8", errors="ignore")
                    mtime = path.stat().st_mtime
                except OSError as e:
                    logger.warning(f"Could not read {path}: {e}")
                    continue
                if not content.strip():
                    continue
                rel = f"{category}/{path.stem}"
                title = extract_title(content, path.name)
                docs.append(DocumentChunk(
                    id=f"{category}-{path.stem}",
                    title=title,
                    content=content,
                    category=category,
                    tags=extract_tags(content, category, rel, title),
                    url=f"{self.base_url}/{rel}" if self.base_url else None,
                    last_updated=datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(),
                ))

        if docs:
            logger.info(f"Markdown resources {self.root}: {len(docs)} documents")
        return docs or None


class StaticSource(CorpusSource):
    def __init__(self, documents: Iterable[DocumentChunk], name: str = "static"):
        self.documents = list(documents)
        self.name = name

    def try_load(self) -> Optional[list[DocumentChunk]]:
        return list(self.documents) or None


BUILTIN_DOCUMENTS = [
    DocumentChunk(
        id="ton-docs-overview",
        title="TON Blockchain Overview",
        content="Official TON blockchain documentation covering architecture, consensus, and core concepts.",
        category="documentation",
        tags=["ton", "blockchain", "overview", "documentation"],
        url="https://docs.ton.org/",
    ),
    DocumentChunk(
        id="ton-docs-smart-contracts",
        title="Smart Contract Development",
        content="Complete guide to developing smart contracts on TON using Tact and FunC languages.",
        category="smart-contracts",
        tags=["smart contracts", "tact", "func", "development"],
        url="https://docs.ton.org/develop/smart-contracts/",
    ),
    DocumentChunk(
        id="ton-docs-tact",
        title="Tact Programming Language",
        content=(
            "Official documentation for the Tact programming language - "
            "the recommended way to write TON smart contracts."
        ),
        category="languages",
        tags=["tact", "language", "smart contracts", "development"],
        url="https://docs.ton.org/develop/smart-contracts/tact/",
    ),
    DocumentChunk(
        id="ton-docs-tvm",
        title="TON Virtual Machine (TVM)",
        content="Technical documentation for TVM - TON's custom virtual machine for executing smart contracts.",
        category="infrastructure",
        tags=["tvm", "virtual machine", "execution", "technical"],
        url="https://docs.ton.org/learn/tvm-instructions/tvm-overview",
    ),
    DocumentChunk(
        id="ton-docs-jettons",
        title="Jettons (TON Tokens)",
        content="Official standard and implementation guide for fungible tokens on TON blockchain.",
        category="tokens",
        tags=["jettons", "tokens", "standards", "fungible"],
        url="https://docs.ton.org/develop/dapps/asset-processing/jettons",
    ),
    DocumentChunk(
        id="ton-connect-docs",
        title="TON Connect Protocol",
        content="Official documentation for TON Connect - the standard protocol for TON wallet connections.",
        category="integration",
        tags=["ton connect", "wallets", "integration", "protocol"],
        url="https://docs.ton.org/develop/dapps/ton-connect",
    ),
    DocumentChunk(
        id="telegram-mini-apps",
        title="Telegram Mini Apps",
        content="Official guide for developing Telegram Mini Apps that integrate with TON blockchain.",
        category="tma",
        tags=["telegram", "mini apps", "tma", "web apps"],
        url="https://docs.ton.org/develop/dapps/telegram-apps/",
    ),
]


@dataclass
class LoadResult:
    documents: list[DocumentChunk] = field(default_factory=list)
    source: Optional[str] = None


class CorpusLoader:
    """Chain of sources: first non-empty one wins, then the baseline is appended."""

    def __init__(
        self, sources: Sequence[CorpusSource],
        baseline: Optional[CorpusSource] = None,
    ):
        self.sources = list(sources)
        self.baseline = baseline

    @classmethod
    def from_config(cls, config: Config) -> "CorpusLoader":
        resources = Path(config.resources_path) if config.resources_path else PACKAGE_DIR / "resources"
        return cls(
            sources=[
                PrebuiltIndexSource(index_candidates(config.index_file)),
                RemoteIndexSource(config.remote_index_urls, timeout=config.remote_timeout),
                MarkdownDirectorySource(
                    resources, config.resource_categories, config.resources_base_url,
                ),
            ],
            baseline=StaticSource(BUILTIN_DOCUMENTS, name="builtin"),
        )

    def load(self) -> LoadResult:
        result = LoadResult()
        for source in self.sources:
            try:
                loaded = source.try_load()
            except Exception as e:
                logger.warning(f"Corpus source '{source.name}' failed: {e}")
                continue
            if loaded:
                result = LoadResult(documents=list(loaded), source=source.name)
                logger.info(f"Corpus loaded from '{source.name}' ({len(loaded)} documents)")
                break
            logger.debug(f"Corpus source '{source.name}' yielded nothing, trying next")
        else:
            logger.warning("No corpus source produced documents, using built-in baseline only")

        if self.baseline is not None:
            try:
                result.documents.extend(self.baseline.try_load() or [])
            except Exception as e:
                logger.warning(f"Baseline source '{self.baseline.name}' failed: {e}")
        return result
