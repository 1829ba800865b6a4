# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Document metadata: titles, categories and tags for raw documents, and
the split of a raw document into indexable chunks.
"""
import re
from dataclasses import replace
from pathlib import Path

from .chunker import chunk_text
from .models import CATEGORIES, DocumentChunk

TAG_KEYWORDS = [
    "ton", "blockchain", "tact", "func", "tvm", "smart contract",
    "wallet", "jetton", "nft", "telegram", "mini app", "tma",
    "ton connect", "dapp", "frontend", "backend", "api", "sdk",
    "testnet", "mainnet", "transaction", "deployment", "testing",
    "tutorial", "guide", "cell", "slice", "builder", "address",
    "message", "gas", "fees",
]

# (needle, category), checked in order against the lower-cased URL path
_PATH_RULES = [
    ("/smart-contract", "smart-contracts"),
    ("/tact", "languages"),
    ("/func", "languages"),
    ("/telegram-app", "tma"),
    ("/tma", "tma"),
    ("/jetton", "tokens"),
    ("/token", "tokens"),
    ("/nft", "nft"),
    ("/ton-connect", "integration"),
    ("/wallet", "wallets"),
    ("/tvm", "infrastructure"),
    ("/dapp", "dapps"),
    ("/tutorial", "tutorials"),
    ("/how-to", "how-to"),
    ("/guide", "how-to"),
    ("/learn", "documentation"),
    ("/develop", "development"),
    ("/api", "api"),
    ("/sdk", "sdk"),
]

_TITLE_RULES = [
    ("tact", "languages"),
    ("func", "languages"),
    ("smart contract", "smart-contracts"),
    ("telegram mini app", "tma"),
    ("tma", "tma"),
    ("jetton", "tokens"),
    ("token", "tokens"),
    ("nft", "nft"),
    ("ton connect", "integration"),
    ("wallet", "wallets"),
    ("tvm", "infrastructure"),
    ("virtual machine", "infrastructure"),
]

_HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def extract_title(content: str, filename: str) -> str:
    match = _HEADING.search(content)
    if match:
        return match.group(1).strip()
    stem = Path(filename).stem
    return re.sub(r"[-_]+", " ", stem).strip().title()


def categorize(path: str, title: str, content: str) -> str:
    """Pick a category from the URL path first, then title and content head."""
    lower_path = path.lower()
    for needle, category in _PATH_RULES:
        if needle in lower_path:
            return category

    lower_title = title.lower()
    head = content[:1000].lower()
    if "tact language" in head or "func language" in head:
        return "languages"
    for needle, category in _TITLE_RULES:
        if needle in lower_title:
            return category
    return "general"


def extract_tags(content: str, category: str, path: str = "", title: str = "") -> list[str]:
    haystack = f"{path}\n{title}\n{content}".lower()
    tags = [category] if category else []
    tags.extend(k for k in TAG_KEYWORDS if k in haystack)
    return list(dict.fromkeys(tags))


def fill_metadata(doc: DocumentChunk) -> DocumentChunk:
    """Complete a loaded document: derive a missing or unknown category and missing tags."""
    category = doc.category.strip().lower()
    if category not in CATEGORIES:
        category = categorize(doc.url or "", doc.title, doc.content)
    tags = doc.tags or extract_tags(doc.content, category, doc.url or "", doc.title)
    return replace(doc, category=category, tags=tags)


def split_document(doc: DocumentChunk, chunk_size: int) -> list[DocumentChunk]:
    """Split *doc* into sentence-aligned chunks.

    A document that fits in one chunk keeps its id; otherwise chunk n gets
    ``<id>-chunk-<n>`` and every chunk after the first a ``(part n+1)`` title suffix.
    """
    pieces = chunk_text(doc.content, chunk_size)
    if len(pieces) == 1:
        return [replace(doc, content=pieces[0].strip() or doc.content)]

    chunks = []
    for i, piece in enumerate(pieces):
        title = doc.title if i == 0 else f"{doc.title} (part {i + 1})"
        chunks.append(replace(doc, id=f"{doc.id}-chunk-{i}", title=title, content=piece))
    return chunks
