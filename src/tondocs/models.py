# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""Records shared by the loader, the index and the search service."""
from dataclasses import dataclass, field
from typing import Optional

CATEGORIES = (
    "documentation", "smart-contracts", "languages", "tokens", "nft",
    "tma", "integration", "wallets", "infrastructure", "dapps",
    "tutorials", "how-to", "development", "api", "sdk",
    "frontend", "management", "deployment", "general",
)


@dataclass
class DocumentChunk:
    id: str
    title: str
    content: str
    category: str = "general"
    tags: list[str] = field(default_factory=list)
    url: Optional[str] = None
    last_updated: Optional[str] = None

    def __post_init__(self):
        # tags behave as a set: collapse duplicates, keep first-seen order
        self.tags = list(dict.fromkeys(t for t in self.tags if t))

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentChunk":
        """Build from a pre-built index entry (camelCase ``lastUpdated``)."""
        tags = data.get("tags")
        if isinstance(tags, str):
            tags = [tags]
        elif not isinstance(tags, list):
            tags = []
        url = data.get("url")
        last_updated = data.get("lastUpdated") or data.get("last_updated")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            category=str(data.get("category") or ""),
            tags=[str(t) for t in tags if t],
            url=str(url) if url else None,
            last_updated=str(last_updated) if last_updated else None,
        )


@dataclass(frozen=True)
class FieldMatch:
    key: str
    value: str
    indices: tuple[tuple[int, int], ...] = ()


@dataclass
class SearchResult:
    document: DocumentChunk
    score: float
    matches: list[FieldMatch] = field(default_factory=list)
    boosted_score: Optional[float] = None

    @property
    def rank_score(self) -> float:
        return self.score if self.boosted_score is None else self.boosted_score
