# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Central configuration – configurable via:
1. Environment variables (TONDOCS_ prefix)
2. .env file
3. JSON override file (tondocs.json, see Config.load)
"""
import json
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import model_validator
from pydantic_settings import BaseSettings

CONFIG_FILE = Path("tondocs.json")


class Config(BaseSettings):
    # ── Corpus sources ───────────────────────────
    index_file: str = ""
    resources_path: str = ""
    resource_categories: list[str] = [
        "frontend", "tma", "smart-contracts",
        "how-to", "management", "deployment",
    ]
    resources_base_url: str = ""
    remote_index_urls: list[str] = []
    remote_timeout: float = 5.0

    # ── Chunking ─────────────────────────────────
    chunk_size: int = 1000

    # ── Fuzzy index ──────────────────────────────
    title_weight: float = 0.4
    tags_weight: float = 0.3
    content_weight: float = 0.2
    category_weight: float = 0.1
    fuzzy_threshold: float = 0.4
    min_term_length: int = 2

    # ── Ranking ──────────────────────────────────
    relevance_ceiling: float = 0.6
    official_host: str = "docs.ton.org"
    official_boost: float = 0.1
    tag_boost: float = 0.05
    default_limit: int = 20
    term_fallback_limit: int = 5

    # ── Server / Transport ───────────────────────
    transport: Literal["stdio", "sse"] = "stdio"
    sse_port: int = 8081
    log_level: str = "INFO"
    log_file: str = ""

    class Config:
        env_prefix = "TONDOCS_"
        env_file = ".env"

    @model_validator(mode="after")
    def _check_tuning(self) -> "Config":
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 < self.fuzzy_threshold <= 1:
            raise ValueError("fuzzy_threshold must be in (0, 1]")
        if self.title_weight <= self.content_weight:
            raise ValueError("title_weight must outweigh content_weight")
        if self.tags_weight <= self.category_weight:
            raise ValueError("tags_weight must outweigh category_weight")
        return self

    @classmethod
    def load(cls, config_file: Path = CONFIG_FILE) -> "Config":
        """Load config: ENV -> .env -> JSON override file."""
        config = cls()

        if config_file.exists():
            try:
                overrides = json.loads(config_file.read_text())
                values = config.model_dump()
                for key, value in overrides.items():
                    if key in values and value != "":
                        values[key] = value
                config = cls.model_validate(values)
            except Exception as e:
                logger.warning(f"Config file error, overrides ignored: {e}")

        return config

    def field_weights(self) -> dict[str, float]:
        return {
            "title": self.title_weight,
            "tags": self.tags_weight,
            "content": self.content_weight,
            "category": self.category_weight,
        }
