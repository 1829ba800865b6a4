# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Sentence-aligned chunking.

Text is split after terminal punctuation (. ! ?) followed by whitespace,
so dotted names like ``docs.ton.org`` or ``0.05`` stay intact. Sentences
are packed greedily into chunks of at most ``chunk_size`` characters; a
single sentence longer than the budget becomes a chunk of its own.
"""
import re

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


def chunk_text(text: str, chunk_size: int = 1000) -> list[str]:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > chunk_size and current:
            chunks.append(current)
            current = sentence
        else:
            current = candidate

    if current:
        chunks.append(current)

    return chunks if chunks else [text]
