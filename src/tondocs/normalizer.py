# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""Query rewriting for common TON-specific misspellings and near-synonyms."""

# Scanned once, in order; each matching key has its first occurrence replaced.
QUERY_REWRITES: dict[str, str] = {
    "tolk": "tact",
    "talk": "tact",
    "funk": "func",
    "jeton": "jetton",
    "tonconnect": "ton connect",
    "ton-connect": "ton connect",
    "smartcontract": "smart contract",
    "smart-contract": "smart contract",
    "miniapp": "mini app",
    "mini-app": "mini app",
    "ton language": "tact language",
    "ton virtual machine": "tvm",
}


def normalize_query(query: str) -> str:
    normalized = query.strip().lower()
    for wrong, right in QUERY_REWRITES.items():
        if wrong in normalized:
            normalized = normalized.replace(wrong, right, 1)
    return normalized
