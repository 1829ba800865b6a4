# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
MCP Server factory – creates a FastMCP instance whose tools render
results from the shared DocsSearchService.

Tools:
  - search_ton_documentation: Ranked fuzzy search with optional category
  - get_documents_by_category: Browse one category
  - get_related_documents: Chunks sharing tags with a given chunk
  - get_index_stats: Index statistics
  - reindex: Reload the corpus from its sources
"""
from mcp.server.fastmcp import FastMCP

from .config import Config
from .health import HealthTracker
from .models import DocumentChunk
from .service import DocsSearchService

# Checked in order against the lower-cased query when nothing matched
NO_RESULT_SUGGESTIONS = {
    "tolk": (
        'Did you mean "Tact"? Tact is the recommended programming language for '
        'TON smart contracts. Try searching for "Tact programming language".'
    ),
    "talk": 'Did you mean "Tact"? Tact is the programming language for TON. Try searching for "Tact".',
    "ton language": 'TON uses Tact and FunC programming languages. Try searching for "Tact" or "FunC".',
    "programming language": (
        'TON supports Tact (recommended) and FunC languages. Try searching for "Tact" or "FunC".'
    ),
}


def no_results_message(query: str) -> str:
    lower = query.lower()
    for key, suggestion in NO_RESULT_SUGGESTIONS.items():
        if key in lower:
            return suggestion
    return (
        f'No documentation found for "{query}". Try searching for:\n'
        '- "Tact programming language" (TON\'s recommended language)\n'
        '- "FunC language" (TON\'s low-level language)\n'
        '- "Smart contracts"\n'
        '- "Jettons" (TON tokens)\n'
        '- "TON Connect" (wallet integration)\n'
        "\nOr visit https://docs.ton.org/ for complete documentation."
    )


def _format_chunk(doc: DocumentChunk) -> str:
    loc = f" <{doc.url}>" if doc.url else ""
    return f"- **{doc.title}** [{doc.id}] ({doc.category}){loc}"


def _format_health(status: dict, healthy: bool) -> str:
    lines = [
        "**Health:** " + ("ok" if healthy else "degraded"),
        f"- **Last load:** {status['last_load_at'] or 'never'}"
        f" ({status['last_load_source'] or '-'}, {status['last_load_chunks']} chunks)",
    ]
    if status["last_load_error"]:
        lines.append(f"- **Last load error:** {status['last_load_error']}")
    lines.append(
        f"- **Searches:** {status['searches_total']} "
        f"({status['searches_hits']} hits, {status['searches_misses']} misses)"
    )
    return "\n".join(lines)


def create_mcp_server(
    config: Config,
    service: DocsSearchService,
    health: HealthTracker | None = None,
) -> FastMCP:
    """Factory: returns a configured FastMCP server bound to *service*."""

    mcp = FastMCP(
        "tondocs",
        instructions=(
            "Ranked search over TON documentation (docs.ton.org, local guides).\n\n"
            "1. search_ton_documentation() for any TON development question\n"
            "2. Narrow with category (e.g. tokens, tma, smart-contracts)\n"
            "3. get_related_documents() to explore around a useful hit"
        ),
    )

    @mcp.tool()
    def search_ton_documentation(query: str, category: str = "", limit: int = 5) -> str:
        """Search TON documentation with typo tolerance and relevance ranking.

        Args:
            query: What you want to know about TON development
            category: Optional category filter (e.g. "tokens", "tma", "languages")
            limit: Number of results (default: 5)
        """
        results = service.search(query, category=category or None, limit=limit or 5)
        if health:
            health.record_search("search_ton_documentation", bool(results))

        if not results:
            return no_results_message(query)

        output = [f'Found {len(results)} relevant results for "{query}":\n']
        for i, r in enumerate(results, 1):
            doc = r.document
            relevance = max(0, min(100, round((1 - r.score) * 100)))
            output.append(
                f"{i}. **{doc.title}** ({doc.category})\n"
                f"   Relevance: {relevance}%\n"
                f"   Tags: {', '.join(doc.tags[:3])}\n"
                f"   {doc.content[:200]}...\n"
            )
        return "\n".join(output)

    @mcp.tool()
    def get_documents_by_category(category: str, limit: int = 10) -> str:
        """List documentation chunks of one category.

        Args:
            category: e.g. "documentation", "smart-contracts", "tokens", "tma"
            limit: Maximum number of entries (default: 10)
        """
        docs = service.get_documents_by_category(category, limit=limit)
        if not docs:
            return f"No documents in category '{category}'."
        return f"**{category}** ({len(docs)} shown)\n\n" + "\n".join(_format_chunk(d) for d in docs)

    @mcp.tool()
    def get_related_documents(document_id: str, limit: int = 5) -> str:
        """Find documentation chunks sharing tags with the given chunk id.

        Args:
            document_id: Chunk id as shown in brackets by other tools
            limit: Maximum number of entries (default: 5)
        """
        docs = service.get_related_documents(document_id, limit=limit)
        if not docs:
            return f"No related documents for '{document_id}'."
        return f"Related to {document_id}:\n\n" + "\n".join(_format_chunk(d) for d in docs)

    @mcp.tool()
    def get_index_stats() -> str:
        """Show statistics about the current search index."""
        stats = service.get_stats()

        cat_dist = "\n".join(
            f"  - {c}: {n} chunks" for c, n in sorted(stats["categories"].items())
        ) or "  (empty)"

        output = (
            f"**Index Statistics**\n\n"
            f"- **Chunks total:** {stats['total_documents']}\n"
            f"- **Distinct tags:** {stats['total_tags']}\n"
            f"- **Source:** {service.last_source or 'builtin'}\n"
            f"- **Chunk size:** {config.chunk_size}\n\n"
            f"**Category distribution:**\n{cat_dist}"
        )
        if health:
            output += "\n\n" + _format_health(health.status, health.is_healthy)
        return output

    @mcp.tool()
    def reindex() -> str:
        """Reload the documentation corpus from its sources and rebuild the index.
        Documents added at runtime are discarded."""
        result = service.initialize()
        if health:
            health.record_load(
                ok=True, source=result["source"],
                documents=result["documents"], chunks=result["chunks"],
            )
        return (
            f"Re-index complete!\n"
            f"  Source: {result['source']}\n"
            f"  Documents: {result['documents']}\n"
            f"  Chunks: {result['chunks']}"
        )

    return mcp
