# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Entry point: python -m tondocs

Loads the corpus once, then serves the MCP tools over stdio or SSE.
"""
import uvicorn
from loguru import logger

from .config import Config
from .health import HealthTracker
from .log import setup_logging
from .server import create_mcp_server
from .service import DocsSearchService


def _run_mcp_sse(mcp_server, host: str, port: int):
    """Run MCP server via SSE, compatible with both old and new mcp SDK versions."""
    try:
        sse_app = mcp_server.sse_app()
        uvicorn.run(sse_app, host=host, port=port, log_level="warning")
    except AttributeError:
        mcp_server.settings.host = host
        mcp_server.settings.port = port
        mcp_server.run(transport="sse")


def main():
    config = Config.load()
    setup_logging(config.log_level, config.log_file)

    health = HealthTracker()
    service = DocsSearchService(config)

    logger.info("Building search index ...")
    try:
        result = service.initialize()
        health.record_load(
            ok=True, source=result["source"],
            documents=result["documents"], chunks=result["chunks"],
        )
    except Exception as e:
        # search() retries the load lazily on first use
        logger.error(f"Initial index build failed: {e}")
        health.record_load(ok=False, error=str(e))

    mcp_server = create_mcp_server(config, service, health)

    logger.info(f"MCP server starting ({config.transport} transport)...")
    if config.transport == "sse":
        _run_mcp_sse(mcp_server, "0.0.0.0", config.sse_port)
    else:
        mcp_server.run(transport="stdio")


if __name__ == "__main__":
    main()
