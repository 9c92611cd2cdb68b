"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.handlers import handle_fetch, handle_health
from core.classify import ResponseClassifier
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.rewrite import ManifestRewriter
from services.fetch_service import FetchService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            follow_redirects=True,
            max_redirects=config.upstream.max_redirects,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, config.upstream.timeout)
        app.state.fetch_service = FetchService(
            logger=logger,
            header_builder=HeaderBuilder(config.upstream.user_agent),
            classifier=ResponseClassifier(),
            rewriter=ManifestRewriter(),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="HLS Fetch Proxy", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return await handle_health()

    @app.get("/fetch")
    async def fetch(request: Request):
        return await handle_fetch(request, logger)

    return app
