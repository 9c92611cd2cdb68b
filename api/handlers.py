"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from core.protocols import RequestLogger
from core.query import validate_fetch_query
from core.request_types import AssemblyFailure, InvalidInput, UpstreamFailure

HEALTH_GREETING = "Hello from hls-fetch-proxy!"


async def handle_health() -> Response:
    return PlainTextResponse(HEALTH_GREETING)


async def handle_fetch(request: Request, logger: RequestLogger) -> Response:
    """Handle /fetch: validate, fetch upstream, classify, rewrite, assemble."""
    fetch_request = validate_fetch_query(
        request.query_params.get("url"),
        request.query_params.get("ref_"),
    )
    if isinstance(fetch_request, InvalidInput):
        return PlainTextResponse(fetch_request.message, status_code=fetch_request.status_code)

    fetch_service = request.app.state.fetch_service
    upstream_client = request.app.state.upstream_client

    prepared = fetch_service.prepare(fetch_request)
    upstream = await upstream_client.fetch(prepared)
    if isinstance(upstream, UpstreamFailure):
        logger.log_error("fetch", upstream.status_code, upstream.message)
        return PlainTextResponse(
            f"Fetch failed: {upstream.message}",
            status_code=upstream.status_code,
        )

    response = fetch_service.render(fetch_request, upstream)
    if isinstance(response, AssemblyFailure):
        logger.log_error("fetch", response.status_code, response.detail or response.message)
        return PlainTextResponse(response.message, status_code=response.status_code)

    return response
