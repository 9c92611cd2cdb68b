"""HTTP fetching of upstream resources."""

import asyncio

import httpx

from core.request_types import PreparedRequest, UpstreamFailure, UpstreamResponse


class UpstreamClient:
    """Fetch upstream resources through a shared httpx client.

    The client carries the redirect policy (see app.create_app); `timeout`
    caps the whole fetch, body included.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float) -> None:
        self._client = client
        self._timeout = timeout

    async def fetch(self, prepared: PreparedRequest) -> UpstreamResponse | UpstreamFailure:
        """Issue a single GET; no retries."""
        try:
            async with asyncio.timeout(self._timeout):
                response = await self._client.get(prepared.target, headers=prepared.headers)
        except TimeoutError:
            return UpstreamFailure(f"timed out fetching {prepared.target} after {self._timeout:g}s")
        except httpx.TimeoutException as e:
            return UpstreamFailure(f"timed out fetching {prepared.target}: {_describe(e)}")
        except httpx.TooManyRedirects as e:
            return UpstreamFailure(f"too many redirects: {_describe(e)}")
        except httpx.RequestError as e:
            return UpstreamFailure(f"error sending request for {prepared.target}: {_describe(e)}")

        return UpstreamResponse(
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
            url=response.url,
            encoding=response.encoding,
        )


def _describe(error: httpx.HTTPError) -> str:
    return str(error) or type(error).__name__
