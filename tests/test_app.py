"""End-to-end tests for the HTTP surface with a mocked upstream."""

import httpx
import pytest

from core.request_types import ResourceKind

PLAYLIST = (
    "#EXTM3U\n"
    '#EXT-X-KEY:METHOD=AES-128,URI="key.bin"\n'
    "#EXTINF:4.000,\n"
    "seg1.ts\n"
)


def not_called(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected upstream call to {request.url}")


class TestHealth:
    """Tests for /health."""

    def test_health(self, proxy):
        client, upstream = proxy(not_called)
        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "Hello from hls-fetch-proxy!"
        assert upstream.call_count == 0

    def test_cors_allows_any_origin(self, proxy):
        client, _ = proxy(not_called)
        response = client.get("/health", headers={"Origin": "https://player.example.org"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_cors_preflight(self, proxy):
        client, _ = proxy(not_called)
        response = client.options(
            "/fetch",
            headers={
                "Origin": "https://player.example.org",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "x-custom",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestFetchValidation:
    """Tests for invalid /fetch input."""

    @pytest.mark.parametrize("query", ["?url=not-a-url", "", "?url=", "?url=ftp%3A%2F%2Fh%2Fa.ts"])
    def test_invalid_url_makes_no_upstream_call(self, proxy, query):
        client, upstream = proxy(not_called)
        response = client.get(f"/fetch{query}")
        assert response.status_code == 400
        assert response.text == "Invalid URL"
        assert response.headers["content-type"].startswith("text/plain")
        assert upstream.call_count == 0


class TestFetchPlaylist:
    """Tests for proxied playlists."""

    def test_playlist_is_rewritten(self, proxy, logger):
        client, upstream = proxy(
            lambda request: httpx.Response(
                200,
                headers={"content-type": "application/x-mpegURL"},
                text=PLAYLIST,
            )
        )
        response = client.get("/fetch", params={"url": "https://host/path/playlist.m3u8"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/vnd.apple.mpegurl"
        assert response.headers["cache-control"] == "public, max-age=18000, stale-while-revalidate=300"
        assert response.headers["cdn-cache-control"] == "max-age=18000"
        assert response.text.split("\n") == [
            "#EXTM3U",
            '#EXT-X-KEY:METHOD=AES-128,URI="/fetch?url=https%3A%2F%2Fhost%2Fpath%2Fkey.bin"',
            "#EXTINF:4.000,",
            "/fetch?url=https%3A%2F%2Fhost%2Fpath%2Fseg1.ts",
        ]
        assert upstream.call_count == 1
        assert logger.fetches == [("https://host/path/playlist.m3u8", ResourceKind.PLAYLIST, 200)]

    def test_outbound_headers(self, proxy):
        client, upstream = proxy(lambda request: httpx.Response(200, text="#EXTM3U\n"))
        client.get(
            "/fetch",
            params={"url": "https://cdn.example.com/live/index.m3u8", "ref_": "https://player.example.org/"},
        )

        sent = upstream.requests[0].headers
        assert sent["referer"] == "https://player.example.org/"
        assert sent["accept"] == "*/*"
        assert sent["origin"] == "https://cdn.example.com"
        assert "HlsFetchProxy" in sent["user-agent"]
        assert "range" not in sent

    def test_referrer_whitespace_is_trimmed(self, proxy):
        client, upstream = proxy(lambda request: httpx.Response(200, text="#EXTM3U\n"))
        response = client.get(
            "/fetch",
            params={"url": "https://cdn.example.com/live/index.m3u8", "ref_": " https://p.example/ "},
        )
        assert response.status_code == 200
        assert upstream.requests[0].headers["referer"] == "https://p.example/"

    def test_non_ascii_cache_control_uses_default(self, proxy):
        client, _ = proxy(
            lambda request: httpx.Response(
                200,
                headers=[(b"cache-control", "max-age=60 ✓".encode())],
                text="#EXTM3U\n",
            )
        )
        response = client.get("/fetch", params={"url": "https://host/live.m3u8"})
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=18000, stale-while-revalidate=300"

    def test_upstream_cache_control_is_reused(self, proxy):
        client, _ = proxy(
            lambda request: httpx.Response(
                200,
                headers={"Cache-Control": "max-age=2", "CDN-Cache-Control": "max-age=1"},
                text="#EXTM3U\n",
            )
        )
        response = client.get("/fetch", params={"url": "https://host/live.m3u8"})
        assert response.headers["cache-control"] == "max-age=2"
        assert response.headers["cdn-cache-control"] == "max-age=1"

    def test_redirected_playlist_resolves_against_final_url(self, proxy):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "old.example.com":
                return httpx.Response(302, headers={"Location": "https://new.example.com/v2/index.m3u8"})
            return httpx.Response(200, text="seg1.ts\n")

        client, upstream = proxy(handler)
        response = client.get("/fetch", params={"url": "https://old.example.com/v1/index.m3u8"})

        assert response.status_code == 200
        assert response.text == "/fetch?url=https%3A%2F%2Fnew.example.com%2Fv2%2Fseg1.ts"
        assert upstream.call_count == 2


class TestFetchPassthrough:
    """Tests for segments and other content."""

    def test_segment_bytes_pass_through(self, proxy):
        payload = bytes(range(256)) * 4
        client, upstream = proxy(
            lambda request: httpx.Response(
                206,
                headers={"content-type": "application/octet-stream"},
                content=payload,
            )
        )
        response = client.get("/fetch", params={"url": "https://cdn.example.com/seg-001.ts"})

        assert response.status_code == 206
        assert response.content == payload
        assert response.headers["content-type"] == "video/mp2t"
        assert response.headers["cache-control"] == "public, max-age=2592000, stale-while-revalidate=86400"
        assert response.headers["cdn-cache-control"] == "max-age=2592000"
        assert upstream.requests[0].headers["range"] == "bytes=0-"

    def test_other_content_type_verbatim(self, proxy):
        client, _ = proxy(
            lambda request: httpx.Response(200, headers={"content-type": "image/png"}, content=b"\x89PNG")
        )
        response = client.get("/fetch", params={"url": "https://cdn.example.com/poster.png"})
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"\x89PNG"

    def test_error_status_is_mirrored(self, proxy, logger):
        client, _ = proxy(lambda request: httpx.Response(404, text="nope"))
        response = client.get("/fetch", params={"url": "https://cdn.example.com/missing.ts"})
        assert response.status_code == 404
        assert response.content == b"nope"
        assert logger.errors == []

    def test_gone_logs_headers(self, proxy, logger):
        client, _ = proxy(lambda request: httpx.Response(410, headers={"x-reason": "expired"}))
        response = client.get("/fetch", params={"url": "https://cdn.example.com/old.m3u8"})

        assert response.status_code == 410
        assert len(logger.gone) == 1
        url, headers = logger.gone[0]
        assert url == "https://cdn.example.com/old.m3u8"
        assert headers["x-reason"] == "expired"


class TestFetchFailures:
    """Tests for upstream failures."""

    def test_connect_error(self, proxy, logger):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = proxy(handler)
        response = client.get("/fetch", params={"url": "https://down.example.com/index.m3u8"})

        assert response.status_code == 500
        assert response.text.startswith("Fetch failed: ")
        assert "connection refused" in response.text
        assert logger.errors and logger.errors[0][1] == 500

    def test_timeout(self, proxy):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        client, upstream = proxy(handler)
        response = client.get("/fetch", params={"url": "https://slow.example.com/seg.ts"})

        assert response.status_code == 500
        assert "timed out" in response.text
        assert upstream.call_count == 1

    def test_redirect_loop_is_a_failure(self, proxy):
        client, upstream = proxy(
            lambda request: httpx.Response(302, headers={"Location": str(request.url)})
        )
        response = client.get("/fetch", params={"url": "https://loop.example.com/index.m3u8"})

        assert response.status_code == 500
        assert "too many redirects" in response.text
        assert upstream.call_count == 6
