"""Response classification and cache header derivation."""

import httpx

from core.request_types import ClassificationResult, ResourceKind

PLAYLIST_CONTENT_TYPE = "application/vnd.apple.mpegurl"
SEGMENT_CONTENT_TYPE = "video/mp2t"
FALLBACK_CONTENT_TYPE = "text/plain"

CDN_CACHE_CONTROL = "CDN-Cache-Control"

# (Cache-Control, CDN-Cache-Control) used when the upstream sends none
PLAYLIST_CACHE_DEFAULTS = ("public, max-age=18000, stale-while-revalidate=300", "max-age=18000")
MEDIA_CACHE_DEFAULTS = ("public, max-age=2592000, stale-while-revalidate=86400", "max-age=2592000")


class ResponseClassifier:
    """Decide whether an upstream response is a playlist, a segment, or other content."""

    def classify(self, target: httpx.URL, headers: httpx.Headers) -> ClassificationResult:
        """Classify by content-type first, then by the target path suffix."""
        upstream_type = _visible_header(headers, "content-type")
        kind = self.kind_of(target.path, upstream_type or "")

        if kind is ResourceKind.PLAYLIST:
            content_type = PLAYLIST_CONTENT_TYPE
            default_cache, default_cdn_cache = PLAYLIST_CACHE_DEFAULTS
        else:
            if kind is ResourceKind.SEGMENT:
                content_type = SEGMENT_CONTENT_TYPE
            else:
                content_type = upstream_type or FALLBACK_CONTENT_TYPE
            default_cache, default_cdn_cache = MEDIA_CACHE_DEFAULTS

        return ClassificationResult(
            kind=kind,
            content_type=content_type,
            cache_control=_visible_header(headers, "cache-control", default_cache),
            cdn_cache_control=_visible_header(headers, CDN_CACHE_CONTROL, default_cdn_cache),
        )

    @staticmethod
    def kind_of(path: str, content_type: str) -> ResourceKind:
        content_type = content_type.lower()
        if PLAYLIST_CONTENT_TYPE in content_type or path.endswith(".m3u8"):
            return ResourceKind.PLAYLIST
        if SEGMENT_CONTENT_TYPE in content_type or path.endswith(".ts"):
            return ResourceKind.SEGMENT
        return ResourceKind.OTHER


def _visible_header(headers: httpx.Headers, name: str, default: str | None = None) -> str | None:
    """Header value if present and visible ASCII (tabs allowed), else default."""
    value = headers.get(name)
    if value is None or not all(char == "\t" or " " <= char <= "~" for char in value):
        return default
    return value
