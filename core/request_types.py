"""Shared request data types."""

from dataclasses import dataclass
from enum import Enum

import httpx


@dataclass(frozen=True)
class FetchRequest:
    """Validated target of a single /fetch call."""

    target: httpx.URL
    referrer: str


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    target: httpx.URL
    headers: httpx.Headers


@dataclass(frozen=True)
class UpstreamResponse:
    """Fully read upstream response.

    Attributes:
        status_code: Status returned by the upstream
        headers: Upstream response headers
        content: Raw body bytes
        url: Final URL after redirects
        encoding: Charset used to decode the body as text
    """

    status_code: int
    headers: httpx.Headers
    content: bytes
    url: httpx.URL
    encoding: str | None = None

    def text(self) -> str:
        """Decode the body, dropping a leading byte-order mark."""
        text = self.content.decode(self.encoding or "utf-8", errors="replace")
        return text.removeprefix("\ufeff")


class ResourceKind(str, Enum):
    PLAYLIST = "playlist"
    SEGMENT = "segment"
    OTHER = "other"


@dataclass(frozen=True)
class ClassificationResult:
    """Kind and outgoing cache metadata of an upstream response."""

    kind: ResourceKind
    content_type: str
    cache_control: str
    cdn_cache_control: str


@dataclass(frozen=True)
class InvalidInput:
    """The /fetch query could not be turned into a target URL."""

    message: str = "Invalid URL"
    status_code: int = 400


@dataclass(frozen=True)
class UpstreamFailure:
    """The upstream fetch did not produce a response."""

    message: str
    status_code: int = 500


@dataclass(frozen=True)
class AssemblyFailure:
    """The outgoing response could not be constructed."""

    message: str = "Body assembly failed"
    status_code: int = 500
    detail: str = ""
