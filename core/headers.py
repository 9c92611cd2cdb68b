"""Header construction for upstream requests."""

import httpx

from core.query import domain_of
from core.request_types import FetchRequest

SEGMENT_SUFFIX = ".ts"


class HeaderBuilder:
    """Build upstream headers for a fetch target."""

    def __init__(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def build_upstream_headers(self, request: FetchRequest) -> httpx.Headers:
        """Identify as a browser-ish client and mimic the referring page."""
        headers = httpx.Headers()
        headers["User-Agent"] = self.user_agent
        headers["Referer"] = _header_value(request.referrer)
        headers["Accept"] = "*/*"

        # Some origins refuse to serve segments without a Range header
        if request.target.path.endswith(SEGMENT_SUFFIX):
            headers["Range"] = "bytes=0-"

        domain = domain_of(request.target)
        if domain:
            headers["Origin"] = f"https://{domain}"

        return headers


def _header_value(value: str) -> str:
    """Trim surrounding whitespace; "" if control characters remain."""
    value = value.strip(" \t")
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in value if char != "\t"):
        return ""
    return value
