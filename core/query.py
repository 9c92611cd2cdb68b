"""Validation of incoming /fetch query parameters."""

import ipaddress

import httpx

from core.request_types import FetchRequest, InvalidInput

ALLOWED_SCHEMES = ("http", "https")


def validate_fetch_query(url: str | None, ref_: str | None = None) -> FetchRequest | InvalidInput:
    """Turn raw `url`/`ref_` parameters into a FetchRequest, or InvalidInput."""
    if not url:
        return InvalidInput()
    try:
        target = httpx.URL(url)
    except httpx.InvalidURL:
        return InvalidInput()

    if target.scheme not in ALLOWED_SCHEMES or not target.host:
        return InvalidInput()

    return FetchRequest(target=target, referrer=ref_ or origin_of(target))


def origin_of(url: httpx.URL) -> str:
    """Serialize scheme and authority, e.g. https://cdn.example.com:8443."""
    return f"{url.scheme}://{url.netloc.decode('ascii')}"


def domain_of(url: httpx.URL) -> str | None:
    """Return the host if it is a domain name, None for IP literals."""
    host = url.raw_host.decode("ascii")
    if not host:
        return None
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return host
    return None
