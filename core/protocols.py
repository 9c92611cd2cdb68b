"""Shared protocol definitions."""

from collections.abc import Mapping
from typing import Protocol

from core.request_types import ResourceKind


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_fetch(self, url: str, kind: ResourceKind, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
    def log_gone(self, url: str, headers: Mapping[str, str]) -> None: ...
