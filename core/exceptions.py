"""Custom exception hierarchy for the HLS fetch proxy.

Per-request failures are returned as outcome values (see core.request_types);
these exceptions cover process-level problems only.
"""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid.

    Attributes:
        message: Error message
        setting: Name of the offending setting (optional)
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting
