"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

ENV_PREFIX = "HLS_PROXY_"


class ProxySettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    dashboard: bool = True


class UpstreamSettings(BaseModel):
    timeout: float = 15.0
    max_redirects: int = 5
    user_agent: str = "Mozilla/5.0 (compatible; HlsFetchProxy/1.0)"


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build configuration from defaults, overlaid with HLS_PROXY_* variables."""
    environ = os.environ if environ is None else environ

    proxy: dict[str, str] = {}
    for name in ("host", "port", "dashboard"):
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            proxy[name] = value

    try:
        return Config.model_validate({"proxy": proxy})
    except ValidationError as e:
        first = e.errors()[0]
        setting = ENV_PREFIX + str(first["loc"][-1]).upper()
        raise ConfigurationError(f"{setting}: {first['msg']}", setting=setting) from e
