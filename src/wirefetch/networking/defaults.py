"""Process-wide network defaults (proxy and text charset)."""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from typing import Mapping

PROXY_ADDRESS_KEY = "WIREFETCH_PROXY_ADDRESS"
PROXY_PORT_KEY = "WIREFETCH_PROXY_PORT"
DEFAULT_CHARSET_KEY = "WIREFETCH_DEFAULT_CHARSET"


@dataclass(frozen=True)
class NetworkDefaults:
    """Defaults applied to every new request configuration.

    ``default_charset`` is used to encode request parameters when no request
    encoding is set, and to decode response text when neither the response
    nor the caller names a charset.
    """

    proxy_host: str | None = None
    proxy_port: int = 0
    default_charset: str = "utf-8"

    def __post_init__(self) -> None:
        if self.proxy_port < 0:
            raise ValueError("proxy_port must be >= 0")
        try:
            codecs.lookup(self.default_charset)
        except LookupError as exc:
            raise ValueError(
                f"unknown default_charset: {self.default_charset}"
            ) from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> NetworkDefaults:
        """Load defaults from environment variables.

        A proxy is only taken when both the address and port keys exist. An
        empty port value leaves the port unset.
        """
        env = os.environ if environ is None else environ
        proxy_host: str | None = None
        proxy_port = 0
        if PROXY_ADDRESS_KEY in env and PROXY_PORT_KEY in env:
            proxy_host = env[PROXY_ADDRESS_KEY] or None
            port_value = env[PROXY_PORT_KEY].strip()
            if port_value:
                proxy_port = int(port_value)
        charset = env.get(DEFAULT_CHARSET_KEY) or "utf-8"
        return cls(
            proxy_host=proxy_host,
            proxy_port=proxy_port,
            default_charset=charset,
        )


_defaults: NetworkDefaults | None = None


def get_defaults() -> NetworkDefaults:
    """Return the process-wide defaults, loading them from the environment once."""
    global _defaults
    if _defaults is None:
        _defaults = NetworkDefaults.from_env()
    return _defaults


def set_defaults(defaults: NetworkDefaults | None) -> None:
    """Replace the process-wide defaults; ``None`` reloads from the environment."""
    global _defaults
    _defaults = defaults
