"""Immutable snapshot of a completed HTTP attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

import requests
from requests.structures import CaseInsensitiveDict

from .defaults import get_defaults


def collect_headers(
    items: Iterable[tuple[str, str]],
) -> CaseInsensitiveDict[str]:
    """Collect header pairs; a later pair with the same folded name wins."""
    headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
    for name, value in items:
        headers[name] = value
    return headers


def wire_headers(response: requests.Response) -> CaseInsensitiveDict[str]:
    """Return the response headers as received, one pair per header line.

    urllib3 keeps repeated headers as separate entries, whereas
    ``response.headers`` has already joined them with commas.
    """
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "items"):
        return collect_headers(raw_headers.items())
    return collect_headers(response.headers.items())


@dataclass(frozen=True)
class ResponseResult:
    """Status line, headers and body of the attempt that ended a call.

    ``body`` is None for HEAD requests and when the body was saved to
    ``saved_path``.
    """

    status_code: int
    reason: str
    url: str
    method: str
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None
    saved_path: str | None = None
    charset: str | None = None
    fallback_charset: str | None = None
    attempts: int = 1

    def __post_init__(self) -> None:
        # Copy and freeze; lookups stay case-insensitive through the proxy.
        object.__setattr__(
            self,
            "headers",
            MappingProxyType(CaseInsensitiveDict(self.headers)),
        )

    @property
    def ok(self) -> bool:
        """True only for status 200, not the whole 2xx range."""
        return self.status_code == 200

    def header(self, name: str) -> str | None:
        if not name:
            return None
        return self.headers.get(name)

    def resolve_charset(self) -> str:
        """Charset used by ``text()``, resolved at call time."""
        return (
            self.charset
            or self.fallback_charset
            or get_defaults().default_charset
        )

    def text(self) -> str:
        if self.body is None:
            return ""
        return self.body.decode(self.resolve_charset())
