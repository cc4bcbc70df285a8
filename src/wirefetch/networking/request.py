"""Assemble the wire target (URL, body, headers) from a RequestConfig."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping
from urllib.parse import urlencode

from requests.structures import CaseInsensitiveDict

from .config import Param, RequestConfig

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
BODY_METHODS = frozenset({"POST"})


@dataclass(frozen=True)
class RequestTarget:
    method: str
    url: str
    body: bytes | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


def build_query_string(
    encoded_params: Iterable[Param],
    raw_params: Iterable[Param],
    encoding: str,
) -> str:
    """Return the encoded parameters followed by the raw ones.

    Encoded parameters use form encoding in ``encoding``; raw parameters are
    appended as ``name=value`` without any escaping.
    """
    query = urlencode(list(encoded_params), encoding=encoding)
    raw = "&".join(f"{name}={value}" for name, value in raw_params)
    if query and raw:
        return f"{query}&{raw}"
    return query or raw


def build_form_body(config: RequestConfig) -> bytes | None:
    """Return the POST body, or None when there are no parameters.

    Raw parameters are included verbatim after the encoded ones.
    """
    body = build_query_string(
        config.encoded_params, config.raw_params, config.request_encoding
    )
    if not body:
        return None
    return body.encode(config.request_encoding)


def build_url(config: RequestConfig) -> str:
    query = build_query_string(
        config.encoded_params, config.raw_params, config.request_encoding
    )
    if not query:
        return config.url
    return f"{config.url}?{query}"


def build_target(method: str, config: RequestConfig) -> RequestTarget:
    """Build the request target for ``method`` (GET, HEAD or POST)."""
    method = method.upper()
    headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
    if method in BODY_METHODS:
        url = config.url
        body = build_form_body(config)
        if body is not None:
            headers["Content-Type"] = (
                f"{FORM_CONTENT_TYPE}; charset={config.request_encoding}"
            )
            if config.use_expect_continue:
                headers["Expect"] = "100-continue"
    else:
        url = build_url(config)
        body = None
    # Caller headers are applied last and win.
    headers.update(config.headers)
    return RequestTarget(method=method, url=url, body=body, headers=headers)
