"""Error taxonomy for the wirefetch networking layer.

Transport failures are not wrapped: the ``requests`` exception raised by the
final attempt reaches the caller unmodified. Non-200 responses are never
raised; they come back as a normal ``ResponseResult``.
"""

from __future__ import annotations

import requests

TRANSPORT_ERRORS = (requests.exceptions.RequestException,)


class HttpClientError(Exception):
    """Base class for errors raised by wirefetch itself."""


class ConfigurationError(HttpClientError, ValueError):
    """Invalid request configuration; raised before any network attempt."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class SavePathError(ConfigurationError):
    """The parent directory of a response save path does not exist."""

    def __init__(self, save_path: str) -> None:
        super().__init__("A015", f"parent directory does not exist: {save_path}")
        self.save_path = save_path
