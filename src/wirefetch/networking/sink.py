"""Response body destinations: a file on disk or an in-memory buffer."""

from __future__ import annotations

import logging
import time
from email.message import Message
from pathlib import Path
from typing import Callable, Iterator

import requests
import urllib3

from .errors import SavePathError

_LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MIN_READ_SECONDS = 0.001


def ensure_parent_directory(save_path: str) -> None:
    """Raise SavePathError unless the parent of ``save_path`` is a directory."""
    if not Path(save_path).parent.is_dir():
        raise SavePathError(save_path)


def declared_charset(response: requests.Response) -> str | None:
    """Return the charset parameter of the response Content-Type, if any."""
    content_type = response.headers.get("Content-Type")
    if not content_type:
        return None
    message = Message()
    message["Content-Type"] = content_type
    return message.get_content_charset() or None


def _bound_socket(raw, seconds: float) -> None:
    """Limit the next socket read of ``raw`` to ``seconds``."""
    connection = getattr(raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is not None:
        sock.settimeout(seconds)


def _read1(response: requests.Response) -> bytes:
    """Read whatever one socket read yields, as requests' exceptions."""
    try:
        return response.raw.read1(CHUNK_SIZE, decode_content=True)
    except (urllib3.exceptions.ReadTimeoutError, TimeoutError) as exc:
        raise requests.exceptions.ReadTimeout(exc, response=response)
    except urllib3.exceptions.ProtocolError as exc:
        raise requests.exceptions.ChunkedEncodingError(exc, response=response)
    except urllib3.exceptions.DecodeError as exc:
        raise requests.exceptions.ContentDecodingError(exc, response=response)
    except urllib3.exceptions.SSLError as exc:
        raise requests.exceptions.SSLError(exc, response=response)


def _iter_body(
    response: requests.Response,
    deadline: float | None,
    clock: Callable[[], float],
) -> Iterator[bytes]:
    """Yield body chunks; every socket read is bounded by the time left.

    Once the deadline has passed, one last short read still tells a body
    that already arrived in full (EOF) from one that is still incoming.
    """
    raw = response.raw
    while not raw.closed:
        expired = False
        if deadline is not None:
            remaining = deadline - clock()
            expired = remaining <= 0
            _bound_socket(raw, max(remaining, MIN_READ_SECONDS))
        chunk = _read1(response)
        if not chunk:
            return
        if expired:
            raise requests.exceptions.ReadTimeout(
                "attempt exceeded its overall timeout while reading the body",
                response=response,
            )
        yield chunk


def read_body(
    response: requests.Response,
    *,
    method: str,
    save_path: str | None,
    deadline: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> tuple[bytes | None, str | None]:
    """Consume the response body and return ``(body, saved_path)``.

    HEAD responses are never read. A 200 response with a ``save_path`` is
    streamed to that file and no body is kept; any other response is
    buffered in memory. A partially written file is left in place when the
    transfer fails.
    """
    if method.upper() == "HEAD":
        return None, None

    if save_path and response.status_code == 200:
        ensure_parent_directory(save_path)
        written = 0
        with open(save_path, "wb") as handle:
            for chunk in _iter_body(response, deadline, clock):
                handle.write(chunk)
                written += len(chunk)
        _LOGGER.debug("Saved %d bytes to %s", written, save_path)
        return None, save_path

    return b"".join(_iter_body(response, deadline, clock)), None
