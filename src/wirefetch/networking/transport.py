"""Per-attempt requests sessions built from a RequestConfig."""

from __future__ import annotations

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from requests.utils import default_user_agent

from .config import RequestConfig


class TimeoutHTTPAdapter(HTTPAdapter):
    """HTTP adapter that applies a default timeout and never retries."""

    def __init__(self, *, timeout: float | tuple[float, float]):
        super().__init__(max_retries=0)
        self.timeout = timeout

    def send(self, request, **kwargs):  # type: ignore[override]
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def effective_user_agent(config: RequestConfig) -> str:
    """Return the User-Agent an attempt will send."""
    return config.user_agent or default_user_agent()


def build_timeout(config: RequestConfig) -> tuple[float, float]:
    """Connect and read timeouts, both equal to the configured timeout."""
    seconds = config.timeout_seconds
    return (seconds, seconds)


def build_session(config: RequestConfig) -> Session:
    """Return a fresh single-use session for one attempt.

    Redirects are never followed and environment proxy/netrc settings are
    ignored so that only ``config`` shapes the attempt.
    """
    adapter = TimeoutHTTPAdapter(timeout=build_timeout(config))

    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.trust_env = False
    session.max_redirects = 0
    session.verify = config.trust_policy.verify
    session.headers["User-Agent"] = effective_user_agent(config)

    if config.proxy is not None:
        proxy_url = config.proxy.as_url()
        session.proxies = {"http": proxy_url, "https": proxy_url}

    if config.basic_auth is not None and config.basic_auth.usable:
        # Sent preemptively to any host and realm.
        session.auth = HTTPBasicAuth(
            config.basic_auth.user_id, config.basic_auth.password
        )

    return session


__all__ = [
    "TimeoutHTTPAdapter",
    "build_session",
    "build_timeout",
    "effective_user_agent",
]
