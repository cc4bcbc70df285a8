"""Synchronous HTTP client executing one configured call with retries.

Each attempt builds its own ``requests.Session`` from the ``RequestConfig``
and closes it before the next attempt starts. Only status 200 ends the
loop early; any other status is retried like a transport failure but is
returned, not raised, once the retry budget is spent.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import requests

from .config import RequestConfig
from .errors import TRANSPORT_ERRORS
from .request import RequestTarget, build_target
from .response import ResponseResult, wire_headers
from .retry import Decision, decide, describe_failure
from .sink import declared_charset, ensure_parent_directory, read_body
from .transport import build_session, build_timeout, effective_user_agent
from .types import Err, Ok, Result

_LOGGER = logging.getLogger(__name__)

ATTEMPT_CODE = "A022"
RETRY_CODE = "A023"
FAILURE_CODE = "A024"

SessionFactory = Callable[[RequestConfig], requests.Session]


class HttpClient:
    """Executes GET, HEAD and POST calls described by a ``RequestConfig``.

    The client keeps no state between calls, so calling ``get`` twice with
    the same config yields two independent results. Transport failures from
    the last attempt propagate unchanged; non-200 responses never raise.
    """

    def __init__(
        self,
        config: RequestConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
        session_factory: SessionFactory = build_session,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Target, parameters, transport and retry settings.
            sleep: Blocking delay between attempts, in seconds.
            session_factory: Builds the single-use session for an attempt.
            clock: Monotonic clock used for the overall attempt deadline.
        """
        self._config = config
        self._sleep = sleep
        self._session_factory = session_factory
        self._clock = clock

    @property
    def config(self) -> RequestConfig:
        return self._config

    def get(self, save_path: str | None = None) -> ResponseResult:
        """Perform an HTTP GET request.

        Args:
            save_path: When set and the response is 200, the body is written
                to this file instead of being kept in memory.

        Returns:
            The result of the attempt that ended the call.
        """
        return self._execute("GET", save_path)

    def head(self) -> ResponseResult:
        """Perform an HTTP HEAD request; the result never carries a body."""
        return self._execute("HEAD", None)

    def post(self, save_path: str | None = None) -> ResponseResult:
        """Perform an HTTP POST request with the parameters as a form body.

        Args:
            save_path: When set and the response is 200, the body is written
                to this file instead of being kept in memory.
        """
        return self._execute("POST", save_path)

    def _execute(self, method: str, save_path: str | None) -> ResponseResult:
        self._config.check()
        if save_path and method != "HEAD":
            ensure_parent_directory(save_path)
        target = build_target(method, self._config)
        policy = self._config.retry

        for attempt in range(policy.max_attempts):
            outcome = self._attempt(target, save_path, attempt)
            decision = decide(outcome, attempt, policy.max_retries)
            if decision is Decision.RETRY:
                self._log_failure(
                    RETRY_CODE, logging.WARNING, attempt + 1, outcome
                )
                self._sleep(policy.interval_seconds)
                continue
            if isinstance(outcome, Err):
                self._log_failure(
                    FAILURE_CODE, logging.ERROR, attempt + 1, outcome
                )
                raise outcome.error
            return outcome.value

        raise AssertionError("attempt loop ended without a decision")

    def _attempt(
        self, target: RequestTarget, save_path: str | None, attempt: int
    ) -> Result[ResponseResult, requests.exceptions.RequestException]:
        """Run one attempt with a fresh session that is always closed."""
        meta: dict[str, Any] = {
            "method": target.method,
            "url": target.url,
            "attempt": attempt + 1,
        }
        self._log_attempt(target.method)
        outcome: Result[ResponseResult, requests.exceptions.RequestException]
        with self._session_factory(self._config) as session, (
            self._config.trust_policy.warnings_scope()
        ):
            try:
                result = self._send(session, target, save_path, attempt)
            except TRANSPORT_ERRORS as exc:
                meta["final_error"] = type(exc).__name__
                outcome = Err(exc, meta=meta)
            else:
                meta["status_code"] = result.status_code
                outcome = Ok(result, meta=meta)
        _LOGGER.debug("HTTP session closed")
        return outcome

    def _send(
        self,
        session: requests.Session,
        target: RequestTarget,
        save_path: str | None,
        attempt: int,
    ) -> ResponseResult:
        deadline = self._clock() + self._config.timeout_seconds
        response = session.request(
            target.method,
            target.url,
            data=target.body,
            headers=target.headers,
            timeout=build_timeout(self._config),
            allow_redirects=False,
            stream=True,
        )
        try:
            _LOGGER.debug("Response code: %s", response.status_code)
            body, saved_path = read_body(
                response,
                method=target.method,
                save_path=save_path,
                deadline=deadline,
                clock=self._clock,
            )
        finally:
            response.close()
        return ResponseResult(
            status_code=response.status_code,
            reason=response.reason or "",
            url=target.url,
            method=target.method,
            headers=wire_headers(response),
            body=body,
            saved_path=saved_path,
            charset=declared_charset(response),
            fallback_charset=self._config.response_encoding,
            attempts=attempt + 1,
        )

    def _log_attempt(self, method: str) -> None:
        config = self._config
        proxy = (
            f"{config.proxy.host},{config.proxy.port}"
            if config.proxy is not None
            else "(none)"
        )
        auth = (
            config.basic_auth.user_id
            if config.basic_auth is not None and config.basic_auth.user_id
            else "(none)"
        )
        _LOGGER.info(
            "HttpClient [method]%s [url]%s [proxy]%s [basic-auth]%s [useragent]%s",
            method,
            config.url,
            proxy,
            auth,
            effective_user_agent(config),
            extra={"code": ATTEMPT_CODE},
        )

    def _log_failure(
        self,
        code: str,
        level: int,
        attempt_number: int,
        outcome: Result[ResponseResult, requests.exceptions.RequestException],
    ) -> None:
        if code == RETRY_CODE:
            message = "HTTP request failed, retrying"
        else:
            message = "HTTP request failed, giving up"
        _LOGGER.log(
            level,
            "%s [attempt]%d/%d [url]%s [cause]%s",
            message,
            attempt_number,
            self._config.retry.max_attempts,
            self._config.url,
            describe_failure(outcome),
            extra={"code": code, "http": dict(outcome.meta)},
        )
