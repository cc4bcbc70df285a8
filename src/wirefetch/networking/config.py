"""Configuration models for a single HTTP call."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from .defaults import NetworkDefaults, get_defaults
from .errors import ConfigurationError
from .trust import TrustPolicy

PROXY_HOST_PATTERN = re.compile(r"[a-zA-Z0-9._~-]+")
DEFAULT_TIMEOUT_MILLIS = 10 * 1000

Param = tuple[str, str]


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class ProxySettings:
    host: str
    port: int

    def __post_init__(self) -> None:
        if not PROXY_HOST_PATTERN.fullmatch(self.host):
            raise ConfigurationError(
                "B004", f"invalid proxy address [proxyAddress:{self.host}]"
            )
        if self.port <= 0:
            raise ConfigurationError(
                "B004", f"invalid proxy port [proxyPort:{self.port}]"
            )

    def as_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@dataclass(frozen=True)
class BasicAuth:
    user_id: str
    password: str = field(repr=False)

    @property
    def usable(self) -> bool:
        """Credentials are only sent when both parts are non-empty."""
        return bool(self.user_id) and bool(self.password)


@dataclass(frozen=True)
class RetryPolicy:
    """Total attempts are ``max_retries + 1``."""

    max_retries: int = 0
    interval_millis: int = 0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("B005", "max_retries must be >= 0")
        if self.interval_millis < 0:
            raise ConfigurationError("B005", "interval_millis must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @property
    def interval_seconds(self) -> float:
        return self.interval_millis / 1000


@dataclass(frozen=True)
class RequestConfig:
    """Everything needed to execute one call.

    Instances are immutable; build them with ``RequestConfigBuilder`` or
    construct directly. ``url`` is checked at execution time, the other
    fields when the value is created. An unset ``request_encoding`` takes
    the process-wide default charset.
    """

    url: str
    encoded_params: tuple[Param, ...] = ()
    raw_params: tuple[Param, ...] = ()
    headers: Mapping[str, str] = field(default_factory=_default_headers)
    timeout_millis: int = DEFAULT_TIMEOUT_MILLIS
    proxy: ProxySettings | None = None
    basic_auth: BasicAuth | None = None
    user_agent: str | None = None
    trust_policy: TrustPolicy = TrustPolicy.VALIDATE
    use_expect_continue: bool = True
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    request_encoding: str | None = None
    response_encoding: str | None = None

    def __post_init__(self) -> None:
        if self.timeout_millis <= 0:
            raise ConfigurationError("B005", "timeout_millis must be > 0")
        if self.request_encoding is None:
            object.__setattr__(
                self, "request_encoding", get_defaults().default_charset
            )

        # Freeze copied collections to avoid post-init mutation side effects.
        object.__setattr__(
            self, "headers", MappingProxyType(dict(self.headers))
        )
        object.__setattr__(
            self, "encoded_params", tuple(self.encoded_params)
        )
        object.__setattr__(self, "raw_params", tuple(self.raw_params))

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000

    def check(self) -> None:
        """Validate settings that are only required at execution time."""
        if not self.url:
            raise ConfigurationError("B003", "request URL is not set")


class RequestConfigBuilder:
    """Mutable builder producing an immutable ``RequestConfig``.

    Setters validate eagerly and return the builder so calls can be
    chained. The proxy and request encoding start from the process-wide
    ``NetworkDefaults``. A builder is not safe for concurrent use.
    """

    def __init__(
        self, url: str, *, defaults: NetworkDefaults | None = None
    ) -> None:
        defaults = defaults or get_defaults()
        self._config = RequestConfig(
            url=url, request_encoding=defaults.default_charset
        )
        self._encoded: list[Param] = []
        self._raw: list[Param] = []
        self._headers: dict[str, str] = {}
        if defaults.proxy_host and defaults.proxy_port > 0:
            self.proxy(defaults.proxy_host, defaults.proxy_port)

    def _set(self, **changes: object) -> RequestConfigBuilder:
        self._config = replace(self._config, **changes)  # type: ignore[arg-type]
        return self

    def add_parameter(self, name: str, value: str | None) -> RequestConfigBuilder:
        """Add a parameter that is URL-encoded when the request is built."""
        self._encoded.append((name, "" if value is None else value))
        return self

    def add_raw_parameter(
        self, name: str, value: str | None
    ) -> RequestConfigBuilder:
        """Add a parameter that is sent verbatim, after the encoded ones."""
        self._raw.append((name, "" if value is None else value))
        return self

    def basic_auth(self, user_id: str, password: str) -> RequestConfigBuilder:
        return self._set(basic_auth=BasicAuth(user_id, password))

    def timeout_seconds(self, seconds: int) -> RequestConfigBuilder:
        """Set connect, read and overall attempt timeouts at once."""
        return self._set(timeout_millis=seconds * 1000)

    def proxy(self, host: str | None, port: int = 0) -> RequestConfigBuilder:
        """Set the proxy; an empty host disables proxying."""
        if not host:
            return self._set(proxy=None)
        return self._set(proxy=ProxySettings(host, port))

    def user_agent(self, user_agent: str) -> RequestConfigBuilder:
        return self._set(user_agent=user_agent)

    def request_encoding(self, encoding: str) -> RequestConfigBuilder:
        return self._set(request_encoding=encoding)

    def response_encoding(self, encoding: str) -> RequestConfigBuilder:
        """Fallback charset; a charset declared by the response wins."""
        return self._set(response_encoding=encoding)

    def disable_tls_verification(self) -> RequestConfigBuilder:
        return self._set(trust_policy=TrustPolicy.ACCEPT_ALL)

    def retry(self, max_retries: int, interval_millis: int) -> RequestConfigBuilder:
        return self._set(retry=RetryPolicy(max_retries, interval_millis))

    def disable_expect_continue(self) -> RequestConfigBuilder:
        """Some servers answer 417 to ``Expect: 100-continue``."""
        return self._set(use_expect_continue=False)

    def header(self, name: str, value: str) -> RequestConfigBuilder:
        self._headers[name] = value
        return self

    def build(self) -> RequestConfig:
        config = replace(
            self._config,
            encoded_params=tuple(self._encoded),
            raw_params=tuple(self._raw),
            headers=dict(self._headers),
        )
        config.check()
        return config
