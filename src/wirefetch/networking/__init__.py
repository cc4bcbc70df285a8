"""Public interface of the wirefetch networking layer."""

from .client import HttpClient
from .config import (
    BasicAuth,
    ProxySettings,
    RequestConfig,
    RequestConfigBuilder,
    RetryPolicy,
)
from .defaults import NetworkDefaults, get_defaults, set_defaults
from .errors import ConfigurationError, HttpClientError, SavePathError
from .response import ResponseResult
from .trust import TrustPolicy

__all__ = [
    "BasicAuth",
    "ConfigurationError",
    "HttpClient",
    "HttpClientError",
    "NetworkDefaults",
    "ProxySettings",
    "RequestConfig",
    "RequestConfigBuilder",
    "ResponseResult",
    "RetryPolicy",
    "SavePathError",
    "TrustPolicy",
    "get_defaults",
    "set_defaults",
]
