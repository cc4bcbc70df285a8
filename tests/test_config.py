# pyright: reportUnknownMemberType=false
import pytest

from wirefetch.networking.config import (
    ProxySettings,
    RequestConfig,
    RequestConfigBuilder,
    RetryPolicy,
)
from wirefetch.networking.defaults import NetworkDefaults, set_defaults
from wirefetch.networking.errors import ConfigurationError
from wirefetch.networking.trust import TrustPolicy


def test_config_defaults_are_stable():
    config = RequestConfig(url="http://example.com")

    assert config.encoded_params == ()
    assert config.raw_params == ()
    assert dict(config.headers) == {}
    assert config.timeout_millis == 10_000
    assert config.proxy is None
    assert config.basic_auth is None
    assert config.user_agent is None
    assert config.trust_policy is TrustPolicy.VALIDATE
    assert config.use_expect_continue is True
    assert config.retry == RetryPolicy(0, 0)
    assert config.retry.max_attempts == 1
    assert config.response_encoding is None


def test_config_headers_are_immutable():
    config = RequestConfig(url="http://example.com", headers={"X-Test": "1"})

    with pytest.raises(TypeError):
        config.headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_headers_input():
    headers = {"X-Test": "1"}
    config = RequestConfig(url="http://example.com", headers=headers)
    headers["X-Test"] = "2"

    assert config.headers["X-Test"] == "1"


def test_config_rejects_non_positive_timeout():
    with pytest.raises(ConfigurationError):
        RequestConfig(url="http://example.com", timeout_millis=0)


def test_retry_policy_rejects_negative_values():
    with pytest.raises(ConfigurationError):
        RetryPolicy(max_retries=-1)
    with pytest.raises(ConfigurationError):
        RetryPolicy(interval_millis=-1)


def test_retry_policy_interval_in_seconds():
    assert RetryPolicy(4, 1500).interval_seconds == 1.5
    assert RetryPolicy(4, 1500).max_attempts == 5


@pytest.mark.parametrize("host", ["proxy local", "proxy:8080", "http://proxy"])
def test_proxy_rejects_malformed_address_at_set_time(host):
    builder = RequestConfigBuilder("http://example.com")

    with pytest.raises(ConfigurationError) as excinfo:
        builder.proxy(host, 8080)

    assert excinfo.value.code == "B004"


def test_proxy_rejects_non_positive_port_at_set_time():
    with pytest.raises(ConfigurationError):
        RequestConfigBuilder("http://example.com").proxy("proxy.local", 0)


def test_proxy_empty_host_disables_proxy():
    config = (
        RequestConfigBuilder("http://example.com")
        .proxy("proxy.local", 3128)
        .proxy(None)
        .build()
    )

    assert config.proxy is None


def test_proxy_settings_url():
    assert ProxySettings("proxy-1.example", 3128).as_url() == (
        "http://proxy-1.example:3128"
    )


def test_builder_collects_parameters_in_order():
    config = (
        RequestConfigBuilder("http://example.com")
        .add_parameter("a", "1")
        .add_parameter("a", "2")
        .add_parameter("b", None)
        .add_raw_parameter("r", "x")
        .build()
    )

    assert config.encoded_params == (("a", "1"), ("a", "2"), ("b", ""))
    assert config.raw_params == (("r", "x"),)


def test_builder_header_last_write_wins():
    config = (
        RequestConfigBuilder("http://example.com")
        .header("X-Token", "old")
        .header("X-Token", "new")
        .build()
    )

    assert dict(config.headers) == {"X-Token": "new"}


def test_builder_applies_all_setters():
    config = (
        RequestConfigBuilder("http://example.com")
        .basic_auth("alice", "secret")
        .timeout_seconds(3)
        .user_agent("Agent/2")
        .request_encoding("shift_jis")
        .response_encoding("euc_jp")
        .disable_tls_verification()
        .retry(2, 500)
        .disable_expect_continue()
        .build()
    )

    assert config.basic_auth is not None
    assert config.basic_auth.user_id == "alice"
    assert config.timeout_millis == 3000
    assert config.timeout_seconds == 3.0
    assert config.user_agent == "Agent/2"
    assert config.request_encoding == "shift_jis"
    assert config.response_encoding == "euc_jp"
    assert config.trust_policy is TrustPolicy.ACCEPT_ALL
    assert config.retry == RetryPolicy(2, 500)
    assert config.use_expect_continue is False


def test_builder_rejects_empty_url():
    with pytest.raises(ConfigurationError) as excinfo:
        RequestConfigBuilder("").build()

    assert excinfo.value.code == "B003"


def test_builder_seeds_proxy_and_charset_from_defaults():
    defaults = NetworkDefaults(
        proxy_host="proxy.corp", proxy_port=8080, default_charset="shift_jis"
    )

    config = RequestConfigBuilder("http://example.com", defaults=defaults).build()

    assert config.proxy == ProxySettings("proxy.corp", 8080)
    assert config.request_encoding == "shift_jis"


def test_builder_ignores_default_proxy_without_port():
    defaults = NetworkDefaults(proxy_host="proxy.corp", proxy_port=0)

    config = RequestConfigBuilder("http://example.com", defaults=defaults).build()

    assert config.proxy is None


def test_basic_auth_password_is_not_in_repr():
    config = (
        RequestConfigBuilder("http://example.com")
        .basic_auth("alice", "secret")
        .build()
    )

    assert "secret" not in repr(config)


def test_direct_config_takes_process_default_charset():
    set_defaults(NetworkDefaults(default_charset="shift_jis"))

    assert RequestConfig(url="http://example.com").request_encoding == "shift_jis"
    assert (
        RequestConfig(url="http://example.com", request_encoding="latin-1")
        .request_encoding
        == "latin-1"
    )
