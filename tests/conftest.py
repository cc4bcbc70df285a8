import pytest

from wirefetch.networking.defaults import NetworkDefaults, set_defaults


@pytest.fixture(autouse=True)
def isolated_defaults():
    set_defaults(NetworkDefaults())
    yield
    set_defaults(None)
