"""TLS trust policies applied to each attempt's session."""

from __future__ import annotations

import contextlib
import warnings
from enum import Enum
from typing import Iterator

import urllib3


class TrustPolicy(Enum):
    """Certificate and hostname validation mode for a call.

    ``VALIDATE`` uses the platform CA bundle and hostname matching.
    ``ACCEPT_ALL`` accepts any server certificate and any hostname.
    """

    VALIDATE = "validate"
    ACCEPT_ALL = "accept_all"

    @property
    def verify(self) -> bool:
        """Value for ``requests.Session.verify``."""
        return self is TrustPolicy.VALIDATE

    @contextlib.contextmanager
    def warnings_scope(self) -> Iterator[None]:
        """Silence urllib3's insecure-request warning while accepting all certs."""
        if self.verify:
            yield
            return
        with warnings.catch_warnings():
            warnings.simplefilter(
                "ignore", urllib3.exceptions.InsecureRequestWarning
            )
            yield
