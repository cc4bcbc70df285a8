"""Retry decisions for the attempt loop."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .types import Result


class Decision(Enum):
    SUCCESS = "success"
    RETRY = "retry"
    TERMINAL = "terminal"


def is_success(status_code: int) -> bool:
    """Only an exact 200 ends the loop early."""
    return status_code == 200


def decide(outcome: Result[Any, BaseException], attempt: int, max_retries: int) -> Decision:
    """Classify one attempt.

    Args:
        outcome: ``Ok`` holding an object with ``status_code``, or ``Err``
            holding the transport exception.
        attempt: Zero-based attempt index.
        max_retries: Configured retry count; the last attempt has index
            ``max_retries``.
    """
    if outcome.ok and is_success(outcome.value.status_code):  # type: ignore[union-attr]
        return Decision.SUCCESS
    if attempt >= max_retries:
        return Decision.TERMINAL
    return Decision.RETRY


def describe_failure(outcome: Result[Any, BaseException]) -> str:
    """Short cause text for log lines."""
    if outcome.ok:
        value = outcome.value  # type: ignore[union-attr]
        return f"{value.status_code} {value.reason}"
    return type(outcome.error).__name__  # type: ignore[union-attr]
