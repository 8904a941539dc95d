"""Assertion vocabulary for faucet scenarios."""

from collections.abc import Awaitable, Callable
from typing import Any

from faucet.core.errors import FaucetError


def expect_equal(actual: Any, expected: Any, message: str | None = None) -> None:
    """Fail unless ``actual == expected``."""
    if actual != expected:
        raise AssertionError(message or f"Expected {expected!r}, got {actual!r}")


async def expect_reverted(
    call: Awaitable[Any] | Callable[[], Awaitable[Any]],
    kind: type[FaucetError] | None = None,
) -> FaucetError:
    """Await ``call`` and succeed only if it is rejected.

    Any FaucetError counts as a rejection. Passing ``kind`` additionally
    requires the rejection to be of that type. Other exceptions are not
    rejections and propagate unchanged.

    Returns:
        The rejection that was raised.

    Raises:
        AssertionError: If the call succeeded or was rejected with a
            different kind than requested.
    """
    awaitable = call() if callable(call) else call
    try:
        result = await awaitable
    except FaucetError as e:
        if kind is not None and not isinstance(e, kind):
            raise AssertionError(
                f"Expected a {kind.__name__} rejection, got {type(e).__name__}: {e}"
            ) from e
        return e
    raise AssertionError(f"Expected the call to be reverted, but it returned {result!r}")
