"""Core domain logic for the faucet.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import (
    FaucetError,
    FixtureError,
    InsufficientFunds,
    LimitExceeded,
    ObjectDestroyed,
    TransferFailed,
    Unauthorized,
)
from .models import (
    DEFAULT_WITHDRAW_CAP,
    WEI_PER_UNIT,
    ZERO_IDENTITY,
    Identity,
    StoreState,
    StoreStatus,
    TransferReceipt,
    format_units,
    parse_units,
)
from .value_store import ValueStore

__all__ = [
    "DEFAULT_WITHDRAW_CAP",
    "FaucetError",
    "FixtureError",
    "Identity",
    "InsufficientFunds",
    "LimitExceeded",
    "ObjectDestroyed",
    "StoreState",
    "StoreStatus",
    "TransferFailed",
    "TransferReceipt",
    "Unauthorized",
    "ValueStore",
    "WEI_PER_UNIT",
    "ZERO_IDENTITY",
    "format_units",
    "parse_units",
]
