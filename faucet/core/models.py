"""Domain models for the faucet.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from decimal import Decimal, DecimalException, Inexact, InvalidOperation, localcontext
from enum import Enum
from typing import TypeAlias

Identity: TypeAlias = str

ZERO_IDENTITY: Identity = "0x" + "0" * 40

# 1 native unit = 10**18 base units
UNIT_DECIMALS = 18
WEI_PER_UNIT = 10**UNIT_DECIMALS

# 0.1 native unit
DEFAULT_WITHDRAW_CAP = 10**17


def validate_identity(identity: Identity, role: str = "identity") -> Identity:
    """Reject empty and zero identities."""
    if not isinstance(identity, str) or not identity.strip():
        raise ValueError(f"{role} must be a non-empty string")
    if identity.lower() == ZERO_IDENTITY:
        raise ValueError(f"{role} cannot be the zero identity")
    return identity


def validate_amount(amount: int, name: str = "amount") -> int:
    """Reject non-integer and negative base-unit amounts."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be an integer number of base units, got {amount!r}")
    if amount < 0:
        raise ValueError(f"{name} must be non-negative, got {amount}")
    return amount


def parse_units(value: str | int | Decimal, decimals: int = UNIT_DECIMALS) -> int:
    """Convert a display amount such as ``"0.5"`` into base units.

    No rounding is performed: a value with more fractional digits than
    ``decimals`` is rejected.

    Raises:
        ValueError: If the value is not a finite, non-negative number or
            cannot be represented exactly in base units.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse {value!r} as an amount")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse {value!r} as an amount") from e
    if not parsed.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    if parsed < 0:
        raise ValueError(f"Amount must be non-negative, got {value!r}")
    with localcontext() as ctx:
        # wide enough that scaling never drops a digit
        ctx.prec = max(ctx.prec, len(parsed.as_tuple().digits) + decimals)
        ctx.traps[Inexact] = True
        try:
            scaled = parsed.scaleb(decimals)
        except DecimalException as e:
            raise ValueError(f"Amount {value!r} cannot be represented in base units") from e
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"Amount {value!r} has more than {decimals} decimal places"
            )
        return int(scaled)


def format_units(amount: int, decimals: int = UNIT_DECIMALS) -> str:
    """Render base units as a display amount, e.g. ``10**17`` -> ``"0.1"``."""
    validate_amount(amount)
    whole, fraction = divmod(amount, 10**decimals)
    fraction_digits = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fraction_digits or '0'}"


class StoreStatus(Enum):
    """Lifecycle states for a value store.

    - ACTIVE: set at construction; withdrawals are self-loops
    - DESTROYED: terminal, reached only through terminate
    """

    ACTIVE = "active"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class StoreState:
    """The full observable field set of a value store.

    Used to snapshot a store and rewind it later.
    """

    owner: Identity
    balance: int
    alive: bool
    cap: int

    def __post_init__(self) -> None:
        """Validate store invariants on creation."""
        validate_identity(self.owner, "owner")
        validate_amount(self.balance, "balance")
        validate_amount(self.cap, "cap")
        if not self.alive and self.balance != 0:
            raise ValueError(
                f"A terminated store must hold no balance, got {self.balance}"
            )

    @property
    def status(self) -> StoreStatus:
        return StoreStatus.ACTIVE if self.alive else StoreStatus.DESTROYED


@dataclass(frozen=True)
class TransferReceipt:
    """Confirmation of a completed ledger transfer."""

    sender: Identity
    recipient: Identity
    amount: int
    sequence: int  # position in the ledger's transfer history

    def __post_init__(self) -> None:
        """Validate receipt invariants on creation."""
        validate_amount(self.amount)
        if self.sequence < 0:
            raise ValueError(f"sequence must be non-negative, got {self.sequence}")
