"""In-memory ledger adapter.

Implements LedgerPort with a plain dict of balances. Every transfer is
validated before any balance is touched, so a failed transfer never
leaves a partial change. Supports snapshot/restore so a sandbox can be
rewound to an earlier point.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from faucet.core.errors import InsufficientFunds
from faucet.core.models import Identity, TransferReceipt, validate_amount, validate_identity
from faucet.core.ports import LedgerPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable copy of every balance and the transfer history."""

    balances: Mapping[Identity, int]
    history: tuple[TransferReceipt, ...]

    def __post_init__(self) -> None:
        """Convert balances dict to read-only proxy."""
        if isinstance(self.balances, dict):
            object.__setattr__(
                self, "balances", MappingProxyType(dict(self.balances))
            )


class InMemoryLedger(LedgerPort):
    """Dict-backed ledger for a single process."""

    def __init__(self, balances: Mapping[Identity, int] | None = None):
        """Initialize the ledger.

        Args:
            balances: Optional opening balances keyed by identity.
        """
        self._balances: dict[Identity, int] = {}
        self._history: list[TransferReceipt] = []
        self._lock = asyncio.Lock()
        for identity, amount in (balances or {}).items():
            self.credit(identity, amount)

    async def transfer(
        self, sender: Identity, recipient: Identity, amount: int
    ) -> TransferReceipt:
        """Move value between two identities."""
        validate_identity(sender, "sender")
        validate_identity(recipient, "recipient")
        validate_amount(amount)

        async with self._lock:
            available = self._balances.get(sender, 0)
            if amount > available:
                raise InsufficientFunds(sender, available, amount, recipient=recipient)

            self._balances[sender] = available - amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount
            receipt = TransferReceipt(
                sender=sender,
                recipient=recipient,
                amount=amount,
                sequence=len(self._history),
            )
            self._history.append(receipt)

        logger.debug(
            f"Transferred {amount} from {sender} to {recipient}",
            extra={"sequence": receipt.sequence},
        )
        return receipt

    async def balance_of(self, identity: Identity) -> int:
        """Return the balance held by an identity."""
        return self._balances.get(identity, 0)

    def credit(self, identity: Identity, amount: int) -> None:
        """Mint ``amount`` into ``identity`` (sandbox genesis funding)."""
        validate_identity(identity)
        validate_amount(amount)
        self._balances[identity] = self._balances.get(identity, 0) + amount

    def identities(self) -> Iterable[Identity]:
        """Return every identity that has ever held a balance."""
        return tuple(self._balances)

    @property
    def history(self) -> tuple[TransferReceipt, ...]:
        return tuple(self._history)

    def total_supply(self) -> int:
        """Sum of all balances; constant across transfers."""
        return sum(self._balances.values())

    @property
    def busy(self) -> bool:
        """True while a transfer is in progress."""
        return self._lock.locked()

    def snapshot(self) -> LedgerSnapshot:
        """Capture every balance and the transfer history."""
        return LedgerSnapshot(balances=dict(self._balances), history=tuple(self._history))

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Rewind to ``snapshot``.

        The snapshot is copied, never adopted, so it can be restored again.

        Raises:
            RuntimeError: If a transfer is in progress.
        """
        if self.busy:
            raise RuntimeError("Cannot restore ledger while a transfer is in progress")
        self._balances = dict(snapshot.balances)
        self._history = list(snapshot.history)
