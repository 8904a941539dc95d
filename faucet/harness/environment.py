"""Sandbox environment for running value stores locally.

A sandbox owns an in-memory ledger, a deterministic pool of funded
identities, and every store deployed through it. Its whole state can be
captured with snapshot() and rewound with restore().
"""

import hashlib
import logging
from dataclasses import dataclass

from faucet.adapters.ledger.memory import InMemoryLedger, LedgerSnapshot
from faucet.core.errors import FixtureError
from faucet.core.models import (
    DEFAULT_WITHDRAW_CAP,
    WEI_PER_UNIT,
    Identity,
    StoreState,
    validate_amount,
)
from faucet.core.value_store import ValueStore

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_COUNT = 20
DEFAULT_INITIAL_BALANCE = 10_000 * WEI_PER_UNIT
DEFAULT_SEED = "faucet-sandbox"


def derive_address(seed: str, index: int) -> Identity:
    """Derive a stable 20-byte hex address from a seed and an index."""
    digest = hashlib.sha256(f"{seed}:{index}".encode()).hexdigest()
    return "0x" + digest[:40]


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Ledger balances plus the state of every deployed store."""

    ledger: LedgerSnapshot
    stores: tuple[tuple[ValueStore, StoreState], ...]
    deploy_count: int


class SandboxEnvironment:
    """Single-process stand-in for the network a store runs on."""

    def __init__(
        self,
        ledger: InMemoryLedger | None = None,
        account_count: int = DEFAULT_ACCOUNT_COUNT,
        initial_balance: int = DEFAULT_INITIAL_BALANCE,
        cap: int = DEFAULT_WITHDRAW_CAP,
        seed: str = DEFAULT_SEED,
    ):
        """Create the sandbox and fund its identity pool.

        Args:
            ledger: Ledger to fund; a fresh InMemoryLedger if omitted.
            account_count: Number of funded identities to create.
            initial_balance: Base units credited to each identity.
            cap: Withdrawal cap given to stores deployed here.
            seed: Seed for deterministic identity derivation.
        """
        if account_count < 0:
            raise ValueError(f"account_count must be non-negative, got {account_count}")
        validate_amount(initial_balance, "initial_balance")
        validate_amount(cap, "cap")

        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.cap = cap
        self._accounts = tuple(derive_address(seed, i) for i in range(account_count))
        for account in self._accounts:
            self.ledger.credit(account, initial_balance)
        self._stores: list[ValueStore] = []
        self._deploy_count = 0

    @property
    def accounts(self) -> tuple[Identity, ...]:
        return self._accounts

    @property
    def stores(self) -> tuple[ValueStore, ...]:
        return tuple(self._stores)

    def signers(self, count: int | None = None) -> tuple[Identity, ...]:
        """Return the first ``count`` identities of the pool (all if None).

        Raises:
            FixtureError: If the pool holds fewer than ``count`` identities.
        """
        if count is None:
            return self._accounts
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if count > len(self._accounts):
            raise FixtureError(
                f"Requested {count} identities but the sandbox only has "
                f"{len(self._accounts)}"
            )
        return self._accounts[:count]

    def signer(self, index: int) -> Identity:
        """Return the identity at ``index`` in the pool."""
        return self.signers(index + 1)[index]

    async def balance_of(self, identity: Identity) -> int:
        return await self.ledger.balance_of(identity)

    async def deploy_store(
        self,
        caller: Identity,
        attached_value: int = 0,
        *,
        cap: int | None = None,
    ) -> ValueStore:
        """Deploy a store owned by ``caller`` and register it for snapshots.

        The store address is derived from the deployer and the number of
        deployments so far, so replaying a sandbox yields the same addresses.
        """
        address = derive_address(caller, self._deploy_count)
        store = await ValueStore.deploy(
            self.ledger,
            caller,
            attached_value,
            cap=self.cap if cap is None else cap,
            address=address,
        )
        self._deploy_count += 1
        self._stores.append(store)
        return store

    def snapshot(self) -> EnvironmentSnapshot:
        """Capture the ledger and every registered store."""
        snapshot = EnvironmentSnapshot(
            ledger=self.ledger.snapshot(),
            stores=tuple((store, store.state()) for store in self._stores),
            deploy_count=self._deploy_count,
        )
        logger.debug(
            "Sandbox snapshot taken",
            extra={"stores": len(snapshot.stores), "transfers": len(snapshot.ledger.history)},
        )
        return snapshot

    def restore(self, snapshot: EnvironmentSnapshot) -> None:
        """Rewind the ledger and every snapshotted store in one step.

        Stores deployed after the snapshot are dropped from the registry.

        Raises:
            RuntimeError: If the ledger or any store is mid-operation.
                Nothing is restored in that case.
        """
        if self.ledger.busy or any(store.busy for store in self._stores):
            raise RuntimeError("Cannot restore sandbox while an operation is in progress")

        self.ledger.restore(snapshot.ledger)
        for store, state in snapshot.stores:
            store.restore_state(state)
        self._stores = [store for store, _ in snapshot.stores]
        self._deploy_count = snapshot.deploy_count
