"""Port interfaces for the faucet.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - LedgerPort: Move value between identities and read balances

2. **Driving Ports** (adapters/external systems call into core)
   - FaucetPort: Caller-facing operations on a value store
"""

from abc import ABC, abstractmethod

from .models import Identity, StoreStatus, TransferReceipt


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class LedgerPort(ABC):
    """Port for the ambient balance ledger every identity draws from.

    The value store never holds value itself; it asks the ledger to move
    value between its own address and its callers.

    Implementations must guarantee:
    - A transfer either completes fully or has no effect
    - Balances never go negative
    - Zero-amount transfers succeed without changing balances
    """

    @abstractmethod
    async def transfer(
        self, sender: Identity, recipient: Identity, amount: int
    ) -> TransferReceipt:
        """Move ``amount`` base units from ``sender`` to ``recipient``.

        Args:
            sender: Identity whose balance is debited.
            recipient: Identity whose balance is credited.
            amount: Non-negative number of base units.

        Returns:
            TransferReceipt describing the completed transfer.

        Raises:
            InsufficientFunds: If ``sender`` cannot cover ``amount``.
            TransferFailed: If the transfer could not be completed for
                any other reason. No balance is changed.
            ValueError: If ``amount`` is negative.
        """

    @abstractmethod
    async def balance_of(self, identity: Identity) -> int:
        """Return the balance held by ``identity``.

        Unknown identities hold zero.
        """


# ============================================================================
# DRIVING PORTS (External systems call into core)
# ============================================================================


class FaucetPort(ABC):
    """Port for caller-facing operations on a value store.

    Every operation takes the caller identity explicitly. Rejections are
    raised as FaucetError subclasses and leave the store unchanged.
    """

    @property
    @abstractmethod
    def address(self) -> Identity:
        """Identity of the store in the ledger."""

    @property
    @abstractmethod
    def owner(self) -> Identity:
        """Identity that constructed the store."""

    @property
    @abstractmethod
    def balance(self) -> int:
        """Base units currently held by the store."""

    @property
    @abstractmethod
    def alive(self) -> bool:
        """False once the store has been terminated."""

    @property
    @abstractmethod
    def status(self) -> StoreStatus:
        """Current lifecycle state."""

    @abstractmethod
    async def withdraw(
        self, caller: Identity, amount: int, attached_value: int = 0
    ) -> TransferReceipt:
        """Send up to the per-call cap to any caller.

        Raises:
            ObjectDestroyed: If the store has been terminated.
            LimitExceeded: If ``amount`` is above the cap.
            InsufficientFunds: If the store cannot cover ``amount``.
            TransferFailed: If a ledger transfer fails.
        """

    @abstractmethod
    async def withdraw_all(self, caller: Identity) -> TransferReceipt:
        """Send the whole balance to the owner.

        Raises:
            ObjectDestroyed: If the store has been terminated.
            Unauthorized: If ``caller`` is not the owner.
            TransferFailed: If the ledger transfer fails.
        """

    @abstractmethod
    async def terminate(self, caller: Identity) -> TransferReceipt:
        """Drain the balance to the owner and disable the store for good.

        Raises:
            ObjectDestroyed: If the store has already been terminated.
            Unauthorized: If ``caller`` is not the owner.
            TransferFailed: If the ledger transfer fails.
        """

    @abstractmethod
    async def receive(self, caller: Identity, attached_value: int) -> TransferReceipt:
        """Accept a plain value transfer into the store.

        Raises:
            ObjectDestroyed: If the store has been terminated.
            TransferFailed: If the ledger transfer fails.
        """
