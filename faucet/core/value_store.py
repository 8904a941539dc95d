"""The value store: a capped faucet with owner-only administration.

Anyone may withdraw up to the per-call cap. Only the owner may drain
the whole balance or terminate the store. Termination is final: every
later mutation is rejected with ObjectDestroyed.

Each operation runs under the store's lock and commits its new state in
a single assignment after every ledger leg has been confirmed, so a
rejected call never leaves a partial change behind.
"""

import asyncio
import logging
import secrets
from dataclasses import replace

from .errors import (
    FaucetError,
    InsufficientFunds,
    LimitExceeded,
    ObjectDestroyed,
    TransferFailed,
    Unauthorized,
)
from .models import (
    DEFAULT_WITHDRAW_CAP,
    Identity,
    StoreState,
    StoreStatus,
    TransferReceipt,
    validate_amount,
    validate_identity,
)
from .ports import FaucetPort, LedgerPort

logger = logging.getLogger(__name__)


def random_address() -> Identity:
    """Generate a fresh 20-byte hex address."""
    return "0x" + secrets.token_hex(20)


class ValueStore(FaucetPort):
    """Core implementation of FaucetPort backed by a LedgerPort.

    Use ``await ValueStore.deploy(...)`` to construct a store; it moves
    the attached value into the store before the store exists.
    """

    def __init__(
        self,
        ledger: LedgerPort,
        owner: Identity,
        *,
        address: Identity,
        cap: int = DEFAULT_WITHDRAW_CAP,
        balance: int = 0,
    ):
        """Wrap an already-funded store address.

        Args:
            ledger: LedgerPort implementation holding the value.
            owner: Identity allowed to drain and terminate the store.
            address: Identity of the store in the ledger.
            cap: Maximum base units a single withdraw may request.
            balance: Base units already held at ``address``.
        """
        validate_identity(address, "address")
        if address == owner:
            raise ValueError("Store address cannot be the owner identity")
        self.ledger = ledger
        self._address = address
        self._state = StoreState(owner=owner, balance=balance, alive=True, cap=cap)
        self._lock = asyncio.Lock()

    @classmethod
    async def deploy(
        cls,
        ledger: LedgerPort,
        caller: Identity,
        attached_value: int = 0,
        *,
        cap: int = DEFAULT_WITHDRAW_CAP,
        address: Identity | None = None,
    ) -> "ValueStore":
        """Construct a store owned by ``caller``, funded with ``attached_value``.

        Raises:
            InsufficientFunds: If the caller cannot cover ``attached_value``.
            TransferFailed: If the funding transfer fails.
            ValueError: If an identity or amount is invalid.
        """
        validate_identity(caller, "caller")
        validate_amount(attached_value, "attached_value")
        validate_amount(cap, "cap")
        address = validate_identity(address or random_address(), "address")
        if address == caller:
            raise ValueError("Store address cannot be the owner identity")

        if attached_value:
            await _checked_transfer(ledger, caller, address, attached_value)

        store = cls(ledger, caller, address=address, cap=cap, balance=attached_value)
        logger.info(
            f"Value store {address} deployed by {caller}",
            extra={
                "address": address,
                "owner": caller,
                "balance": attached_value,
                "cap": cap,
            },
        )
        return store

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def address(self) -> Identity:
        return self._address

    @property
    def owner(self) -> Identity:
        return self._state.owner

    @property
    def balance(self) -> int:
        return self._state.balance

    @property
    def alive(self) -> bool:
        return self._state.alive

    @property
    def cap(self) -> int:
        return self._state.cap

    @property
    def status(self) -> StoreStatus:
        return self._state.status

    @property
    def busy(self) -> bool:
        """True while an operation is in progress."""
        return self._lock.locked()

    def state(self) -> StoreState:
        """Return the full observable field set."""
        return self._state

    def restore_state(self, state: StoreState) -> None:
        """Rewind the store to a previously captured state.

        Args:
            state: A StoreState taken from this store with ``state()``.

        Raises:
            ValueError: If ``state`` belongs to a different owner.
            RuntimeError: If an operation is in progress.
        """
        if state.owner != self._state.owner:
            raise ValueError(
                f"Cannot restore state owned by {state.owner} onto a store "
                f"owned by {self._state.owner}"
            )
        if self.busy:
            raise RuntimeError(
                f"Cannot restore store {self._address} while an operation is in progress"
            )
        self._state = state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def withdraw(
        self, caller: Identity, amount: int, attached_value: int = 0
    ) -> TransferReceipt:
        """Send ``amount`` to ``caller`` if it fits under the cap.

        Any caller may withdraw; the store does not track who deposited
        what. Value attached to the call is credited before the payout
        and returned if the payout fails. If that refund also fails the
        deposit is kept in the store balance so it still matches the ledger.
        """
        validate_identity(caller, "caller")
        validate_amount(amount)
        validate_amount(attached_value, "attached_value")

        async with self._lock:
            state = self._ensure_alive("withdraw", caller)
            if amount > state.cap:
                logger.warning(
                    f"Withdrawal of {amount} by {caller} rejected: cap is {state.cap}",
                    extra={"address": self._address, "caller": caller, "amount": amount},
                )
                raise LimitExceeded(amount, state.cap)

            available = state.balance + attached_value
            if amount > available:
                logger.warning(
                    f"Withdrawal of {amount} by {caller} rejected: store holds {available}",
                    extra={"address": self._address, "caller": caller, "amount": amount},
                )
                raise InsufficientFunds(self._address, available, amount, recipient=caller)

            deposit = None
            if attached_value:
                deposit = await _checked_transfer(
                    self.ledger, caller, self._address, attached_value
                )
            try:
                receipt = await _checked_transfer(self.ledger, self._address, caller, amount)
            except FaucetError:
                if deposit is not None and not await self._refund(deposit):
                    # the deposit stays at the store address in the ledger
                    self._state = replace(state, balance=state.balance + attached_value)
                raise

            self._state = replace(state, balance=available - amount)

        logger.info(
            f"Withdrew {amount} from {self._address} to {caller}",
            extra={
                "address": self._address,
                "caller": caller,
                "amount": amount,
                "attached_value": attached_value,
                "balance": self._state.balance,
            },
        )
        return receipt

    async def withdraw_all(self, caller: Identity) -> TransferReceipt:
        """Send the entire balance to the owner."""
        validate_identity(caller, "caller")

        async with self._lock:
            state = self._ensure_alive("withdraw_all", caller)
            self._ensure_owner(state, caller, "withdraw_all")
            receipt = await _checked_transfer(
                self.ledger, self._address, state.owner, state.balance
            )
            self._state = replace(state, balance=0)

        logger.info(
            f"Owner drained {state.balance} from {self._address}",
            extra={"address": self._address, "owner": state.owner, "amount": state.balance},
        )
        return receipt

    async def terminate(self, caller: Identity) -> TransferReceipt:
        """Drain the balance to the owner and disable the store."""
        validate_identity(caller, "caller")

        async with self._lock:
            state = self._ensure_alive("terminate", caller)
            self._ensure_owner(state, caller, "terminate")
            receipt = await _checked_transfer(
                self.ledger, self._address, state.owner, state.balance
            )
            self._state = replace(state, balance=0, alive=False)

        logger.info(
            f"Value store {self._address} terminated, {state.balance} returned to owner",
            extra={"address": self._address, "owner": state.owner, "amount": state.balance},
        )
        return receipt

    async def receive(self, caller: Identity, attached_value: int) -> TransferReceipt:
        """Accept value sent to the store without a withdrawal."""
        validate_identity(caller, "caller")
        validate_amount(attached_value, "attached_value")

        async with self._lock:
            state = self._ensure_alive("receive", caller)
            receipt = await _checked_transfer(
                self.ledger, caller, self._address, attached_value
            )
            self._state = replace(state, balance=state.balance + attached_value)

        logger.debug(
            f"Received {attached_value} from {caller}",
            extra={"address": self._address, "caller": caller, "amount": attached_value},
        )
        return receipt

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _ensure_alive(self, operation: str, caller: Identity) -> StoreState:
        state = self._state
        if not state.alive:
            logger.warning(
                f"{operation} by {caller} rejected: store {self._address} is terminated",
                extra={"address": self._address, "caller": caller},
            )
            raise ObjectDestroyed(self._address)
        return state

    def _ensure_owner(self, state: StoreState, caller: Identity, operation: str) -> None:
        if caller != state.owner:
            logger.warning(
                f"{operation} by {caller} rejected: caller is not the owner",
                extra={"address": self._address, "caller": caller, "owner": state.owner},
            )
            raise Unauthorized(caller, state.owner, operation)

    async def _refund(self, deposit: TransferReceipt) -> bool:
        """Return value credited earlier in a call that is being rejected.

        Returns False if the refund could not be made.
        """
        try:
            await _checked_transfer(
                self.ledger, deposit.recipient, deposit.sender, deposit.amount
            )
        except Exception as refund_error:
            logger.error(
                f"Failed to refund {deposit.amount} to {deposit.sender} after a "
                f"rejected withdrawal: {refund_error}",
                exc_info=True,
            )
            return False
        return True

    def __repr__(self) -> str:
        state = self._state
        return (
            f"ValueStore(address={self._address!r}, owner={state.owner!r}, "
            f"balance={state.balance}, status={state.status.value})"
        )


async def _checked_transfer(
    ledger: LedgerPort, sender: Identity, recipient: Identity, amount: int
) -> TransferReceipt:
    """Run a ledger transfer, reporting any failure as TransferFailed."""
    try:
        return await ledger.transfer(sender, recipient, amount)
    except FaucetError:
        raise
    except Exception as e:
        raise TransferFailed(sender, recipient, amount, reason=str(e)) from e
