"""Tests for the in-memory ledger adapter."""

import pytest

from faucet.adapters.ledger.memory import InMemoryLedger, LedgerSnapshot
from faucet.core.errors import InsufficientFunds, TransferFailed

ALICE = "0x" + "1" * 40
BOB = "0x" + "2" * 40


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Create a ledger with Alice funded."""
    return InMemoryLedger({ALICE: 1_000})


class TestTransfer:
    @pytest.mark.asyncio
    async def test_moves_value(self, ledger: InMemoryLedger) -> None:
        receipt = await ledger.transfer(ALICE, BOB, 400)

        assert await ledger.balance_of(ALICE) == 600
        assert await ledger.balance_of(BOB) == 400
        assert receipt.sender == ALICE
        assert receipt.recipient == BOB
        assert receipt.amount == 400
        assert receipt.sequence == 0

    @pytest.mark.asyncio
    async def test_sequence_increases(self, ledger: InMemoryLedger) -> None:
        first = await ledger.transfer(ALICE, BOB, 1)
        second = await ledger.transfer(ALICE, BOB, 1)

        assert (first.sequence, second.sequence) == (0, 1)
        assert ledger.history == (first, second)

    @pytest.mark.asyncio
    async def test_insufficient_funds_changes_nothing(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(InsufficientFunds) as exc_info:
            await ledger.transfer(ALICE, BOB, 1_001)

        assert exc_info.value.available == 1_000
        assert exc_info.value.requested == 1_001
        assert isinstance(exc_info.value, TransferFailed)
        assert await ledger.balance_of(ALICE) == 1_000
        assert await ledger.balance_of(BOB) == 0
        assert ledger.history == ()

    @pytest.mark.asyncio
    async def test_zero_transfer_from_unknown_identity(self, ledger: InMemoryLedger) -> None:
        await ledger.transfer(BOB, ALICE, 0)

        assert await ledger.balance_of(ALICE) == 1_000

    @pytest.mark.asyncio
    async def test_rejects_negative_amount(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(ValueError):
            await ledger.transfer(ALICE, BOB, -1)

    @pytest.mark.asyncio
    async def test_total_supply_is_conserved(self, ledger: InMemoryLedger) -> None:
        await ledger.transfer(ALICE, BOB, 250)
        await ledger.transfer(BOB, ALICE, 100)

        assert ledger.total_supply() == 1_000


class TestCredit:
    def test_credit_mints(self, ledger: InMemoryLedger) -> None:
        ledger.credit(BOB, 5)

        assert ledger.total_supply() == 1_005
        assert set(ledger.identities()) == {ALICE, BOB}

    def test_credit_rejects_negative(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(ValueError):
            ledger.credit(BOB, -5)


class TestSnapshot:
    @pytest.mark.asyncio
    async def test_restore_rewinds_balances_and_history(self, ledger: InMemoryLedger) -> None:
        snapshot = ledger.snapshot()
        await ledger.transfer(ALICE, BOB, 300)

        ledger.restore(snapshot)

        assert await ledger.balance_of(ALICE) == 1_000
        assert await ledger.balance_of(BOB) == 0
        assert ledger.history == ()

    @pytest.mark.asyncio
    async def test_snapshot_can_be_restored_repeatedly(self, ledger: InMemoryLedger) -> None:
        snapshot = ledger.snapshot()

        for _ in range(3):
            await ledger.transfer(ALICE, BOB, 300)
            ledger.restore(snapshot)

        assert await ledger.balance_of(ALICE) == 1_000
        assert snapshot.balances == {ALICE: 1_000}

    def test_snapshot_is_read_only(self, ledger: InMemoryLedger) -> None:
        snapshot = ledger.snapshot()

        with pytest.raises(TypeError):
            snapshot.balances[BOB] = 1  # type: ignore[index]

    def test_snapshot_from_dict(self) -> None:
        snapshot = LedgerSnapshot(balances={ALICE: 7}, history=())
        ledger = InMemoryLedger()

        ledger.restore(snapshot)

        assert ledger.total_supply() == 7
