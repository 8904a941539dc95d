"""Unit tests for port interface contracts.

Tests verify that port abstract base classes are properly defined
and that implementations must satisfy the interface contract.
"""

import pytest

from faucet.adapters.ledger import InMemoryLedger
from faucet.core.ports import FaucetPort, LedgerPort
from faucet.core.value_store import ValueStore
from faucet.tests.fakes import FakeLedgerPort


class TestPortAbstraction:
    """Test that ports cannot be instantiated directly."""

    def test_ledger_port_is_abstract(self) -> None:
        """LedgerPort cannot be instantiated."""
        with pytest.raises(TypeError):
            LedgerPort()  # type: ignore[abstract]

    def test_faucet_port_is_abstract(self) -> None:
        """FaucetPort cannot be instantiated."""
        with pytest.raises(TypeError):
            FaucetPort()  # type: ignore[abstract]

    def test_partial_ledger_is_rejected(self) -> None:
        class BalanceOnly(LedgerPort):
            async def balance_of(self, identity: str) -> int:
                return 0

        with pytest.raises(TypeError):
            BalanceOnly()  # type: ignore[abstract]


class TestPortImplementation:
    """Test that the shipped implementations satisfy their ports."""

    def test_in_memory_ledger_is_a_ledger_port(self) -> None:
        assert isinstance(InMemoryLedger(), LedgerPort)

    def test_fake_ledger_is_a_ledger_port(self) -> None:
        assert isinstance(FakeLedgerPort(), LedgerPort)

    def test_value_store_is_a_faucet_port(self) -> None:
        store = ValueStore(FakeLedgerPort(), "0x" + "a" * 40, address="0x" + "c" * 40)

        assert isinstance(store, FaucetPort)
