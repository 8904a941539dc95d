"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without a real ledger:

- FakeLedgerPort: In-memory balances with on-demand transfer failures
"""

from .ledger import FakeLedgerPort

__all__ = [
    "FakeLedgerPort",
]
