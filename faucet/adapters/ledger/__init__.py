"""Ledger adapters holding the balances value stores draw from.

Implementations:
- In-memory (single process, snapshot/restore for test sandboxes)
"""

from .memory import InMemoryLedger, LedgerSnapshot

__all__ = ["InMemoryLedger", "LedgerSnapshot"]
