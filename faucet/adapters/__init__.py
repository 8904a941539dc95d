"""External adapters for the faucet.

This package provides implementations of the core port interfaces and
the outer surfaces that drive the core.

Adapter Organization:

- ledger/: Ledgers value stores move value through (in-memory)
- cli/: Command-line interface for driving a store in a sandbox
"""
