"""Test suite for the faucet.

Organized into four categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - In-memory ledger and CLI command handler

3. harness/: Tests for the fixture harness
   - Snapshot/restore, fixture loading, assertion helpers

4. fakes/: Port implementations for testing
   - In-memory implementations of LedgerPort
   - Used by core unit tests
"""
