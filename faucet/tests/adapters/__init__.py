"""Tests for adapter implementations.

These tests exercise the in-memory ledger and the CLI command handler
against the core domain models.
"""
