"""Capped value faucet with owner-only administration and a snapshot-backed fixture harness."""

__version__ = "0.1.0"
