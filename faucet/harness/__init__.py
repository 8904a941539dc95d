"""Fixture harness for exercising value stores.

Provides a sandbox environment, snapshot-backed fixture loading and the
assertion helpers scenarios are written with:

- SandboxEnvironment: ledger, funded identities, deployed stores
- FixtureHarness / load_fixture: build once, restore before every load
- expect_equal / expect_reverted: scenario assertions
"""

from .assertions import expect_equal, expect_reverted
from .environment import EnvironmentSnapshot, SandboxEnvironment
from .fixture import (
    Bundle,
    FixtureHarness,
    deploy_faucet_and_set_variables,
    load_fixture,
    reset_fixtures,
)

__all__ = [
    "Bundle",
    "EnvironmentSnapshot",
    "FixtureHarness",
    "SandboxEnvironment",
    "deploy_faucet_and_set_variables",
    "expect_equal",
    "expect_reverted",
    "load_fixture",
    "reset_fixtures",
]
