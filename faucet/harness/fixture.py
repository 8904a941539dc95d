"""Fixture loading with snapshot/restore.

A fixture group is identified by its builder function. The first time a
builder is loaded it runs once against a fresh sandbox and the sandbox is
snapshotted; every later load rewinds the sandbox to that snapshot and
hands back the same bundle. Scenarios therefore start from an identical
state without paying for construction each time.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from faucet.core.errors import FixtureError
from faucet.core.models import Identity
from faucet.core.value_store import ValueStore

from .environment import EnvironmentSnapshot, SandboxEnvironment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bundle:
    """Everything a faucet scenario needs, built once per fixture group."""

    store: ValueStore
    owner: Identity
    other: Identity
    sample_amount: int
    environment: SandboxEnvironment

    def __post_init__(self) -> None:
        """Validate bundle invariants on creation."""
        if self.owner == self.other:
            raise FixtureError("owner and other must be distinct identities")
        if self.sample_amount < 0:
            raise FixtureError(
                f"sample_amount must be non-negative, got {self.sample_amount}"
            )


FixtureBuilder: TypeAlias = Callable[[SandboxEnvironment], Awaitable[Any]]


async def deploy_faucet_and_set_variables(environment: SandboxEnvironment) -> Bundle:
    """Deploy a store from the first signer with no attached value.

    The second signer is the non-owner identity, and the sample amount is
    half of the withdrawal cap.
    """
    owner, other = environment.signers(2)
    store = await environment.deploy_store(owner)
    return Bundle(
        store=store,
        owner=owner,
        other=other,
        sample_amount=store.cap // 2,
        environment=environment,
    )


@dataclass
class _FixtureGroup:
    environment: SandboxEnvironment | None = None
    result: Any = None
    snapshot: EnvironmentSnapshot | None = None
    error: FixtureError | None = None


class FixtureHarness:
    """Builds each fixture group once and rewinds it before every load."""

    def __init__(
        self,
        environment_factory: Callable[[], SandboxEnvironment] = SandboxEnvironment,
    ):
        """Initialize the harness.

        Args:
            environment_factory: Creates the fresh sandbox each group is
                built in.
        """
        self._environment_factory = environment_factory
        self._groups: dict[FixtureBuilder, _FixtureGroup] = {}

    async def load_fixture(self, builder: FixtureBuilder) -> Any:
        """Return the builder's result with its sandbox at the snapshot.

        Raises:
            FixtureError: If the builder failed, now or on an earlier load.
                A failed group is never rebuilt.
        """
        group = self._groups.get(builder)
        if group is None:
            return await self._build(builder)
        if group.error is not None:
            raise group.error
        self.restore_to_snapshot(builder)
        return group.result

    def restore_to_snapshot(self, builder: FixtureBuilder) -> None:
        """Rewind a built group's sandbox to the state captured after build.

        Raises:
            FixtureError: If the group has not been built successfully.
        """
        group = self._groups.get(builder)
        if group is None or group.snapshot is None or group.environment is None:
            raise FixtureError(f"Fixture {_name(builder)} has not been built")
        group.environment.restore(group.snapshot)
        logger.debug(f"Restored fixture {_name(builder)} to its snapshot")

    def is_loaded(self, builder: FixtureBuilder) -> bool:
        return builder in self._groups

    def reset(self) -> None:
        """Forget every fixture group."""
        self._groups.clear()

    async def _build(self, builder: FixtureBuilder) -> Any:
        group = _FixtureGroup()
        self._groups[builder] = group
        try:
            group.environment = self._environment_factory()
            group.result = await builder(group.environment)
        except FixtureError as e:
            group.error = e
            logger.error(f"Fixture {_name(builder)} failed: {e}")
            raise
        except Exception as e:
            group.error = FixtureError(f"Fixture {_name(builder)} failed: {e}")
            logger.error(f"Fixture {_name(builder)} failed: {e}", exc_info=True)
            raise group.error from e

        group.snapshot = group.environment.snapshot()
        logger.info(
            f"Built fixture {_name(builder)}",
            extra={"stores": len(group.snapshot.stores)},
        )
        return group.result


def _name(builder: FixtureBuilder) -> str:
    return getattr(builder, "__qualname__", repr(builder))


_default_harness = FixtureHarness()


async def load_fixture(builder: FixtureBuilder) -> Any:
    """Load ``builder`` through the process-wide harness."""
    return await _default_harness.load_fixture(builder)


def reset_fixtures() -> None:
    """Forget every fixture group held by the process-wide harness."""
    _default_harness.reset()
