"""CLI command implementations for driving a faucet in a sandbox.

This adapter maps CLI commands (deploy, withdraw, withdraw_all, terminate,
status) onto a ValueStore running in a SandboxEnvironment. The caller of
each command is picked from the sandbox identity pool. It handles
CLI-specific argument parsing and error reporting.
"""

import logging
from typing import Any

from faucet.core.errors import FaucetError
from faucet.core.models import Identity, format_units, parse_units
from faucet.core.value_store import ValueStore
from faucet.harness.environment import SandboxEnvironment

logger = logging.getLogger(__name__)


def parse_amount(value: int | str) -> int:
    """Interpret a CLI amount.

    Integers are base units; strings are display units, e.g. ``"0.05"``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, int):
        return value
    return parse_units(value)


class CLICommandHandler:
    """Handles CLI commands against a sandbox and its deployed store.

    Every command returns a dictionary with ``status`` set to
    ``"success"`` or ``"error"``; rejections never escape as exceptions.
    """

    def __init__(self, environment: SandboxEnvironment, deploy_value: int = 0):
        """Initialize the CLI command handler.

        Args:
            environment: Sandbox supplying the ledger and caller identities.
            deploy_value: Default base units attached on deploy.
        """
        self.environment = environment
        self.deploy_value = deploy_value
        self.store: ValueStore | None = None

    def resolve_caller(self, caller: int | str) -> Identity:
        """Map a signer index or address onto a sandbox identity.

        Raises:
            ValueError: If the caller is not part of the sandbox.
        """
        accounts = self.environment.accounts
        if isinstance(caller, str) and caller.isdigit():
            caller = int(caller)
        if isinstance(caller, int) and not isinstance(caller, bool):
            if not 0 <= caller < len(accounts):
                raise ValueError(
                    f"Signer index {caller} out of range (0-{len(accounts) - 1})"
                )
            return accounts[caller]
        if caller in accounts:
            return caller
        raise ValueError(f"Unknown caller: {caller}")

    async def accounts(self) -> dict[str, Any]:
        """List sandbox identities with their balances."""
        entries = []
        for index, account in enumerate(self.environment.accounts):
            balance = await self.environment.balance_of(account)
            entries.append(
                {"index": index, "address": account, "balance": format_units(balance)}
            )
        return {"status": "success", "operation": "accounts", "accounts": entries}

    async def deploy(
        self, caller: int | str = 0, value: int | str | None = None
    ) -> dict[str, Any]:
        """Deploy a new store, replacing the current one.

        Args:
            caller: Signer index or address of the owner.
            value: Amount attached to the deployment.

        Returns:
            Dictionary with status and the new store's details.
        """
        try:
            owner = self.resolve_caller(caller)
            attached = self.deploy_value if value is None else parse_amount(value)
            self.store = await self.environment.deploy_store(owner, attached)
        except (FaucetError, ValueError) as e:
            return self._error("deploy", e)

        logger.info(f"Deployed store {self.store.address}", extra={"owner": owner})
        return {
            "status": "success",
            "operation": "deploy",
            "message": f"Store deployed at {self.store.address}",
            **self._describe(self.store),
        }

    async def status(self) -> dict[str, Any]:
        """Report on the current store."""
        if self.store is None:
            return self._no_store("status")
        return {"status": "success", "operation": "status", **self._describe(self.store)}

    async def withdraw(
        self, caller: int | str, amount: int | str, value: int | str = 0
    ) -> dict[str, Any]:
        """Withdraw ``amount`` from the store as ``caller``."""
        if self.store is None:
            return self._no_store("withdraw")
        try:
            identity = self.resolve_caller(caller)
            requested = parse_amount(amount)
            await self.store.withdraw(identity, requested, parse_amount(value))
        except (FaucetError, ValueError) as e:
            return self._error("withdraw", e)
        return {
            "status": "success",
            "operation": "withdraw",
            "message": f"Withdrew {format_units(requested)} to {identity}",
            **self._describe(self.store),
        }

    async def withdraw_all(self, caller: int | str) -> dict[str, Any]:
        """Drain the store to its owner as ``caller``."""
        if self.store is None:
            return self._no_store("withdraw_all")
        try:
            receipt = await self.store.withdraw_all(self.resolve_caller(caller))
        except (FaucetError, ValueError) as e:
            return self._error("withdraw_all", e)
        return {
            "status": "success",
            "operation": "withdraw_all",
            "message": f"Returned {format_units(receipt.amount)} to the owner",
            **self._describe(self.store),
        }

    async def terminate(self, caller: int | str) -> dict[str, Any]:
        """Terminate the store as ``caller``."""
        if self.store is None:
            return self._no_store("terminate")
        try:
            receipt = await self.store.terminate(self.resolve_caller(caller))
        except (FaucetError, ValueError) as e:
            return self._error("terminate", e)
        return {
            "status": "success",
            "operation": "terminate",
            "message": f"Store terminated, {format_units(receipt.amount)} returned to the owner",
            **self._describe(self.store),
        }

    async def balance(self, identity: int | str) -> dict[str, Any]:
        """Report the ledger balance of a sandbox identity or the store."""
        try:
            if self.store is not None and identity == self.store.address:
                account = self.store.address
            else:
                account = self.resolve_caller(identity)
        except ValueError as e:
            return self._error("balance", e)
        amount = await self.environment.balance_of(account)
        return {
            "status": "success",
            "operation": "balance",
            "address": account,
            "balance": format_units(amount),
            "balance_base_units": amount,
        }

    def _describe(self, store: ValueStore) -> dict[str, Any]:
        return {
            "address": store.address,
            "owner": store.owner,
            "balance": format_units(store.balance),
            "cap": format_units(store.cap),
            "store_status": store.status.value,
        }

    def _error(self, operation: str, error: Exception) -> dict[str, Any]:
        logger.error(f"Failed to {operation}: {error}")
        return {
            "status": "error",
            "operation": operation,
            "error": type(error).__name__,
            "message": str(error),
        }

    def _no_store(self, operation: str) -> dict[str, Any]:
        return {
            "status": "error",
            "operation": operation,
            "message": "No store deployed. Run 'deploy' first.",
        }


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler bound to a sandbox.
        command: Command name.
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized, ``args`` is not a
            mapping, or a required argument is missing.
    """
    if not isinstance(args, dict):
        raise ValueError(f"Arguments for {command} must be an object, got {type(args).__name__}")

    if command == "accounts":
        return await handler.accounts()

    elif command == "deploy":
        return await handler.deploy(args.get("caller", 0), args.get("value"))

    elif command == "status":
        return await handler.status()

    elif command == "withdraw":
        _require(args, "caller", "amount")
        return await handler.withdraw(args["caller"], args["amount"], args.get("value", 0))

    elif command == "withdraw_all":
        _require(args, "caller")
        return await handler.withdraw_all(args["caller"])

    elif command == "terminate":
        _require(args, "caller")
        return await handler.terminate(args["caller"])

    elif command == "balance":
        _require(args, "address")
        return await handler.balance(args["address"])

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")


def _require(args: dict[str, Any], *names: str) -> None:
    for name in names:
        if name not in args:
            raise ValueError(f"Missing required parameter: {name}")
