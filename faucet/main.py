"""Composition root for the faucet.

This module is the ONLY location that wires core domain logic to
concrete adapters. All wiring of dependencies happens here, creating a
clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Sandbox and adapter instantiation
- Entry point selection (interactive CLI or scripted demo)
"""

import asyncio
import json
import logging
import sys
from typing import Any

from faucet.adapters.cli.commands import CLICommandHandler, run_command
from faucet.config import Settings, load_settings
from faucet.harness.environment import SandboxEnvironment


def _parse_command_line(command_line: str) -> tuple[str, dict[str, Any]]:
    """Split ``command {"json": "args"}`` into a command name and arguments.

    Raises:
        ValueError: If the arguments are not a JSON object.
    """
    command, _, args_str = command_line.partition(" ")
    args_str = args_str.strip()
    try:
        args = json.loads(args_str) if args_str else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON arguments: {e.msg}") from e
    if not isinstance(args, dict):
        raise ValueError("Arguments must be a JSON object, e.g. {\"caller\": 0}")
    return command.lower(), args


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Read commands from stdin until ``exit`` or EOF and print each result.

    Bad input and failed commands are reported as error results; the
    loop only ends on ``exit`` or EOF.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")
    loop = asyncio.get_running_loop()

    while True:
        try:
            # input() blocks, so it runs off the event loop
            command_line = (await loop.run_in_executor(None, input, "faucet> ")).strip()
        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue

        if not command_line:
            continue
        if command_line.lower() == "exit":
            logger.info("Exiting CLI")
            break
        if command_line.lower() == "help":
            _print_cli_help()
            continue

        try:
            command, args = _parse_command_line(command_line)
            result = await run_command(cli_handler, command, args)
        except ValueError as e:
            result = {"status": "error", "message": str(e)}
        except Exception as e:
            logger.error(f"Command execution error: {e}", exc_info=True)
            result = {"status": "error", "message": str(e)}
        print(json.dumps(result, indent=2, default=str))


async def _run_demo(cli_handler: CLICommandHandler) -> list[dict[str, Any]]:
    """Run a scripted walk through the store lifecycle and print each result."""
    steps: list[tuple[str, dict[str, Any]]] = [
        ("deploy", {"caller": 0, "value": "0.2"}),
        ("withdraw", {"caller": 1, "amount": "1", "value": "1"}),
        ("withdraw", {"caller": 1, "amount": "0.05"}),
        ("withdraw_all", {"caller": 1}),
        ("withdraw_all", {"caller": 0}),
        ("terminate", {"caller": 0}),
        ("withdraw", {"caller": 0, "amount": "0.05"}),
    ]
    results = []
    for command, args in steps:
        result = await run_command(cli_handler, command, args)
        print(json.dumps({"command": command, "args": args, **result}, indent=2))
        results.append(result)
    return results


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  Amounts given as strings are display units ("0.05"); integers are
  base units (1 unit = 10**18 base units). Callers are signer indexes
  or sandbox addresses.

  accounts
    List sandbox identities and their balances.

    Example: accounts

  deploy
    Deploy a new store. Optional: caller (default 0), value

    Example: deploy {"caller": 0, "value": "0.2"}

  status
    Show the deployed store.

  withdraw
    Withdraw up to the cap. Required: caller, amount. Optional: value

    Example: withdraw {"caller": 1, "amount": "0.05"}

  withdraw_all
    Drain the store to its owner. Required: caller

    Example: withdraw_all {"caller": 0}

  terminate
    Drain and permanently disable the store. Required: caller

    Example: terminate {"caller": 0}

  balance
    Show a ledger balance. Required: address (signer index or address)

    Example: balance {"address": 1}

  help
    Show this help message.

  exit
    Exit the CLI.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_cli_handler(settings: Settings) -> CLICommandHandler:
    """Wire a sandbox and a CLI handler from settings."""
    environment = SandboxEnvironment(
        account_count=settings.sandbox_account_count,
        initial_balance=settings.sandbox_initial_balance,
        cap=settings.withdraw_cap,
    )
    return CLICommandHandler(environment, deploy_value=settings.deploy_value)


async def bootstrap() -> None:
    """Load configuration, wire the sandbox, and start the application.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Create the sandbox and CLI handler
    4. Select and start run mode

    Raises:
        SystemExit: On an unknown run mode
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading faucet sandbox...")

    # Step 3: Wire the sandbox
    cli_handler = build_cli_handler(settings)
    logger.info(
        f"Sandbox ready with {settings.sandbox_account_count} funded identities",
        extra={"withdraw_cap": settings.withdraw_cap},
    )

    # Step 4: Select run mode and start
    logger.info(f"Starting in {settings.run_mode} mode...")

    if settings.run_mode == "cli":
        await _run_cli_interactive(cli_handler)
    elif settings.run_mode == "demo":
        await _run_demo(cli_handler)
    else:
        logger.error(f"Unknown run mode: {settings.run_mode}")
        sys.exit(1)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
