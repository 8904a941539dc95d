"""Command-line interface adapters.

Provides CLI commands for driving a faucet in a local sandbox:
- accounts: List funded sandbox identities
- deploy: Deploy a new value store
- status: Report on the deployed store
- withdraw / withdraw_all / terminate: Call store operations as a caller
"""
