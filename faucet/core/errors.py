"""Error kinds raised by the faucet domain.

Every rejection raised by a ValueStore operation derives from
FaucetError and leaves the store exactly as it was before the call.
Invalid arguments (negative amounts, empty identities) are programmer
errors and raise ValueError instead.
"""


class FaucetError(Exception):
    """Base class for rejected faucet operations."""


class Unauthorized(FaucetError):
    """Raised when a non-owner calls an owner-gated operation."""

    def __init__(self, caller: str, owner: str, operation: str = ""):
        self.caller = caller
        self.owner = owner
        self.operation = operation
        action = f" {operation}" if operation else ""
        super().__init__(f"Caller {caller} is not the owner and cannot{action}")


class LimitExceeded(FaucetError):
    """Raised when a withdrawal request exceeds the per-call cap."""

    def __init__(self, requested: int, cap: int):
        self.requested = requested
        self.cap = cap
        super().__init__(
            f"Requested {requested} exceeds the withdrawal cap of {cap}"
        )


class TransferFailed(FaucetError):
    """Raised when the underlying value transfer could not be completed."""

    def __init__(self, sender: str, recipient: str, amount: int, reason: str = ""):
        self.sender = sender
        self.recipient = recipient
        self.amount = amount
        self.reason = reason
        message = f"Transfer of {amount} from {sender} to {recipient} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InsufficientFunds(TransferFailed):
    """Raised when an account cannot cover the requested amount."""

    def __init__(self, identity: str, available: int, requested: int, recipient: str = ""):
        self.identity = identity
        self.available = available
        self.requested = requested
        super().__init__(
            identity,
            recipient,
            requested,
            reason=f"insufficient funds (available {available})",
        )


class ObjectDestroyed(FaucetError):
    """Raised for any mutation attempted after the store was terminated."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Value store {address} has been terminated")


class FixtureError(Exception):
    """Raised when a fixture group cannot be built.

    This is a harness configuration error, not a faucet rejection, so it
    is intentionally not a FaucetError.
    """
