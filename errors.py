# errors.py
# Exceptions raised by the ledger client, the contract surface and the locator.

from typing import Any


class LedgerError(RuntimeError):
    """Base class for every failure reported while talking to the ledger."""


class NotFound(LedgerError):
    """A contract address file or one of its entries does not exist."""


class ArtifactMismatch(LedgerError):
    """A contract artifact cannot be parsed or lacks a requested member."""


class NodeUnavailable(LedgerError):
    """Raised when the PXE endpoint is not reachable."""


class RpcError(LedgerError):
    """Error returned by the RPC server."""

    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC Error {code}: {message}")


class TxDropped(LedgerError):
    """The node dropped a sent transaction."""


class TxReverted(LedgerError):
    """A sent transaction was included but its execution reverted."""


class TxTimeout(LedgerError):
    """A receipt wait with a positive timeout ran out."""
