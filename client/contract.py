#!/usr/bin/env python3
# client/contract.py
# Callable contract handles.
#
#   token = Contract.at(address, artifact, wallet)
#   token.methods.balance_of_private(addr).simulate()       -> viewTx
#   sent = token.methods.mint_public(addr, 100).send()      -> sendTx
#   sent.get_tx_hash(); receipt = sent.wait()               -> getTxReceipt polling

import sys
import time

from blockchain import TxHash, TxStatus
from errors import TxDropped, TxReverted, TxTimeout
from notes import AztecAddress, Fr
from tools import parse_hex32, short_hex

DEFAULT_WAIT_INTERVAL = 1.0


def encode_arg(value):
    """
    Convert a Python argument into its JSON-RPC form: field elements and
    addresses become 0x-hex strings, ints and bools pass through.
    """
    if isinstance(value, (Fr, TxHash)):
        return value.to_string()
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value < 0:
            raise ValueError("negative integers cannot be encoded as field arguments")
        return value
    if isinstance(value, (list, tuple)):
        return [encode_arg(v) for v in value]
    if isinstance(value, str):
        return Fr(value).to_string()
    raise TypeError(f"cannot encode contract argument of type {type(value).__name__}")


def decode_return(value, return_types):
    """
    Decode a view result. Single field/integer returns come back as int;
    anything else is handed back untouched.
    """
    if len(return_types) != 1:
        return value
    kind = return_types[0].get("kind")
    if kind in ("field", "integer") and isinstance(value, (str, int)) and not isinstance(value, bool):
        return parse_hex32(value)
    return value


def _split_wallet(wallet_or_client):
    # A wallet exposes get_address() and carries its client.
    if hasattr(wallet_or_client, "get_address"):
        return wallet_or_client.client, wallet_or_client
    return wallet_or_client, None


class SentTx:
    """A transaction accepted by the PXE, not necessarily mined yet."""

    def __init__(self, client, tx_hash):
        self.client = client
        self.tx_hash = TxHash(tx_hash)

    def get_tx_hash(self):
        return self.tx_hash

    def get_receipt(self):
        return self.client.get_tx_receipt(self.tx_hash)

    def wait(self, timeout=0, interval=DEFAULT_WAIT_INTERVAL):
        """
        Poll the receipt until the transaction leaves the pending state.

          - timeout=0 waits forever; a positive timeout raises TxTimeout.
          - dropped transactions raise TxDropped, reverted ones TxReverted.
        Returns the mined TxReceipt.
        """
        deadline = None
        if timeout and timeout > 0:
            deadline = time.monotonic() + timeout

        while True:
            receipt = self.get_receipt()
            if receipt.status == TxStatus.MINED:
                print(
                    "[CONTRACT] tx", short_hex(self.tx_hash.to_string()),
                    "mined in block", receipt.block_number, file=sys.stderr,
                )
                return receipt
            if receipt.status == TxStatus.DROPPED:
                raise TxDropped(f"transaction {self.tx_hash} dropped: {receipt.error}")
            if receipt.status == TxStatus.REVERTED:
                raise TxReverted(f"transaction {self.tx_hash} reverted: {receipt.error}")
            if deadline is not None and time.monotonic() >= deadline:
                raise TxTimeout(f"transaction {self.tx_hash} still pending after {timeout}s")
            time.sleep(interval)


class ContractFunctionInteraction:
    """One bound call: contract + function + encoded arguments."""

    def __init__(self, contract, function, args):
        expected = len(function.parameters)
        if len(args) != expected:
            raise ValueError(
                "%s expects %d arguments (%s), got %d"
                % (function.name, expected, ", ".join(function.parameter_names()), len(args))
            )
        self.contract = contract
        self.function = function
        self.args = [encode_arg(a) for a in args]

    def simulate(self):
        """
        Evaluate an unconstrained function on the PXE and return its decoded
        result. State-changing functions are only reachable through send().
        """
        if not self.function.is_unconstrained():
            raise ValueError(f"{self.function.name} is not unconstrained; use send()")
        from_address = None
        if self.contract.wallet is not None:
            from_address = self.contract.wallet.get_address()
        raw = self.contract.client.view_tx(
            self.function.name, self.args, self.contract.address, from_address
        )
        return decode_return(raw, self.function.return_types)

    def request(self):
        if self.contract.wallet is None:
            raise ValueError(f"{self.function.name}: sending requires a wallet, not a bare client")
        return {
            "origin": self.contract.wallet.get_address().to_string(),
            "to": self.contract.address.to_string(),
            "functionName": self.function.name,
            "args": self.args,
        }

    def send(self):
        """
        Submit the call as a transaction. Returns a SentTx as soon as the
        PXE accepts it; call wait() on it for the receipt.
        """
        if self.function.is_unconstrained():
            raise ValueError(f"{self.function.name} is unconstrained; use simulate()")
        tx_hash = self.contract.client.send_tx(self.request())
        return SentTx(self.contract.client, tx_hash)


class ContractMethods:
    def __init__(self, contract):
        self._contract = contract

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        function = self._contract.artifact.get_function(name)

        def bind(*args):
            return ContractFunctionInteraction(self._contract, function, args)

        return bind


class Contract:
    """
    Handle to a deployed contract: its address, its artifact and the wallet
    (or bare client, for read-only use) calls go through.
    """

    def __init__(self, address, artifact, wallet_or_client):
        self.address = AztecAddress(address)
        self.artifact = artifact
        self.client, self.wallet = _split_wallet(wallet_or_client)
        self.methods = ContractMethods(self)

    @classmethod
    def at(cls, address, artifact, wallet_or_client):
        return cls(address, artifact, wallet_or_client)

    def __repr__(self):
        return f"Contract({self.artifact.name}@{short_hex(self.address.to_string())})"


__all__ = [
    "Contract",
    "ContractFunctionInteraction",
    "SentTx",
    "encode_arg",
    "decode_return",
]
