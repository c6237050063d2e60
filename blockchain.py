# blockchain.py
# Chain-side records returned by the PXE: tx hashes, receipts and
# unencrypted logs, plus their JSON wire form.

import json

from tools import turn_hex_str_to_bytes, short_hex


class TxHash:
    """
    32-byte transaction hash. Unlike field elements it may use the full
    byte range, so it is kept as bytes rather than as an Fr.
    """

    __slots__ = ("raw",)

    def __init__(self, value):
        if isinstance(value, TxHash):
            self.raw = value.raw
            return
        b = turn_hex_str_to_bytes(value)
        if len(b) != 32:
            raise ValueError("tx hash must be 32 bytes, got: " + str(len(b)))
        self.raw = b

    def to_string(self):
        return "0x" + self.raw.hex()

    def __eq__(self, other):
        if isinstance(other, TxHash):
            return self.raw == other.raw
        return NotImplemented

    def __hash__(self):
        return hash(self.raw)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return "TxHash(" + short_hex(self.to_string()) + ")"


class TxStatus:
    PENDING = "pending"
    MINED = "mined"
    DROPPED = "dropped"
    REVERTED = "reverted"

    ALL = (PENDING, MINED, DROPPED, REVERTED)


class TxReceipt:
    """
    Receipt of a sent transaction.

    Fields:
      - tx_hash: TxHash
      - status: one of TxStatus.ALL
      - error: str, reason reported by the node ("" when none)
      - block_number: int or None (None while pending)
      - block_hash: hex string or None
    """

    def __init__(self, tx_hash, status, error="", block_number=None, block_hash=None):
        if status not in TxStatus.ALL:
            raise ValueError("unknown tx status: " + repr(status))
        self.tx_hash = TxHash(tx_hash)
        self.status = status
        self.error = error or ""
        self.block_number = block_number
        self.block_hash = block_hash

    def to_dict(self):
        """
        Convert the receipt into a plain dictionary for printing or serialization.
        """
        d = {
            "txHash": self.tx_hash.to_string(),
            "status": self.status,
            "error": self.error,
        }
        if self.block_number is not None:
            d["blockNumber"] = self.block_number
        if self.block_hash is not None:
            d["blockHash"] = self.block_hash
        return d

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TypeError("receipt must be a JSON object")
        if "txHash" not in data or "status" not in data:
            raise ValueError("receipt missing txHash or status")
        block_number = data.get("blockNumber")
        if block_number is not None:
            block_number = int(block_number)
        return cls(
            tx_hash=data["txHash"],
            status=data["status"],
            error=data.get("error", ""),
            block_number=block_number,
            block_hash=data.get("blockHash"),
        )

    def to_json(self, indent=2):
        return json.dumps(self.to_dict(), indent=indent)


class LogFilter:
    """Block range [from_block, to_block) for unencrypted log queries."""

    def __init__(self, from_block, to_block):
        if from_block < 0 or to_block < from_block:
            raise ValueError("invalid block range: %d..%d" % (from_block, to_block))
        self.from_block = from_block
        self.to_block = to_block

    @classmethod
    def for_blocks(cls, block_number, count):
        return cls(block_number, block_number + count)

    def to_dict(self):
        return {"fromBlock": self.from_block, "toBlock": self.to_block}


class UnencryptedLog:
    """
    A public log emitted by a contract, tagged with its position
    (block number, tx index, log index).
    """

    def __init__(self, block_number, tx_index, log_index, contract_address, selector, data):
        self.block_number = block_number
        self.tx_index = tx_index
        self.log_index = log_index
        self.contract_address = contract_address
        self.selector = selector
        self.data = turn_hex_str_to_bytes(data)

    @classmethod
    def from_dict(cls, data):
        log_id = data.get("id", {})
        log = data.get("log", {})
        return cls(
            block_number=int(log_id.get("blockNumber", 0)),
            tx_index=int(log_id.get("txIndex", 0)),
            log_index=int(log_id.get("logIndex", 0)),
            contract_address=log.get("contractAddress", ""),
            selector=log.get("selector", ""),
            data=log.get("data", ""),
        )

    def to_dict(self):
        return {
            "id": {
                "blockNumber": self.block_number,
                "txIndex": self.tx_index,
                "logIndex": self.log_index,
            },
            "log": {
                "contractAddress": self.contract_address,
                "selector": self.selector,
                "data": "0x" + self.data.hex(),
            },
        }

    def _data_as_text(self):
        # Printable payloads are shown as text, anything else as hex.
        try:
            text = self.data.decode("utf-8")
        except UnicodeDecodeError:
            return "0x" + self.data.hex()
        if text and text.isprintable():
            return text
        return "0x" + self.data.hex()

    def to_human_readable(self):
        return (
            "logId: %d-%d-%d, UnencryptedL2Log(contractAddress: %s, selector: %s, data: %s)"
            % (
                self.block_number,
                self.tx_index,
                self.log_index,
                self.contract_address,
                self.selector,
                self._data_as_text(),
            )
        )
