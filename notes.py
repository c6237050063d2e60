# notes.py
# Field elements, addresses and the note records registered with the PXE.
#
# Everything here is a plain value. Notes are built locally after a mint
# confirms and handed to the PXE through client.core.PXEClient.add_note;
# from then on the PXE's note store is the authority for them.

from __future__ import annotations

import hashlib
import os
from typing import List, Sequence, Union

from blockchain import TxHash
from tools import (
    FR_MODULUS,
    SECRET_HASH_GENERATOR_INDEX,
    parse_hex32,
    to_hex32,
    short_hex,
)

FieldLike = Union["Fr", int, str, bytes, bytearray]


class Fr:
    """
    Element of the BN254 scalar field.

    Accepts an int, a (0x-)hex string, 32 bytes or another Fr. Values must
    already be canonical: anything >= the modulus raises ValueError.
    """

    MODULUS = FR_MODULUS

    __slots__ = ("value",)

    def __init__(self, value: FieldLike = 0):
        if isinstance(value, Fr):
            v = value.value
        else:
            v = parse_hex32(value)
        if v < 0 or v >= self.MODULUS:
            raise ValueError("value out of field range: " + short_hex(hex(v)))
        self.value = v

    @classmethod
    def random(cls, rng=None) -> "Fr":
        """
        Uniform-ish random element: 256 random bits reduced modulo the field.
        Pass a random.Random instance as rng for a reproducible value.
        """
        if rng is None:
            rv = int.from_bytes(os.urandom(32), "big")
        else:
            rv = rng.getrandbits(256)
        return cls(rv % cls.MODULUS)

    @classmethod
    def zero(cls) -> "Fr":
        return cls(0)

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(32, "big")

    def to_string(self) -> str:
        return to_hex32(self.value)

    def is_zero(self) -> bool:
        return self.value == 0

    def __int__(self):
        return self.value

    def __index__(self):
        return self.value

    def __eq__(self, other):
        if isinstance(other, Fr):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((Fr, self.value))

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"{type(self).__name__}({short_hex(self.to_string())})"


class AztecAddress(Fr):
    """Account or contract address; a field element with its own type."""

    @classmethod
    def zero(cls) -> "AztecAddress":
        return cls(0)


def _chunk_mod_field(items: Sequence[Fr], block_size: int = 32) -> bytes:
    """
    Concatenate field elements as 32-byte big-endian blocks, reducing each
    block into the field (already canonical for Fr inputs).
    """
    blocks = []
    for it in items:
        reduced = int(it) % FR_MODULUS
        blocks.append(reduced.to_bytes(block_size, "big"))
    return b"".join(blocks)


def hash_fields(items: Sequence[FieldLike], generator_index: int = 0) -> Fr:
    """
    Hash a list of field elements into one field element.

    The generator index is absorbed first as its own block, so hashes taken
    for different purposes never collide on equal inputs. The digest is
    SHA-256 of the concatenated blocks, reduced modulo the field.
    """
    fields: List[Fr] = [Fr(generator_index)]
    for it in items:
        fields.append(Fr(it))
    message = _chunk_mod_field(fields)
    digest = hashlib.sha256(message).digest()
    digest_int = int.from_bytes(digest, "big")
    return Fr(digest_int % FR_MODULUS)


def compute_secret_hash(secret: FieldLike) -> Fr:
    """
    Hash of a shielding secret: sha256(be32(26) || be32(secret)) mod r.
    The same secret always gives the same hash, and redeem_shield only
    succeeds when the redeemed secret hashes to the value locked by
    mint_private. The PXE and the token contract must compute the very same
    hash; against a node that hashes secrets differently every redeem fails.
    """
    return hash_fields([secret], SECRET_HASH_GENERATOR_INDEX)


class Note:
    """Ordered list of field elements forming a note preimage."""

    def __init__(self, items: Sequence[FieldLike]):
        self.items = [Fr(it) for it in items]

    def to_dict(self):
        return {"items": [it.to_string() for it in self.items]}

    @classmethod
    def from_dict(cls, data) -> "Note":
        return cls(data["items"])

    def __eq__(self, other):
        if isinstance(other, Note):
            return self.items == other.items
        return NotImplemented

    def __len__(self):
        return len(self.items)

    def __str__(self):
        return "[" + ", ".join(short_hex(it.to_string()) for it in self.items) + "]"


class ExtendedNote:
    """
    A note plus everything the PXE needs to index it: the owner it belongs
    to, the contract and storage slot it lives in, the note type and the
    transaction that created it.
    """

    def __init__(self, note, owner, contract_address, storage_slot, note_type_id, tx_hash):
        if not isinstance(note, Note):
            raise TypeError("note must be a Note")
        self.note = note
        self.owner = AztecAddress(owner)
        self.contract_address = AztecAddress(contract_address)
        self.storage_slot = Fr(storage_slot)
        self.note_type_id = Fr(note_type_id)
        self.tx_hash = TxHash(tx_hash)

    def to_dict(self):
        return {
            "note": self.note.to_dict(),
            "owner": self.owner.to_string(),
            "contractAddress": self.contract_address.to_string(),
            "storageSlot": self.storage_slot.to_string(),
            "noteTypeId": self.note_type_id.to_string(),
            "txHash": str(self.tx_hash),
        }

    @classmethod
    def from_dict(cls, data) -> "ExtendedNote":
        return cls(
            note=Note.from_dict(data["note"]),
            owner=data["owner"],
            contract_address=data["contractAddress"],
            storage_slot=data["storageSlot"],
            note_type_id=data["noteTypeId"],
            tx_hash=data["txHash"],
        )

    def __str__(self):
        return (
            "ExtendedNote(note=" + str(self.note)
            + ", owner=" + short_hex(self.owner.to_string())
            + ", contract=" + short_hex(self.contract_address.to_string())
            + ", slot=" + short_hex(self.storage_slot.to_string())
            + ", type=" + short_hex(self.note_type_id.to_string())
            + ", tx=" + short_hex(str(self.tx_hash))
            + ")"
        )


__all__ = [
    "Fr",
    "AztecAddress",
    "Note",
    "ExtendedNote",
    "hash_fields",
    "compute_secret_hash",
]
