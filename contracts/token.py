#!/usr/bin/env python3
# contracts/token.py
# Locate the deployed token contract: address from the local address file,
# interface from the bundled artifact.

import json
import os
import sys

from client.artifact import load_contract_artifact_file
from client.contract import Contract
from errors import NotFound
from notes import AztecAddress
from tools import get_addresses_file, short_hex

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
TOKEN_ARTIFACT_PATH = os.path.join(THIS_DIR, "artifacts", "token-Token.json")
TOKEN_CONTRACT_NAME = "token"


def read_contract_address(name, addresses_path=None):
    """
    Read one contract address from the address file, a JSON object
    mapping contract names to 0x-hex addresses.

    Raise NotFound if the file or the entry is missing, ValueError if the
    file or the address text is malformed.
    """
    if addresses_path is None:
        addresses_path = get_addresses_file()

    try:
        with open(addresses_path, "r", encoding="utf-8") as f:
            addresses = json.load(f)
    except FileNotFoundError as e:
        raise NotFound(f"address file not found: {addresses_path}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"address file is not valid JSON: {addresses_path}: {e}") from e

    if not isinstance(addresses, dict):
        raise ValueError(f"address file must hold a JSON object: {addresses_path}")
    if name not in addresses or not addresses[name]:
        raise NotFound(f"no {name!r} entry in address file {addresses_path}")

    return AztecAddress(addresses[name])


def get_token(wallet_or_client, addresses_path=None, artifact_path=None):
    """
    Return a Contract handle for the token, bound to a wallet (for sends)
    or a bare client (read-only). No remote call is made.
    """
    address = read_contract_address(TOKEN_CONTRACT_NAME, addresses_path)
    if artifact_path is None:
        artifact_path = TOKEN_ARTIFACT_PATH
    artifact = load_contract_artifact_file(artifact_path)
    print("[LOCATOR]", artifact.name, "at", short_hex(address.to_string()), file=sys.stderr)
    return Contract.at(address, artifact, wallet_or_client)
