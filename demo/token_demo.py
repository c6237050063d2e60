#!/usr/bin/env python3
# demo/token_demo.py
#
# Token demo: private and public mint/transfer against a running PXE.
#
# Overview:
#   1) connect to the PXE and print the chain id,
#   2) list the registered accounts,
#   3) mint 20 tokens privately for the first account: lock them under a
#      secret hash, register the pending note with the PXE, redeem it with
#      the secret,
#   4) transfer 1 token privately from the first to the second account,
#   5) mint 100 tokens publicly for the first account and print the
#      unencrypted log the mint emitted.
#
#   Every step blocks until the PXE answers; any failure aborts the run.
#   Run it with a PXE at PXE_URL (default http://localhost:8080) and an
#   addresses.json naming the deployed token in the working directory.

import json
import os
import sys

# Add project root to sys.path
THIS_FILE = os.path.abspath(__file__)
THIS_DIR = os.path.dirname(THIS_FILE)
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from acct import get_initial_test_accounts_wallets
from client.core import create_pxe_client
from contracts.token import get_token
from notes import ExtendedNote, Fr, Note, compute_secret_hash
from tools import get_pxe_url

PRIVATE_MINT_AMOUNT = 20
PRIVATE_TRANSFER_AMOUNT = 1
PUBLIC_MINT_AMOUNT = 100
LOG_TEXT_LIMIT = 200

PENDING_SHIELDS_SLOT = "pending_shields"
TRANSPARENT_NOTE = "TransparentNote"


def show_accounts(pxe):
    accounts = pxe.get_registered_accounts()
    print("User accounts:\n" + "\n".join(str(a.address) for a in accounts))
    return accounts


def _show_balances(pxe, method_name, addresses_path=None):
    token = get_token(pxe, addresses_path)
    accounts = pxe.get_registered_accounts()

    balances = {}
    for account in accounts:
        method = getattr(token.methods, method_name)
        balance = method(account.address).simulate()
        print(f"Balance of {account.address}: {balance}")
        balances[str(account.address)] = balance
    return balances


def show_private_balances(pxe, addresses_path=None):
    return _show_balances(pxe, "balance_of_private", addresses_path)


def show_public_balances(pxe, addresses_path=None):
    return _show_balances(pxe, "balance_of_public", addresses_path)


def mint_private_funds(pxe, addresses_path=None, amount=PRIVATE_MINT_AMOUNT, secret=None):
    """
    Mint `amount` into the owner's private balance:
    mint_private locks it under hash(secret), the pending note is handed to
    the PXE, and redeem_shield claims it with the secret itself.
    Returns the redeem receipt.
    """
    print("Minting private funds")
    owner = get_initial_test_accounts_wallets(pxe, 1)[0]
    print(f"Owner address: {owner.get_address()}")
    token = get_token(owner, addresses_path)
    print(f"Token address: {token.address}")

    show_private_balances(pxe, addresses_path)

    if secret is None:
        secret = Fr.random()
    print(f"Minting {amount} with secret {secret}")
    secret_hash = compute_secret_hash(secret)
    print(f"Secret hash: {secret_hash}")

    receipt = token.methods.mint_private(amount, secret_hash).send().wait()
    print(f"Receipt: {receipt.to_json()}")

    storage_slot = token.artifact.storage_slot(PENDING_SHIELDS_SLOT)
    note_type_id = token.artifact.note_type_id(TRANSPARENT_NOTE)

    note = Note([Fr(amount), secret_hash])
    extended_note = ExtendedNote(
        note,
        owner.get_address(),
        token.address,
        storage_slot,
        note_type_id,
        receipt.tx_hash,
    )
    print(f"Adding note: {extended_note}")
    pxe.add_note(extended_note)

    print("Redeeming shield")
    redeem_receipt = token.methods.redeem_shield(owner.get_address(), amount, secret).send().wait()

    show_private_balances(pxe, addresses_path)
    return redeem_receipt


def transfer_private_funds(pxe, addresses_path=None, amount=PRIVATE_TRANSFER_AMOUNT):
    owner, recipient = get_initial_test_accounts_wallets(pxe, 2)
    token = get_token(owner, addresses_path)

    tx = token.methods.transfer(owner.get_address(), recipient.get_address(), amount, 0).send()
    print(f"Sent transfer transaction {tx.get_tx_hash()}")
    show_private_balances(pxe, addresses_path)

    print("Awaiting transaction to be mined")
    receipt = tx.wait()
    print(f"Transaction has been mined on block {receipt.block_number}")
    show_private_balances(pxe, addresses_path)
    return receipt


def mint_public_funds(pxe, addresses_path=None, amount=PUBLIC_MINT_AMOUNT):
    """
    Mint `amount` publicly, then print the unencrypted logs of the newest
    block. Returns the printed log lines.
    """
    owner = get_initial_test_accounts_wallets(pxe, 1)[0]
    token = get_token(owner, addresses_path)

    tx = token.methods.mint_public(owner.get_address(), amount).send()
    print(f"Sent mint transaction {tx.get_tx_hash()}")
    show_public_balances(pxe, addresses_path)

    print("Awaiting transaction to be mined")
    receipt = tx.wait()
    print(f"Transaction has been mined on block {receipt.block_number}")
    show_public_balances(pxe, addresses_path)

    block_number = pxe.get_block_number()
    logs = pxe.get_unencrypted_logs(block_number, 1)
    text_logs = [log.to_human_readable()[:LOG_TEXT_LIMIT] for log in logs]
    for log in text_logs:
        print(f"Log emitted: {log}")
    return text_logs


def main(pxe_url=None, session=None, addresses_path=None):
    if pxe_url is None:
        pxe_url = get_pxe_url()
    pxe = create_pxe_client(pxe_url, session=session)
    info = pxe.get_node_info()
    print(f"Connected to chain {info.get('l1ChainId')}")

    print("⚽️SHOW ACCOUNTS")
    show_accounts(pxe)

    print("⚽️SHOW PRIVATE BALANCES")
    mint_private_funds(pxe, addresses_path)

    print("⚽️TRANSFER PRIVATE FUNDS")
    transfer_private_funds(pxe, addresses_path)

    print("⚽️SHOW PUBLIC BALANCES")
    mint_public_funds(pxe, addresses_path)


def run(argv=None, session=None):
    """
    Process entry point. The demo takes no flags; argv is accepted only so
    stray arguments are reported instead of ignored.
    Returns the exit code: 0 on success, 1 on any error.
    """
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        print("Error in app: token-demo takes no arguments, got " + json.dumps(argv), file=sys.stderr)
        return 1
    try:
        main(session=session)
    except Exception as err:
        print(f"Error in app: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
