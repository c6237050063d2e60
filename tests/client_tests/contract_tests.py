#!/usr/bin/env python3
# tests/client_tests/contract_tests.py
#
# Contract handles: locating the token, simulate/send routing, argument
# checks and receipt waiting.

import json
import os
import sys

import pytest

# Add project root and tests dir to sys.path
THIS_FILE = os.path.abspath(__file__)
THIS_DIR = os.path.dirname(THIS_FILE)
TESTS_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
PROJECT_ROOT = os.path.abspath(os.path.join(TESTS_DIR, ".."))
for p in (TESTS_DIR, PROJECT_ROOT):
    if p not in sys.path:
        sys.path.insert(0, p)

from acct import get_initial_test_accounts_wallets
from blockchain import TxHash, TxStatus
from client.contract import encode_arg, decode_return
from client.core import PXEClient
from contracts.token import get_token, read_contract_address
from errors import ArtifactMismatch, NotFound, RpcError, TxDropped, TxReverted, TxTimeout
from fake_pxe import FakePXE, FakeSession, TOKEN_ADDRESS
from notes import AztecAddress, Fr

URL = "http://pxe.test:8080"


# -----------------------------------------------------------
# Contract locator
# -----------------------------------------------------------
def test_missing_token_entry_fails_before_any_rpc(tmp_path, fake_session, fake_node):
    path = tmp_path / "addresses.json"
    path.write_text(json.dumps({"other": TOKEN_ADDRESS}))
    client = PXEClient(URL, session=fake_session)

    with pytest.raises(NotFound):
        get_token(client, str(path))
    assert fake_session.posted == []
    assert fake_node.methods_seen == []


def test_missing_address_file_is_not_found(tmp_path, fake_session):
    client = PXEClient(URL, session=fake_session)
    with pytest.raises(NotFound):
        get_token(client, str(tmp_path / "nowhere.json"))
    assert fake_session.posted == []


def test_malformed_address_file(tmp_path):
    path = tmp_path / "addresses.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        read_contract_address("token", str(path))

    path.write_text(json.dumps({"token": "0xnothex"}))
    with pytest.raises(ValueError):
        read_contract_address("token", str(path))


def test_bad_artifact_raises_artifact_mismatch(tmp_path, addresses_file, fake_session):
    art = tmp_path / "broken.json"
    art.write_text("{]")
    client = PXEClient(URL, session=fake_session)
    with pytest.raises(ArtifactMismatch):
        get_token(client, addresses_file, artifact_path=str(art))


def test_token_handle(addresses_file, fake_session):
    client = PXEClient(URL, session=fake_session)
    token = get_token(client, addresses_file)
    assert token.address == AztecAddress(TOKEN_ADDRESS)
    assert token.wallet is None
    assert token.client is client
    with pytest.raises(ArtifactMismatch):
        token.methods.no_such_function


# -----------------------------------------------------------
# Interactions
# -----------------------------------------------------------
def test_encode_and_decode_helpers():
    assert encode_arg(Fr(3)) == Fr(3).to_string()
    assert encode_arg(5) == 5
    assert encode_arg(True) is True
    assert encode_arg("0x10") == Fr(16).to_string()
    assert encode_arg([1, Fr(2)]) == [1, Fr(2).to_string()]
    with pytest.raises(ValueError):
        encode_arg(-1)
    with pytest.raises(TypeError):
        encode_arg(1.5)

    assert decode_return("0x0a", [{"kind": "field"}]) == 10
    assert decode_return(7, [{"kind": "integer"}]) == 7
    assert decode_return(True, [{"kind": "boolean"}]) is True
    assert decode_return([1, 2], []) == [1, 2]


def test_simulate_decodes_balances(addresses_file, fake_session, fake_node):
    client = PXEClient(URL, session=fake_session)
    owner = fake_node.accounts[0]
    fake_node.private_balances[owner] = 12
    fake_node.public_balances[owner] = 34

    token = get_token(client, addresses_file)
    assert token.methods.balance_of_private(owner).simulate() == 12
    assert token.methods.balance_of_public(AztecAddress(owner)).simulate() == 34


def test_wrong_argument_count(addresses_file, fake_session):
    client = PXEClient(URL, session=fake_session)
    token = get_token(client, addresses_file)
    with pytest.raises(ValueError):
        token.methods.transfer(1, 2, 3)


def test_send_needs_wallet_and_constrained_function(addresses_file, fake_session):
    client = PXEClient(URL, session=fake_session)
    token = get_token(client, addresses_file)
    with pytest.raises(ValueError):
        token.methods.mint_public(0x1000, 5).send()

    wallet = get_initial_test_accounts_wallets(client, 1)[0]
    token = get_token(wallet, addresses_file)
    with pytest.raises(ValueError):
        token.methods.balance_of_public(0x1000).send()
    with pytest.raises(ValueError):
        token.methods.mint_public(0x1000, 5).simulate()


def test_send_request_shape_and_wait(addresses_file):
    node = FakePXE(polls_until_mined=2)
    session = FakeSession(node)
    client = PXEClient(URL, session=session)
    wallet = get_initial_test_accounts_wallets(client, 1)[0]
    token = get_token(wallet, addresses_file)

    sent = token.methods.mint_public(wallet.get_address(), 100).send()
    assert isinstance(sent.get_tx_hash(), TxHash)

    request = session.posted[-1][1]["params"][0]
    assert request["origin"] == wallet.get_address().to_string()
    assert request["to"] == AztecAddress(TOKEN_ADDRESS).to_string()
    assert request["functionName"] == "mint_public"
    assert request["args"] == [wallet.get_address().to_string(), 100]

    assert sent.get_receipt().status == TxStatus.PENDING
    receipt = sent.wait(interval=0)
    assert receipt.status == TxStatus.MINED
    assert receipt.block_number == node.block_number
    assert node.public_balance(wallet.get_address()) == 100


def test_wait_with_timeout_gives_up(addresses_file):
    node = FakePXE(polls_until_mined=10**6)
    client = PXEClient(URL, session=FakeSession(node))
    wallet = get_initial_test_accounts_wallets(client, 1)[0]
    token = get_token(wallet, addresses_file)

    sent = token.methods.mint_public(wallet.get_address(), 1).send()
    with pytest.raises(TxTimeout):
        sent.wait(timeout=0.05, interval=0.01)


def test_wait_raises_on_reverted_and_dropped(addresses_file):
    node = FakePXE()
    client = PXEClient(URL, session=FakeSession(node))
    wallet = get_initial_test_accounts_wallets(client, 1)[0]
    token = get_token(wallet, addresses_file)
    start_block = node.block_number

    node.fail_next_tx("reverted", "Assertion failed: caller is not minter")
    sent = token.methods.mint_public(wallet.get_address(), 5).send()
    with pytest.raises(TxReverted) as err:
        sent.wait(interval=0)
    assert "caller is not minter" in str(err.value)
    assert sent.get_receipt().block_number == start_block + 1

    node.fail_next_tx("dropped", "nullifier already spent")
    sent = token.methods.mint_public(wallet.get_address(), 5).send()
    with pytest.raises(TxDropped):
        sent.wait(interval=0)
    assert sent.get_receipt().block_number is None

    # neither tx took effect
    assert node.public_balance(wallet.get_address()) == 0
    assert node.logs == []

    # the next tx goes through normally
    token.methods.mint_public(wallet.get_address(), 5).send().wait(interval=0)
    assert node.public_balance(wallet.get_address()) == 5


def test_rejected_send_raises_rpc_error(addresses_file, fake_session):
    client = PXEClient(URL, session=fake_session)
    owner, recipient = get_initial_test_accounts_wallets(client, 2)
    token = get_token(owner, addresses_file)
    with pytest.raises(RpcError):
        token.methods.transfer(owner.get_address(), recipient.get_address(), 1, 0).send()


def test_too_few_accounts(fake_session):
    client = PXEClient(URL, session=fake_session)
    with pytest.raises(ValueError):
        get_initial_test_accounts_wallets(client, 10)


if __name__ == "__main__":
    sys.exit(pytest.main([THIS_FILE]))
