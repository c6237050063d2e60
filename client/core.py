#!/usr/bin/env python3
# client/core.py
# PXE client: JSON-RPC 2.0 over HTTP against a private execution environment.
# Every public method maps to exactly one RPC call and returns parsed records.

import itertools
import sys

import requests

from acct import Account
from blockchain import TxHash, TxReceipt, LogFilter, UnencryptedLog
from errors import NodeUnavailable, RpcError
from tools import get_pxe_url, get_request_timeout, short_hex

RPC_NAMESPACE = "pxe"


class PXEClient:
    """
    Thin RPC client for the PXE.

      - url: base URL of the PXE JSON-RPC endpoint.
      - session: anything with requests.Session's post(); a fresh Session
        is created when omitted.
      - timeout: per-request transport timeout in seconds; None (the
        default unless PXE_REQUEST_TIMEOUT is set) waits as long as the PXE
        takes, proving included. Waiting for a transaction to be mined is
        not bounded by it (see SentTx.wait).
    """

    def __init__(self, url=None, session=None, timeout=None):
        if url is None:
            url = get_pxe_url()
        if timeout is None:
            timeout = get_request_timeout()
        self.url = url
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self._ids = itertools.count(1)

    # ---------------- transport ----------------
    def _request(self, method, params=None):
        """
        Send one JSON-RPC request and return its result member.

        Transport failures raise NodeUnavailable; a JSON-RPC error member,
        an HTTP error status or an unparseable body raise RpcError.
        """
        full_method = RPC_NAMESPACE + "_" + method
        payload = {
            "jsonrpc": "2.0",
            "method": full_method,
            "params": params if params is not None else [],
            "id": next(self._ids),
        }
        print("[PXE] ->", full_method, file=sys.stderr)

        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NodeUnavailable(f"PXE at {self.url} is not reachable: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            if resp.status_code >= 400:
                raise RpcError(resp.status_code, f"HTTP {resp.status_code} from PXE")
            raise RpcError(-32700, "PXE returned a body that is not JSON")

        if not isinstance(body, dict):
            raise RpcError(-32600, "PXE returned a non-object JSON-RPC response")

        if "error" in body and body["error"]:
            err = body["error"]
            if not isinstance(err, dict):
                raise RpcError(-32603, str(err))
            raise RpcError(
                err.get("code", -1),
                err.get("message", "Unknown error"),
                err.get("data"),
            )

        if resp.status_code >= 400:
            raise RpcError(resp.status_code, f"HTTP {resp.status_code} from PXE")

        if "result" not in body:
            raise RpcError(-32603, "JSON-RPC response carries neither result nor error")

        return body["result"]

    # ---------------- node ----------------
    def get_node_info(self):
        info = self._request("getNodeInfo")
        if not isinstance(info, dict):
            raise RpcError(-32603, "getNodeInfo returned a non-object result")
        return info

    def get_block_number(self):
        return int(self._request("getBlockNumber"))

    # ---------------- accounts ----------------
    def get_registered_accounts(self):
        """
        Return the registered accounts in the order the PXE reports them.
        """
        raw = self._request("getRegisteredAccounts")
        if not isinstance(raw, list):
            raise RpcError(-32603, "getRegisteredAccounts returned a non-list result")
        accounts = [Account.from_dict(item) for item in raw]
        print("[PXE] registered accounts:", len(accounts), file=sys.stderr)
        return accounts

    # ---------------- notes ----------------
    def add_note(self, extended_note):
        """
        Register a note with the PXE's note store. Adding the same note
        twice is left to the PXE to accept or reject.
        """
        self._request("addNote", [extended_note.to_dict()])
        print("[PXE] note added for owner", short_hex(extended_note.owner.to_string()), file=sys.stderr)

    # ---------------- logs ----------------
    def get_unencrypted_logs(self, block_number, count):
        """
        Fetch unencrypted logs for `count` blocks starting at `block_number`.
        """
        log_filter = LogFilter.for_blocks(block_number, count)
        res = self._request("getUnencryptedLogs", [log_filter.to_dict()])
        if not isinstance(res, dict) or "logs" not in res:
            raise RpcError(-32603, "getUnencryptedLogs returned no logs member")
        if res.get("maxLogsHit"):
            print("[PXE][WARN] log query hit the node's limit; result truncated.", file=sys.stderr)
        return [UnencryptedLog.from_dict(item) for item in res["logs"]]

    # ---------------- transactions ----------------
    def view_tx(self, function_name, args, to, from_address=None):
        """
        Run an unconstrained (read-only) contract function and return its
        raw result.
        """
        params = [function_name, args, str(to)]
        if from_address is not None:
            params.append(str(from_address))
        return self._request("viewTx", params)

    def send_tx(self, request):
        """
        Submit a function call for proving and inclusion. The PXE signs on
        behalf of request["origin"]. Returns the TxHash as soon as the node
        accepts the transaction.
        """
        tx_hash = TxHash(self._request("sendTx", [request]))
        print("[PXE] tx accepted:", short_hex(tx_hash.to_string()), file=sys.stderr)
        return tx_hash

    def get_tx_receipt(self, tx_hash):
        raw = self._request("getTxReceipt", [str(TxHash(tx_hash))])
        return TxReceipt.from_dict(raw)


def create_pxe_client(url=None, session=None, timeout=None):
    """Create a PXEClient; no request is made until the first call."""
    return PXEClient(url=url, session=session, timeout=timeout)
