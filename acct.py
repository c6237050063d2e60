# acct.py
# Account handles and the wallets that send transactions on their behalf.

from notes import AztecAddress, Fr
from tools import short_hex


class Account:
    """
    A registered account as reported by the PXE.

    Design notes:
      - address is the only required field; public_key and partial_address
        are kept when the PXE reports them.
      - instances are never mutated after creation.
    """

    def __init__(self, address, public_key=None, partial_address=None):
        self.address = AztecAddress(address)
        self.public_key = public_key
        self.partial_address = None if partial_address is None else Fr(partial_address)

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, str):
            return cls(data)
        if not isinstance(data, dict) or "address" not in data:
            raise ValueError("account entry must carry an address")
        return cls(
            address=data["address"],
            public_key=data.get("publicKey"),
            partial_address=data.get("partialAddress"),
        )

    def __repr__(self):
        return "Account(" + short_hex(self.address.to_string()) + ")"


class AccountWallet:
    """
    An account bound to a PXE client. State-changing contract calls made
    through the wallet are sent with the account as origin; the PXE holds
    the account's keys and signs.
    """

    def __init__(self, client, account):
        self.client = client
        self.account = account

    def get_address(self):
        return self.account.address

    def __repr__(self):
        return "AccountWallet(" + short_hex(self.account.address.to_string()) + ")"


def get_initial_test_accounts_wallets(client, count=None):
    """
    Return wallets for the test accounts registered with the PXE, in the
    order the PXE lists them.
    Raise ValueError when fewer than `count` accounts are registered.
    """
    accounts = client.get_registered_accounts()
    if count is not None:
        if len(accounts) < count:
            raise ValueError(
                "expected at least %d registered accounts, PXE has %d" % (count, len(accounts))
            )
        accounts = accounts[:count]
    return [AccountWallet(client, a) for a in accounts]
