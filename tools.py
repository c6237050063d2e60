# tools.py
# Shared helpers: hex conversion, field constants and runtime configuration.

import os

DEFAULT_PXE_URL = "http://localhost:8080"
DEFAULT_ADDRESSES_FILE = "addresses.json"
# None: requests waits for the PXE as long as it takes
DEFAULT_REQUEST_TIMEOUT = None

# BN254 scalar field modulus (the field notes and secrets live in)
FR_MODULUS = int(
    "30644e72e131a029b85045b68181585d2833e84879b9709143e1f593f0000001",
    16
)

# Domain separator for secret hashing
SECRET_HASH_GENERATOR_INDEX = 26


# ==========================================================
# Configuration
# ==========================================================
def get_pxe_url(environ=None) -> str:
    """
    Return the PXE base URL from PXE_URL, falling back to the local default.
    """
    if environ is None:
        environ = os.environ
    url = environ.get("PXE_URL", "").strip()
    if not url:
        return DEFAULT_PXE_URL
    return url


def get_addresses_file(environ=None) -> str:
    if environ is None:
        environ = os.environ
    path = environ.get("ADDRESSES_FILE", "").strip()
    if not path:
        return DEFAULT_ADDRESSES_FILE
    return path


def get_request_timeout(environ=None):
    """
    Per-request HTTP timeout in seconds (PXE_REQUEST_TIMEOUT), or None when
    the variable is unset. Proving happens inside sendTx, so calls are
    unbounded unless a timeout is asked for.
    Raise ValueError if the variable is set but is not a positive number.
    """
    if environ is None:
        environ = os.environ
    raw = environ.get("PXE_REQUEST_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError("PXE_REQUEST_TIMEOUT must be a number, got: " + repr(raw))
    if value <= 0:
        raise ValueError("PXE_REQUEST_TIMEOUT must be positive, got: " + repr(raw))
    return value


# ==========================================================
# Utility functions
# ==========================================================
def turn_hex_str_to_bytes(s) -> bytes:
    """
    Convert bytes or a hex string (with or without 0x prefix) into bytes.
    Raise ValueError if the input is an invalid hex string.
    """
    if isinstance(s, (bytes, bytearray)):
        return bytes(s)

    if not isinstance(s, str):
        raise TypeError("turn_hex_str_to_bytes only accepts str or bytes")

    s2 = s.strip()
    if s2.startswith(("0x", "0X")):
        s2 = s2[2:]
    if len(s2) % 2 != 0:
        raise ValueError("hex string length must be even")
    try:
        return bytes.fromhex(s2)
    except ValueError as e:
        raise ValueError("invalid hex string: " + repr(e))


def to_hex32(value: int) -> str:
    """
    Encode a non-negative integer as a 0x-prefixed 32-byte hex string.
    """
    if value < 0:
        raise ValueError("value must be non-negative")
    return "0x" + value.to_bytes(32, "big").hex()


def parse_hex32(s) -> int:
    """
    Parse a 32-byte value given as hex string, bytes or int.
    Shorter hex strings are left-padded; longer ones are rejected.
    """
    if isinstance(s, bool):
        raise TypeError("bool is not a field value")
    if isinstance(s, int):
        return s
    b = turn_hex_str_to_bytes(s)
    if len(b) > 32:
        raise ValueError("value longer than 32 bytes: " + str(len(b)))
    return int.from_bytes(b, "big")


def short_hex(h, prefix_len=8):
    """
    Return a shortened hex string like 0x1234abcd...9f0a.
    If h is bytes or bytearray, convert to hex string first.
    If h is not a string or hex string is already short, return as-is.
    """
    if isinstance(h, (bytes, bytearray)):
        s = bytes(h).hex()
    else:
        s = h

    if not isinstance(s, str):
        return s

    prefix = ""
    if s.startswith(("0x", "0X")):
        prefix = s[:2]
        s = s[2:]

    if len(s) <= prefix_len * 2:
        return prefix + s

    head = s[:prefix_len]
    tail = s[-4:]
    return prefix + head + "..." + tail
