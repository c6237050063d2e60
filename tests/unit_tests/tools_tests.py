#!/usr/bin/env python3
# tests/unit_tests/tools_tests.py
#
# Hex helpers and configuration lookup.

import os
import sys

import pytest

# Add project root to sys.path
THIS_FILE = os.path.abspath(__file__)
THIS_DIR = os.path.dirname(THIS_FILE)
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tools import (
    DEFAULT_PXE_URL,
    get_addresses_file,
    get_pxe_url,
    get_request_timeout,
    parse_hex32,
    short_hex,
    to_hex32,
    turn_hex_str_to_bytes,
)


def test_pxe_url_default_and_override():
    assert get_pxe_url({}) == DEFAULT_PXE_URL
    assert get_pxe_url({"PXE_URL": "  "}) == DEFAULT_PXE_URL
    assert get_pxe_url({"PXE_URL": "http://pxe:9000"}) == "http://pxe:9000"


def test_addresses_file_default_and_override():
    assert get_addresses_file({}) == "addresses.json"
    assert get_addresses_file({"ADDRESSES_FILE": "/tmp/a.json"}) == "/tmp/a.json"


def test_request_timeout_parsing():
    assert get_request_timeout({}) is None
    assert get_request_timeout({"PXE_REQUEST_TIMEOUT": "2.5"}) == 2.5
    with pytest.raises(ValueError):
        get_request_timeout({"PXE_REQUEST_TIMEOUT": "soon"})
    with pytest.raises(ValueError):
        get_request_timeout({"PXE_REQUEST_TIMEOUT": "0"})


def test_hex_to_bytes_accepts_prefix_and_rejects_odd_length():
    assert turn_hex_str_to_bytes("0x0102") == b"\x01\x02"
    assert turn_hex_str_to_bytes("0102") == b"\x01\x02"
    assert turn_hex_str_to_bytes(b"\x05") == b"\x05"
    with pytest.raises(ValueError):
        turn_hex_str_to_bytes("0x123")
    with pytest.raises(ValueError):
        turn_hex_str_to_bytes("zz")
    with pytest.raises(TypeError):
        turn_hex_str_to_bytes(12)


def test_hex32_round_trip_and_limits():
    h = to_hex32(255)
    assert h == "0x" + "00" * 31 + "ff"
    assert parse_hex32(h) == 255
    assert parse_hex32("0xff") == 255
    assert parse_hex32(7) == 7
    with pytest.raises(ValueError):
        parse_hex32("0x" + "11" * 33)
    with pytest.raises(TypeError):
        parse_hex32(True)
    with pytest.raises(ValueError):
        to_hex32(-1)


def test_short_hex_keeps_prefix():
    s = short_hex("0x" + "ab" * 32)
    assert s.startswith("0xabababab")
    assert s.endswith("...abab")
    assert short_hex("0x1234") == "0x1234"
    assert short_hex(b"\x01" * 32).startswith("01010101...")
    assert short_hex(None) is None


if __name__ == "__main__":
    sys.exit(pytest.main([THIS_FILE]))
