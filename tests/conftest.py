import json
import os
import sys

import pytest

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
for p in (THIS_DIR, PROJECT_ROOT):
    if p not in sys.path:
        sys.path.insert(0, p)

from fake_pxe import FakePXE, FakeSession, TOKEN_ADDRESS  # noqa: E402


@pytest.fixture
def fake_node():
    return FakePXE()


@pytest.fixture
def fake_session(fake_node):
    return FakeSession(fake_node)


@pytest.fixture
def addresses_file(tmp_path):
    path = tmp_path / "addresses.json"
    path.write_text(json.dumps({"token": TOKEN_ADDRESS}))
    return str(path)
