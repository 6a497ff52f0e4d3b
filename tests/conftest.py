import copy
import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from secret_mcp.metrics import default_metrics  # noqa: E402
from secret_mcp.wallets import default_wallets  # noqa: E402

RAW_PERMIT = {
    "params": {
        "permit_name": "p",
        "allowed_tokens": [],
        "permissions": ["balance"],
        "chain_id": "secret-4",
    },
    "signature": {
        "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": "AAA"},
        "signature": "BBB",
    },
}


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()


@pytest.fixture(autouse=True)
def reset_wallets():
    default_wallets.reset()
    yield
    default_wallets.reset()


@pytest.fixture
def raw_permit():
    return copy.deepcopy(RAW_PERMIT)
