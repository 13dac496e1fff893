"""tests/conftest.py: shared fixtures for the signing test suite"""
import pytest
from eth_account import Account

TEST_PRIVATE_KEY = "0x0123456789012345678901234567890123456789012345678901234567890123"
SAMPLE_VAULT = "0x0000000000000000000000000000000000000001"

REFERENCE_NONCE = 1677777606040
REFERENCE_CONNECTION_ID = "0x0fcbeda5ae3c4950a548021552a4fea2226858c4453571bf3f24ba017eac2908"


@pytest.fixture
def private_key():
    return TEST_PRIVATE_KEY


@pytest.fixture
def wallet():
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def fresh_wallet():
    return Account.create()


@pytest.fixture
def reference_action():
    """ETH order (asset 4) used by the official SDK's phantom agent test"""
    return {
        "type": "order",
        "orders": [{
            "a": 4,
            "b": True,
            "p": "1670.1",
            "s": "0.0147",
            "r": False,
            "t": {"limit": {"tif": "Ioc"}},
        }],
        "grouping": "na",
    }


@pytest.fixture
def cancel_action():
    return {"type": "cancel", "cancels": [{"a": 0, "o": 123456}]}
