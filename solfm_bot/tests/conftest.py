"""Shared fixtures and fakes for the solfm_bot tests."""

import os
import sys
from types import SimpleNamespace

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from solfm_bot.config import Settings
from solfm_bot.core.models import (
    ActionMetadata,
    Exchange,
    Instruction,
    InstructionAction,
    Receive,
    Token,
    TokenAmount,
    UserAction,
)
from solfm_bot.core.token_registry import TokenRegistry

USER = "HfcB5GVWnUvLsNGeGo9CZEYqVmy8QViZBRtRo4mjJeBe"
OTHER = "Cu5VRDQDnxSmSLUuRc2znNnxoCKJM9VEbXUTUKwUcHk9"
POOL = "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
JUP = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"

USDC_TOKEN = Token(name="USD Coin", symbol="USDC", address=USDC, decimals=6)
BONK_TOKEN = Token(name="Bonk", symbol="Bonk", address=BONK, decimals=5)


class FakeRpcClient:
    """Stands in for solana AsyncClient.get_account_info; keyed by address string."""

    def __init__(self, accounts=None, error=None):
        self.accounts = accounts or {}
        self.error = error
        self.calls = []
        self.closed = False

    async def get_account_info(self, pubkey):
        self.calls.append(str(pubkey))
        if self.error is not None:
            raise self.error
        data = self.accounts.get(str(pubkey))
        if data is None:
            return SimpleNamespace(value=None)
        return SimpleNamespace(value=SimpleNamespace(data=data))

    async def close(self):
        self.closed = True


def transfer(source, destination, token, amount, timestamp=1_700_000_000,
             action=InstructionAction.TRANSFER, status="Successful"):
    return Instruction(
        action=action,
        status=status,
        source=source,
        destination=destination,
        token=token,
        amount=amount,
        timestamp=timestamp,
    )


def amount(address, value):
    return TokenAmount(address=address, amount=value)


def exchange(spend, receive, ts, tx_hash="tx"):
    return UserAction(
        metadata=ActionMetadata(transaction_hash=tx_hash, timestamp=ts),
        content=Exchange(spend=spend, receive=receive),
    )


def receive(token, ts, tx_hash="tx"):
    return UserAction(
        metadata=ActionMetadata(transaction_hash=tx_hash, timestamp=ts),
        content=Receive(token),
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        TELEGRAM_BOT_TOKEN="123:abc",
        TOKEN_CACHE_PATH=str(tmp_path / "token-cache.json"),
        LOG_DIR=str(tmp_path / "logs"),
        TRANSFERS_PAGE_SIZE=2,
        TRANSFERS_MAX_RESULTS=10,
    )


@pytest.fixture
def rpc():
    return FakeRpcClient()


@pytest.fixture
def registry(settings, rpc):
    registry = TokenRegistry(settings, client=rpc)
    registry.add(USDC_TOKEN)
    registry.add(BONK_TOKEN)
    return registry


