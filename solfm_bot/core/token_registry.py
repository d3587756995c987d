"""
Token Registry

Resolves mint addresses to display metadata (symbol, decimals).

Lookup order:
- In-memory map, seeded from the JSON token cache file
- On-chain: SPL mint account (decimals) and Metaplex metadata PDA (name, symbol)
- Placeholder (short address, "Unknown", 0 decimals) when both fail

Usage:
    registry = TokenRegistry(settings, AsyncClient(settings.RPC_URL))
    registry.load()
    token = await registry.lookup(mint)
    ...
    await registry.save()
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey

from solfm_bot.config import Settings
from solfm_bot.constants import (
    METADATA_HEADER_LEN,
    MINT_DECIMALS_OFFSET,
    SOL_DECIMALS,
    SOL_TOKEN,
    TOKEN_METADATA_PROGRAM,
)
from solfm_bot.core.models import Token

RPC_ERRORS = (SolanaRpcException, RPCException)

SOL = Token(name="Wrapped SOL", symbol="SOL", address=SOL_TOKEN, decimals=SOL_DECIMALS)


def metadata_address(mint: Pubkey) -> Pubkey:
    pda, _ = Pubkey.find_program_address(
        [b"metadata", bytes(TOKEN_METADATA_PROGRAM), bytes(mint)],
        TOKEN_METADATA_PROGRAM,
    )
    return pda


def decode_mint_decimals(data: bytes) -> int:
    if len(data) <= MINT_DECIMALS_OFFSET:
        raise ValueError(f"mint account too short ({len(data)} bytes)")
    return data[MINT_DECIMALS_OFFSET]


def decode_metadata(data: bytes) -> tuple[str, str]:
    """Return (name, symbol) from a Metaplex metadata account."""
    offset = METADATA_HEADER_LEN

    def read_str() -> str:
        nonlocal offset
        if offset + 4 > len(data):
            raise ValueError("metadata account truncated")
        length = int.from_bytes(data[offset:offset + 4], "little")
        offset += 4
        if offset + length > len(data):
            raise ValueError("metadata string overruns account")
        value = data[offset:offset + length].decode("utf-8", errors="ignore")
        offset += length
        return value.rstrip("\x00")

    name = read_str()
    symbol = read_str()
    return name, symbol


def _account_bytes(resp: Any) -> bytes | None:
    value = getattr(resp, "value", None)
    if value is None:
        return None
    return bytes(value.data)


class TokenRegistry:
    """Process-wide token metadata cache, shared by every command."""

    def __init__(self, settings: Settings, client: AsyncClient | None = None) -> None:
        self.settings = settings
        self.client = client or AsyncClient(settings.RPC_URL, timeout=settings.API_TIMEOUT_SEC)
        self.cache_path = Path(settings.TOKEN_CACHE_PATH)
        self.logger = logging.getLogger("solfm_bot.tokens")
        self._tokens: dict[str, Token] = {SOL.address: SOL}
        self._lock = asyncio.Lock()

    async def close(self) -> None:
        await self.client.close()

    def __len__(self) -> int:
        return len(self._tokens)

    def add(self, token: Token) -> None:
        self._tokens[token.address] = token

    def load(self) -> int:
        """Seed the in-memory map from the cache file."""
        if not self.cache_path.exists():
            self.logger.info("No token cache found at %s", self.cache_path)
            return 0
        with open(self.cache_path, "r", encoding="utf-8") as f:
            token_list = json.load(f)
        for item in token_list:
            token = Token.from_dict(item)
            if token.address:
                self.add(token)
        self.logger.info("Loading %d tokens from cache", len(token_list))
        return len(token_list)

    async def save(self) -> int:
        async with self._lock:
            token_list = sorted(self._tokens.values(), key=lambda t: t.address)
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump([t.to_dict() for t in token_list], f, indent=2)
            self.logger.info("Saving %d tokens into cache", len(token_list))
            return len(token_list)

    async def lookup(self, address: str) -> Token:
        # Held across the network round trip so concurrent commands serialize
        async with self._lock:
            token = self._tokens.get(address)
            if token is not None:
                return token

            self.logger.debug("Lookup token on chain: %s", address)
            token = await self._fetch_token(address)
            self._tokens[address] = token
            return token

    async def _fetch_token(self, address: str) -> Token:
        token = Token.placeholder(address)
        try:
            mint = Pubkey.from_string(address)
        except ValueError as exc:
            self.logger.error("Invalid mint address %s: %s", address, exc)
            return token

        try:
            data = _account_bytes(await self.client.get_account_info(mint))
            if data is None:
                self.logger.error("Mint account not found for token: %s", address)
            else:
                token.decimals = decode_mint_decimals(data)
                self.logger.debug("Decimal: %d", token.decimals)
        except RPC_ERRORS + (ValueError,) as exc:
            self.logger.error("Failed to fetch mint info for token: %s, err: %s", address, exc)

        try:
            data = _account_bytes(await self.client.get_account_info(metadata_address(mint)))
            if data is None:
                self.logger.error("Metadata account not found for token: %s", address)
            else:
                token.name, token.symbol = decode_metadata(data)
                self.logger.debug("Name: %s, Symbol: %s", token.name, token.symbol)
        except RPC_ERRORS + (ValueError,) as exc:
            self.logger.error("Failed to fetch metadata for mint token: %s, err: %s", address, exc)

        return token
