from __future__ import annotations

import logging
from typing import Any

import httpx

from solfm_bot.config import Settings
from solfm_bot.constants import TRANSFERS_PATH
from solfm_bot.core.models import Transaction
from solfm_bot.exceptions import FetchException, ParseException


class SolanaFmClient:
    """Pages through the solana.fm account transfer history."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.base_url = settings.SOLANAFM_API_BASE.rstrip("/")
        self.page_size = settings.TRANSFERS_PAGE_SIZE
        self.client = client or httpx.AsyncClient(timeout=settings.API_TIMEOUT_SEC)
        self.logger = logging.getLogger("solfm_bot.transfers")

    async def close(self) -> None:
        await self.client.aclose()

    async def account_transfers(
        self, account: str, from_ts: int, to_ts: int, limit: int
    ) -> list[Transaction]:
        """Return up to ``limit`` transactions for ``account``, newest first."""
        transactions: list[Transaction] = []
        page = 1
        while len(transactions) < limit:
            results = await self.get_page(account, from_ts, to_ts, page)
            transactions.extend(results)
            self.logger.debug(
                "Fetched page %d for %s: %d transactions", page, account[:8], len(results)
            )
            if len(results) < self.page_size:
                break
            page += 1

        if self.settings.FILTER_FAILED_TRANSACTIONS:
            before = len(transactions)
            transactions = [tx for tx in transactions if tx.is_successful()]
            if before != len(transactions):
                self.logger.info("Dropped %d unsuccessful transactions", before - len(transactions))

        return transactions[:limit]

    async def get_page(self, account: str, from_ts: int, to_ts: int, page: int) -> list[Transaction]:
        url = f"{self.base_url}{TRANSFERS_PATH.format(account=account)}"
        params: dict[str, Any] = {
            "utcFrom": int(from_ts),
            "utcTo": int(to_ts),
            "page": page,
            "limit": self.page_size,
        }
        payload = await self._request(url, params)
        return _parse_results(payload, page)

    async def _request(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self.logger.warning("solana.fm request failed for %s: %s", url, exc)
            raise FetchException("Transfer history request failed", url=url, error=exc) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise ParseException("Transfer history response is not JSON", url=url) from exc


def _parse_results(payload: Any, page: int) -> list[Transaction]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise ParseException("Transfer history response has no results", page=page)
    try:
        return [Transaction.from_dict(item) for item in results]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ParseException("Malformed transaction in transfer history", page=page, error=exc) from exc
