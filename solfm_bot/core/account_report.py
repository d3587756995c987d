"""
Account Report

Runs one report end to end: fetch transfers -> classify -> aggregate -> render.

Usage:
    report = AccountReport(settings, SolanaFmClient(settings), registry)
    text = await report.quiz(account, days=7)
"""
from __future__ import annotations

import logging
from collections import Counter

from solfm_bot.config import Settings
from solfm_bot.constants import SOL_TOKEN
from solfm_bot.core.aggregator import aggregate_actions, sorted_entries
from solfm_bot.core.classifier import classify_transactions
from solfm_bot.core.formatting import build_actions_message, build_quiz_message
from solfm_bot.core.models import ActionKind, UserAction
from solfm_bot.core.token_registry import TokenRegistry
from solfm_bot.core.transfers_client import SolanaFmClient
from solfm_bot.utils.time import trailing_window

# Extra transactions fetched for /actions to make up for hidden unparsed no-ops
ACTIONS_FETCH_HEADROOM = 10


class AccountReport:
    def __init__(
        self,
        settings: Settings,
        transfers_client: SolanaFmClient,
        registry: TokenRegistry,
    ) -> None:
        self.settings = settings
        self.transfers_client = transfers_client
        self.registry = registry
        self.logger = logging.getLogger("solfm_bot.report")

    async def account_actions(
        self, account: str, from_ts: int, to_ts: int, limit: int | None = None
    ) -> list[UserAction]:
        """Classified actions for ``account`` in [from_ts, to_ts], newest first."""
        limit = limit or self.settings.TRANSFERS_MAX_RESULTS
        transactions = await self.transfers_client.account_transfers(account, from_ts, to_ts, limit)
        actions = await classify_transactions(account, transactions, self.registry)
        kinds = Counter(action.kind.value for action in actions)
        self.logger.info(
            "Classified %d transactions for %s: %s", len(actions), account[:8], dict(kinds)
        )
        return actions

    async def quiz(self, account: str, days: int, now: float | None = None) -> str:
        from_ts, to_ts = trailing_window(days, now)
        actions = await self.account_actions(account, from_ts, to_ts)

        # Fetched newest first, folded oldest first
        entries = sorted_entries(aggregate_actions(reversed(actions)))
        rows = [(entry, await self.registry.lookup(entry.address)) for entry in entries]
        sol = await self.registry.lookup(SOL_TOKEN)
        return build_quiz_message(self.settings, rows, sol)

    async def actions(self, account: str, days: int, now: float | None = None) -> str:
        from_ts, to_ts = trailing_window(days, now)
        limit = min(
            self.settings.ACTIONS_LIMIT + ACTIONS_FETCH_HEADROOM,
            self.settings.TRANSFERS_MAX_RESULTS,
        )
        actions = await self.account_actions(account, from_ts, to_ts, limit)
        # A no-op with no timestamp means nothing in the transaction was parsed
        visible = [
            action for action in actions
            if not (action.metadata.timestamp is None and action.kind == ActionKind.NONE)
        ]
        return build_actions_message(self.settings, visible[: self.settings.ACTIONS_LIMIT])
