"""Folds classified actions into per-token SOL vs token totals for the quiz report."""
from __future__ import annotations

import logging
from typing import Iterable

from solfm_bot.core.models import Exchange, QuizEntry, Receive, UserAction

logger = logging.getLogger(__name__)


def _touch(entries: dict[str, QuizEntry], address: str, timestamp: int | None) -> QuizEntry:
    entry = entries.get(address)
    if entry is None:
        entry = entries[address] = QuizEntry(address=address)
    if timestamp is not None and timestamp > entry.last_timestamp:
        entry.last_timestamp = timestamp
    return entry


def aggregate_actions(
    actions: Iterable[UserAction], entries: dict[str, QuizEntry] | None = None
) -> dict[str, QuizEntry]:
    """Fold ``actions`` (oldest first) into ``entries`` and return it.

    Only SOL-priced trades count: a buy (SOL -> X) or sell (X -> SOL) moves
    both counters of X, a plain receive of X moves its token counter.
    Spends, no-ops, unknowns and swaps without exactly one SOL leg are
    ignored.
    """
    if entries is None:
        entries = {}

    for action in actions:
        content = action.content
        timestamp = action.metadata.timestamp

        if isinstance(content, Exchange):
            spend, receive = content.spend, content.receive
            if spend.is_sol() and not receive.is_sol():
                # buy
                entry = _touch(entries, receive.address, timestamp)
                entry.sol_delta -= spend.amount
                entry.other_delta += receive.amount
            elif not spend.is_sol() and receive.is_sol():
                # sell
                entry = _touch(entries, spend.address, timestamp)
                entry.sol_delta += receive.amount
                entry.other_delta -= spend.amount
            else:
                logger.debug(
                    "Skipping non-SOL swap %s -> %s in %s",
                    spend.short_address(), receive.short_address(),
                    action.metadata.transaction_hash,
                )
        elif isinstance(content, Receive) and not content.token.is_sol():
            entry = _touch(entries, content.token.address, timestamp)
            entry.other_delta += content.token.amount

    return entries


def sorted_entries(entries: dict[str, QuizEntry]) -> list[QuizEntry]:
    """Active rows, most recently touched first."""
    active = [entry for entry in entries.values() if entry.has_activity()]
    return sorted(active, key=lambda e: e.last_timestamp, reverse=True)
