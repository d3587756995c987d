"""
Transaction Classifier

Reduces a transaction's transfer instructions to net balance changes for one
account, then labels the change pattern:

- nothing moved            -> None
- one token out            -> Spend
- one token in             -> Receive
- one token out, one in    -> Exchange
- anything else            -> Unknown
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from solfm_bot.core.models import (
    ActionContent,
    ActionMetadata,
    Exchange,
    NoChange,
    Receive,
    Spend,
    TokenAmount,
    Transaction,
    Unknown,
    UserAction,
)
from solfm_bot.core.token_registry import TokenRegistry

logger = logging.getLogger(__name__)


@dataclass
class TransactionSummary:
    """Net effect of one transaction on the subject account.

    Balances are signed base units: positive is an outflow from the
    subject, negative an inflow. Tokens that net to zero are removed.
    """
    hash: str
    balances: dict[str, int] = field(default_factory=dict)
    timestamp: int | None = None
    interact_with: list[str] = field(default_factory=list)

    def balance_change(self, token: str, amount: int) -> None:
        total = self.balances.get(token, 0) + amount
        if total:
            self.balances[token] = total
        else:
            self.balances.pop(token, None)

    def set_timestamp(self, timestamp: int) -> None:
        if self.timestamp is None:
            self.timestamp = timestamp
        elif self.timestamp != timestamp:
            logger.error(
                "incorrect timestamp in %s, expect %d, find %d",
                self.hash, self.timestamp, timestamp,
            )

    def add_counterparty(self, address: str) -> None:
        self.interact_with.append(address)

    def spends(self) -> dict[str, int]:
        return {token: amount for token, amount in self.balances.items() if amount > 0}

    def receives(self) -> dict[str, int]:
        return {token: -amount for token, amount in self.balances.items() if amount < 0}


def summarize_transaction(subject: str, transaction: Transaction) -> TransactionSummary:
    summary = TransactionSummary(hash=transaction.transaction_hash)

    for instruction in transaction.instructions:
        if instruction.token == "":
            continue

        summary.set_timestamp(instruction.timestamp)

        if not instruction.action.is_transfer:
            continue

        destination = instruction.destination
        if destination is None:
            logger.debug("Transfer without destination in %s", transaction.transaction_hash)
            continue

        if instruction.source == subject:
            summary.add_counterparty(destination)
            summary.balance_change(instruction.token, instruction.amount)
        elif destination == subject:
            summary.add_counterparty(instruction.source)
            summary.balance_change(instruction.token, -instruction.amount)

    return summary


async def _token_amount(amounts: dict[str, int], registry: TokenRegistry) -> TokenAmount:
    (address, amount), = amounts.items()
    token = await registry.lookup(address)
    return TokenAmount.of(token, amount)


async def classify_summary(summary: TransactionSummary, registry: TokenRegistry) -> UserAction:
    spends = summary.spends()
    receives = summary.receives()

    content: ActionContent
    if not spends and not receives:
        content = NoChange()
    elif not spends and len(receives) == 1:
        content = Receive(await _token_amount(receives, registry))
    elif len(spends) == 1 and not receives:
        content = Spend(await _token_amount(spends, registry))
    elif len(spends) == 1 and len(receives) == 1:
        content = Exchange(
            spend=await _token_amount(spends, registry),
            receive=await _token_amount(receives, registry),
        )
    else:
        content = Unknown()

    metadata = ActionMetadata(transaction_hash=summary.hash, timestamp=summary.timestamp)
    return UserAction(metadata=metadata, content=content)


async def classify_transaction(
    subject: str, transaction: Transaction, registry: TokenRegistry
) -> UserAction:
    return await classify_summary(summarize_transaction(subject, transaction), registry)


async def classify_transactions(
    subject: str, transactions: Iterable[Transaction], registry: TokenRegistry
) -> list[UserAction]:
    return [await classify_transaction(subject, tx, registry) for tx in transactions]
