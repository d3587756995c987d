from __future__ import annotations

import logging
import re
from typing import Iterable

from solfm_bot.config import Settings
from solfm_bot.core.models import QuizEntry, Token, TokenAmount, UserAction
from solfm_bot.utils.time import format_timestamp

logger = logging.getLogger(__name__)

# Characters Telegram MarkdownV2 reserves outside of code spans
_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")
_LINK_SPECIAL = re.compile(r"([)\\])")

UNPARSED_TIME = "unparsed time"
EMPTY_ACTIONS = "No actions found in this period."
EMPTY_QUIZ = "No SOL trades found in this period."


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def _link(label: str, url: str) -> str:
    escaped_url = _LINK_SPECIAL.sub(r"\\\1", url)
    return f"[{escape_markdown(label)}]({escaped_url})"


def tx_link(settings: Settings, signature: str) -> str:
    return settings.EXPLORER_TX_LINK.format(signature=signature)


def address_link(settings: Settings, address: str) -> str:
    return settings.EXPLORER_ADDRESS_LINK.format(address=address)


def build_action_line(settings: Settings, action: UserAction) -> str:
    timestamp = action.metadata.timestamp
    date = UNPARSED_TIME
    if timestamp is not None:
        try:
            date = format_timestamp(timestamp, settings.DISPLAY_UTC_OFFSET_HOURS)
        except (OverflowError, ValueError, OSError):
            logger.warning(
                "Unrenderable timestamp %s in %s", timestamp, action.metadata.transaction_hash
            )
    link = _link(date, tx_link(settings, action.metadata.transaction_hash))
    return f"{link}: {escape_markdown(action.content.describe())}"


def build_quiz_line(settings: Settings, entry: QuizEntry, sol: Token, token: Token) -> str:
    sol_amount = TokenAmount.of(sol, entry.sol_delta)
    other_amount = TokenAmount.of(token, entry.other_delta)
    link = _link(other_amount.short_address(), address_link(settings, entry.address))
    return (
        f"{link}: {escape_markdown(sol_amount.describe())}"
        f" vs {escape_markdown(other_amount.describe())}"
    )


def build_actions_message(settings: Settings, actions: Iterable[UserAction]) -> str:
    lines = [build_action_line(settings, action) for action in actions]
    return "\n".join(lines) if lines else escape_markdown(EMPTY_ACTIONS)


def build_quiz_message(
    settings: Settings, rows: Iterable[tuple[QuizEntry, Token]], sol: Token
) -> str:
    lines = [build_quiz_line(settings, entry, sol, token) for entry, token in rows]
    return "\n".join(lines) if lines else escape_markdown(EMPTY_QUIZ)


def build_help_message(bot_description: str, usages: Iterable[str]) -> str:
    lines = [bot_description, ""]
    lines.extend(usages)
    return escape_markdown("\n".join(lines))


def build_error_message(text: str) -> str:
    return escape_markdown(f"Error: {text}")
