"""
Command Processor Module

Turns chat text into commands and runs them against the account report:
- /help
- /quiz <account> <days>
- /actions <account> <days>

Failures from the explorer API or bad arguments come back as a reply text,
never as an exception, so the chat loop keeps running.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from solfm_bot.core.account_report import AccountReport
from solfm_bot.core.formatting import build_error_message, build_help_message
from solfm_bot.exceptions import BotException, CommandException

logger = logging.getLogger(__name__)

BOT_DESCRIPTION = "These commands are supported:"
# Explorer history does not go back further than this
MAX_DAYS = 3650


class CommandType(Enum):
    """Types of commands that can be processed."""
    HELP = "help"
    QUIZ = "quiz"
    ACTIONS = "actions"


USAGES = {
    CommandType.HELP: "/help - Display this text.",
    CommandType.QUIZ: "/quiz <account> <days> - Show someone portfolio in the last x days.",
    CommandType.ACTIONS: "/actions <account> <days> - Show someone latest actions in the last x days.",
}


@dataclass
class Command:
    """Represents a command to be processed."""
    command_type: CommandType
    account: Optional[str] = None
    days: int = 0


def parse_command(text: str) -> Optional[Command]:
    """
    Parse a chat message into a Command.

    Returns:
        Command, or None when the text is not a command of ours

    Raises:
        CommandException: known command with bad arguments
    """
    parts = text.strip().split()
    if not parts or not parts[0].startswith("/"):
        return None

    # "/quiz@my_bot" -> "quiz"
    name = parts[0][1:].split("@", 1)[0].lower()
    try:
        command_type = CommandType(name)
    except ValueError:
        return None

    if command_type == CommandType.HELP:
        return Command(command_type=command_type)

    args = parts[1:]
    if len(args) != 2:
        raise CommandException(f"usage: {USAGES[command_type]}")
    account, days_text = args
    try:
        days = int(days_text)
    except ValueError:
        raise CommandException(f"days must be a number, got {days_text!r}") from None
    if days <= 0:
        raise CommandException("days must be positive")
    if days > MAX_DAYS:
        raise CommandException(f"days must be at most {MAX_DAYS}")
    return Command(command_type=command_type, account=account, days=days)


class CommandProcessor:
    """
    Dispatches parsed commands to the account report.

    Usage:
        processor = CommandProcessor(report)
        reply = await processor.handle_text("/quiz <account> 7")
    """

    def __init__(self, report: AccountReport):
        self.report = report

    async def handle_text(self, text: str) -> Optional[str]:
        """Return the MarkdownV2 reply for ``text``, or None if it is not a command."""
        try:
            cmd = parse_command(text)
            if cmd is None:
                return None
            return await self.process_command(cmd)
        except BotException as e:
            logger.error(f"Command failed: {e}")
            return build_error_message(e.message)

    async def process_command(self, cmd: Command) -> str:
        """Process a single command."""
        logger.info(f"COMMAND {cmd.command_type.value} account={cmd.account} days={cmd.days}")

        if cmd.command_type == CommandType.QUIZ:
            message = await self.report.quiz(cmd.account, cmd.days)
        elif cmd.command_type == CommandType.ACTIONS:
            message = await self.report.actions(cmd.account, cmd.days)
        else:
            message = build_help_message(BOT_DESCRIPTION, USAGES.values())

        logger.debug(message)
        return message
