import asyncio
import logging

from solfm_bot.config import get_settings
from solfm_bot.core.account_report import AccountReport
from solfm_bot.core.command_processor import CommandProcessor
from solfm_bot.core.telegram_bot import TelegramBot
from solfm_bot.core.token_registry import TokenRegistry
from solfm_bot.core.transfers_client import SolanaFmClient
from solfm_bot.exceptions import ConfigurationException
from solfm_bot.utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def async_main() -> None:
    settings = get_settings()
    setup_logging(settings)
    if not settings.TELEGRAM_BOT_TOKEN:
        raise ConfigurationException("TELEGRAM_BOT_TOKEN is required")

    registry = TokenRegistry(settings)
    registry.load()
    transfers_client = SolanaFmClient(settings)
    report = AccountReport(settings, transfers_client, registry)
    bot = TelegramBot(settings, CommandProcessor(report))

    try:
        await bot.run()
    finally:
        await registry.save()
        await bot.close()
        await transfers_client.close()
        await registry.close()
        logger.info("Shutdown complete")


def main() -> None:
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user.")


if __name__ == "__main__":
    main()
