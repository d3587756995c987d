from __future__ import annotations

import logging
from pathlib import Path

from solfm_bot.config import Settings


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours command traffic and failures."""

    GREY = "\x1b[90m"
    GREEN = "\x1b[92m"
    CYAN = "\x1b[96m"
    RED = "\x1b[91m"
    YELLOW = "\x1b[93m"
    RESET = "\x1b[0m"

    DATE_FMT = "%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR:
            color = self.RED
        elif record.levelno >= logging.WARNING:
            color = self.YELLOW
        else:
            color = self.GREY

        msg = str(record.msg)
        if "COMMAND" in msg:
            color = self.CYAN
        elif "REPLY" in msg and record.levelno < logging.WARNING:
            color = self.GREEN

        formatter = logging.Formatter(
            f"{color}%(asctime)s %(levelname)s %(name)s %(message)s{self.RESET}",
            datefmt=self.DATE_FMT,
        )
        return formatter.format(record)


def setup_logging(settings: Settings) -> None:
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "bot.log"

    # File Handler (Plain text, no colors)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColoredFormatter())

    logger = logging.getLogger()
    logger.setLevel(settings.LOG_LEVEL)

    # Remove existing handlers to avoid duplicates on reload
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    # Silence noisy HTTP libraries - only show WARNING and above
    for noisy in ("httpx", "httpcore", "hpack", "asyncio", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
