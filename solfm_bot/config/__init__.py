"""Config package"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if not value:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    # ============================================
    # TELEGRAM
    # ============================================
    TELEGRAM_BOT_TOKEN: str = ""
    # Empty list = answer every chat
    TELEGRAM_ALLOWED_CHAT_IDS: list[str] = field(default_factory=list)
    TELEGRAM_POLL_TIMEOUT_SEC: int = 30
    TELEGRAM_API_BASE: str = "https://api.telegram.org"

    # ============================================
    # ENDPOINTS
    # ============================================
    RPC_URL: str = "https://api.mainnet-beta.solana.com"
    SOLANAFM_API_BASE: str = "https://api.solana.fm"
    API_TIMEOUT_SEC: float = 20.0

    # ============================================
    # TRANSFER HISTORY
    # ============================================
    TRANSFERS_PAGE_SIZE: int = 100
    TRANSFERS_MAX_RESULTS: int = 1000
    # Older behaviour: drop transactions with any non-"Successful" instruction
    FILTER_FAILED_TRANSACTIONS: bool = False
    ACTIONS_LIMIT: int = 50

    # ============================================
    # TOKENS
    # ============================================
    TOKEN_CACHE_PATH: str = "./token-cache.json"

    # ============================================
    # PRESENTATION
    # ============================================
    EXPLORER_TX_LINK: str = "https://solana.fm/tx/{signature}"
    EXPLORER_ADDRESS_LINK: str = "https://solana.fm/address/{address}"
    DISPLAY_UTC_OFFSET_HOURS: int = 0

    # ============================================
    # LOGGING
    # ============================================
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            TELEGRAM_BOT_TOKEN=_env_str("TELEGRAM_BOT_TOKEN", ""),
            TELEGRAM_ALLOWED_CHAT_IDS=_env_list("TELEGRAM_ALLOWED_CHAT_IDS"),
            TELEGRAM_POLL_TIMEOUT_SEC=_env_int("TELEGRAM_POLL_TIMEOUT_SEC", 30),
            TELEGRAM_API_BASE=_env_str("TELEGRAM_API_BASE", "https://api.telegram.org"),
            RPC_URL=_env_str("RPC_URL", "https://api.mainnet-beta.solana.com"),
            SOLANAFM_API_BASE=_env_str("SOLANAFM_API_BASE", "https://api.solana.fm"),
            API_TIMEOUT_SEC=_env_float("API_TIMEOUT_SEC", 20.0),
            TRANSFERS_PAGE_SIZE=_env_int("TRANSFERS_PAGE_SIZE", 100),
            TRANSFERS_MAX_RESULTS=_env_int("TRANSFERS_MAX_RESULTS", 1000),
            FILTER_FAILED_TRANSACTIONS=_env_bool("FILTER_FAILED_TRANSACTIONS", False),
            ACTIONS_LIMIT=_env_int("ACTIONS_LIMIT", 50),
            TOKEN_CACHE_PATH=_env_str("TOKEN_CACHE_PATH", "./token-cache.json"),
            EXPLORER_TX_LINK=_env_str("EXPLORER_TX_LINK", "https://solana.fm/tx/{signature}"),
            EXPLORER_ADDRESS_LINK=_env_str(
                "EXPLORER_ADDRESS_LINK", "https://solana.fm/address/{address}"
            ),
            DISPLAY_UTC_OFFSET_HOURS=_env_int("DISPLAY_UTC_OFFSET_HOURS", 0),
            LOG_DIR=_env_str("LOG_DIR", "logs"),
            LOG_LEVEL=_env_str("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
