from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from solfm_bot.config import Settings
from solfm_bot.constants import TELEGRAM_MAX_MESSAGE_LEN
from solfm_bot.core.command_processor import CommandProcessor

POLL_ERROR_BACKOFF_SEC = 5.0


class TelegramBot:
    """Long-polls the Bot API and answers commands in the chat they came from."""

    def __init__(
        self,
        settings: Settings,
        processor: CommandProcessor,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.processor = processor
        self.token = settings.TELEGRAM_BOT_TOKEN
        self.base_url = f"{settings.TELEGRAM_API_BASE.rstrip('/')}/bot{self.token}"
        # Long polls hold the request open for up to the poll timeout
        timeout = settings.API_TIMEOUT_SEC + settings.TELEGRAM_POLL_TIMEOUT_SEC
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logging.getLogger("solfm_bot.telegram")
        self._last_update_id = 0

    async def close(self) -> None:
        await self.client.aclose()

    async def run(self) -> None:
        self.logger.info("Starting command bot...")
        while True:
            if not await self.poll_once():
                await asyncio.sleep(POLL_ERROR_BACKOFF_SEC)

    async def poll_once(self) -> bool:
        """Fetch and handle one batch of updates. False when the poll itself failed."""
        updates = await self._get_updates()
        if updates is None:
            return False
        for update in updates:
            try:
                await self.handle_update(update)
            except Exception as e:
                # One bad update must not stop the loop
                self.logger.exception(f"Failed to handle update {update.get('update_id')}: {e}")
        return True

    async def handle_update(self, update: dict[str, Any]) -> None:
        update_id = update.get("update_id")
        if isinstance(update_id, int) and update_id >= self._last_update_id:
            self._last_update_id = update_id + 1

        message = update.get("message")
        if not isinstance(message, dict):
            return
        text = message.get("text")
        chat_id = (message.get("chat") or {}).get("id")
        if not isinstance(text, str) or not self._is_allowed_chat(chat_id):
            return

        reply = await self.processor.handle_text(text)
        if reply:
            await self.send_message(chat_id, reply)

    async def send_message(self, chat_id: int | str, text: str) -> bool:
        ok = True
        for chunk in split_message(text):
            payload: dict[str, Any] = {
                "chat_id": chat_id,
                "text": chunk,
                "parse_mode": "MarkdownV2",
                "disable_web_page_preview": True,
            }
            data = await self._post("sendMessage", payload)
            if not (isinstance(data, dict) and data.get("ok")):
                ok = False
        self.logger.info("REPLY sent to chat %s (%d chars)", chat_id, len(text))
        return ok

    def _is_allowed_chat(self, chat_id: int | str | None) -> bool:
        if chat_id is None:
            return False
        allowed = self.settings.TELEGRAM_ALLOWED_CHAT_IDS
        return not allowed or str(chat_id) in allowed

    async def _get_updates(self) -> list[dict[str, Any]] | None:
        payload = {
            "timeout": self.settings.TELEGRAM_POLL_TIMEOUT_SEC,
            "offset": self._last_update_id,
            "allowed_updates": '["message"]',
        }
        data = await self._post("getUpdates", payload, method_type="get")
        if isinstance(data, dict) and isinstance(data.get("result"), list):
            return data["result"]
        return None

    async def _post(self, method: str, payload: dict[str, Any], method_type: str = "post") -> Any:
        url = f"{self.base_url}/{method}"
        try:
            if method_type == "get":
                response = await self.client.get(url, params=payload)
            else:
                response = await self.client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self.logger.warning("Telegram %s failed: %s", method, exc)
            return {}


def split_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE_LEN) -> list[str]:
    """Split on line boundaries so each chunk fits in one Telegram message."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
