"""
Alert Channels.

IAlertChannel implementations (one delivery attempt each) and the
uniform retry wrapper applied to every one of them.

CHANNELS:
- TelegramChannel        → Bot API ``sendMessage`` (HTML, metadata in <code>)
- SlackWebhookChannel    → text + section/context blocks
- DiscordWebhookChannel  → ``content`` truncated to 1900 chars
"""

from __future__ import annotations

import asyncio
import html
import json
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from signalgate.application.ports.alert_channel import ChannelResult, IAlertChannel
from signalgate.shared.logging.logger import get_logger

logger = get_logger("alert_channels")

DISCORD_MAX_CHARS = 1900


def _metadata_json(metadata: Dict[str, Any]) -> str:
    return json.dumps(metadata, indent=2, sort_keys=True, default=str)


class _HttpChannel(IAlertChannel):
    """Shared POST-JSON plumbing; subclasses build the body."""

    def __init__(self, url: str, timeout: float = 5.0, client: Optional[httpx.AsyncClient] = None):
        self._url = url
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    def build_body(self, text: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def send(self, text: str, metadata: Dict[str, Any]) -> ChannelResult:
        try:
            response = await self._client.post(self._url, json=self.build_body(text, metadata))
        except httpx.HTTPError as e:
            return ChannelResult(channel=self.name, ok=False, error=f"{type(e).__name__}: {e}")
        error = self.response_error(response)
        if error:
            return ChannelResult(channel=self.name, ok=False, error=error)
        return ChannelResult(channel=self.name, ok=True)

    def response_error(self, response: httpx.Response) -> Optional[str]:
        if response.status_code >= 400:
            return f"HTTP {response.status_code}"
        return None

    async def close(self) -> None:
        await self._client.aclose()


class TelegramChannel(_HttpChannel):
    name = "telegram"

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            f"https://api.telegram.org/bot{bot_token}/sendMessage", timeout=timeout, client=client,
        )
        self._chat_id = chat_id

    def build_body(self, text: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        body = html.escape(text, quote=False)
        if metadata:
            body += f"\n\n<code>{html.escape(_metadata_json(metadata), quote=False)}</code>"
        return {
            "chat_id": self._chat_id,
            "text": body,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

    def response_error(self, response: httpx.Response) -> Optional[str]:
        error = super().response_error(response)
        if error:
            return error
        # the Bot API can answer 200 with ok=false
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and payload.get("ok") is False:
            return payload.get("description") or "telegram ok=false"
        return None


class SlackWebhookChannel(_HttpChannel):
    name = "slack"

    def build_body(self, text: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        blocks = [{"type": "section", "text": {"type": "mrkdwn", "text": text}}]
        if metadata:
            blocks.append({
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"```{_metadata_json(metadata)}```"},
                ],
            })
        return {"text": text, "blocks": blocks}


class DiscordWebhookChannel(_HttpChannel):
    name = "discord"

    def build_body(self, text: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        content = text
        if metadata:
            content += f"\n```json\n{_metadata_json(metadata)}\n```"
        return {"content": content[:DISCORD_MAX_CHARS]}


class RetryingAlertChannel(IAlertChannel):
    """
    Retries any channel up to ``max_attempts`` times, sleeping
    ``delay × attempt`` between attempts. Returns the last result.
    """

    def __init__(
        self,
        channel: IAlertChannel,
        max_attempts: int = 3,
        delay_seconds: float = 0.3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._channel = channel
        self._max_attempts = max(1, max_attempts)
        self._delay = delay_seconds
        self._sleep = sleep
        self.name = channel.name

    async def send(self, text: str, metadata: Dict[str, Any]) -> ChannelResult:
        result = ChannelResult(channel=self.name, ok=False, error="not attempted")
        for attempt in range(1, self._max_attempts + 1):
            try:
                result = await self._channel.send(text, metadata)
            except Exception as e:
                logger.exception("Channel %s raised", self.name)
                result = ChannelResult(channel=self.name, ok=False, error=str(e))
            if result.ok:
                return result
            if attempt < self._max_attempts:
                logger.warning(
                    "Channel %s attempt %d/%d failed: %s",
                    self.name, attempt, self._max_attempts, result.error,
                )
                await self._sleep(self._delay * attempt)
        logger.error("Channel %s gave up after %d attempts: %s", self.name, self._max_attempts, result.error)
        return result

    async def close(self) -> None:
        close = getattr(self._channel, "close", None)
        if close is not None:
            await close()
