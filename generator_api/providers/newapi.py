"""
OpenAI-compatible relay ("NewAPI") with two channels.

generate: the primary (free) channel is tried once when configured; whatever goes
wrong there is logged and the request moves to the secondary (VIP) channel, whose
failure is final. The channels are never called in parallel.

list_models: every configured channel is asked concurrently, each call bounded by
models_timeout; a failing channel contributes nothing.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from generator_api.core.config import ChannelCredentials, NewApiSettings
from generator_api.providers.base import BackendError, ChannelError, ConfigurationError, Provider

logger = logging.getLogger(__name__)

# the relay sits behind Cloudflare, which blocks non-browser agents
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class ChannelResult:
    channel: str
    text: Optional[str] = None
    error: Optional[ChannelError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def extract_content(body: str) -> str:
    # choices[0].message.content, or the raw body when it isn't there
    try:
        data = json.loads(body)
    except ValueError:
        return body
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return body
    return content if isinstance(content, str) else body


class NewApiProvider(Provider):
    name = "newapi"

    def __init__(self, settings: NewApiSettings):
        super().__init__(settings.default_model_id)
        self._channels: Dict[str, ChannelCredentials] = {c.tier_name: c for c in settings.channels()}
        self._temperature = settings.temperature
        self._timeout = httpx.Timeout(settings.timeout, connect=10.0)
        self._models_timeout = settings.models_timeout

    @property
    def channels(self) -> List[ChannelCredentials]:
        return list(self._channels.values())

    def _headers(self, channel: ChannelCredentials) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {channel.api_key}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    async def _attempt(self, channel: ChannelCredentials, payload: Dict[str, Any]) -> ChannelResult:
        url = f"{channel.base_url.rstrip('/')}/v1/chat/completions"
        tier = channel.tier_name
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.post(url, json=payload, headers=self._headers(channel))
        except httpx.HTTPError as e:
            return ChannelResult(tier, error=ChannelError(tier, f"HTTP error: {type(e).__name__}: {e}"))
        if not r.is_success:
            return ChannelResult(tier, error=ChannelError(tier, f"HTTP {r.status_code} - {r.text}", r.status_code))
        if not r.text.strip():
            return ChannelResult(tier, error=ChannelError(tier, "empty response body", r.status_code))
        return ChannelResult(tier, text=extract_content(r.text))

    async def complete(self, system: str, user: str, model: str) -> str:
        if not self._channels:
            raise ConfigurationError("NewAPI has no channel configured (set NEWAPI_FREE_API_KEY or NEWAPI_VIP_API_KEY)")

        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self._temperature,
        }

        failure: Optional[ChannelError] = None
        primary = self._channels.get("primary")
        if primary is not None:
            result = await self._attempt(primary, payload)
            if result.ok:
                return result.text or ""
            failure = result.error
            logger.warning("primary channel cannot serve '%s': %s -> switching to secondary", model, failure)

        secondary = self._channels.get("secondary")
        if secondary is None:
            raise BackendError(
                f"Primary channel failed and no secondary channel is configured: {failure}",
                failure.status_code if failure else None,
            )
        result = await self._attempt(secondary, payload)
        if result.error is not None:
            raise BackendError(str(result.error), result.error.status_code)
        return result.text or ""

    async def _fetch_models(self, channel: ChannelCredentials) -> List[str]:
        url = f"{channel.base_url.rstrip('/')}/v1/models"
        try:
            async with httpx.AsyncClient(timeout=self._models_timeout) as client:
                r = await asyncio.wait_for(client.get(url, headers=self._headers(channel)), self._models_timeout)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError, asyncio.TimeoutError) as e:
            logger.warning("%s channel failed to list models: %s: %s", channel.tier_name, type(e).__name__, e)
            return []
        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [str(item["id"]) for item in items if isinstance(item, dict) and item.get("id")]

    async def list_models(self) -> List[str]:
        batches = await asyncio.gather(*(self._fetch_models(c) for c in self.channels))
        models = sorted({m for batch in batches for m in batch})
        return models or [self.default_model]
