import logging
from enum import Enum
from types import MappingProxyType
from typing import Callable, List, Mapping, Tuple

from generator_api.core.config import Settings
from generator_api.core.errors import UnsupportedProviderError
from generator_api.providers.base import BackendError, Provider, ProviderError

logger = logging.getLogger(__name__)


class ProviderKey(str, Enum):
    GOOGLE = "google"
    NEWAPI = "newapi"
    OPENAI = "openai"


class UnavailableProvider(Provider):
    """Takes the place of an adapter whose construction failed at startup."""

    def __init__(self, name: str, reason: str):
        super().__init__("")
        self.name = name
        self.reason = reason

    async def complete(self, system: str, user: str, model: str) -> str:
        raise BackendError(f"Adapter unavailable: {self.reason}")

    async def list_models(self) -> List[str]:
        raise BackendError(f"Adapter unavailable: {self.reason}")


class ProviderRegistry:
    """
    Fixed ProviderKey -> adapter map, built once and read-only afterwards.
    Every request for a key gets the same adapter instance.
    """

    def __init__(self, adapters: Mapping[ProviderKey, Provider]):
        self._adapters = MappingProxyType(dict(adapters))

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(sorted(k.value for k in self._adapters))

    def lookup(self, key: str) -> ProviderKey:
        normalized = (key or "").strip().lower()
        try:
            provider_key = ProviderKey(normalized)
        except ValueError:
            raise UnsupportedProviderError(key, self.keys) from None
        if provider_key not in self._adapters:
            raise UnsupportedProviderError(key, self.keys)
        return provider_key

    def resolve(self, key: str) -> Provider:
        return self._adapters[self.lookup(key)]

    async def aclose(self) -> None:
        for key, adapter in self._adapters.items():
            try:
                await adapter.aclose()
            except Exception:
                logger.exception("closing the %s adapter failed", key.value)


def _construct(key: ProviderKey, build: Callable[[], Provider]) -> Provider:
    try:
        return build()
    except ProviderError as e:
        logger.error("%s adapter unavailable: %s", key.value, e)
        return UnavailableProvider(key.value, str(e))


def build_registry(settings: Settings) -> ProviderRegistry:
    from generator_api.providers.gemini import GeminiProvider
    from generator_api.providers.newapi import NewApiProvider
    from generator_api.providers.stub import EchoProvider

    return ProviderRegistry({
        ProviderKey.GOOGLE: _construct(ProviderKey.GOOGLE, lambda: GeminiProvider(settings.gemini)),
        ProviderKey.NEWAPI: _construct(ProviderKey.NEWAPI, lambda: NewApiProvider(settings.newapi)),
        ProviderKey.OPENAI: EchoProvider(),
    })
