# let's us swap/add providers without touching endpoint logic (google/newapi/openai...)
# declares the abstract provider contract (generate/list_models) that all providers implement

from abc import ABC, abstractmethod
from typing import List, Optional

from generator_api.schemas.generate import GenerateRequest
from generator_api.services.cleaner import clean
from generator_api.services.prompt import build_prompt


# base of every adapter-level failure; transport library errors never escape an adapter
class ProviderError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChannelError(ProviderError):
    """One channel of a multi-channel provider failed. Absorbed by the fallback."""

    def __init__(self, channel: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"[{channel}] {message}", status_code)
        self.channel = channel


class BackendError(ProviderError):
    """Terminal upstream failure, reported to the caller."""


class ConfigurationError(ProviderError):
    pass


class Provider(ABC):
    name: str = ""

    def __init__(self, default_model: str):
        self.default_model = default_model

    def resolve_model(self, model_name: Optional[str]) -> str:
        return model_name if model_name else self.default_model

    async def generate(self, request: GenerateRequest) -> str:
        model = self.resolve_model(request.model_name)
        system, user = build_prompt(request.prompt, request.output_mode)
        raw = await self.complete(system, user, model)
        return clean(raw, request.output_mode)

    @abstractmethod
    async def complete(self, system: str, user: str, model: str) -> str:
        """Send one prompt pair upstream and return the raw model text."""

    @abstractmethod
    async def list_models(self) -> List[str]:
        ...

    async def aclose(self) -> None:
        return None
