import logging
from dataclasses import dataclass
from typing import List

from generator_api.core.errors import ClientInputError, GenerationError
from generator_api.providers.base import ProviderError
from generator_api.providers.factory import ProviderKey, ProviderRegistry
from generator_api.schemas.generate import GenerateRequest, OutputMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    provider_used: str
    model_used: str
    content: str
    output_mode: OutputMode


@dataclass(frozen=True)
class ModelListing:
    provider: str
    models: List[str]


def _summarize(e: Exception) -> str:
    if isinstance(e, ProviderError):
        return str(e)
    # not an adapter error: keep the trace in the log, not in the response
    logger.exception("unexpected provider failure")
    return f"{type(e).__name__}: {e}"


async def handle_generate(registry: ProviderRegistry, request: GenerateRequest) -> GenerationResult:
    if not request.prompt or not request.prompt.strip():
        raise ClientInputError("Prompt must not be empty.")
    key = registry.lookup(request.provider_key or ProviderKey.GOOGLE.value)

    provider = registry.resolve(key.value)
    try:
        content = await provider.generate(request)
    except Exception as e:
        raise GenerationError(f"Generation failed: {_summarize(e)}") from e

    return GenerationResult(
        provider_used=key.value,
        model_used=provider.resolve_model(request.model_name),
        content=content,
        output_mode=request.output_mode,
    )


async def handle_models(registry: ProviderRegistry, provider_key: str) -> ModelListing:
    key = registry.lookup(provider_key)

    provider = registry.resolve(key.value)
    try:
        models = await provider.list_models()
    except Exception as e:
        raise GenerationError(f"Failed to list models: {_summarize(e)}") from e

    return ModelListing(provider=key.value, models=models)
