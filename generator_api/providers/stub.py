from typing import List

from generator_api.providers.base import Provider
from generator_api.schemas.generate import GenerateRequest
from generator_api.services.cleaner import clean

STUB_MODEL = "echo-1"


class EchoProvider(Provider):
    # placeholder until a real OpenAI integration exists; echoes the prompt back
    name = "openai"

    def __init__(self, default_model: str = STUB_MODEL):
        super().__init__(default_model)

    # the prompt is echoed as given, without the article template
    async def generate(self, request: GenerateRequest) -> str:
        return clean(await self.complete("", request.prompt, self.resolve_model(request.model_name)), request.output_mode)

    async def complete(self, system: str, user: str, model: str) -> str:
        return f"Reply from {self.name}: {user}"

    async def list_models(self) -> List[str]:
        return [self.default_model]
