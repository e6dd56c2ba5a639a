import logging
import os
from typing import Any, List, Optional

from google.api_core import exceptions as google_exceptions
from google.api_core.client_options import ClientOptions
from google.auth import exceptions as auth_exceptions
from google.cloud import aiplatform_v1
from google.oauth2 import service_account

from generator_api.core.config import GeminiSettings
from generator_api.providers.base import BackendError, Provider

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def create_client(settings: GeminiSettings) -> aiplatform_v1.PredictionServiceAsyncClient:
    # the gRPC transport picks up grpc_proxy / https_proxy set at startup
    if not os.path.isfile(settings.key_file_path):
        raise BackendError(f"Credential file not found: {settings.key_file_path}")
    try:
        credentials = service_account.Credentials.from_service_account_file(settings.key_file_path, scopes=SCOPES)
    except (ValueError, auth_exceptions.GoogleAuthError) as e:
        raise BackendError(f"Invalid credential file {settings.key_file_path}: {e}") from e
    return aiplatform_v1.PredictionServiceAsyncClient(
        credentials=credentials,
        client_options=ClientOptions(api_endpoint=f"{settings.location}-aiplatform.googleapis.com"),
    )


class GeminiProvider(Provider):
    """Vertex AI generateContent over gRPC. One call per request, never retried."""

    name = "google"

    def __init__(self, settings: GeminiSettings, client: Optional[Any] = None):
        super().__init__(settings.default_model_id)
        self._settings = settings
        self._owns_client = client is None
        self._client = client if client is not None else create_client(settings)

    def model_path(self, model: str) -> str:
        s = self._settings
        return f"projects/{s.project_id}/locations/{s.location}/publishers/google/models/{model}"

    async def complete(self, system: str, user: str, model: str) -> str:
        request = aiplatform_v1.GenerateContentRequest(
            model=self.model_path(model),
            contents=[aiplatform_v1.Content(role="user", parts=[aiplatform_v1.Part(text=user)])],
            system_instruction=aiplatform_v1.Content(parts=[aiplatform_v1.Part(text=system)]),
            generation_config=aiplatform_v1.GenerationConfig(
                temperature=self._settings.temperature,
                max_output_tokens=self._settings.max_output_tokens,
            ),
        )
        try:
            response = await self._client.generate_content(request=request, timeout=self._settings.timeout)
        except google_exceptions.GoogleAPICallError as e:
            status = int(e.code) if e.code is not None else None
            raise BackendError(f"Google API Error: {e.message} (Code: {status})", status) from e
        except google_exceptions.GoogleAPIError as e:
            raise BackendError(f"Google API Error: {e}") from e

        if not response.candidates:
            logger.info("gemini returned no candidates for %s", model)
            return ""
        return "".join(part.text for part in response.candidates[0].content.parts)

    async def list_models(self) -> List[str]:
        return list(self._settings.models) or [self.default_model]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.transport.close()
