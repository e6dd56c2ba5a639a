# centralized configuration loader
# runs load_dotenv() to read .env
# module constants are only read by load_settings(); adapters receive the dataclasses

import os
from dataclasses import dataclass
from typing import List, Tuple
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


# Routing
DEFAULT_PROVIDER = os.getenv("DEFAULT_PROVIDER", "google").strip().lower()
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))

# Gemini (Vertex AI over gRPC)
GEMINI_PROJECT_ID = os.getenv("GEMINI_PROJECT_ID", "")
GEMINI_LOCATION = os.getenv("GEMINI_LOCATION", "us-central1")
GEMINI_DEFAULT_MODEL_ID = os.getenv("GEMINI_DEFAULT_MODEL_ID", "gemini-1.5-flash")
GEMINI_KEY_FILE_PATH = os.getenv("GEMINI_KEY_FILE_PATH", "credentials.json")
GEMINI_PROXY_URL = os.getenv("GEMINI_PROXY_URL", "")
GEMINI_MODELS = _csv(os.getenv("GEMINI_MODELS", "gemini-2.0-flash-exp,gemini-1.5-pro,gemini-1.5-flash"))
GEMINI_MAX_OUTPUT_TOKENS = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8000"))
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "300"))

# NewAPI (OpenAI-compatible relay, free channel first then VIP)
NEWAPI_BASE_URL = os.getenv("NEWAPI_BASE_URL", "https://api.openai.com")
NEWAPI_FREE_BASE_URL = os.getenv("NEWAPI_FREE_BASE_URL", "") or NEWAPI_BASE_URL
NEWAPI_VIP_BASE_URL = os.getenv("NEWAPI_VIP_BASE_URL", "") or NEWAPI_BASE_URL
NEWAPI_DEFAULT_MODEL_ID = os.getenv("NEWAPI_DEFAULT_MODEL_ID", "gpt-4o-mini")
NEWAPI_FREE_API_KEY = os.getenv("NEWAPI_FREE_API_KEY", "").strip()
NEWAPI_VIP_API_KEY = os.getenv("NEWAPI_VIP_API_KEY", "").strip()
NEWAPI_TIMEOUT = float(os.getenv("NEWAPI_TIMEOUT", "120"))
NEWAPI_MODELS_TIMEOUT = float(os.getenv("NEWAPI_MODELS_TIMEOUT", "5"))

# Access gates
API_KEY = os.getenv("MY_API_KEY", "")
IP_WHITELIST = os.getenv("IP_WHITELIST", "*").strip()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class ChannelCredentials:
    tier_name: str  # "primary" | "secondary"
    api_key: str
    base_url: str


@dataclass(frozen=True)
class GeminiSettings:
    project_id: str
    location: str
    default_model_id: str
    key_file_path: str
    proxy_url: str = ""
    models: Tuple[str, ...] = ()
    temperature: float = 0.7
    max_output_tokens: int = 8000
    timeout: float = 300.0


@dataclass(frozen=True)
class NewApiSettings:
    default_model_id: str
    free_api_key: str = ""
    vip_api_key: str = ""
    free_base_url: str = "https://api.openai.com"
    vip_base_url: str = "https://api.openai.com"
    temperature: float = 0.7
    timeout: float = 120.0
    models_timeout: float = 5.0

    def channels(self) -> List[ChannelCredentials]:
        """Configured channels, cheapest first. Tiers without a key are left out."""
        out: List[ChannelCredentials] = []
        if self.free_api_key:
            out.append(ChannelCredentials("primary", self.free_api_key, self.free_base_url))
        if self.vip_api_key:
            out.append(ChannelCredentials("secondary", self.vip_api_key, self.vip_base_url))
        return out


@dataclass(frozen=True)
class Settings:
    gemini: GeminiSettings
    newapi: NewApiSettings
    default_provider: str = "google"
    api_key: str = ""
    ip_whitelist: str = "*"
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        gemini=GeminiSettings(
            project_id=GEMINI_PROJECT_ID,
            location=GEMINI_LOCATION,
            default_model_id=GEMINI_DEFAULT_MODEL_ID,
            key_file_path=GEMINI_KEY_FILE_PATH,
            proxy_url=GEMINI_PROXY_URL,
            models=GEMINI_MODELS,
            temperature=TEMPERATURE,
            max_output_tokens=GEMINI_MAX_OUTPUT_TOKENS,
            timeout=GEMINI_TIMEOUT,
        ),
        newapi=NewApiSettings(
            default_model_id=NEWAPI_DEFAULT_MODEL_ID,
            free_api_key=NEWAPI_FREE_API_KEY,
            vip_api_key=NEWAPI_VIP_API_KEY,
            free_base_url=NEWAPI_FREE_BASE_URL,
            vip_base_url=NEWAPI_VIP_BASE_URL,
            temperature=TEMPERATURE,
            timeout=NEWAPI_TIMEOUT,
            models_timeout=NEWAPI_MODELS_TIMEOUT,
        ),
        default_provider=DEFAULT_PROVIDER,
        api_key=API_KEY,
        ip_whitelist=IP_WHITELIST,
        log_level=LOG_LEVEL,
    )
