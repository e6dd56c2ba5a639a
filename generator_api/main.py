# generator_api/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from generator_api.core import config
from generator_api.core.config import Settings
from generator_api.api.security import ApiKeyMiddleware, IpAllowListMiddleware
from generator_api.api.routers.health import router as health_router
from generator_api.api.routers.providers import router as providers_router
from generator_api.api.routers.generator import router as generator_router
from generator_api.providers.factory import ProviderRegistry, build_registry

logger = logging.getLogger(__name__)


def configure_proxy(proxy_url: str) -> None:
    # process-wide: grpc reads grpc_proxy when the channel connects
    if proxy_url:
        os.environ.setdefault("grpc_proxy", proxy_url)
        logger.info("proxy enabled: %s", proxy_url)
    else:
        logger.info("direct mode (no proxy)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown
    await app.state.registry.aclose()
    logger.info("provider adapters closed")


def create_app(settings: Optional[Settings] = None, registry: Optional[ProviderRegistry] = None) -> FastAPI:
    settings = settings or config.load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure_proxy(settings.gemini.proxy_url)

    app = FastAPI(title="AI Generator API", version="1.0.0", lifespan=lifespan)

    # added last = runs first: ip allow-list -> api key -> cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)
    app.add_middleware(IpAllowListMiddleware, allow_list=settings.ip_whitelist)

    # adapters are built once here; the key -> adapter map is read-only afterwards
    app.state.settings = settings
    app.state.registry = registry or build_registry(settings)

    # Routers
    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(generator_router)

    return app


app = create_app()
