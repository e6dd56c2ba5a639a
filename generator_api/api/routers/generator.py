import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from generator_api.api.deps import get_registry
from generator_api.core.errors import ClientInputError, GenerationError
from generator_api.providers.factory import ProviderRegistry
from generator_api.schemas.generate import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    ModelsResponse,
    OutputMode,
)
from generator_api.services.generator_service import handle_generate, handle_models

router = APIRouter(prefix="/generator", tags=["generator"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"description": "bad input or unknown provider"}, 500: {"model": ErrorResponse}}


def _server_error(e: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())


@router.post("/generate", response_model=GenerateResponse, responses=ERROR_RESPONSES)
async def generate(
    req: GenerateRequest,
    request: Request,
    provider: Optional[str] = Query(default=None, description="overrides providerKey from the body"),
    registry: ProviderRegistry = Depends(get_registry),
):
    key = provider if provider is not None else (req.provider_key or request.app.state.settings.default_provider)
    req = req.model_copy(update={"provider_key": key})

    try:
        result = await handle_generate(registry, req)
    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        logger.warning("generate via %s failed: %s", req.provider_key, e)
        return _server_error(e)

    return GenerateResponse(
        provider=result.provider_used,
        model_used=result.model_used,
        is_html=result.output_mode == OutputMode.HTML,
        content=result.content,
    )


@router.get("/models", response_model=ModelsResponse, responses=ERROR_RESPONSES)
async def models(request: Request, provider: Optional[str] = None, registry: ProviderRegistry = Depends(get_registry)):
    key = provider if provider is not None else request.app.state.settings.default_provider
    try:
        listing = await handle_models(registry, key)
    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        logger.warning("listing models of %s failed: %s", key, e)
        return _server_error(e)

    return ModelsResponse(provider=listing.provider, count=len(listing.models), models=listing.models)
