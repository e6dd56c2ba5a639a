from fastapi import APIRouter, Depends, Request
from generator_api.api.deps import get_registry
from generator_api.providers.factory import ProviderRegistry

router = APIRouter(tags=["providers"])

@router.get("/providers")
def list_providers(request: Request, registry: ProviderRegistry = Depends(get_registry)) -> dict:
    return {"providers": list(registry.keys), "default": request.app.state.settings.default_provider}
