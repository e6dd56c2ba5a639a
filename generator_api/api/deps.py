from fastapi import Request
from generator_api.providers.factory import ProviderRegistry

def get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry
