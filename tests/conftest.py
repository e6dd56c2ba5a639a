# tests/conftest.py
import os
import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env before the app module builds its default app
os.environ.setdefault("MY_API_KEY", "test-key")
os.environ.setdefault("IP_WHITELIST", "*")

# IMPORTANT: import the app after envs are set
from generator_api.main import create_app
from generator_api.providers.factory import ProviderKey, ProviderRegistry
from generator_api.providers.stub import EchoProvider
from fakes import API_KEY, FakeProvider, make_settings


@pytest.fixture
def google_fake():
    return FakeProvider(reply="```html\n<p>Hello</p>\n```", default_model="gemini-1.5-flash")


@pytest.fixture
def newapi_fake():
    return FakeProvider(reply="Hello\n\nWorld", default_model="gpt-4o-mini", models=["b", "a"])


@pytest.fixture
def registry(google_fake, newapi_fake):
    return ProviderRegistry({
        ProviderKey.GOOGLE: google_fake,
        ProviderKey.NEWAPI: newapi_fake,
        ProviderKey.OPENAI: EchoProvider(),
    })


@pytest_asyncio.fixture
async def app(registry):
    return create_app(settings=make_settings(), registry=registry)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"x-api-key": API_KEY}) as ac:
        yield ac


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
