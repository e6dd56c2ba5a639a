# tests/test_api_basic.py
import pytest
from httpx import AsyncClient, ASGITransport

from generator_api.main import create_app
from generator_api.providers import gemini
from generator_api.providers.base import BackendError
from generator_api.providers.factory import build_registry
from generator_api.schemas.generate import MAX_PROMPT_LENGTH
from fakes import API_KEY, make_settings


@pytest.mark.asyncio
async def test_health(client):
    # /health is public and always answers {"status": "ok"}
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_providers(client):
    r = await client.get("/providers")
    assert r.status_code == 200
    assert r.json() == {"providers": ["google", "newapi", "openai"], "default": "google"}


@pytest.mark.asyncio
async def test_generate_html_ok(client):
    r = await client.post("/generator/generate", json={"prompt": "AI 发展", "outputMode": "html"})
    assert r.status_code == 200
    assert r.json() == {
        "provider": "google",
        "modelUsed": "gemini-1.5-flash",
        "isHtml": True,
        "content": "<p>Hello</p>",
    }


@pytest.mark.asyncio
async def test_generate_query_provider_wins(client, newapi_fake):
    r = await client.post(
        "/generator/generate?provider=newapi",
        json={"prompt": "Hi", "providerKey": "google", "modelName": "deepseek-chat"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["provider"] == "newapi"
    assert data["modelUsed"] == "deepseek-chat"
    assert data["content"] == '<div class="generated-content"><p>Hello</p><p>World</p></div>'
    assert newapi_fake.calls[0][2] == "deepseek-chat"


@pytest.mark.asyncio
async def test_generate_plain_text(client, newapi_fake):
    r = await client.post(
        "/generator/generate",
        json={"prompt": "Hi", "providerKey": "newapi", "outputMode": "plain_text"},
    )
    assert r.status_code == 200
    assert r.json()["isHtml"] is False
    assert r.json()["content"] == "Hello\n\nWorld"


@pytest.mark.asyncio
async def test_unknown_provider_400(client):
    r = await client.post("/generator/generate", json={"prompt": "测试", "providerKey": "unknown"})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert "google" in detail and "newapi" in detail


@pytest.mark.asyncio
async def test_empty_prompt_400(client):
    r = await client.post("/generator/generate", json={"prompt": "  "})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_validation_422(client):
    # missing prompt / bad output mode are rejected by FastAPI itself
    r = await client.post("/generator/generate", json={"providerKey": "google"})
    assert r.status_code == 422
    r = await client.post("/generator/generate", json={"prompt": "x", "outputMode": "pdf"})
    assert r.status_code == 422
    r = await client.post("/generator/generate", json={"prompt": "x" * (MAX_PROMPT_LENGTH + 1)})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_adapter_failure_500_envelope(client, google_fake):
    google_fake.error = BackendError("Google API Error: quota exceeded (Code: 429)", 429)
    r = await client.post("/generator/generate", json={"prompt": "Hi"})
    assert r.status_code == 500
    assert r.json() == {"error": "Generation failed: Google API Error: quota exceeded (Code: 429)"}


@pytest.mark.asyncio
async def test_models(client):
    r = await client.get("/generator/models", params={"provider": "newapi"})
    assert r.status_code == 200
    assert r.json() == {"provider": "newapi", "count": 2, "models": ["b", "a"]}


@pytest.mark.asyncio
async def test_models_default_provider(client):
    r = await client.get("/generator/models")
    assert r.status_code == 200
    assert r.json()["provider"] == "google"


@pytest.mark.asyncio
async def test_models_unknown_provider_400(client):
    r = await client.get("/generator/models", params={"provider": "baidu"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_models_failure_500(client, newapi_fake):
    newapi_fake.error = BackendError("relay down")
    r = await client.get("/generator/models", params={"provider": "newapi"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to list models: relay down"}


@pytest.mark.asyncio
async def test_missing_credentials_reported_without_rebuilding(monkeypatch):
    attempts = []
    real_create_client = gemini.create_client

    def counting_create_client(settings):
        attempts.append(settings.key_file_path)
        return real_create_client(settings)

    monkeypatch.setattr(gemini, "create_client", counting_create_client)
    settings = make_settings()
    app = create_app(settings=settings, registry=build_registry(settings))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"x-api-key": API_KEY}) as ac:
        for _ in range(2):
            r = await ac.post("/generator/generate", json={"prompt": "Hi", "providerKey": "google"})
            assert r.status_code == 500
            assert r.json() == {
                "error": "Generation failed: Adapter unavailable: Credential file not found: /nonexistent/key.json"
            }
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_shutdown_closes_adapters(app, google_fake, newapi_fake, client):
    r = await client.post("/generator/generate", json={"prompt": "Hi"})
    assert r.status_code == 200
    assert not google_fake.closed

    async with app.router.lifespan_context(app):
        pass
    assert google_fake.closed
    assert newapi_fake.closed
