"""Service tests for the HTTP API against a real database."""

import hashlib
import hmac
import json
import time

import pytest
from sqlalchemy import select

from buildlab.agents.prompts import AgentRole
from buildlab.api.dependencies import get_current_user
from buildlab.api.main import app
from buildlab.errors import LLMInvocationError
from buildlab.models import BuildRequest, GeneratedProject, Profile, Transaction

PREVIEW_URL = "http://buildlab-previews.s3-website-us-east-1.amazonaws.com/ai-recipe-finder"


def stripe_signature(payload: bytes, secret: str) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.json()["name"] == "BuildLab Generator"

    @pytest.mark.asyncio
    async def test_correlation_header_echoed(self, client):
        response = await client.get("/health", headers={"X-Correlation-ID": "req_abc"})
        assert response.headers["X-Correlation-ID"] == "req_abc"


class TestGenerate:
    @pytest.mark.asyncio
    async def test_missing_authorization(self, client):
        app.dependency_overrides.pop(get_current_user)

        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.status_code == 401
        assert response.json() == {"error": "Missing authorization header"}

    @pytest.mark.asyncio
    async def test_unknown_build_request(self, client, fake_llm):
        response = await client.post("/generate", json={"build_request_id": "br-missing"})

        assert response.status_code == 400
        assert response.json() == {"error": "Build request not found"}
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_documents_only(self, client, session_maker, fake_llm):
        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        project = body["project"]
        assert project["preview_url"] is None
        assert project["github_url"] is None
        assert project["documents"]["market_research"] == (
            "research document\nProject Title: AI Recipe Finder..."
        )
        assert project["documents"]["prd"].startswith("product_manager document")
        assert AgentRole.CODER not in fake_llm.roles

        async with session_maker() as session:
            build_request = await session.get(BuildRequest, "br-1")
            assert build_request.generation_status == "completed"

    @pytest.mark.asyncio
    async def test_code_prototype_published(self, client, object_store, repository_publisher):
        response = await client.post(
            "/generate",
            json={"build_request_id": "br-1", "options": {"codePrototype": True, "focusArea": "mvp"}},
        )

        assert response.status_code == 200
        project = response.json()["project"]
        assert project["preview_url"] == PREVIEW_URL
        assert project["github_url"] == "https://github.com/tester/buildlab-ai-recipe-finder"
        assert "ai-recipe-finder/src/App.tsx" in object_store.objects
        assert repository_publisher.calls[0]["credential"] == "gho_user_token"  # noqa: S105

    @pytest.mark.asyncio
    async def test_document_previews_truncated(self, client, settings):
        settings.document_preview_chars = 8

        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.json()["project"]["documents"]["tech_spec"] == "architec..."

    @pytest.mark.asyncio
    async def test_stage_failure(self, client, session_maker, fake_llm):
        fake_llm.failures[AgentRole.RESEARCH] = LLMInvocationError("Model invocation failed: boom")

        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Model invocation failed: boom"}

        async with session_maker() as session:
            build_request = await session.get(BuildRequest, "br-1")
            assert build_request.generation_status == "failed"
            project = (
                await session.execute(
                    select(GeneratedProject).where(
                        GeneratedProject.project_slug == "ai-recipe-finder"
                    )
                )
            ).scalar_one()
            assert project.status == "failed"
            assert project.error == "Model invocation failed: boom"

    @pytest.mark.asyncio
    async def test_generation_already_running(self, client, service_orchestrator, fake_llm):
        service_orchestrator.registry.acquire("ai-recipe-finder")

        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.status_code == 409
        assert "already in progress" in response.json()["error"]
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_unexpected_error(self, client, fake_llm):
        fake_llm.failures[AgentRole.ARCHITECT] = KeyError("choices")

        response = await client.post("/generate", json={"build_request_id": "br-1"})

        assert response.status_code == 500
        assert "choices" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_invalid_body(self, client):
        response = await client.post("/generate", json={"options": {}})
        assert response.status_code == 422


class TestProjects:
    @pytest.mark.asyncio
    async def test_get_project_after_generation(self, client):
        await client.post(
            "/generate", json={"build_request_id": "br-1", "options": {"codePrototype": True}}
        )

        response = await client.get("/projects/ai-recipe-finder")

        assert response.status_code == 200
        project = response.json()
        assert project["status"] == "completed"
        assert project["build_request_id"] == "br-1"
        assert project["preview_url"] == PREVIEW_URL
        assert "src/App.tsx" in project["code_files"]
        assert project["market_research"].startswith("research document")

    @pytest.mark.asyncio
    async def test_unknown_project(self, client):
        response = await client.get("/projects/nope")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_preview(self, client):
        await client.post(
            "/generate", json={"build_request_id": "br-1", "options": {"codePrototype": True}}
        )

        response = await client.get("/projects/ai-recipe-finder/preview")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.headers["Content-Security-Policy"] == (
            "sandbox allow-scripts allow-same-origin"
        )
        assert "<title>AI Recipe Finder - Live Preview</title>" in response.text
        assert "window.__PreviewApp__" in response.text

    @pytest.mark.asyncio
    async def test_preview_without_code(self, client):
        await client.post("/generate", json={"build_request_id": "br-1"})

        response = await client.get("/projects/ai-recipe-finder/preview")

        assert response.status_code == 200
        assert "Preview Loading..." in response.text


class TestStripeWebhook:
    @staticmethod
    def checkout_payload(metadata: dict) -> bytes:
        event = {
            "id": "evt_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": "cs_test_1",
                    "object": "checkout.session",
                    "amount_total": 1500,
                    "payment_status": "paid",
                    "metadata": metadata,
                }
            },
        }
        return json.dumps(event).encode()

    @pytest.mark.asyncio
    async def test_checkout_grants_submissions(self, client, session_maker, settings):
        payload = self.checkout_payload({"user_id": "user-1", "pack_size": "3"})

        response = await client.post(
            "/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": stripe_signature(payload, settings.stripe_webhook_secret)},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}

        async with session_maker() as session:
            profile = await session.get(Profile, "user-1")
            assert profile.extra_submissions == 3  # noqa: PLR2004
            transaction = (await session.execute(select(Transaction))).scalar_one()
            assert transaction.amount == 15.0  # noqa: PLR2004
            assert transaction.stripe_payment_id == "cs_test_1"
            assert transaction.meta == {"pack_size": 3, "payment_status": "paid"}

    @pytest.mark.asyncio
    async def test_missing_signature(self, client):
        response = await client.post("/webhooks/stripe", content=b"{}")
        assert response.status_code == 400
        assert response.json() == {"error": "No signature"}

    @pytest.mark.asyncio
    async def test_bad_signature(self, client):
        payload = self.checkout_payload({"user_id": "user-1", "pack_size": "3"})

        response = await client.post(
            "/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": stripe_signature(payload, secret="whsec_wrong")},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Webhook error:")

    @pytest.mark.asyncio
    async def test_missing_metadata(self, client, settings):
        payload = self.checkout_payload({"user_id": "user-1"})

        response = await client.post(
            "/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": stripe_signature(payload, settings.stripe_webhook_secret)},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing metadata"}

    @pytest.mark.asyncio
    async def test_other_events_acknowledged(self, client, settings):
        payload = json.dumps(
            {"id": "evt_2", "object": "event", "type": "invoice.paid", "data": {"object": {}}}
        ).encode()

        response = await client.post(
            "/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": stripe_signature(payload, settings.stripe_webhook_secret)},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
