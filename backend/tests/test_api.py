"""
Tests for the HTTP API.

Run with: cd backend && pytest tests/test_api.py -v

Endpoints run in-process over httpx's ASGI transport, with the database
swapped for an in-memory SQLite and the pipeline for a mock provider.
"""
import httpx
import pytest

from cvintel.database import get_db
from cvintel.exceptions import ConfigurationError, ProviderError
from cvintel.main import app
from cvintel.services.llm_providers import MockTextProvider
from cvintel.services.pipeline import CVAnalysisPipeline, get_pipeline

PROFILE = {
    "email": "jane@example.com",
    "full_name": "Jane Doe",
    "target_role": "Backend Engineer",
    "industry": "Fintech",
    "career_level": "Senior",
    "target_country": "United Kingdom",
}

CONTEXT = {
    "targetRole": "Backend Engineer",
    "industry": "Fintech",
    "targetCountry": "United Kingdom",
    "careerLevel": "Senior",
}

SCORES = {
    "structure": 18,
    "keyword": 15,
    "impact": 13,
    "alignment": 11,
    "clarity": 14,
    "overall": 71,
    "atsRisk": "Medium",
}


@pytest.fixture
def provider(mock_responses):
    return MockTextProvider(mock_responses)


@pytest.fixture
async def client(session_factory, provider):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pipeline] = lambda: CVAnalysisPipeline(provider)

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def create_user(client) -> dict:
    response = await client.post("/auth/mock", json=PROFILE)
    assert response.status_code == 200
    return response.json()


class TestHealth:
    """Liveness, keep-alive and metrics."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "provider_configured" in body
        assert "store_configured" in body

    @pytest.mark.asyncio
    async def test_keep_alive_pings_store(self, client):
        response = await client.get("/keep-alive")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_metrics_exposed(self, client):
        await client.get("/health")
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "http_requests_total" in response.text


class TestAuth:
    """Profile lookup and upsert by email."""

    @pytest.mark.asyncio
    async def test_check_unknown_email_returns_null(self, client):
        response = await client.get("/auth/check/nobody@example.com")
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_mock_auth_upserts_by_email(self, client):
        created = await create_user(client)
        assert created["id"]
        assert created["email"] == "jane@example.com"

        updated = await client.post("/auth/mock", json={**PROFILE, "target_role": "Staff Engineer"})
        assert updated.json()["id"] == created["id"]
        assert updated.json()["target_role"] == "Staff Engineer"

        checked = await client.get("/auth/check/jane@example.com")
        assert checked.json()["target_role"] == "Staff Engineer"


class TestAnalysisPersistence:
    """Saving results and reading history."""

    @pytest.mark.asyncio
    async def test_save_then_history_round_trip(self, client, mock_responses):
        user = await create_user(client)

        response = await client.post("/analysis/save", json={
            "userId": user["id"],
            "parsedCv": mock_responses["parse_cv"],
            "scores": SCORES,
            "report": mock_responses["explain_scores"],
        })
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["cvId"]

        history = (await client.get(f"/history/{user['id']}")).json()
        assert len(history) == 1
        assert history[0]["cv_id"] == body["cvId"]
        assert history[0]["overall_score"] == 71
        assert history[0]["ats_risk_level"] == "Medium"
        assert history[0]["strengths"] == mock_responses["explain_scores"]["strengths"]

    @pytest.mark.asyncio
    async def test_save_rejects_out_of_range_scores(self, client, mock_responses):
        response = await client.post("/analysis/save", json={
            "userId": "u-1",
            "parsedCv": mock_responses["parse_cv"],
            "scores": {**SCORES, "structure": 25},
            "report": mock_responses["explain_scores"],
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_save_for_unknown_user_fails(self, client, mock_responses):
        response = await client.post("/analysis/save", json={
            "userId": "no-such-user",
            "parsedCv": mock_responses["parse_cv"],
            "scores": SCORES,
            "report": mock_responses["explain_scores"],
        })

        assert response.status_code == 500
        assert "Unknown user" in response.json()["error"]
        assert (await client.get("/history/no-such-user")).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scores", [
        {**SCORES, "overall": 99},
        {**SCORES, "atsRisk": "Low"},
    ])
    async def test_save_rejects_inconsistent_scores(self, client, mock_responses, scores):
        user = await create_user(client)

        response = await client.post("/analysis/save", json={
            "userId": user["id"],
            "parsedCv": mock_responses["parse_cv"],
            "scores": scores,
            "report": mock_responses["explain_scores"],
        })

        assert response.status_code == 422
        assert (await client.get(f"/history/{user['id']}")).json() == []

    @pytest.mark.asyncio
    async def test_history_for_unknown_user_is_empty(self, client):
        response = await client.get("/history/unknown-user")
        assert response.status_code == 200
        assert response.json() == []


class TestAI:
    """Pipeline and optimization endpoints."""

    @pytest.mark.asyncio
    async def test_analyze_returns_full_result(self, client):
        response = await client.post("/ai/analyze", json={"cvText": "Jane Doe CV", "context": CONTEXT})

        assert response.status_code == 200
        body = response.json()
        assert body["parsedCv"]["work_experience"][0]["company"] == "Paylane"
        assert body["signals"]["keywords"]["keyword_density_level"] == "moderate"
        assert body["scores"]["overall"] == 100
        assert body["scores"]["atsRisk"] == "Low"
        assert len(body["report"]["weaknesses"]) == 3
        assert body["cvId"] is None

    @pytest.mark.asyncio
    async def test_analyze_with_user_saves_history(self, client):
        user = await create_user(client)

        response = await client.post("/ai/analyze", json={
            "cvText": "Jane Doe CV",
            "context": CONTEXT,
            "userId": user["id"],
        })
        assert response.status_code == 200
        cv_id = response.json()["cvId"]
        assert cv_id

        history = (await client.get(f"/history/{user['id']}")).json()
        assert [item["cv_id"] for item in history] == [cv_id]
        assert history[0]["overall_score"] == 100
        assert history[0]["ats_risk_level"] == "Low"

    @pytest.mark.asyncio
    async def test_signal_failure_is_500_and_saves_nothing(self, client, provider):
        user = await create_user(client)
        provider.responses["alignment_signals"] = ProviderError("model overloaded")

        response = await client.post("/ai/analyze", json={
            "cvText": "Jane Doe CV",
            "context": CONTEXT,
            "userId": user["id"],
        })

        assert response.status_code == 500
        assert "signals" in response.json()["error"]
        assert "model overloaded" in response.json()["error"]
        assert provider.called("explain_scores") == 0
        assert (await client.get(f"/history/{user['id']}")).json() == []

    @pytest.mark.asyncio
    async def test_empty_cv_text_is_rejected(self, client):
        response = await client.post("/ai/analyze", json={"cvText": "", "context": CONTEXT})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_credentials_surface_as_500(self, client):
        def unconfigured():
            raise ConfigurationError("OPENAI_API_KEY is not configured.")

        app.dependency_overrides[get_pipeline] = unconfigured

        response = await client.post("/ai/analyze", json={"cvText": "cv", "context": CONTEXT})

        assert response.status_code == 500
        assert response.json() == {"error": "OPENAI_API_KEY is not configured."}

    @pytest.mark.asyncio
    async def test_optimize_summary(self, client):
        response = await client.post("/ai/optimize", json={
            "content": "Backend engineer.",
            "type": "summary",
            "context": CONTEXT,
        })
        assert response.status_code == 200
        assert response.json() == {
            "type": "summary",
            "result": "Senior backend engineer who cut payment latency by 45%.",
        }

    @pytest.mark.asyncio
    async def test_optimize_bullets(self, client):
        response = await client.post("/ai/optimize", json={
            "content": ["Maintained the order API"],
            "type": "bullets",
            "context": CONTEXT,
        })
        assert response.status_code == 200
        assert response.json()["result"] == ["Reduced settlement latency 45% via ledger redesign"]

    @pytest.mark.asyncio
    async def test_optimize_unknown_type_rejected(self, client):
        response = await client.post("/ai/optimize", json={"content": "x", "type": "cover_letter"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_optimize_cv(self, client, provider, mock_responses):
        response = await client.post("/ai/optimize-cv", json={
            "parsedCv": mock_responses["parse_cv"],
            "context": CONTEXT,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["summary"].startswith("Senior backend engineer")
        assert len(body["experience"]) == 2
        assert provider.called("optimize_bullets") == 2


class TestMetricsLabels:
    """Request metrics are labelled by route template."""

    @pytest.mark.asyncio
    async def test_routed_requests_use_path_templates(self, client):
        response = await client.get("/history/user-42")
        assert response.status_code == 200

        metrics = (await client.get("/metrics")).text
        assert 'endpoint="/history/{user_id}"' in metrics
        assert 'endpoint="/history/user-42"' not in metrics

    @pytest.mark.asyncio
    async def test_prefixed_post_routes_are_recorded(self, client):
        await create_user(client)

        metrics = (await client.get("/metrics")).text
        assert 'endpoint="/auth/mock"' in metrics
