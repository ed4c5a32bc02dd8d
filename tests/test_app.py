"""Flask API 测试。"""

import pytest

from app import create_app
from conftest import FailingSuggestionStore
from src.services.matching_service import MatchingService


@pytest.fixture
def client(profile_store, suggestion_store, failing_llm):
    service = MatchingService(profile_store, suggestion_store, llm_service=failing_llm)
    return create_app(service).test_client()


class TestSuggestionsEndpoint:
    """测试 GET /api/customers/<id>/suggestions。"""

    def test_returns_ranked_suggestions(self, client):
        response = client.get("/api/customers/cust-m/suggestions")

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert [s["candidateId"] for s in data["suggestions"]] == ["cand-ok"]
        assert data["suggestions"][0]["tier"] == "High"
        assert data["suggestions"][0]["source"] == "fallback"

    def test_unknown_customer_is_404(self, client):
        response = client.get("/api/customers/nobody/suggestions")

        assert response.status_code == 404
        assert "error" in response.get_json()

    def test_store_failure_is_500(self, profile_store, failing_llm):
        service = MatchingService(profile_store, FailingSuggestionStore(), llm_service=failing_llm)
        client = create_app(service).test_client()

        response = client.get("/api/customers/cust-m/suggestions")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Internal error"}


class TestHistoryEndpoint:
    """测试 GET /api/customers/<id>/suggestions/history。"""

    def test_history_grows_with_each_run(self, client):
        client.get("/api/customers/cust-m/suggestions")
        client.get("/api/customers/cust-m/suggestions")

        response = client.get("/api/customers/cust-m/suggestions/history")

        assert response.status_code == 200
        assert len(response.get_json()["suggestions"]) == 2

    def test_health(self, client):
        assert client.get("/api/health").get_json() == {"status": "ok"}
