"""Tests for the recommendations endpoint (service dependency overridden)."""

import pytest
from fastapi.testclient import TestClient

from recommender.api.deps import get_recommendation_service
from recommender.main import app
from recommender.services.recommendation_service import (
    PropertyNotFoundError,
    RecommendationResult,
)
from recommender.services.similarity_scorer import score_property
from recommender.services.snapshot import PropertySnapshot

URL = "/api/v1/recommendations"


class FakeService:
    def __init__(self, result=None, error=None):
        self.result = result or RecommendationResult()
        self.error = error
        self.calls = []

    async def recommend(self, property_id, limit, user_id=None):
        self.calls.append({"property_id": property_id, "limit": limit, "user_id": user_id})
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def use_service():
    def _install(service: FakeService) -> TestClient:
        app.dependency_overrides[get_recommendation_service] = lambda: service
        return TestClient(app)

    yield _install
    app.dependency_overrides.clear()


def _scored():
    target = PropertySnapshot(id="t", property_type="villa", city="Ubud", bedrooms=3)
    candidate = PropertySnapshot(
        id="c", title="Villa", property_type="villa", city="Ubud", bedrooms=3, features={"pool": True}
    )
    return score_property(target, candidate)


class TestRecommendationsEndpoint:
    def test_success_shape(self, use_service):
        service = FakeService(RecommendationResult(recommendations=[_scored()]))
        client = use_service(service)

        response = client.post(URL, json={"propertyId": "t"})

        assert response.status_code == 200
        body = response.json()
        assert body["personalized"] is False
        (rec,) = body["recommendations"]
        assert rec["property"]["id"] == "c"
        assert rec["score"] == 55
        assert rec["matchPercentage"] == 55
        assert rec["reasons"] == ["Same type", "Same area", "Same bedrooms"]
        assert rec["scoreBreakdown"]["type"] == 25
        assert rec["scoreBreakdown"]["userType"] == 0

    def test_defaults_passed_to_service(self, use_service):
        service = FakeService()
        client = use_service(service)

        client.post(URL, json={"propertyId": "t"})

        assert service.calls == [{"property_id": "t", "limit": 6, "user_id": None}]

    def test_limit_and_user(self, use_service):
        service = FakeService()
        client = use_service(service)

        response = client.post(URL, json={"propertyId": "t", "limit": 3, "userId": "u1"})

        assert response.status_code == 200
        assert service.calls == [{"property_id": "t", "limit": 3, "user_id": "u1"}]

    def test_empty_result(self, use_service):
        client = use_service(FakeService())
        response = client.post(URL, json={"propertyId": "t"})
        assert response.json() == {"recommendations": [], "personalized": False}

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"propertyId": ""},
            {"propertyId": "t", "limit": 0},
            {"propertyId": "t", "limit": "many"},
        ],
    )
    def test_malformed_request(self, use_service, payload):
        service = FakeService()
        client = use_service(service)

        response = client.post(URL, json=payload)

        assert response.status_code == 400
        assert "error" in response.json()
        assert service.calls == []

    def test_not_json(self, use_service):
        client = use_service(FakeService())
        response = client.post(URL, content=b"propertyId=t", headers={"Content-Type": "text/plain"})
        assert response.status_code == 400

    def test_not_found(self, use_service):
        client = use_service(FakeService(error=PropertyNotFoundError("t")))
        response = client.post(URL, json={"propertyId": "t"})
        assert response.status_code == 404
        assert response.json() == {"error": "Property not found"}

    def test_unexpected_error(self, use_service):
        client = use_service(FakeService(error=RuntimeError("database unavailable")))
        response = client.post(URL, json={"propertyId": "t"})
        assert response.status_code == 500
        assert response.json() == {"error": "database unavailable"}
