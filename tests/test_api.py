"""Tests for HTTP endpoints."""

from fastapi.testclient import TestClient

from food_health.api.app import create_app
from food_health.containers import AppContainer
from tests.conftest import (
    GRANOLA_PER_100G,
    SOUR_CANDY_PER_100G,
    FakeProductClient,
    InMemoryNutritionLogRepository,
)


def test_health_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_report_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/health-report",
        json={
            "nutrition": GRANOLA_PER_100G,
            "ingredients_text": "oats, honey",
            "grams": 45,
            "meta": {"category": "cereal", "name": "Granola"},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 86
    assert data["stars"] == 4.5
    assert data["per_100g"]["energy_kcal"] == 450
    assert data["flags"][0]["key"] == "high_fiber"
    assert data["flags"][0]["severity"] == "good"


def test_health_report_treats_oversized_numbers_as_missing(
    container: AppContainer,
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/health-report",
        json={"nutrition": {**GRANOLA_PER_100G, "sugars_100g": 10**400}},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["per_100g"]["sugars_g"] == 0
    assert 0 <= data["score"] <= 100


def test_health_report_rejects_non_positive_grams(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/health-report", json={"nutrition": {}, "grams": 0})

    assert response.status_code == 422


def test_product_report_endpoint(
    container: AppContainer, product_client: FakeProductClient
) -> None:
    product_client.products["4000"] = {
        "product_name": "Sour Punch Straws",
        "categories": "Candy",
        "nutriments": SOUR_CANDY_PER_100G,
        "ingredients_text": "sugar, red 40",
    }
    client = TestClient(create_app(container))

    response = client.get("/products/4000/health-report", params={"grams": 30})

    assert response.status_code == 200
    assert response.json()["score"] == 47


def test_product_report_unknown_barcode(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/products/0000/health-report")

    assert response.status_code == 404


def test_score_nutrition_log_endpoint(
    container: AppContainer, log_repository: InMemoryNutritionLogRepository
) -> None:
    record = log_repository.add()
    client = TestClient(create_app(container))

    response = client.post(f"/nutrition-logs/{record.id}/score")

    assert response.status_code == 200
    assert response.json() == {"log_id": str(record.id), "quality_score": 86}
    assert log_repository.scores[record.id] == 86


def test_score_nutrition_log_not_found(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition-logs/00000000-0000-0000-0000-000000000000/score"
    )

    assert response.status_code == 404


def test_admin_requires_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/health").status_code == 401
    assert (
        client.get("/admin/health", headers={"X-Admin-Token": "wrong"}).status_code
        == 401
    )


def test_admin_rescore_endpoint(
    container: AppContainer, log_repository: InMemoryNutritionLogRepository
) -> None:
    log_repository.add()
    log_repository.add()
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/rescore",
        params={"limit": 1},
        headers={"X-Admin-Token": "admin-token"},
    )

    assert response.status_code == 200
    assert response.json() == {"scored": 1}
