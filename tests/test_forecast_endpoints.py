"""Tests for forecast API endpoints."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from fastapi.testclient import TestClient

from health_tracker.api.app import create_app
from health_tracker.containers import AppContainer
from tests.conftest import InMemoryEntryRepository, daily_weights

HEADERS = {"X-Api-Token": "api-token"}


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_forecast_requires_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/users/{uuid4()}/forecast")

    assert response.status_code == 401


def test_forecast_rejects_wrong_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        f"/users/{uuid4()}/forecast", headers={"X-Api-Token": "nope"}
    )

    assert response.status_code == 401


def test_forecast_insufficient_data(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/users/{uuid4()}/forecast", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "insufficient_data"
    assert data["scenarios"] == {}
    assert data["summary"] is None
    assert data["backtest"] is None


def test_forecast_returns_scenarios_and_backtest(
    container: AppContainer, entry_repository: InMemoryEntryRepository
) -> None:
    user_id = uuid4()
    today = datetime.now(tz=UTC).date()
    weights = [85.0 - 0.05 * day for day in range(14)]
    entry_repository.records[user_id] = daily_weights(
        today - timedelta(days=13), weights, calories=2200, protein_g=110
    )
    client = TestClient(create_app(container))

    response = client.get(
        f"/users/{user_id}/forecast", headers=HEADERS, params={"timezone": "UTC"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["weight_observations"] == 14
    assert set(data["scenarios"]) == {
        "today",
        "weekly-average",
        "historical-1d",
        "historical-2d",
        "historical-3d",
    }
    weekly = data["scenarios"]["weekly-average"]
    assert len(weekly["points"]) == 90
    assert weekly["points"][0]["lower"] is not None
    assert data["summary"]["current"] == weights[-1]
    assert data["backtest"]["samples"] == 7
    assert data["backtest"]["label"].startswith("Backtest MAE:")
    assert len(data["backtest"]["recent"]) == 7
    assert len(data["series"]) == 14


def test_forecast_rejects_unknown_timezone(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        f"/users/{uuid4()}/forecast",
        headers=HEADERS,
        params={"timezone": "Mars/Olympus_Mons"},
    )

    assert response.status_code == 422
