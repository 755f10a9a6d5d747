from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from finance_tracker.app import app
from finance_tracker.services.persistence import FinanceStorage
from finance_tracker.state import FinanceState
from finance_tracker.storage.memory import MemoryStore

client = TestClient(app)


@pytest.fixture
def finance() -> Generator[FinanceState, None, None]:
    had_state = hasattr(app.state, "finance")
    original_state = getattr(app.state, "finance", None)
    state = FinanceState(FinanceStorage(MemoryStore()), default_sort="date-desc")
    state.initialize()
    app.state.finance = state
    yield state
    if had_state:
        app.state.finance = original_state
    else:
        delattr(app.state, "finance")


def _create(**overrides) -> dict:
    body = {
        "description": "Pizza night",
        "amount": "24.00",
        "category": "Food",
        "date": "2025-09-12",
    }
    body.update(overrides)
    response = client.post("/api/transactions", json=body)
    assert response.status_code == 201
    return response.json()["transaction"]


def test_create_and_list_with_highlights(finance: FinanceState) -> None:
    created = _create()
    _create(description="Metro card", amount=30, category="Transport", date="2025-09-10")

    response = client.get("/api/transactions", params={"search": "pizza"})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["total"] == 2
    record = data["transactions"][0]
    assert record["id"] == created["id"]
    assert record["highlighted"]["description"] == "<mark>Pizza</mark> night"
    assert record["highlighted"]["amount"] == "24.00"


def test_invalid_search_returns_empty_list(finance: FinanceState) -> None:
    _create()

    data = client.get("/api/transactions", params={"search": "*oops"}).json()

    assert data["count"] == 0
    assert data["searchError"]


def test_category_filter_and_sort(finance: FinanceState) -> None:
    _create(description="Cheap lunch", amount="5")
    _create(description="Fancy dinner", amount="55")
    _create(description="Ticket", amount="3", category="Transport")

    data = client.get(
        "/api/transactions",
        params={"category": "Food", "sort": "amount-desc"},
    ).json()

    assert [item["description"] for item in data["transactions"]] == ["Fancy dinner", "Cheap lunch"]


def test_create_rejects_invalid_draft(finance: FinanceState) -> None:
    response = client.post(
        "/api/transactions",
        json={"description": "the the", "amount": "01", "category": "Food", "date": "2025-02-30"},
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["valid"] is False
    assert set(detail["errors"]) == {"description", "amount", "date"}
    assert finance.transactions == []


def test_update_and_delete(finance: FinanceState) -> None:
    created = _create()

    response = client.put(
        f"/api/transactions/{created['id']}",
        json={"description": "Pizza night", "amount": "26.50", "category": "Food", "date": "2025-09-12"},
    )
    assert response.status_code == 200
    assert response.json()["transaction"]["amount"] == 26.5

    assert client.delete(f"/api/transactions/{created['id']}").status_code == 204
    assert client.delete(f"/api/transactions/{created['id']}").status_code == 404
    assert client.get(f"/api/transactions/{created['id']}").status_code == 404


def test_validate_endpoints(finance: FinanceState) -> None:
    response = client.post("/api/validate/date", json={"value": "2024-02-29"})
    assert response.json() == {"valid": True, "message": ""}

    response = client.post("/api/validate", json={"description": " x"})
    data = response.json()
    assert data["valid"] is False
    assert set(data["errors"]) == {"description", "amount", "date", "category"}


def test_categories(finance: FinanceState) -> None:
    assert client.post("/api/categories", json={"name": "Gifts"}).status_code == 201
    assert client.post("/api/categories", json={"name": "Gifts"}).status_code == 409
    assert client.post("/api/categories", json={"name": "G1fts"}).status_code == 422
    assert "Gifts" in client.get("/api/categories").json()
    assert client.delete("/api/categories/Gifts").status_code == 200
    assert client.delete("/api/categories/Gifts").status_code == 404


def test_settings_and_conversion(finance: FinanceState) -> None:
    response = client.put("/api/settings", json={"rates": {"USD": 1, "EUR": 0.5, "GBP": 0.25}})
    assert response.status_code == 200
    assert response.json()["baseCurrency"] == "USD"

    converted = client.get("/api/convert", params={"amount": 10, "to": "EUR"}).json()
    assert converted == {"amount": 5.0, "currency": "EUR", "symbol": "€"}

    assert client.put("/api/settings", json={"baseCurrency": "JPY"}).status_code == 422
    assert client.get("/api/convert", params={"amount": 10, "to": "JPY"}).status_code == 422


def test_budget_and_dashboard(finance: FinanceState) -> None:
    _create(amount="85", date="2025-09-12")
    assert client.put("/api/budget", json={"amount": 100}).json()["budgetCap"] == 100
    assert client.put("/api/budget", json={"amount": -5}).status_code == 422

    data = client.get("/api/dashboard", params={"today": "2025-09-14"}).json()

    assert data["stats"]["totalExpenses"] == 85
    assert data["stats"]["weekTotal"] == 85
    assert data["stats"]["dailyTotals"]["2025-09-12"] == 85
    assert data["budget"]["state"] == "warning"
    assert data["budget"]["remaining"] == 15
    assert data["monthly"][0]["month"] == "2025-09"


def test_export_import_and_clear(finance: FinanceState) -> None:
    _create()
    exported = client.get("/api/export").json()

    assert client.post("/api/clear").json() == {"success": True}
    assert client.get("/api/transactions").json()["count"] == 0

    response = client.post("/api/import", json=exported)
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get("/api/transactions").json()["count"] == 1

    bad = client.post("/api/import", json={"transactions": [{"id": ""}]})
    assert bad.status_code == 422
    assert bad.json()["detail"] == "Transaction 1: missing or invalid id"


def test_missing_state_returns_500() -> None:
    had_state = hasattr(app.state, "finance")
    original_state = getattr(app.state, "finance", None)
    app.state.finance = None
    try:
        assert client.get("/api/categories").status_code == 500
    finally:
        if had_state:
            app.state.finance = original_state
        else:
            delattr(app.state, "finance")


def test_partial_rates_keep_conversions_working(finance: FinanceState) -> None:
    response = client.put("/api/settings", json={"rates": {"USD": 1}})

    assert response.status_code == 200
    assert response.json()["rates"]["EUR"] == 0.92
    assert client.get("/api/convert", params={"amount": 100, "to": "EUR"}).json()["amount"] == 92.0


def test_import_with_mixed_timezones_is_rejected(finance: FinanceState) -> None:
    record = {
        "id": "txn_1",
        "description": "Lunch",
        "amount": 12.5,
        "category": "Food",
        "date": "2025-09-29",
        "createdAt": "2025-09-29T10:30:00Z",
        "updatedAt": "2025-09-29T10:30:00",
    }

    response = client.post("/api/import", json={"transactions": [record]})

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Transaction 1: invalid")
