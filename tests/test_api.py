"""Tests for the Flask API routes."""

from __future__ import annotations

import json

import pytest

from api.app import create_app
from common.config import Settings
from common.storage import MemoryStorage


def _add(client, name, category, amount):
    response = client.post("/expenses", json={"name": name, "category": category, "amount": amount})
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture
def seeded(client):
    _add(client, "Coffee", "Personal", "3.50")
    _add(client, "Rent", "Business", 1200)
    _add(client, "Lunch", "Personal", "12")
    return client


def test_create_expense(client):
    body = _add(client, "Coffee", "Personal", "3.50")
    assert body["name"] == "Coffee"
    assert body["category"] == body["type"] == "Personal"
    assert body["amount"] == 3.5
    assert body["display_amount"] == "PEN 3.50"
    assert body["tone"] == "positive"
    assert body["id"]


def test_create_accepts_persisted_field_name(client):
    response = client.post("/expenses", json={"name": "Taxi", "type": "Business", "amount": -4})
    assert response.status_code == 201
    assert response.get_json()["tone"] == "negative"


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Coffee", "category": "Personal", "amount": "lots"},
        {"name": "Yacht", "category": "Personal", "amount": "1e400"},
        {"name": "Coffee", "category": "Personal"},
        {"name": 3, "category": "Personal", "amount": 1},
        {"name": "Coffee", "amount": 1},
    ],
)
def test_create_rejects_bad_input(client, payload):
    response = client.post("/expenses", json=payload)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Validation error"


def test_create_requires_json(client):
    response = client.post("/expenses", data="name=Coffee")
    assert response.status_code == 400


def test_list_all(seeded):
    body = seeded.get("/expenses").get_json()
    assert body["scope"] == "Both"
    assert [item["name"] for item in body["items"]] == ["Coffee", "Rent", "Lunch"]


def test_list_filtered(seeded):
    body = seeded.get("/expenses?mode=personal").get_json()
    assert body["scope"] == "Personal"
    assert [item["name"] for item in body["items"]] == ["Coffee", "Lunch"]


def test_list_unknown_mode(seeded):
    assert seeded.get("/expenses?mode=family").status_code == 400


def test_get_and_delete_by_id(seeded):
    expense_id = seeded.get("/expenses").get_json()["items"][1]["id"]

    assert seeded.get(f"/expenses/{expense_id}").get_json()["name"] == "Rent"
    assert seeded.delete(f"/expenses/{expense_id}").status_code == 204
    assert seeded.get(f"/expenses/{expense_id}").status_code == 404
    assert seeded.delete(f"/expenses/{expense_id}").status_code == 404


def test_remove_by_displayed_position(seeded):
    response = seeded.post("/expenses/remove", json={"positions": [1], "mode": "personal"})

    assert response.status_code == 200
    assert [item["name"] for item in response.get_json()["removed"]] == ["Lunch"]
    names = [item["name"] for item in seeded.get("/expenses").get_json()["items"]]
    assert names == ["Coffee", "Rent"]


def test_remove_out_of_range(seeded):
    response = seeded.post("/expenses/remove", json={"positions": [5], "mode": "business"})
    assert response.status_code == 404
    assert len(seeded.get("/expenses").get_json()["items"]) == 3


def test_remove_rejects_bad_positions(seeded):
    response = seeded.post("/expenses/remove", json={"positions": "0"})
    assert response.status_code == 400


def test_chart_groups_by_category_when_unfiltered(seeded):
    body = seeded.get("/chart").get_json()
    assert body["title"] == "Both"
    assert body["caption"] == "Expenses"
    assert [segment["label"] for segment in body["segments"]] == ["Personal", "Business"]
    # One exemplar per category: Coffee stands in for all personal expenses.
    assert [segment["amount"] for segment in body["segments"]] == [3.5, 1200.0]


def test_chart_groups_by_name_within_category(seeded):
    body = seeded.get("/chart?mode=personal").get_json()
    assert body["title"] == "Personal"
    assert [segment["label"] for segment in body["segments"]] == ["Coffee", "Lunch"]


def test_data_survives_app_restart(data_dir, seeded):
    stored = json.loads((data_dir / "Items.json").read_text(encoding="utf-8"))
    assert [entry["type"] for entry in stored] == ["Personal", "Business", "Personal"]

    restarted = create_app(data_dir, settings=Settings()).test_client()
    names = [item["name"] for item in restarted.get("/expenses").get_json()["items"]]
    assert names == ["Coffee", "Rent", "Lunch"]


def test_injected_storage_and_currency():
    storage = MemoryStorage()
    app = create_app(storage=storage, settings=Settings(currency="USD", storage_key="Expenses"))
    client = app.test_client()

    body = _add(client, "Coffee", "Personal", "3.5")

    assert body["display_amount"] == "USD 3.50"
    assert "Expenses" in storage.slots


def test_out_of_range_amount_leaves_stored_data_alone(data_dir, seeded):
    response = seeded.post("/expenses", json={"name": "Yacht", "category": "Personal", "amount": "1e400"})
    assert response.status_code == 400

    restarted = create_app(data_dir, settings=Settings()).test_client()
    assert len(restarted.get("/expenses").get_json()["items"]) == 3
