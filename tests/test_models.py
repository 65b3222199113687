from decimal import Decimal

import pytest

from common.exceptions import ValidationError
from common.models import ExpenseItem, ViewMode


def test_create_generates_distinct_ids():
    first = ExpenseItem.create("Coffee", "Personal", Decimal("3.50"))
    second = ExpenseItem.create("Coffee", "Personal", Decimal("3.50"))
    assert first.id != second.id
    assert first.name == second.name == "Coffee"


def test_to_dict_writes_category_under_type():
    item = ExpenseItem(id="abc", name="Rent", category="Business", amount=Decimal("1200.00"))
    assert item.to_dict() == {"id": "abc", "name": "Rent", "type": "Business", "amount": 1200.0}


def test_from_dict_reads_persisted_layout():
    item = ExpenseItem.from_dict({"id": "abc", "name": "Taxi", "type": "Business", "amount": Decimal("-4.2")})
    assert item == ExpenseItem(id="abc", name="Taxi", category="Business", amount=Decimal("-4.2"))


def test_from_dict_accepts_integer_amounts():
    item = ExpenseItem.from_dict({"id": "abc", "name": "Taxi", "type": "Business", "amount": 0})
    assert item.amount == Decimal("0")


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Taxi", "type": "Business", "amount": 1},
        {"id": "abc", "type": "Business", "amount": 1},
        {"id": "abc", "name": "Taxi", "category": "Business", "amount": 1},
        {"id": 7, "name": "Taxi", "type": "Business", "amount": 1},
        {"id": "abc", "name": "Taxi", "type": "Business", "amount": "1"},
        {"id": "abc", "name": "Taxi", "type": "Business", "amount": True},
        {"id": "abc", "name": "Taxi", "type": "Business", "amount": None},
        ["abc", "Taxi", "Business", 1],
    ],
)
def test_from_dict_rejects_shape_mismatches(payload):
    with pytest.raises((KeyError, TypeError, ValueError)):
        ExpenseItem.from_dict(payload)


def test_records_are_immutable():
    item = ExpenseItem.create("Coffee", "Personal", Decimal("3.50"))
    with pytest.raises(AttributeError):
        item.amount = Decimal("1")  # type: ignore[misc]


@pytest.mark.parametrize(
    "mode, category, group_key, title",
    [
        (ViewMode.PERSONAL, "Personal", "name", "Personal"),
        (ViewMode.BUSINESS, "Business", "name", "Business"),
        (ViewMode.BOTH, None, "category", "Both"),
    ],
)
def test_view_mode_switches_filter_and_grouping_together(mode, category, group_key, title):
    assert mode.category == category
    assert mode.group_key == group_key
    assert mode.title == title


def test_label_for_follows_grouping_key():
    item = ExpenseItem.create("Coffee", "Personal", Decimal("3.50"))
    assert ViewMode.PERSONAL.label_for(item) == "Coffee"
    assert ViewMode.BOTH.label_for(item) == "Personal"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, ViewMode.BOTH),
        ("", ViewMode.BOTH),
        ("both", ViewMode.BOTH),
        ("Personal", ViewMode.PERSONAL),
        (" BUSINESS ", ViewMode.BUSINESS),
    ],
)
def test_parse_view_mode(raw, expected):
    assert ViewMode.parse(raw) is expected


def test_parse_view_mode_rejects_unknown_values():
    with pytest.raises(ValidationError):
        ViewMode.parse("family")


def test_amounts_are_held_at_double_precision():
    item = ExpenseItem.create("Bond", "Business", Decimal("12345678901234567.89"))
    assert item.amount == Decimal(repr(12345678901234567.89))
    assert ExpenseItem.create("Stamp", "Personal", Decimal("1e-400")).amount == 0


def test_from_dict_rejects_amounts_beyond_double_range():
    with pytest.raises(ValueError):
        ExpenseItem.from_dict({"id": "abc", "name": "Yacht", "type": "Personal", "amount": Decimal("1e400")})
    with pytest.raises(ValueError):
        ExpenseItem.from_dict({"id": "abc", "name": "Yacht", "type": "Personal", "amount": 10**400})
