from __future__ import annotations

from decimal import Decimal

import pytest

from resto_ledger.errors import BadRequestError, ConsistencyError, NotFoundError
from resto_ledger.repositories import Category, Expense, Invoice


@pytest.fixture
def foreign_category(db, other_restaurant):
    return Category.register(db, {"restaurant_id": other_restaurant["id"], "name": "Bar"})


@pytest.fixture
def expense(db, restaurant, category, invoice):
    return Expense.register(
        db,
        {
            "restaurant_id": restaurant["id"],
            "category_id": category["id"],
            "invoice_id": invoice["id"],
            "amount": "45.25",
            "notes": "tomatoes",
        },
    )


def test_register_matching_category(expense, category, invoice) -> None:
    assert expense["category_id"] == category["id"]
    assert expense["invoice_id"] == invoice["id"]
    assert expense["amount"] == Decimal("45.25")


def test_register_category_from_other_restaurant(db, restaurant, invoice, foreign_category) -> None:
    with pytest.raises(ConsistencyError) as exc:
        Expense.register(
            db,
            {
                "restaurant_id": restaurant["id"],
                "category_id": foreign_category["id"],
                "invoice_id": invoice["id"],
                "amount": 10,
            },
        )
    assert isinstance(exc.value, BadRequestError)
    assert exc.value.status_code == 400


def test_register_restaurant_must_match_invoice(db, other_restaurant, category, invoice) -> None:
    with pytest.raises(ConsistencyError):
        Expense.register(
            db,
            {
                "restaurant_id": other_restaurant["id"],
                "category_id": category["id"],
                "invoice_id": invoice["id"],
                "amount": 10,
            },
        )


def test_register_missing_invoice(db, restaurant, category) -> None:
    with pytest.raises(NotFoundError):
        Expense.register(
            db,
            {"restaurant_id": restaurant["id"], "category_id": category["id"], "invoice_id": 999, "amount": 1},
        )


def test_listings(db, restaurant, category, invoice, expense) -> None:
    second_invoice = Invoice.register(
        db,
        {"restaurant_id": restaurant["id"], "date": "2024-03-09", "invoice": "INV-101", "vendor": "Sysco", "total": 9},
    )
    other = Expense.register(
        db,
        {"restaurant_id": restaurant["id"], "category_id": category["id"], "invoice_id": second_invoice["id"], "amount": 9},
    )

    assert Expense.get(db, expense["id"]) == expense
    assert [e["id"] for e in Expense.get_all_for_invoice(db, invoice["id"])] == [expense["id"]]
    assert [e["id"] for e in Expense.get_all_for_restaurant(db, restaurant["id"])] == [expense["id"], other["id"]]


def test_update_checks_new_category(db, restaurant, invoice, expense, foreign_category) -> None:
    with pytest.raises(ConsistencyError):
        Expense.update(db, expense["id"], invoice["id"], {"category_id": foreign_category["id"], "amount": 1})

    dairy = Category.register(db, {"restaurant_id": restaurant["id"], "name": "Dairy"})
    got = Expense.update(db, expense["id"], invoice["id"], {"category_id": dairy["id"], "amount": "50"})
    assert got["category_id"] == dairy["id"]
    assert got["amount"] == Decimal("50")
    assert got["notes"] is None


def test_update_wrong_invoice(db, restaurant, category, expense) -> None:
    other_invoice = Invoice.register(
        db,
        {"restaurant_id": restaurant["id"], "date": "2024-03-09", "invoice": "INV-101", "vendor": "Sysco", "total": 9},
    )
    with pytest.raises(ConsistencyError):
        Expense.update(db, expense["id"], other_invoice["id"], {"category_id": category["id"], "amount": 1})


def test_update_missing_expense(db, invoice, category) -> None:
    with pytest.raises(NotFoundError):
        Expense.update(db, 500, invoice["id"], {"category_id": category["id"], "amount": 1})


def test_remove_missing_names_id(db, expense) -> None:
    Expense.remove(db, expense["id"])
    with pytest.raises(NotFoundError) as exc:
        Expense.remove(db, expense["id"])
    assert str(expense["id"]) in exc.value.message


@pytest.mark.parametrize("amount", ["NaN", "Infinity"])
def test_register_rejects_non_finite_amount(db, restaurant, category, invoice, amount) -> None:
    with pytest.raises(BadRequestError):
        Expense.register(
            db,
            {"restaurant_id": restaurant["id"], "category_id": category["id"], "invoice_id": invoice["id"], "amount": amount},
        )
    assert Expense.get_all_for_invoice(db, invoice["id"]) == []


def test_update_rejects_non_finite_amount(db, invoice, category, expense) -> None:
    with pytest.raises(BadRequestError):
        Expense.update(db, expense["id"], invoice["id"], {"category_id": category["id"], "amount": "NaN"})
    assert Expense.get(db, expense["id"]) == expense
