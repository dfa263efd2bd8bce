from __future__ import annotations

import pytest

from resto_ledger.errors import ConsistencyError, NotFoundError
from resto_ledger.helpers.check_exist import (
    check_category_exists,
    check_expense_exists,
    check_invoice_exists,
    check_restaurant_exists,
    check_user_exists,
)
from resto_ledger.helpers.check_same_restaurant import check_invoice_category


@pytest.mark.parametrize(
    "check, label",
    [
        (check_user_exists, "user"),
        (check_restaurant_exists, "restaurant"),
        (check_category_exists, "category"),
        (check_invoice_exists, "invoice"),
        (check_expense_exists, "expense"),
    ],
)
def test_missing_rows_raise_not_found(db, check, label) -> None:
    with pytest.raises(NotFoundError) as exc:
        check(db, 321)
    assert exc.value.message == f"There is no {label} with the id 321."
    assert exc.value.status_code == 404


def test_existing_rows_pass(db, user, restaurant, category, invoice) -> None:
    check_user_exists(db, user["id"])
    check_restaurant_exists(db, restaurant["id"])
    check_category_exists(db, category["id"])
    check_invoice_exists(db, invoice["id"])


def test_invoice_category(db, restaurant, other_restaurant, category, invoice) -> None:
    check_invoice_category(db, invoice["id"], category["id"])
    check_invoice_category(db, invoice["id"], category["id"], restaurant["id"])

    with pytest.raises(ConsistencyError):
        check_invoice_category(db, invoice["id"], category["id"], other_restaurant["id"])
    with pytest.raises(NotFoundError):
        check_invoice_category(db, invoice["id"], 999)
