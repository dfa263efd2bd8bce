"""Cross-entity checks: records linked by an expense must share a restaurant."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import ConsistencyError, NotFoundError
from ..models import Category, Expense, Invoice


def _restaurant_of(db: Session, model, id: int, label: str) -> int:
    row = db.execute(select(model.restaurant_id).where(model.id == id)).first()
    if not row:
        raise NotFoundError(f"There is no {label} with the id {id}.")
    return row.restaurant_id


def check_invoice_category(db: Session, invoice_id: int, category_id: int, restaurant_id: Optional[int] = None) -> None:
    """Invoice and category must exist and belong to the same restaurant.

    When ``restaurant_id`` is passed it has to be that restaurant as well.
    """
    invoice_restaurant = _restaurant_of(db, Invoice, invoice_id, "invoice")
    category_restaurant = _restaurant_of(db, Category, category_id, "category")

    if category_restaurant != invoice_restaurant:
        raise ConsistencyError(
            f"Category {category_id} and invoice {invoice_id} do not belong to the same restaurant."
        )
    if restaurant_id is not None and restaurant_id != invoice_restaurant:
        raise ConsistencyError(f"Invoice {invoice_id} does not belong to restaurant {restaurant_id}.")


def check_expense_invoice_category(db: Session, expense_id: int, invoice_id: int, category_id: int) -> None:
    row = db.execute(select(Expense.invoice_id).where(Expense.id == expense_id)).first()
    if not row:
        raise NotFoundError(f"There is no expense with the id {expense_id}.")
    if row.invoice_id != invoice_id:
        raise ConsistencyError(f"Expense {expense_id} is not part of invoice {invoice_id}.")

    check_invoice_category(db, invoice_id, category_id)
