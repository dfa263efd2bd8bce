"""Existence checks run before a mutation touches a referenced row."""
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Category, Expense, Invoice, Restaurant, User


def _check_exists(db: Session, model, id: int, label: str) -> None:
    found = db.execute(select(model.id).where(model.id == id)).first()
    if not found:
        raise NotFoundError(f"There is no {label} with the id {id}.")


def check_user_exists(db: Session, id: int) -> None:
    _check_exists(db, User, id, "user")


def check_restaurant_exists(db: Session, id: int) -> None:
    _check_exists(db, Restaurant, id, "restaurant")


def check_category_exists(db: Session, id: int) -> None:
    _check_exists(db, Category, id, "category")


def check_invoice_exists(db: Session, id: int) -> None:
    _check_exists(db, Invoice, id, "invoice")


def check_expense_exists(db: Session, id: int) -> None:
    _check_exists(db, Expense, id, "expense")
