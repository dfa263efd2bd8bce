import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from .. import models
from ..db import transaction
from ..errors import NotFoundError
from ..helpers.check_exist import check_restaurant_exists
from ..helpers.check_same_restaurant import check_expense_invoice_category, check_invoice_category
from .invoice import as_amount

log = logging.getLogger(__name__)

t = models.Expense
COLUMNS = (t.id, t.restaurant_id, t.category_id, t.invoice_id, t.amount, t.notes)


class Expense:
    @staticmethod
    def register(db: Session, data: dict) -> dict:
        """Add an expense line to an invoice.

        Accepts: {restaurant_id, category_id, invoice_id, amount, notes}
        Returns: {id, restaurant_id, category_id, invoice_id, amount, notes}

        Raises ConsistencyError if the category, the invoice and the restaurant do
        not line up.
        """
        check_restaurant_exists(db, data["restaurant_id"])
        check_invoice_category(db, data["invoice_id"], data["category_id"], data["restaurant_id"])

        stmt = insert(t).values(
            restaurant_id=data["restaurant_id"],
            category_id=data["category_id"],
            invoice_id=data["invoice_id"],
            amount=as_amount(data["amount"]),
            notes=data.get("notes"),
        ).returning(*COLUMNS)
        with transaction(db):
            expense = dict(db.execute(stmt).mappings().one())
        log.info(f"registered expense {expense['id']} on invoice {expense['invoice_id']}")
        return expense

    @staticmethod
    def get(db: Session, id: int) -> dict:
        row = db.execute(select(*COLUMNS).where(t.id == id)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no expense with the id {id}.")
        return dict(row)

    @staticmethod
    def get_all_for_invoice(db: Session, invoice_id: int) -> list:
        rows = db.execute(select(*COLUMNS).where(t.invoice_id == invoice_id).order_by(t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def get_all_for_restaurant(db: Session, restaurant_id: int) -> list:
        rows = db.execute(select(*COLUMNS).where(t.restaurant_id == restaurant_id).order_by(t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def update(db: Session, expense_id: int, invoice_id: int, data: dict) -> dict:
        """Replace category, amount and notes.

        The new category is checked against the invoice's restaurant.
        """
        check_expense_invoice_category(db, expense_id, invoice_id, data["category_id"])

        stmt = update(t).where(t.id == expense_id).values(
            category_id=data["category_id"],
            amount=as_amount(data["amount"]),
            notes=data.get("notes"),
        ).returning(*COLUMNS)
        with transaction(db):
            expense = dict(db.execute(stmt).mappings().one())
        return expense

    @staticmethod
    def remove(db: Session, id: int) -> None:
        with transaction(db):
            result = db.execute(delete(t).where(t.id == id))
            if not result.rowcount:
                raise NotFoundError(f"There is no expense with id {id}.")
        log.info(f"removed expense {id}")
