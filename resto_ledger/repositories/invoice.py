import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..db import is_unique_violation, transaction
from ..errors import BadRequestError, NotFoundError
from ..helpers.check_exist import check_invoice_exists, check_restaurant_exists

log = logging.getLogger(__name__)

t = models.Invoice
COLUMNS = (t.id, t.restaurant_id, t.date, t.invoice, t.vendor, t.total, t.notes)
NUMBER_UNIQUE = ("uq_invoices_vendor_no", "invoices.restaurant_id, invoices.vendor, invoices.invoice")


def as_date(value: Union[date, str]) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid date: {value!r}.")


def as_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise BadRequestError(f"Invalid amount: {value!r}.")
    # NaN / Infinity 不是金額
    if not amount.is_finite():
        raise BadRequestError(f"Invalid amount: {value!r}.")
    return amount


def _check_duplicate(db: Session, restaurant_id: int, vendor: str, invoice: str, exclude_id: Optional[int] = None) -> None:
    q = select(t.id).where(t.restaurant_id == restaurant_id, t.vendor == vendor, t.invoice == invoice)
    if exclude_id is not None:
        q = q.where(t.id != exclude_id)
    if db.execute(q).first():
        raise _duplicate(vendor, invoice)


def _duplicate(vendor: str, invoice: str) -> BadRequestError:
    return BadRequestError(f"Invoice {invoice} from {vendor} already exists.")


def _fields(data: dict) -> dict:
    return {
        "date": as_date(data["date"]),
        "invoice": data["invoice"],
        "vendor": data["vendor"],
        "total": as_amount(data["total"]),
        "notes": data.get("notes"),
    }


class Invoice:
    @staticmethod
    def register(db: Session, data: dict) -> dict:
        """Add an invoice.

        Accepts: {restaurant_id, date, invoice, vendor, total, notes}
        Returns: {id, restaurant_id, date, invoice, vendor, total, notes}

        Raises BadRequestError if the restaurant already has this vendor's invoice
        number. Values are compared as given.
        """
        restaurant_id = data["restaurant_id"]
        check_restaurant_exists(db, restaurant_id)
        fields = _fields(data)
        _check_duplicate(db, restaurant_id, fields["vendor"], fields["invoice"])

        stmt = insert(t).values(restaurant_id=restaurant_id, **fields).returning(*COLUMNS)
        try:
            with transaction(db):
                invoice = dict(db.execute(stmt).mappings().one())
        except IntegrityError as e:
            if is_unique_violation(e, *NUMBER_UNIQUE):
                raise _duplicate(fields["vendor"], fields["invoice"]) from e
            raise

        log.info(f"registered invoice {invoice['id']} for restaurant {restaurant_id}")
        return invoice

    @staticmethod
    def get(db: Session, id: int) -> dict:
        row = db.execute(select(*COLUMNS).where(t.id == id)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no invoice with the id {id}.")
        return dict(row)

    @staticmethod
    def get_all_for_restaurant(db: Session, restaurant_id: int) -> list:
        check_restaurant_exists(db, restaurant_id)
        rows = db.execute(select(*COLUMNS).where(t.restaurant_id == restaurant_id).order_by(t.date, t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def get_dates_for_restaurant(db: Session, restaurant_id: int, start_date, end_date) -> list:
        """Invoices dated between ``start_date`` and ``end_date``, both included."""
        check_restaurant_exists(db, restaurant_id)
        q = (
            select(*COLUMNS)
            .where(t.restaurant_id == restaurant_id, t.date >= as_date(start_date), t.date <= as_date(end_date))
            .order_by(t.date, t.id)
        )
        return [dict(r) for r in db.execute(q).mappings().all()]

    @staticmethod
    def update(db: Session, id: int, data: dict) -> dict:
        """Replace date, invoice, vendor, total and notes."""
        check_invoice_exists(db, id)
        fields = _fields(data)
        restaurant_id = db.execute(select(t.restaurant_id).where(t.id == id)).scalar_one()
        _check_duplicate(db, restaurant_id, fields["vendor"], fields["invoice"], exclude_id=id)

        stmt = update(t).where(t.id == id).values(**fields).returning(*COLUMNS)
        try:
            with transaction(db):
                invoice = dict(db.execute(stmt).mappings().one())
        except IntegrityError as e:
            if is_unique_violation(e, *NUMBER_UNIQUE):
                raise _duplicate(fields["vendor"], fields["invoice"]) from e
            raise
        return invoice

    @staticmethod
    def remove(db: Session, id: int) -> None:
        with transaction(db):
            result = db.execute(delete(t).where(t.id == id))
            if not result.rowcount:
                raise NotFoundError(f"There is no invoice with id {id}.")
        log.info(f"removed invoice {id}")
