import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from .. import models
from ..db import transaction
from ..errors import NotFoundError
from ..helpers.check_exist import check_category_exists, check_restaurant_exists

log = logging.getLogger(__name__)

t = models.Category
COLUMNS = (t.id, t.restaurant_id, t.name, t.notes)


class Category:
    @staticmethod
    def register(db: Session, data: dict) -> dict:
        """Accepts: {restaurant_id, name, notes}  Returns: {id, restaurant_id, name, notes}"""
        check_restaurant_exists(db, data["restaurant_id"])

        stmt = insert(t).values(
            restaurant_id=data["restaurant_id"],
            name=data["name"],
            notes=data.get("notes"),
        ).returning(*COLUMNS)
        with transaction(db):
            category = dict(db.execute(stmt).mappings().one())
        log.info(f"registered category {category['id']} for restaurant {category['restaurant_id']}")
        return category

    @staticmethod
    def get(db: Session, id: int) -> dict:
        row = db.execute(select(*COLUMNS).where(t.id == id)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no category with the id {id}.")
        return dict(row)

    @staticmethod
    def get_all_for_restaurant(db: Session, restaurant_id: int) -> list:
        check_restaurant_exists(db, restaurant_id)
        rows = db.execute(select(*COLUMNS).where(t.restaurant_id == restaurant_id).order_by(t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def update(db: Session, id: int, data: dict) -> dict:
        check_category_exists(db, id)

        stmt = update(t).where(t.id == id).values(name=data["name"], notes=data.get("notes")).returning(*COLUMNS)
        with transaction(db):
            category = dict(db.execute(stmt).mappings().one())
        return category

    @staticmethod
    def remove(db: Session, id: int) -> None:
        with transaction(db):
            result = db.execute(delete(t).where(t.id == id))
            if not result.rowcount:
                raise NotFoundError(f"There is no category with id {id}.")
        log.info(f"removed category {id}")
