import logging
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from .. import models
from ..db import transaction
from ..errors import NotFoundError
from ..helpers.check_exist import check_restaurant_exists, check_user_exists
from .restaurant_user import RESTAURANT_COLUMNS, USER_COLUMNS, RestaurantUser, enrich, insert_link

log = logging.getLogger(__name__)

t = models.Restaurant


def _lower(value: Optional[str]) -> Optional[str]:
    # None / 空字串原樣保留
    return value.lower() if value else value


def _fields(data: dict) -> dict:
    return {
        "name": data["name"],
        "address": data.get("address"),
        "phone": data.get("phone"),
        "email": _lower(data.get("email")),
        "website": _lower(data.get("website")),
        "notes": data.get("notes"),
    }


class Restaurant:
    @staticmethod
    def register(db: Session, owner_id: int, data: dict) -> dict:
        """Add a restaurant and make ``owner_id`` its owner.

        Accepts: owner_id, {name, address, phone, email, website, notes}
        Returns: {id, owner_id, name, address, phone, email, website, notes}

        The restaurant row and the owner link are committed together; if either
        insert fails neither is kept.
        """
        check_user_exists(db, owner_id)

        stmt = insert(t).values(owner_id=owner_id, **_fields(data)).returning(*RESTAURANT_COLUMNS)
        with transaction(db):
            restaurant = dict(db.execute(stmt).mappings().one())
            insert_link(db, restaurant["id"], owner_id, True)

        log.info(f"registered restaurant {restaurant['id']} for owner {owner_id}")
        return restaurant

    @staticmethod
    def get(db: Session, id: int) -> dict:
        """Get a restaurant with its users.

        Returns: {id, owner_id, name, address, phone, email, website, notes, users}
        where users is [{is_owner, id, email_address, first_name, last_name}, ...]
        """
        row = db.execute(select(*RESTAURANT_COLUMNS).where(t.id == id)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no restaurant with the id {id}.")

        restaurant = dict(row)
        links = RestaurantUser.get_all_restaurant_users(db, id)
        restaurant["users"] = enrich(db, links, "user_id", models.User, USER_COLUMNS)
        return restaurant

    @staticmethod
    def get_all_for_user(db: Session, user_id: int) -> list:
        check_user_exists(db, user_id)
        links = RestaurantUser.get_all_user_restaurants(db, user_id)
        return enrich(db, links, "restaurant_id", models.Restaurant, RESTAURANT_COLUMNS)

    @staticmethod
    def update(db: Session, id: int, data: dict) -> dict:
        """Replace name, address, phone, email, website and notes."""
        check_restaurant_exists(db, id)

        stmt = update(t).where(t.id == id).values(**_fields(data)).returning(*RESTAURANT_COLUMNS)
        with transaction(db):
            restaurant = dict(db.execute(stmt).mappings().one())
        return restaurant

    @staticmethod
    def remove(db: Session, id: int) -> None:
        with transaction(db):
            result = db.execute(delete(t).where(t.id == id))
            if not result.rowcount:
                raise NotFoundError(f"There is no restaurant with id {id}.")
        log.info(f"removed restaurant {id}")
