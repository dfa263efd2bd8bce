"""Membership links between users and restaurants."""
import logging

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..db import is_unique_violation, transaction
from ..errors import BadRequestError, NotFoundError
from ..helpers.check_exist import check_restaurant_exists, check_user_exists

log = logging.getLogger(__name__)

t = models.RestaurantUser
LINK_COLUMNS = (t.restaurant_id, t.user_id, t.is_owner)
PAIR_UNIQUE = ("uq_restaurants_users_pair", "restaurants_users.restaurant_id, restaurants_users.user_id")

USER_COLUMNS = (models.User.id, models.User.email_address, models.User.first_name, models.User.last_name)
RESTAURANT_COLUMNS = (
    models.Restaurant.id,
    models.Restaurant.owner_id,
    models.Restaurant.name,
    models.Restaurant.address,
    models.Restaurant.phone,
    models.Restaurant.email,
    models.Restaurant.website,
    models.Restaurant.notes,
)


def enrich(db: Session, links: list, key: str, model, columns: tuple) -> list:
    """Replace the foreign keys of each link with the record ``key`` points at.

    One query for all distinct ids; output keeps the order of ``links``.
    """
    ids = {link[key] for link in links}
    if not ids:
        return []

    rows = db.execute(select(*columns).where(model.id.in_(ids))).mappings().all()
    by_id = {r["id"]: r for r in rows}

    out = []
    for link in links:
        item = {k: v for k, v in link.items() if k not in ("restaurant_id", "user_id")}
        item.update(by_id[link[key]])
        out.append(item)
    return out


def insert_link(db: Session, restaurant_id: int, user_id: int, is_owner: bool) -> dict:
    """Insert without committing, for callers that own the transaction."""
    stmt = insert(t).values(restaurant_id=restaurant_id, user_id=user_id, is_owner=is_owner).returning(*LINK_COLUMNS)
    return dict(db.execute(stmt).mappings().one())


def _duplicate(restaurant_id: int, user_id: int) -> BadRequestError:
    return BadRequestError(f"User {user_id} is already associated with restaurant {restaurant_id}.")


def _check_not_linked(db: Session, restaurant_id: int, user_id: int) -> None:
    dup = db.execute(select(t.id).where(t.restaurant_id == restaurant_id, t.user_id == user_id)).first()
    if dup:
        raise _duplicate(restaurant_id, user_id)


def _check_keeps_owner(db: Session, restaurant_id: int, user_id: int) -> None:
    """The link may only be dropped or demoted if the restaurant still has an owner."""
    link = db.execute(
        select(t.is_owner).where(t.restaurant_id == restaurant_id, t.user_id == user_id)
    ).first()
    if not link:
        raise NotFoundError(f"User {user_id} is not associated with restaurant {restaurant_id}.")

    owner_id = db.execute(select(models.Restaurant.owner_id).where(models.Restaurant.id == restaurant_id)).scalar_one()
    if owner_id == user_id:
        raise BadRequestError(f"User {user_id} is the owner of restaurant {restaurant_id}.")

    if link.is_owner:
        owners = db.execute(
            select(func.count()).select_from(t).where(t.restaurant_id == restaurant_id, t.is_owner.is_(True))
        ).scalar_one()
        if owners <= 1:
            raise BadRequestError(f"User {user_id} is the last owner of restaurant {restaurant_id}.")


class RestaurantUser:
    @staticmethod
    def register(db: Session, restaurant_id: int, user_id: int, is_owner: bool = False) -> dict:
        """Link a user to a restaurant.

        Returns: {restaurant_id, user_id, is_owner}
        Raises BadRequestError if the pair is already linked.
        """
        check_restaurant_exists(db, restaurant_id)
        check_user_exists(db, user_id)
        _check_not_linked(db, restaurant_id, user_id)

        try:
            with transaction(db):
                link = insert_link(db, restaurant_id, user_id, is_owner)
        except IntegrityError as e:
            if is_unique_violation(e, *PAIR_UNIQUE):
                raise _duplicate(restaurant_id, user_id) from e
            raise

        log.info(f"linked user {user_id} to restaurant {restaurant_id} (owner={is_owner})")
        return link

    @staticmethod
    def get_all_restaurant_users(db: Session, restaurant_id: int) -> list:
        rows = db.execute(select(*LINK_COLUMNS).where(t.restaurant_id == restaurant_id).order_by(t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def get_all_user_restaurants(db: Session, user_id: int) -> list:
        rows = db.execute(select(*LINK_COLUMNS).where(t.user_id == user_id).order_by(t.id)).mappings().all()
        return [dict(r) for r in rows]

    @staticmethod
    def update(db: Session, restaurant_id: int, user_id: int, is_owner: bool) -> dict:
        """Set the owner flag. Raises BadRequestError if that would leave no owner."""
        if not is_owner:
            _check_keeps_owner(db, restaurant_id, user_id)

        stmt = (
            update(t)
            .where(t.restaurant_id == restaurant_id, t.user_id == user_id)
            .values(is_owner=is_owner)
            .returning(*LINK_COLUMNS)
        )
        with transaction(db):
            row = db.execute(stmt).mappings().first()
            if not row:
                raise NotFoundError(f"User {user_id} is not associated with restaurant {restaurant_id}.")
            link = dict(row)
        return link

    @staticmethod
    def remove(db: Session, restaurant_id: int, user_id: int) -> None:
        """Unlink a user. Raises BadRequestError if that would leave no owner."""
        _check_keeps_owner(db, restaurant_id, user_id)

        with transaction(db):
            db.execute(delete(t).where(t.restaurant_id == restaurant_id, t.user_id == user_id))
        log.info(f"unlinked user {user_id} from restaurant {restaurant_id}")
