import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..db import is_unique_violation, transaction
from ..errors import BadRequestError, NotFoundError, UnauthorizedError
from ..helpers.check_exist import check_user_exists
from ..security import dummy_verify, hash_password, verify_password
from .restaurant_user import RESTAURANT_COLUMNS, USER_COLUMNS, RestaurantUser, enrich

log = logging.getLogger(__name__)

t = models.User
PUBLIC_COLUMNS = USER_COLUMNS
EMAIL_UNIQUE = ("users.email_address", "ix_users_email_address")


def _duplicate_email(email_address: str) -> BadRequestError:
    return BadRequestError(f"The email address {email_address} is already associated with an existing account.")


def _check_email_free(db: Session, email_address: str, exclude_id=None) -> None:
    q = select(t.id).where(t.email_address == email_address)
    if exclude_id is not None:
        q = q.where(t.id != exclude_id)
    if db.execute(q).first():
        raise _duplicate_email(email_address)


class User:
    @staticmethod
    def authenticate(db: Session, email_address: str, password: str) -> dict:
        """Check an email address / password pair.

        Accepts: email_address, password
        Returns: {id, email_address, first_name, last_name}

        Raises UnauthorizedError whether the address is unknown or the password is
        wrong; the message and the hashing work are the same in both cases.
        """
        email = email_address.lower()
        row = db.execute(select(*PUBLIC_COLUMNS, t.password).where(t.email_address == email)).mappings().first()

        if not row:
            dummy_verify()
        elif verify_password(password, row["password"]):
            user = dict(row)
            del user["password"]
            return user

        log.info("rejected login attempt")
        raise UnauthorizedError(f"The entered email address ({email}) and password do not match.")

    @staticmethod
    def register(db: Session, data: dict) -> dict:
        """Add a user.

        Accepts: {email_address, first_name, last_name, password}
        Returns: {id, email_address, first_name, last_name}

        Raises BadRequestError if the email address is taken (case-insensitive).
        """
        email = data["email_address"].lower()
        _check_email_free(db, email)

        stmt = insert(t).values(
            email_address=email,
            first_name=data["first_name"],
            last_name=data["last_name"],
            password=hash_password(data["password"]),
        ).returning(*PUBLIC_COLUMNS)
        try:
            with transaction(db):
                user = dict(db.execute(stmt).mappings().one())
        except IntegrityError as e:
            # 兩個請求同時註冊同一信箱
            if is_unique_violation(e, *EMAIL_UNIQUE):
                raise _duplicate_email(email) from e
            raise

        log.info(f"registered user {user['id']}")
        return user

    @staticmethod
    def get(db: Session, id: int) -> dict:
        """Get a user with the restaurants they belong to.

        Returns: {id, email_address, first_name, last_name, restaurants}
        where restaurants is [{is_owner, id, owner_id, name, address, phone, email, website, notes}, ...]
        """
        row = db.execute(select(*PUBLIC_COLUMNS).where(t.id == id)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no user with the id {id}.")

        user = dict(row)
        links = RestaurantUser.get_all_user_restaurants(db, id)
        user["restaurants"] = enrich(db, links, "restaurant_id", models.Restaurant, RESTAURANT_COLUMNS)
        return user

    @staticmethod
    def get_by_email_address(db: Session, email_address: str) -> dict:
        email = email_address.lower()
        row = db.execute(select(*PUBLIC_COLUMNS).where(t.email_address == email)).mappings().first()
        if not row:
            raise NotFoundError(f"There is no user with the email address {email}.")
        return dict(row)

    @staticmethod
    def update(db: Session, id: int, data: dict) -> dict:
        """Replace email address, first name and last name.

        Raises BadRequestError if another account already uses the email address.
        Keeping one's own address is never a conflict.
        """
        check_user_exists(db, id)

        email = data["email_address"].lower()
        _check_email_free(db, email, exclude_id=id)

        stmt = update(t).where(t.id == id).values(
            email_address=email,
            first_name=data["first_name"],
            last_name=data["last_name"],
        ).returning(*PUBLIC_COLUMNS)
        try:
            with transaction(db):
                user = dict(db.execute(stmt).mappings().one())
        except IntegrityError as e:
            if is_unique_violation(e, *EMAIL_UNIQUE):
                raise _duplicate_email(email) from e
            raise
        return user

    @staticmethod
    def change_password(db: Session, id: int, current_password: str, new_password: str) -> None:
        row = db.execute(select(t.password).where(t.id == id)).first()
        if not row:
            raise NotFoundError(f"There is no user with the id {id}.")
        if not verify_password(current_password, row.password):
            raise UnauthorizedError("The current password is not correct.")

        with transaction(db):
            db.execute(update(t).where(t.id == id).values(password=hash_password(new_password)))
        log.info(f"changed password for user {id}")

    @staticmethod
    def remove(db: Session, id: int) -> None:
        with transaction(db):
            result = db.execute(delete(t).where(t.id == id))
            if not result.rowcount:
                raise NotFoundError(f"There is no user with id {id}.")
        log.info(f"removed user {id}")
