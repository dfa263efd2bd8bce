"""Pytest configuration.

Settings are read at import time, so the environment is prepared before the
package is imported.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resto_ledger.db import ensure_tables, make_engine
from resto_ledger.repositories import Category, Invoice, Restaurant, User


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    ensure_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return User.register(
        db,
        {"email_address": "a@b.com", "first_name": "Ada", "last_name": "Byron", "password": "secret123"},
    )


@pytest.fixture
def restaurant(db, user):
    return Restaurant.register(db, user["id"], {"name": "Cafe", "email": "Info@Cafe.COM", "website": None})


@pytest.fixture
def other_restaurant(db, user):
    return Restaurant.register(db, user["id"], {"name": "Bistro"})


@pytest.fixture
def category(db, restaurant):
    return Category.register(db, {"restaurant_id": restaurant["id"], "name": "Produce"})


@pytest.fixture
def invoice(db, restaurant):
    return Invoice.register(
        db,
        {
            "restaurant_id": restaurant["id"],
            "date": "2024-03-01",
            "invoice": "INV-100",
            "vendor": "Sysco",
            "total": "120.50",
        },
    )
