from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from resto_ledger.db import get_db
from resto_ledger.main import app
from resto_ledger.repositories import Restaurant, User


def test_health() -> None:
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_errors_reach_client_with_status(engine) -> None:
    local = FastAPI()
    Session = sessionmaker(bind=engine, future=True)

    def _db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    @local.get("/restaurants/{rid}")
    def get_restaurant(rid: int, db=Depends(get_db)):
        return Restaurant.get(db, rid)

    @local.post("/login")
    def login(email: str, password: str, db=Depends(get_db)):
        return User.authenticate(db, email, password)

    local.dependency_overrides[get_db] = _db
    client = TestClient(local)

    resp = client.get("/restaurants/8")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "There is no restaurant with the id 8."}

    resp = client.post("/login", params={"email": "x@y.com", "password": "pw"})
    assert resp.status_code == 401
