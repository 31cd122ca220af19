"""Shared fixtures: an in-process document store behind mocked HTTP."""

import re
from datetime import datetime, timedelta
from urllib.parse import urlsplit

import jwt
import pytest
import responses

import store_server
from fleetbook import config

STORE_URL = "http://localhost:3000"


class FakeStore:
    """Answers the document store's HTTP calls with the real store server app."""

    def __init__(self, client):
        self.client = client
        self.calls = []

    def register(self, rsps):
        pattern = re.compile(re.escape(STORE_URL) + r"/.*")
        for method in (responses.GET, responses.POST, responses.PUT, responses.PATCH, responses.DELETE):
            rsps.add_callback(method, pattern, callback=self._forward)

    def _forward(self, request):
        url = urlsplit(request.url)
        self.calls.append((request.method, url.path))
        body = request.body
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        response = self.client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            data=body,
            content_type="application/json",
        )
        return response.status_code, {"Content-Type": "application/json"}, response.get_data()

    def seed(self, collection, *records):
        db = store_server.read_db()
        db.setdefault(collection, []).extend(records)
        store_server.write_db(db)

    def records(self, collection):
        return store_server.read_db().get(collection, [])

    def get(self, collection, record_id):
        return next(r for r in self.records(collection) if r.get("id") == record_id)


@pytest.fixture
def fake_store(tmp_path, monkeypatch):
    monkeypatch.setattr(store_server, "DB_FILE", str(tmp_path / "db.json"))
    monkeypatch.setattr(config, "STORE_URL", STORE_URL)
    store_server.ensure_db()

    store = FakeStore(store_server.app.test_client())
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        store.register(rsps)
        yield store


def issue_token(email, kind="employee"):
    now = datetime.utcnow()
    payload = {"email": email, "kind": kind, "exp": now + timedelta(hours=1), "iat": now}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


@pytest.fixture
def fleet(fake_store):
    """A small fleet: an admin, two employees, a driver with a car and a car without driver."""
    fake_store.seed(
        "employees",
        {"id": "e-admin", "name": "Grace Admin", "email": "admin@example.com", "role": "admin"},
        {"id": "e-ann", "name": "Ann Wanjiru", "email": "ann@example.com", "role": "employee"},
        {"id": "e-bob", "name": "Bob Otieno", "email": "bob@example.com", "role": "manager"},
    )
    fake_store.seed(
        "cars",
        {"id": "c1", "model": "Corolla", "plate": "KAA 001", "seats": 5, "driverId": "d1",
         "availableToday": True, "unavailableSince": None},
        {"id": "c2", "model": "Prius", "plate": "KAA 002", "seats": 5, "driverId": None,
         "availableToday": True, "unavailableSince": None},
    )
    fake_store.seed(
        "drivers",
        {"id": "d1", "name": "Dan Kamau", "email": "dan@example.com", "phone": "0700", "license": "L1",
         "carId": "c1"},
    )
    return {
        "admin": issue_token("admin@example.com"),
        "ann": issue_token("ann@example.com"),
        "bob": issue_token("bob@example.com"),
        "driver": issue_token("dan@example.com", kind="driver"),
        "store": fake_store,
    }


@pytest.fixture
def token_for():
    return issue_token
