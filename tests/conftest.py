import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import database
import email_client
from main import app


@pytest.fixture
def mongo(monkeypatch):
    db = mongomock.MongoClient()["hackathon-test"]
    monkeypatch.setattr(database, "db", db)
    return db


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_post(to, subject, html):
        sent.append({"to": to, "subject": subject, "html": html})
        return True

    monkeypatch.setattr(email_client, "_post_email", fake_post)
    return sent


@pytest.fixture
def client(mongo, sent_emails):
    with TestClient(app) as c:
        yield c


def register(client, email, password="abc123"):
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def make_admin(mongo, user_id):
    mongo["user"].update_one({"_id": ObjectId(user_id)}, {"$set": {"admin": True}})


def auth(user):
    return {"x-access-token": user["token"]}


@pytest.fixture
def admin(client, mongo):
    user = register(client, "admin@hackathon.dev")
    make_admin(mongo, user["_id"])
    return user


class _BlindCollection:
    """Collection whose find_one never finds anything; everything else is passed through."""

    def __init__(self, collection):
        self._collection = collection

    def find_one(self, *args, **kwargs):
        return None

    def __getattr__(self, name):
        return getattr(self._collection, name)


@pytest.fixture
def blind_lookups(monkeypatch):
    """Make find_one miss on the named collections, leaving unique indexes to catch duplicates."""
    def apply(*names):
        real = database.get_collection

        def get_collection(name):
            collection = real(name)
            return _BlindCollection(collection) if name in names else collection

        monkeypatch.setattr(database, "get_collection", get_collection)
    return apply
