from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from config import settings
from database import get_db
from main import app
from registry import REGISTRY

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

COMMON_FIELDS = {
    "volunteer": {
        "fathername": "Ramesh",
        "mothername": "Sita",
        "dateofbirth": datetime(1995, 5, 17, tzinfo=timezone.utc),
        "education": "Graduate",
        "agree": True,
        "viewed": False,
    },
    "opinion": {"typeOfOpinion": "Roads", "comment": "Potholes near the market"},
    "suggestion": {"typeOfSuggest": "Health", "comment": "Open a night clinic", "viewed": False},
    "developmentIdea": {"typeOfIdea": "Education", "comment": "Library for the ward", "viewed": False},
}


@pytest.fixture()
def mongo_db():
    return mongomock.MongoClient()["civic_portal_test"]


@pytest.fixture()
def add_record(mongo_db):
    """Insert a record of ``tag`` created ``minutes`` after BASE_TIME; returns its id as str."""

    def _add(tag, minutes=0, **fields):
        kind = REGISTRY.resolve(tag)
        created = BASE_TIME + timedelta(minutes=minutes)
        doc = {
            "fullname": f"{tag} person {minutes}",
            "mobile": "9800000000",
            "area": "Ward 4",
            **COMMON_FIELDS[tag],
            "createdAt": created,
            "updatedAt": created,
            **fields,
        }
        return str(mongo_db[kind.collection].insert_one(doc).inserted_id)

    return _add


@pytest.fixture()
def client(mongo_db, monkeypatch):
    monkeypatch.setattr(settings, "admin_token", None)
    app.dependency_overrides[get_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()
