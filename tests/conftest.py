import os

import pytest

# Configura las variables requeridas antes de importar el backend.
os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017/test")
os.environ.setdefault("DB_NAME", "test_db")
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas-suficientemente-larga-para-hs256")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "true")

from maintenance_app.repositories import actions_repo, requests_repo  # noqa: E402


class FakeRequests:
    """Colección de solicitudes en memoria con la misma escritura condicional que Mongo."""

    def __init__(self, *docs):
        self.docs = {d["id"]: dict(d) for d in docs}
        self.inserted = []
        self.seq = 0

    async def find_by_id(self, request_id):
        doc = self.docs.get(request_id)
        return dict(doc) if doc else None

    async def insert(self, doc):
        self.docs[doc["id"]] = dict(doc)
        self.inserted.append(dict(doc))

    async def next_sequence(self):
        self.seq += 1
        return self.seq

    async def update_status_if(self, request_id, expected_status, new_status, new_stage, extra=None):
        doc = self.docs.get(request_id)
        if not doc or doc["status"] != expected_status:
            return False
        doc.update(status=new_status, current_stage=new_stage, **(extra or {}))
        return True


class FakeActions:
    def __init__(self):
        self.records = []

    async def append(self, record):
        self.records.append(record)
        return record.model_dump()


def make_request(**overrides):
    doc = {
        "id": "MR-000001",
        "store": "Retail Store - Mumbai",
        "category": "Electrical",
        "description": "Luces del pasillo 3 sin funcionar",
        "priority": "High",
        "contact_number": "555-0101",
        "reported_by": "u-coord",
        "reported_by_name": "Store Coordinator",
        "status": "Pending-Stage-2",
        "flow_type": None,
        "current_stage": 2,
        "sent_back_from_status": None,
        "sent_back_from_stage": None,
        "sent_back_from_flow": None,
    }
    doc.update(overrides)
    return doc


def make_user(role, user_id=None, store="Retail Store - Mumbai"):
    return {"id": user_id or f"u-{role}", "username": role, "full_name": role.replace("_", " ").title(), "role": role, "store": store}


@pytest.fixture
def actions(monkeypatch):
    fake = FakeActions()
    monkeypatch.setattr(actions_repo, "append", fake.append)
    return fake


@pytest.fixture
def install_requests(monkeypatch):
    def _install(*docs):
        fake = FakeRequests(*docs)
        monkeypatch.setattr(requests_repo, "find_by_id", fake.find_by_id)
        monkeypatch.setattr(requests_repo, "insert", fake.insert)
        monkeypatch.setattr(requests_repo, "next_sequence", fake.next_sequence)
        monkeypatch.setattr(requests_repo, "update_status_if", fake.update_status_if)
        return fake
    return _install
