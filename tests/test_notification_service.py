import asyncio

import pytest

from conftest import make_request
from maintenance_app.repositories import notifications_repo, users_repo
from maintenance_app.services import notification_service

STORE = "Retail Store - Mumbai"

USERS = [
    {"id": "u-mc", "role": "maintenance_coordinator", "store": STORE},
    {"id": "u-mc-all", "role": "maintenance_coordinator", "store": "ALL"},
    {"id": "u-mc-other", "role": "maintenance_coordinator", "store": "Warehouse - Pune"},
    {"id": "u-coord", "role": "store_coordinator", "store": STORE},
    {"id": "u-sm", "role": "store_manager", "store": STORE},
    {"id": "u-admin", "role": "admin", "store": "ALL"},
]


@pytest.fixture
def sent(monkeypatch):
    rows = []

    async def list_by_role(role, store=None):
        return [u for u in USERS if u["role"] == role and (store is None or u["store"] in (store, "ALL"))]

    async def insert_many(docs):
        rows.extend(docs)
        return len(docs)

    monkeypatch.setattr(users_repo, "list_by_role", list_by_role)
    monkeypatch.setattr(notifications_repo, "insert_many", insert_many)
    return rows


def _notify(request, new_status, action, notes=None):
    return asyncio.run(notification_service.notify(request, new_status, action, "Store Manager", notes))


def test_next_role_in_same_store_is_notified(sent):
    count = _notify(make_request(), "Pending-Stage-3", "approve")
    assert count == 2
    assert [n["user_id"] for n in sent] == ["u-mc", "u-mc-all"]
    assert sent[0]["title"] == "Request MR-000001 - Action Required"
    assert sent[0]["message"] == "Pending Coordinator Decision (Internal/External). Action: Approve by Store Manager"
    assert sent[0]["read"] is False


def test_rejection_notifies_reporter(sent):
    _notify(make_request(), "Rejected", "reject", notes="Duplicada")
    assert [n["user_id"] for n in sent] == ["u-coord"]
    assert sent[0]["title"] == "Request MR-000001 - Rejected"
    assert sent[0]["message"].endswith("Notes: Duplicada")


def test_completion_notifies_reporter(sent):
    _notify(make_request(), "Completed-Internal", "close")
    assert [n["user_id"] for n in sent] == ["u-coord"]
    assert sent[0]["title"] == "Request MR-000001 - Completed"


def test_send_back_notifies_coordinators_once(sent):
    _notify(make_request(), "Submitted", "send_back", notes="Falta foto")
    assert [n["user_id"] for n in sent] == ["u-coord"]
    assert sent[0]["title"] == "Request MR-000001 - Sent Back"


def test_disabled_notifications(sent, monkeypatch):
    monkeypatch.setattr(notification_service.settings, "notifications_enabled", False)
    assert _notify(make_request(), "Pending-Stage-3", "approve") == 0
    assert sent == []


def test_new_request_notifies_store_managers_and_admins(sent):
    count = asyncio.run(notification_service.notify_created(make_request()))
    assert count == 2
    assert {n["user_id"] for n in sent} == {"u-sm", "u-admin"}
    assert sent[0]["title"] == "New Request MR-000001"
