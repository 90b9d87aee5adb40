import asyncio

import pytest
from fastapi import HTTPException

from conftest import make_request, make_user
from maintenance_app.models.request import ActionPayload
from maintenance_app.services import notification_service, workflow_service


@pytest.fixture
def notified(monkeypatch):
    calls = []

    async def fake_notify(request, new_status, action_taken, actor_label, notes=None):
        calls.append((request["id"], new_status, action_taken, actor_label, notes))
        return 1

    monkeypatch.setattr(notification_service, "notify", fake_notify)
    return calls


def _apply(request_id, actor, action, **kw):
    return asyncio.run(workflow_service.apply_action(request_id, ActionPayload(action=action, **kw), actor))


def _status_code(request_id, actor, action, **kw):
    with pytest.raises(HTTPException) as exc:
        _apply(request_id, actor, action, **kw)
    return exc.value.status_code


def test_approve_advances_and_records_audit(install_requests, actions, notified):
    store = install_requests(make_request())
    doc = _apply("MR-000001", make_user("store_manager"), "approve")

    assert doc["status"] == "Pending-Stage-3"
    assert doc["current_stage"] == 3
    assert store.docs["MR-000001"]["status"] == "Pending-Stage-3"
    [record] = actions.records
    assert (record.stage, record.action, record.from_status, record.to_status) == (2, "approve", "Pending-Stage-2", "Pending-Stage-3")
    assert notified == [("MR-000001", "Pending-Stage-3", "approve", "Store Manager", None)]


def test_decision_sets_flow_type(install_requests, actions, notified):
    store = install_requests(make_request(status="Pending-Stage-3", current_stage=3))
    doc = _apply("MR-000001", make_user("maintenance_coordinator"), "decide_external")
    assert (doc["status"], doc["current_stage"], doc["flow_type"]) == ("External-Pending-RM", 4, "external")
    assert store.docs["MR-000001"]["flow_type"] == "external"


def test_wrong_role_is_forbidden(install_requests, actions, notified):
    store = install_requests(make_request(status="Internal-Pending-MM", flow_type="internal", current_stage=4))
    assert _status_code("MR-000001", make_user("store_manager"), "approve") == 403
    assert store.docs["MR-000001"]["status"] == "Internal-Pending-MM"
    assert actions.records == []
    assert notified == []


def test_admin_can_act_anywhere(install_requests, actions, notified):
    install_requests(make_request(status="Internal-Pending-MM", flow_type="internal", current_stage=4))
    doc = _apply("MR-000001", make_user("admin", store="ALL"), "approve")
    assert doc["status"] == "Internal-Pending-SM"


def test_missing_request(install_requests, actions, notified):
    install_requests()
    assert _status_code("MR-404", make_user("admin"), "approve") == 404


def test_terminal_request_rejects_actions(install_requests, actions, notified):
    install_requests(make_request(status="Completed-Internal", flow_type="internal", current_stage=5))
    assert _status_code("MR-000001", make_user("admin"), "approve") == 400


def test_inconsistent_state_is_a_conflict(install_requests, actions, notified):
    install_requests(make_request(status="Internal-Pending-MM", flow_type=None, current_stage=4))
    assert _status_code("MR-000001", make_user("admin"), "approve") == 409


def test_action_not_declared_at_stage(install_requests, actions, notified):
    install_requests(make_request())
    assert _status_code("MR-000001", make_user("store_manager"), "close") == 400


def test_reject_requires_notes(install_requests, actions, notified):
    install_requests(make_request())
    assert _status_code("MR-000001", make_user("store_manager"), "reject") == 422
    doc = _apply("MR-000001", make_user("store_manager"), "reject", notes="Duplicada")
    assert (doc["status"], doc["current_stage"]) == ("Rejected", 2)
    assert doc["completion_date"] is not None


def test_concurrent_writer_wins(install_requests, actions, notified, monkeypatch):
    store = install_requests(make_request())
    original = store.update_status_if

    async def racing_update(request_id, expected_status, *args, **kwargs):
        # otro jefe de tienda aprobó entre la lectura y la escritura
        store.docs[request_id]["status"] = "Pending-Stage-3"
        return await original(request_id, expected_status, *args, **kwargs)

    monkeypatch.setattr(workflow_service.repo, "update_status_if", racing_update)
    assert _status_code("MR-000001", make_user("store_manager"), "approve") == 409
    assert actions.records == []
    assert notified == []


def test_send_back_and_re_raise(install_requests, actions, notified):
    store = install_requests(make_request(status="External-Pending-MM", flow_type="external", current_stage=6))

    assert _status_code("MR-000001", make_user("maintenance_manager"), "send_back") == 422
    doc = _apply("MR-000001", make_user("maintenance_manager"), "send_back", notes="Falta presupuesto")
    assert (doc["status"], doc["current_stage"], doc["flow_type"]) == ("Submitted", 1, None)
    assert (doc["sent_back_from_status"], doc["sent_back_from_stage"], doc["sent_back_from_flow"]) == (
        "External-Pending-MM", 6, "external")

    # solo el coordinador de tienda (o admin) puede volver a enviarla
    assert _status_code("MR-000001", make_user("maintenance_manager"), "re_raise") == 403
    doc = _apply("MR-000001", make_user("store_coordinator"), "re_raise", notes="Presupuesto adjunto")
    assert (doc["status"], doc["current_stage"], doc["flow_type"]) == ("External-Pending-MM", 6, "external")
    assert doc["sent_back_from_status"] is None
    assert store.docs["MR-000001"]["sent_back_from_stage"] is None
    assert [r.action for r in actions.records] == ["send_back", "re_raise"]
    assert [r.stage for r in actions.records] == [6, 1]


def test_re_raise_without_return_address(install_requests, actions, notified):
    install_requests(make_request(status="Submitted", current_stage=1))
    assert _status_code("MR-000001", make_user("store_coordinator"), "re_raise") == 400


def test_send_back_at_initial_stage(install_requests, actions, notified):
    install_requests(make_request(status="Submitted", current_stage=1))
    assert _status_code("MR-000001", make_user("store_coordinator"), "send_back", notes="x") == 400


def test_quality_check_requires_rating_and_comment(install_requests, actions, notified):
    install_requests(make_request(status="External-Pending-MC-QC", flow_type="external", current_stage=5))
    coordinator = make_user("maintenance_coordinator")
    assert _status_code("MR-000001", coordinator, "quality_check", notes="Trabajo correcto") == 422
    assert _status_code("MR-000001", coordinator, "quality_check", quality_rating="Good") == 422
    doc = _apply("MR-000001", coordinator, "quality_check", quality_rating="Better", notes="Trabajo correcto")
    assert doc["status"] == "External-Pending-MM"
    assert actions.records[-1].quality_rating == "Better"


def test_notification_failure_does_not_block(install_requests, actions, monkeypatch):
    async def broken_notify(*args, **kwargs):
        raise RuntimeError("notificaciones caídas")

    monkeypatch.setattr(notification_service, "notify", broken_notify)
    store = install_requests(make_request())
    doc = _apply("MR-000001", make_user("store_manager"), "approve")
    assert doc["status"] == "Pending-Stage-3"
    assert store.docs["MR-000001"]["status"] == "Pending-Stage-3"
    assert len(actions.records) == 1


def test_return_address_of_ignores_invalid_values():
    assert workflow_service.return_address_of({"id": "x"}) is None
    assert workflow_service.return_address_of({"id": "x", "sent_back_from_status": "Nope", "sent_back_from_stage": 3}) is None
    addr = workflow_service.return_address_of({
        "sent_back_from_status": "Pending-Stage-3", "sent_back_from_stage": 3, "sent_back_from_flow": None,
    })
    assert (addr.status, addr.stage, addr.flow_type) == ("Pending-Stage-3", 3, None)


def test_other_store_cannot_act(install_requests, actions, notified):
    store = install_requests(make_request())
    manager_pune = make_user("store_manager", store="Warehouse - Pune")
    assert _status_code("MR-000001", manager_pune, "approve") == 404
    assert store.docs["MR-000001"]["status"] == "Pending-Stage-2"
    assert actions.records == []
    assert notified == []


def test_all_stores_user_can_act(install_requests, actions, notified):
    install_requests(make_request())
    doc = _apply("MR-000001", make_user("store_manager", store="ALL"), "approve")
    assert doc["status"] == "Pending-Stage-3"


def test_audit_failure_keeps_transition(install_requests, notified, monkeypatch):
    async def broken_append(record):
        raise RuntimeError("auditoría caída")

    monkeypatch.setattr(workflow_service.actions_repo, "append", broken_append)
    store = install_requests(make_request())
    doc = _apply("MR-000001", make_user("store_manager"), "approve")
    assert doc["status"] == "Pending-Stage-3"
    assert store.docs["MR-000001"]["status"] == "Pending-Stage-3"
    assert len(notified) == 1
