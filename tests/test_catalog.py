import pytest
from pydantic import ValidationError

from maintenance_app.workflow.catalog import CATALOG_V2, CATALOGS, get_catalog
from maintenance_app.workflow.flows import lookup_stage, role_for_status, stage_by_number, stages_for_flow

FLOWS = [None, "internal", "external"]


class TestFlowResolver:
    def test_unset_flow_has_only_common_stages(self):
        assert [s.stage for s in stages_for_flow(None)] == [1, 2, 3]

    def test_internal_flow_appends_internal_path(self):
        stages = stages_for_flow("internal")
        assert [s.stage for s in stages] == [1, 2, 3, 4, 5]
        assert stages[3].status == "Internal-Pending-MM"

    def test_external_flow_appends_external_path(self):
        stages = stages_for_flow("external")
        assert [s.stage for s in stages] == list(range(1, 11))
        assert stages[-1].status == "External-Pending-SM"

    def test_stage_numbers_are_unique_within_flow(self):
        for flow in FLOWS:
            numbers = [s.stage for s in stages_for_flow(flow)]
            assert len(numbers) == len(set(numbers))


class TestLookup:
    def test_every_resolved_stage_is_found(self):
        """Cada (estado, flujo) que produce el resolvedor tiene definición."""
        for flow in FLOWS:
            for info in stages_for_flow(flow):
                assert lookup_stage(info.status, flow) == info

    def test_common_statuses_resolve_in_every_flow(self):
        for flow in FLOWS:
            assert lookup_stage("Pending-Stage-3", flow).stage == 3

    def test_path_status_without_flow_is_not_found(self):
        assert lookup_stage("External-Pending-RM", None) is None
        assert lookup_stage("External-Pending-RM", "internal") is None

    def test_terminal_statuses_have_no_stage(self):
        for flow in FLOWS:
            for status in ("Completed-Internal", "Completed-External", "Rejected"):
                assert lookup_stage(status, flow) is None

    def test_stage_by_number(self):
        assert stage_by_number(6, "external").status == "External-Pending-MM"
        assert stage_by_number(6, "internal") is None


class TestCatalogShape:
    def test_statuses_are_unique_per_flow(self):
        for flow in FLOWS:
            statuses = [s.status for s in stages_for_flow(flow)]
            assert len(statuses) == len(set(statuses))

    def test_reject_status_implies_reject_action(self):
        for flow in FLOWS:
            for info in stages_for_flow(flow):
                if info.reject_status:
                    assert info.allows("reject")

    def test_only_creation_stage_has_no_actions(self):
        for flow in FLOWS:
            for info in stages_for_flow(flow):
                assert bool(info.actions) == (info.stage != 1)

    def test_decision_stage_declares_both_branches(self):
        info = lookup_stage("Pending-Stage-3", None)
        assert info.stage == CATALOG_V2.decision_stage
        assert set(info.action_kinds) == {"decide_internal", "decide_external"}
        assert info.next_status is None

    def test_quality_check_stage(self):
        info = lookup_stage("External-Pending-MC-QC", "external")
        assert info.requires_quality_check
        assert info.action_kinds == ("quality_check",)

    def test_stage_info_is_immutable(self):
        info = lookup_stage("Pending-Stage-2", None)
        with pytest.raises(ValidationError):
            info.next_status = "Rejected"

    def test_role_for_status(self):
        assert role_for_status("Pending-Stage-2") == "store_manager"
        assert role_for_status("External-Pending-Admin") == "admin_manager"
        assert role_for_status("Completed-External") is None


class TestCatalogVersions:
    def test_default_catalog(self):
        assert get_catalog() is CATALOG_V2
        assert get_catalog("2") is CATALOGS["2"]

    def test_unknown_version(self):
        with pytest.raises(KeyError):
            get_catalog("1999")
