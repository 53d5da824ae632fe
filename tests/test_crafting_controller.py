"""Tests for the session controller: gating, batch refusal, logging, undo."""
from __future__ import annotations

import pytest

from essence_forge.catalog import ELEMENTAL_ACTIONS, ELEMENTAL_QUICK_SET_ORDER
from essence_forge.config.settings import CraftingSettings, Settings
from essence_forge.core import initialize_crafting_controller
from essence_forge.core.crafting_controller import CraftingController
from essence_forge.core.roll_source import QueuedRollSource
from essence_forge.core.state_manager import StateManager
from essence_forge.exceptions import UnknownActionError
from essence_forge.models import RESOURCE_ORDER, Resource, RollMode, Toolkit


@pytest.fixture
def make_controller(fixed_source):
    def make(**table) -> CraftingController:
        table.setdefault("auto_roll", False)
        return CraftingController(
            ELEMENTAL_ACTIONS,
            StateManager(),
            settings=CraftingSettings(**table),
            fallback_source=fixed_source(1, 1),
        )

    return make


class TestSelect:
    def test_defaults_to_first_risk(self, make_controller) -> None:
        action, risk = make_controller().select("t1")
        assert action.id == "t1"
        assert risk.id == "steady"

    def test_unknown_action(self, make_controller) -> None:
        with pytest.raises(UnknownActionError):
            make_controller().select("t9")

    def test_unknown_risk(self, make_controller) -> None:
        with pytest.raises(KeyError):
            make_controller().select("t1", "reckless")


class TestRollSource:
    def test_auto_roll_uses_fallback(self, make_controller) -> None:
        controller = make_controller(auto_roll=True)
        assert controller.build_roll_source() is controller.fallback_source

    def test_manual_rolls_are_queued(self, make_controller) -> None:
        controller = make_controller(manual_checks="17, 4", manual_salvage="9")
        source = controller.build_roll_source()
        assert isinstance(source, QueuedRollSource)
        assert source.next_check_pair() == (17, 4)
        assert source.next_salvage() == 9


class TestRun:
    def test_tool_gate(self, make_controller) -> None:
        controller = make_controller(toolkit=Toolkit.STANDARD)
        controller.state.replace_inventory({"fusedElemental": 4})
        response = controller.run("t4", "steady")
        assert not response.ok
        assert response.message == "Requires greater elemental condenser: equip it before rolling."
        assert controller.state.get_current_state().undo_snapshot is None
        assert controller.state.get_inventory()[Resource.FUSED_ELEMENTAL] == 4

    def test_nothing_affordable(self, make_controller) -> None:
        response = make_controller().run("t3")
        assert not response.ok
        assert response.message == "Insufficient resources for this action."

    def test_partial_batch_refused(self, make_controller) -> None:
        controller = make_controller()
        controller.state.replace_inventory({"fineElemental": 2, "fineArcane": 2})
        response = controller.run("t3", batch=3)
        assert not response.ok
        assert response.message == "Not enough resources for the requested batch size (2/3)."
        assert controller.state.get_inventory()[Resource.FINE_ELEMENTAL] == 2
        assert controller.state.get_current_state().log == []

    def test_successful_batch_is_logged(self, make_controller) -> None:
        controller = make_controller(manual_checks="20 20")
        response = controller.run("t1", "steady", batch=2)
        assert response.ok
        assert response.message == "T1 run complete: 2/2 attempts resolved."

        state = controller.state.get_current_state()
        assert state.inventory[Resource.RAW_ELEMENTAL] == 2
        assert state.inventory[Resource.RAW_AE] == 2
        assert state.session_minutes == 90
        assert state.log[0].title == "T1 Steady channel (x2)"
        assert state.log[0].details.splitlines()[0] == (
            "Attempt 1: SUCCESS (d20 20 + 0 = 20 vs DC 10) → +1 RawAE, +1 Raw EE"
        )
        assert len(state.rolls) == 2

    def test_staged_salvage_narration(self, make_controller) -> None:
        controller = make_controller(manual_checks="1 1", manual_salvage="5 18")
        controller.state.replace_inventory({"superiorElemental": 1, "fusedElemental": 1})
        response = controller.run("t5")
        assert response.ok
        details = controller.state.get_current_state().log[0].details
        assert "FAIL (d20 1 + 0 = 1 vs DC 24)" in details
        assert "Salvage stage 1 FAIL (d20 5 + 0 = 5 vs DC 22)" in details
        assert "Salvage stage 2 SUCCESS (d20 18 + 0 = 18 vs DC 18)" in details
        assert details.endswith("→ -1 Superior EE")
        assert controller.state.get_inventory()[Resource.FUSED_ELEMENTAL] == 1

    def test_modifier_and_mode_reach_the_engine(self, make_controller) -> None:
        controller = make_controller(
            crafting_mod=2, roll_mode=RollMode.ADVANTAGE, manual_checks="3 12"
        )
        response = controller.run("t1", "steady")
        check = response.result.attempts[0].check
        assert check.die == 12
        assert check.total == 14
        assert check.success

    def test_optional_cost_with_greater_tool(self, make_controller) -> None:
        controller = make_controller(toolkit=Toolkit.GREATER, manual_checks="12 12")
        controller.state.replace_inventory({"fusedElemental": 1, "fused": 1, "rawAE": 4})
        response = controller.run("t4", "steady", extra=4)
        attempt = response.result.attempts[0]
        assert attempt.effective_dc == 12
        assert attempt.success
        assert controller.state.get_inventory()[Resource.SUPERIOR_ELEMENTAL] == 1
        assert controller.state.get_inventory()[Resource.RAW_AE] == 0

    def test_undo(self, make_controller) -> None:
        controller = make_controller(manual_checks="20 20")
        assert controller.undo().message == "Nothing to undo yet."
        controller.run("t1")
        response = controller.undo()
        assert response.ok
        assert response.message == "Last run undone."
        state = controller.state.get_current_state()
        assert state.inventory[Resource.RAW_ELEMENTAL] == 0
        assert state.session_minutes == 0


class TestPreview:
    def test_gated_risk(self, make_controller) -> None:
        controller = make_controller()
        controller.state.replace_inventory({"fusedElemental": 2, "fused": 1})
        preview = controller.preview("t4", "steady")
        assert preview.needs_tool
        assert preview.tool_label == "Requires greater elemental condenser"
        assert not preview.can_run
        assert preview.feasible == 1
        assert preview.flex_labels == ["Fused essence (any family)"]
        assert preview.requirements == {Resource.FUSED_ELEMENTAL: 1}

    def test_optional_cost_shortfall(self, make_controller) -> None:
        controller = make_controller(toolkit=Toolkit.GREATER)
        controller.state.replace_inventory({"fusedElemental": 2, "fused": 1})
        preview = controller.preview("t4", "steady", extra=5)
        assert preview.odds.effective_dc == 12
        assert preview.wasted_units == 1
        assert preview.missing == ["5 RawAE (have 0)"]
        assert preview.feasible == 0
        assert not preview.can_run

    def test_runnable(self, make_controller) -> None:
        preview = make_controller().preview("t1", "surge", batch=3)
        assert preview.can_run
        assert preview.missing == []
        assert preview.tool_label is None
        assert preview.odds.effective_dc == 16
        assert preview.expectation[Resource.RAW_AE] == pytest.approx(0.25)


class TestInitialize:
    def test_wires_settings(self) -> None:
        settings = Settings(_env_file=None, crafting_mod=4, log_limit=5, toolkit="greater")
        controller = initialize_crafting_controller(
            ELEMENTAL_ACTIONS, settings, quick_set_order=ELEMENTAL_QUICK_SET_ORDER
        )
        assert controller.quick_set_order is ELEMENTAL_QUICK_SET_ORDER
        assert controller.settings.crafting_mod == 4
        assert controller.settings.toolkit == Toolkit.GREATER
        assert controller.state.log_limit == 5
        assert list(controller.actions) == ["t1", "t2", "t3", "t4", "t5"]


class TestQuickSet:
    def test_uses_table_order(self, fixed_source) -> None:
        controller = CraftingController(
            ELEMENTAL_ACTIONS,
            StateManager(),
            fallback_source=fixed_source(),
            quick_set_order=ELEMENTAL_QUICK_SET_ORDER,
        )
        controller.state.set_resource("fused", 5)
        inventory = controller.quick_set("10,0,0,0,0,4,2")
        assert inventory[Resource.RAW_ELEMENTAL] == 10
        assert inventory[Resource.RAW_AE] == 4
        assert inventory[Resource.FINE_ARCANE] == 2
        assert inventory[Resource.FUSED] == 0

    def test_defaults_to_display_order(self, make_controller) -> None:
        controller = make_controller()
        assert controller.quick_set_order == RESOURCE_ORDER
        assert controller.quick_set("3")[Resource.RAW] == 3
