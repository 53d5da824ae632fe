"""Tests for odds and expected-value previews."""
from __future__ import annotations

import pytest

from essence_forge.catalog import ELEMENTAL_ACTIONS
from essence_forge.core.expectation import compute_expected_value, compute_odds
from essence_forge.models import Resource, RiskConfig, RollMode


class TestComputeOdds:
    def test_optional_cost_applied(self, base_risk, optional_cost) -> None:
        odds = compute_odds(base_risk, 6, RollMode.NORMAL, 1, optional_cost)
        assert odds.effective_dc == 14
        assert odds.success == pytest.approx(0.65)
        assert odds.salvage == pytest.approx(0.65)
        assert odds.stage_chances == pytest.approx([0.65])

    def test_no_salvage(self) -> None:
        risk = RiskConfig(id="bare", label="Bare", base_dc=11)
        odds = compute_odds(risk, 0, RollMode.NORMAL, 0, None)
        assert odds.salvage is None
        assert odds.stage_chances == []

    def test_cascade_aggregate(self, staged_risk) -> None:
        odds = compute_odds(staged_risk, 5, RollMode.NORMAL, 0, None)
        assert odds.success == pytest.approx(0.1)
        assert odds.stage_chances == pytest.approx([0.2, 0.4])
        assert odds.salvage == pytest.approx(1 - 0.8 * 0.6)

    def test_roll_mode_only_affects_check(self, staged_risk) -> None:
        normal = compute_odds(staged_risk, 5, RollMode.NORMAL, 0, None)
        advantage = compute_odds(staged_risk, 5, RollMode.ADVANTAGE, 0, None)
        assert advantage.success > normal.success
        assert advantage.stage_chances == normal.stage_chances
        assert advantage.salvage == normal.salvage


class TestComputeExpectedValue:
    def test_mixed_outcome(self, base_risk, optional_cost) -> None:
        odds = compute_odds(base_risk, 6, RollMode.NORMAL, 1, optional_cost)
        ev = compute_expected_value(base_risk, odds, optional_cost, 1)
        assert ev[Resource.SUPERIOR] > 0
        assert ev[Resource.FUSED] < 0
        assert ev[Resource.RAW_AE] == -1
        assert ev[Resource.FINE] == pytest.approx(3 * 0.35 * 0.65)

    def test_certain_success(self) -> None:
        risk = RiskConfig(
            id="easy",
            label="Easy",
            base_dc=5,
            inputs={Resource.FUSED: 2},
            outputs={Resource.SUPERIOR: 1},
        )
        odds = compute_odds(risk, 10, RollMode.NORMAL, 0, None)
        ev = compute_expected_value(risk, odds, None, 0)
        assert ev == {Resource.FUSED: -2, Resource.SUPERIOR: pytest.approx(1.0)}

    def test_cascade_weights_each_stage(self, staged_risk) -> None:
        odds = compute_odds(staged_risk, 5, RollMode.NORMAL, 0, None)
        ev = compute_expected_value(staged_risk, odds, None, 0)
        assert ev[Resource.SUPREME_ELEMENTAL] == pytest.approx(0.1)
        assert ev[Resource.SUPERIOR_ELEMENTAL] == pytest.approx(-1 + 0.9 * 0.2)
        # Stage 2 is only reached when stage 1 fails
        assert ev[Resource.FUSED_ELEMENTAL] == pytest.approx(-1 + 0.9 * 0.8 * 0.4)

    def test_zero_entries_dropped(self, staged_risk) -> None:
        odds = compute_odds(staged_risk, 0, RollMode.NORMAL, 0, None)
        ev = compute_expected_value(staged_risk, odds, None, 0)
        assert Resource.SUPREME_ELEMENTAL not in ev
        assert ev[Resource.SUPERIOR_ELEMENTAL] == pytest.approx(-1)

    def test_flex_charged_from_inventory(self, make_inventory) -> None:
        risk = ELEMENTAL_ACTIONS[1].get_risk("standard")
        odds = compute_odds(risk, 0, RollMode.NORMAL, 0, None)
        ev = compute_expected_value(risk, odds, None, 0, make_inventory(rawElemental=1, raw=3))
        assert ev[Resource.RAW] == -1
        assert ev[Resource.RAW_ELEMENTAL] == pytest.approx(-1 + 0.65 * 0.45)
        assert ev[Resource.FINE_ELEMENTAL] == pytest.approx(0.35)

    def test_flex_skipped_without_inventory(self) -> None:
        risk = ELEMENTAL_ACTIONS[1].get_risk("standard")
        odds = compute_odds(risk, 0, RollMode.NORMAL, 0, None)
        ev = compute_expected_value(risk, odds, None, 0)
        assert Resource.RAW not in ev

    def test_unpayable_inventory_falls_back_to_fixed_cost(self, make_inventory) -> None:
        risk = ELEMENTAL_ACTIONS[1].get_risk("standard")
        odds = compute_odds(risk, 0, RollMode.NORMAL, 0, None)
        assert compute_expected_value(risk, odds, None, 0, make_inventory()) == \
            compute_expected_value(risk, odds, None, 0)
