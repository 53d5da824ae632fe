"""Shared fixtures for the crafting engine tests."""
from __future__ import annotations

import pytest

from essence_forge.core.inventory import normalize_inventory
from essence_forge.core.roll_source import QueuedRollSource, RollSource
from essence_forge.models import (
    ActionConfig,
    OptionalCostConfig,
    Resource,
    RiskConfig,
    SalvageCascade,
    SalvageStage,
    Tier,
)


class FixedRollSource(RollSource):
    """Always rolls the same values."""

    def __init__(self, check: int = 10, salvage: int = 10) -> None:
        self.check = check
        self.salvage = salvage
        self.check_calls = 0
        self.salvage_calls = 0

    def next_check_pair(self) -> tuple[int, int]:
        self.check_calls += 1
        return self.check, self.check

    def next_salvage(self) -> int:
        self.salvage_calls += 1
        return self.salvage


@pytest.fixture
def fixed_source():
    """Factory for constant roll sources."""
    return FixedRollSource


@pytest.fixture
def queued_source():
    """Factory for queued roll sources that fall back to natural 1s."""

    def make(checks=(), salvage=(), repeat=False) -> QueuedRollSource:
        return QueuedRollSource(checks, salvage, fallback=FixedRollSource(1, 1), repeat=repeat)

    return make


@pytest.fixture
def make_inventory():
    """Factory for total inventories from sparse keyword counts."""

    def make(**counts: int):
        return normalize_inventory(counts)

    return make


@pytest.fixture
def base_risk() -> RiskConfig:
    return RiskConfig(
        id="standard",
        label="Standard",
        base_dc=18,
        inputs={Resource.FUSED: 2},
        outputs={Resource.SUPERIOR: 1},
        salvage=SalvageStage(dc=14, returns={Resource.FINE: 3}),
        time_minutes=120,
    )


@pytest.fixture
def optional_cost() -> OptionalCostConfig:
    return OptionalCostConfig(
        resource=Resource.RAW_AE,
        label="RawAE",
        per_unit_dc_reduction=4,
        min_dc=5,
    )


@pytest.fixture
def base_action(base_risk: RiskConfig, optional_cost: OptionalCostConfig) -> ActionConfig:
    return ActionConfig(
        id="refine",
        tier=Tier.T4,
        title="Refine",
        risks=[base_risk],
        optional_cost=optional_cost,
    )


@pytest.fixture
def plain_action(base_risk: RiskConfig) -> ActionConfig:
    return ActionConfig(id="plain", tier=Tier.T4, title="Plain", risks=[base_risk])


@pytest.fixture
def staged_risk() -> RiskConfig:
    return RiskConfig(
        id="staged",
        label="Staged",
        base_dc=24,
        inputs={Resource.SUPERIOR_ELEMENTAL: 1, Resource.FUSED_ELEMENTAL: 1},
        outputs={Resource.SUPREME_ELEMENTAL: 1},
        salvage=SalvageCascade(stages=[
            SalvageStage(dc=22, returns={Resource.SUPERIOR_ELEMENTAL: 1}),
            SalvageStage(dc=18, returns={Resource.FUSED_ELEMENTAL: 1}),
        ]),
        time_minutes=120,
    )


@pytest.fixture
def staged_action(staged_risk: RiskConfig) -> ActionConfig:
    return ActionConfig(id="staged", tier=Tier.T5, title="Test", risks=[staged_risk])
