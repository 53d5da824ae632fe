"""Odds and expected resource deltas for previewing a risk without rolling."""

from typing import Mapping

from essence_forge.models import (
    OddsResult,
    OptionalCostConfig,
    Resource,
    ResourceDelta,
    RiskConfig,
    RollMode,
)
from essence_forge.core.inventory import normalize_inventory
from essence_forge.core.probability import chance_normal, chance_with_advantage
from essence_forge.core.requirements import effective_dc, resolve_attempt_requirement


def compute_odds(
    risk: RiskConfig,
    modifier: int,
    mode: RollMode,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> OddsResult:
    """
    Check and salvage odds for one attempt.

    Salvage stages always use normal odds: the roll mode applies to the check
    only, never to the salvage rolls that follow a failure.
    """
    dc = effective_dc(risk, extra_cost, optional_cost)
    stage_chances = [chance_normal(stage.dc, modifier) for stage in risk.salvage_stages]

    salvage = None
    if stage_chances:
        all_fail = 1.0
        for chance in stage_chances:
            all_fail *= 1 - chance
        salvage = 1 - all_fail

    return OddsResult(
        effective_dc=dc,
        success=chance_with_advantage(dc, modifier, mode),
        salvage=salvage,
        stage_chances=stage_chances,
    )


def compute_expected_value(
    risk: RiskConfig,
    odds: OddsResult,
    optional_cost: OptionalCostConfig | None,
    extra_cost: int,
    inventory: Mapping[Resource | str, int] | None = None,
) -> ResourceDelta:
    """
    Expected per-resource change from running the risk once.

    Each salvage stage is weighted by the chance the cascade reaches it and
    succeeds there: (1 - success) * prod(1 - earlier stages) * this stage.
    Multiplying every stage by the aggregate salvage chance instead would
    overcount when stages return different resources.

    Flex inputs are charged only when an inventory is supplied, since which
    option pays for them depends on what is in stock. An inventory that cannot
    pay for the attempt is treated as if none had been given.
    """
    expectation: dict[Resource, float] = {}

    def add(resource: Resource, amount: float) -> None:
        expectation[resource] = expectation.get(resource, 0.0) + amount

    cost = None
    if inventory is not None:
        cost = resolve_attempt_requirement(
            normalize_inventory(inventory), risk, extra_cost, optional_cost
        )

    if cost is not None:
        for resource, spent in cost.items():
            add(resource, -spent)
    else:
        for resource, spent in risk.inputs.items():
            if spent:
                add(resource, -spent)
        if optional_cost is not None and extra_cost > 0:
            add(optional_cost.resource, -extra_cost)

    for resource, gain in risk.outputs.items():
        if gain:
            add(resource, gain * odds.success)

    reach = 1 - odds.success
    for stage, chance in zip(risk.salvage_stages, odds.stage_chances):
        for resource, gain in stage.returns.items():
            if gain:
                add(resource, gain * reach * chance)
        reach *= 1 - chance

    return {resource: value for resource, value in expectation.items() if value}
