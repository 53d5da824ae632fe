"""
Feasibility and requirement resolution.

Everything here is read-only with respect to the caller's inventory: costs are
reserved against private working copies so that resources shared between fixed
inputs, the optional cost and flex pools are contended for rather than counted
twice.
"""

import logging
import math

from essence_forge.exceptions import ConfigurationError
from essence_forge.models import (
    ActionConfig,
    Inventory,
    OptionalCostConfig,
    Resource,
    RiskConfig,
)
from essence_forge.core.inventory import apply_delta

logger = logging.getLogger(__name__)


# ============================================================
# DIFFICULTY
# ============================================================

def effective_dc(
    risk: RiskConfig,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> int:
    """Base DC, lowered per extra unit spent, never below the optional-cost floor."""
    if optional_cost is None or extra_cost <= 0:
        return risk.base_dc
    reduction = extra_cost * optional_cost.per_unit_dc_reduction
    return max(optional_cost.min_dc, risk.base_dc - reduction)


def units_to_floor(risk: RiskConfig, optional_cost: OptionalCostConfig) -> int:
    """Extra units needed to bring the risk's DC down to the floor."""
    gap = max(0, risk.base_dc - optional_cost.min_dc)
    return math.ceil(gap / optional_cost.per_unit_dc_reduction)


def wasted_extra_units(
    risk: RiskConfig,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> int:
    """Units per attempt that are consumed without lowering the DC any further."""
    if optional_cost is None or extra_cost <= 0:
        return 0
    return max(0, extra_cost - units_to_floor(risk, optional_cost))


# ============================================================
# CONFIGURATION CHECKS
# ============================================================

def ensure_risk_consistent(risk: RiskConfig) -> None:
    """
    Fail fast on a risk whose static data cannot be resolved.

    Validated models never trip this; it guards risks built with
    ``model_construct`` or otherwise bypassing validation.
    """
    if risk.base_dc is None or risk.base_dc <= 0:
        raise ConfigurationError(f"Risk {risk.id}: base DC must be positive, got {risk.base_dc}")

    for name, table in (("input", risk.inputs), ("output", risk.outputs)):
        for resource, amount in table.items():
            if amount < 0:
                raise ConfigurationError(f"Risk {risk.id}: negative {name} for {resource}: {amount}")

    for flex in risk.flex_inputs:
        if not flex.options:
            raise ConfigurationError(f"Risk {risk.id}: flex input '{flex.id}' has no options")
        if flex.amount < 0:
            raise ConfigurationError(f"Risk {risk.id}: flex input '{flex.id}' has negative amount")

    if risk.salvage is not None:
        stages = risk.salvage_stages
        if not stages:
            raise ConfigurationError(f"Risk {risk.id}: salvage cascade has no stages")
        for stage in stages:
            if stage.dc is None or stage.dc <= 0:
                raise ConfigurationError(f"Risk {risk.id}: salvage stage DC must be positive")
            if any(amount < 0 for amount in stage.returns.values()):
                raise ConfigurationError(f"Risk {risk.id}: salvage stage returns a negative amount")


def _ensure_extra_cost(extra_cost: int) -> None:
    if extra_cost < 0:
        raise ConfigurationError(f"Extra cost must be >= 0, got {extra_cost}")


# ============================================================
# FEASIBILITY
# ============================================================

def _reserve(working: Inventory, cost: dict[Resource, int], resource: Resource, amount: int) -> bool:
    """Take amount from working into cost. Returns False if working cannot cover it."""
    if amount <= 0:
        return True
    if working.get(resource, 0) < amount:
        return False
    working[resource] -= amount
    cost[resource] = cost.get(resource, 0) + amount
    return True


def resolve_attempt_requirement(
    inventory: Inventory,
    risk: RiskConfig,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> dict[Resource, int] | None:
    """
    Work out what exactly one attempt would cost against this inventory.

    Reservation order:
    1. Every fixed input
    2. The optional cost, if extra units are requested
    3. Each flex input, greedily through its options in declared order

    Returns the per-resource cost, or None if any part cannot be fully paid.
    The inventory passed in is not modified.
    """
    ensure_risk_consistent(risk)
    _ensure_extra_cost(extra_cost)

    working = dict(inventory)
    cost: dict[Resource, int] = {}

    for resource, amount in risk.inputs.items():
        if not _reserve(working, cost, resource, amount):
            return None

    if optional_cost is not None and extra_cost > 0:
        if not _reserve(working, cost, optional_cost.resource, extra_cost):
            return None

    for flex in risk.flex_inputs:
        remaining = flex.amount
        for option in flex.options:
            if remaining <= 0:
                break
            take = min(working.get(option, 0), remaining)
            _reserve(working, cost, option, take)
            remaining -= take
        if remaining > 0:
            return None

    return cost


def max_feasible_attempts(
    inventory: Inventory,
    risk: RiskConfig,
    requested: int,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> int:
    """
    How many consecutive attempts, up to requested, the inventory can pay for.

    Attempts are simulated one by one and committed to a working copy, since
    flex substitution and shared pools make the answer non-linear in cost.
    """
    working = dict(inventory)
    feasible = 0
    while feasible < requested:
        cost = resolve_attempt_requirement(working, risk, extra_cost, optional_cost)
        if cost is None:
            break
        apply_delta(working, {resource: -amount for resource, amount in cost.items()})
        feasible += 1
    return feasible


def total_requirements(
    risk: RiskConfig,
    attempts: int,
    extra_cost: int,
    optional_cost: OptionalCostConfig | None,
) -> dict[Resource, int]:
    """Fixed plus optional cost of a batch. Flex inputs are not included."""
    requirements: dict[Resource, int] = {}
    for resource, amount in risk.inputs.items():
        if amount:
            requirements[resource] = amount * attempts
    if optional_cost is not None and extra_cost > 0:
        resource = optional_cost.resource
        requirements[resource] = requirements.get(resource, 0) + extra_cost * attempts
    return requirements


def missing_resources(
    inventory: Inventory,
    action: ActionConfig,
    risk: RiskConfig,
    batch: int,
    extra_cost: int,
) -> list[str]:
    """
    Human-readable shortfalls for running a whole batch.

    Fixed and optional costs are reported per resource. If those are covered
    but the batch still cannot run, the flex pools (or the combined demand)
    are reported instead. Empty when the batch is feasible.
    """
    missing = []
    for resource, need in total_requirements(risk, batch, 0, None).items():
        have = inventory.get(resource, 0)
        if have < need:
            missing.append(f"{need} {resource.label} (have {have})")

    optional_cost = action.optional_cost
    if optional_cost is not None and extra_cost > 0:
        need = extra_cost * batch
        have = inventory.get(optional_cost.resource, 0)
        if have < need:
            missing.append(f"{need} {optional_cost.resource.label} (have {have})")

    if not missing:
        feasible = max_feasible_attempts(inventory, risk, batch, extra_cost, optional_cost)
        if feasible < batch:
            if risk.flex_inputs:
                labels = ", ".join(flex.label for flex in risk.flex_inputs)
                missing.append(f"Flex supply: {labels} insufficient (need {batch} attempts)")
            else:
                missing.append("Insufficient resources for requested batch.")
    return missing


# ============================================================
# TOOLS
# ============================================================

def tool_requirement_met(risk: RiskConfig, equipped_tool: str | None) -> bool:
    """True when the risk has no tool gate or the equipped tool satisfies it."""
    if risk.tool_requirement is None:
        return True
    return equipped_tool == risk.tool_requirement.id
