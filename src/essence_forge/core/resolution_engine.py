import logging
from typing import Mapping

from essence_forge.exceptions import ConfigurationError
from essence_forge.models import (
    ActionConfig,
    ActionRunResult,
    AttemptResult,
    Inventory,
    Resource,
    RiskConfig,
    RollDetail,
    RollMode,
    RollType,
    RunSummary,
)
from essence_forge.core.inventory import apply_delta, normalize_inventory
from essence_forge.core.probability import pick_advantage
from essence_forge.core.requirements import (
    effective_dc,
    ensure_risk_consistent,
    resolve_attempt_requirement,
    wasted_extra_units,
)
from essence_forge.core.roll_source import RollSource

logger = logging.getLogger(__name__)

INSUFFICIENT_RESOURCES = "Insufficient resources"


class ResolutionEngine:
    """
    Resolves batches of crafting attempts. No I/O and no dice of its own:
    every integer comes from the injected RollSource.
    """

    def run_action(
        self,
        action: ActionConfig,
        risk: RiskConfig,
        attempts: int,
        inventory: Mapping[Resource | str, int],
        modifier: int,
        roll_mode: RollMode,
        roll_source: RollSource,
        extra_cost: int = 0,
    ) -> ActionRunResult:
        """
        Run up to `attempts` attempts of one risk.

        The batch stops early, without rollback, at the first attempt the
        working inventory cannot pay for. The caller's inventory is copied
        and never modified.

        Raises:
            ConfigurationError: attempts < 1, negative extra cost, or a risk
                whose static data cannot be resolved.
        """
        if attempts < 1:
            raise ConfigurationError(f"Attempts must be >= 1, got {attempts}")
        if extra_cost < 0:
            raise ConfigurationError(f"Extra cost must be >= 0, got {extra_cost}")
        ensure_risk_consistent(risk)

        optional_cost = action.optional_cost
        if extra_cost > 0 and optional_cost is None:
            logger.debug("Action %s has no optional cost; ignoring %s extra units", action.id, extra_cost)

        wasted = wasted_extra_units(risk, extra_cost, optional_cost)
        if wasted:
            logger.warning(
                "%s/%s: %d of %d extra %s per attempt are past the DC floor and will be wasted",
                action.id, risk.id, wasted, extra_cost, optional_cost.resource.value,
            )

        working = normalize_inventory(inventory)
        dc = effective_dc(risk, extra_cost, optional_cost)
        results: list[AttemptResult] = []
        rolls: list[RollDetail] = []
        stopped_reason: str | None = None

        for index in range(attempts):
            cost = resolve_attempt_requirement(working, risk, extra_cost, optional_cost)
            if cost is None:
                stopped_reason = INSUFFICIENT_RESOURCES
                logger.warning(
                    "%s/%s stopped after %d of %d attempts: %s",
                    action.id, risk.id, index, attempts, stopped_reason,
                )
                break

            attempt = self._resolve_attempt(
                index, action, risk, working, cost, dc, modifier, roll_mode, roll_source
            )
            results.append(attempt)
            rolls.append(attempt.check)
            rolls.extend(attempt.salvage)

        summary = RunSummary(
            attempts_requested=attempts,
            attempts_completed=len(results),
            stopped_reason=stopped_reason,
            total_time=sum(result.time_minutes for result in results),
        )
        logger.info(
            "%s/%s: %d/%d attempts, %d succeeded, %d minutes",
            action.id, risk.id, summary.attempts_completed, attempts,
            sum(1 for result in results if result.success), summary.total_time,
        )

        return ActionRunResult(
            attempts=results,
            final_inventory=working,
            rolls=rolls,
            summary=summary,
            requirement_met=stopped_reason is None,
        )

    def _resolve_attempt(
        self,
        index: int,
        action: ActionConfig,
        risk: RiskConfig,
        working: Inventory,
        cost: dict[Resource, int],
        dc: int,
        modifier: int,
        roll_mode: RollMode,
        roll_source: RollSource,
    ) -> AttemptResult:
        """Commit one reserved cost, roll the check and any salvage, apply gains."""
        delta = {resource: -amount for resource, amount in cost.items()}
        apply_delta(working, delta)

        roll, other = roll_source.next_check_pair()
        die = pick_advantage(roll, other, roll_mode)
        total = die + modifier
        success = total >= dc
        check = self._roll_detail(RollType.CHECK, action, risk, dc, die, modifier, success)

        salvage_rolls: list[RollDetail] = []
        if success:
            gains = dict(risk.outputs)
        else:
            gains, salvage_rolls = self._roll_salvage(action, risk, modifier, roll_source)

        apply_delta(working, gains)
        for resource, gain in gains.items():
            delta[resource] = delta.get(resource, 0) + gain

        logger.debug(
            "Attempt %d: d20 %d%+d = %d vs DC %d -> %s",
            index + 1, die, modifier, total, dc, "success" if success else "failure",
        )

        return AttemptResult(
            attempt=index + 1,
            risk_id=risk.id,
            dc=risk.base_dc,
            effective_dc=dc,
            success=success,
            time_minutes=risk.time_minutes,
            check=check,
            salvage=salvage_rolls,
            consumed=cost,
            inventory_delta={resource: change for resource, change in delta.items() if change},
        )

    def _roll_salvage(
        self,
        action: ActionConfig,
        risk: RiskConfig,
        modifier: int,
        roll_source: RollSource,
    ) -> tuple[dict[Resource, int], list[RollDetail]]:
        """
        Walk the salvage stages in order. The first stage met returns its
        resources and ends the cascade; if none is met nothing comes back.
        """
        rolls = []
        for number, stage in enumerate(risk.salvage_stages, start=1):
            die = roll_source.next_salvage()
            success = die + modifier >= stage.dc
            rolls.append(self._roll_detail(
                RollType.SALVAGE, action, risk, stage.dc, die, modifier, success,
                stage=number if risk.has_staged_salvage else None,
            ))
            if success:
                return dict(stage.returns), rolls
        return {}, rolls

    @staticmethod
    def _roll_detail(
        roll_type: RollType,
        action: ActionConfig,
        risk: RiskConfig,
        dc: int,
        die: int,
        modifier: int,
        success: bool,
        stage: int | None = None,
    ) -> RollDetail:
        return RollDetail(
            type=roll_type,
            tier=action.tier.value,
            action_id=action.id,
            risk_id=risk.id,
            dc=dc,
            die=die,
            modifier=modifier,
            total=die + modifier,
            success=success,
            stage=stage,
        )


resolution_engine = ResolutionEngine()


def run_action(
    action: ActionConfig,
    risk: RiskConfig,
    attempts: int,
    inventory: Mapping[Resource | str, int],
    modifier: int,
    roll_mode: RollMode,
    roll_source: RollSource,
    extra_cost: int = 0,
) -> ActionRunResult:
    """Run a batch with the shared engine instance."""
    return resolution_engine.run_action(
        action, risk, attempts, inventory, modifier, roll_mode, roll_source, extra_cost
    )
