import logging
from typing import List

from pydantic import BaseModel

from essence_forge.catalog import get_action, index_actions
from essence_forge.config.settings import CraftingSettings
from essence_forge.exceptions import UnknownActionError
from essence_forge.models import (
    ActionConfig,
    ActionRunResult,
    AttemptResult,
    Inventory,
    OddsResult,
    RESOURCE_ORDER,
    Resource,
    ResourceDelta,
    RiskConfig,
    RollDetail,
)
from essence_forge.core.expectation import compute_expected_value, compute_odds
from essence_forge.core.inventory import format_delta
from essence_forge.core.requirements import (
    max_feasible_attempts,
    missing_resources,
    tool_requirement_met,
    total_requirements,
    wasted_extra_units,
)
from essence_forge.core.resolution_engine import ResolutionEngine
from essence_forge.core.roll_source import (
    QueuedRollSource,
    RandomRollSource,
    RollSource,
    parse_roll_queue,
)
from essence_forge.core.state_manager import StateManager

logger = logging.getLogger(__name__)

# Feasibility cap used when previewing "how many could I run"
PREVIEW_ATTEMPT_CAP = 9999


class ActionPreview(BaseModel):
    """What the table shows before a run: costs, shortfalls, odds, expectation"""
    action_id: str
    risk_id: str
    batch: int
    extra: int
    requirements: dict[Resource, int] = {}  # Fixed + optional cost for the batch
    flex_labels: List[str] = []
    missing: List[str] = []
    feasible: int                           # Attempts the inventory could pay for
    needs_tool: bool
    tool_label: str | None = None           # Label of the tool gate, if the risk has one
    can_run: bool
    odds: OddsResult
    expectation: ResourceDelta
    wasted_units: int = 0                   # Extra units per attempt past the DC floor


class ControllerResponse(BaseModel):
    ok: bool
    message: str
    result: ActionRunResult | None = None


class CraftingController:
    """
    Coordinates one crafting session.
    Looks up actions, gates tools and batch feasibility, feeds the engine a
    roll source built from the table settings, and records what happened.
    """

    def __init__(
        self,
        actions: List[ActionConfig],
        state_manager: StateManager,
        settings: CraftingSettings | None = None,
        resolution_engine: ResolutionEngine | None = None,
        fallback_source: RollSource | None = None,
        quick_set_order: List[Resource] | None = None,
    ):
        self.actions = index_actions(actions)
        self.state = state_manager
        self.settings = settings or CraftingSettings()
        self.engine = resolution_engine or ResolutionEngine()
        self.fallback_source = fallback_source or RandomRollSource()
        self.quick_set_order = quick_set_order or RESOURCE_ORDER

    def select(self, action_id: str, risk_id: str | None = None) -> tuple[ActionConfig, RiskConfig]:
        """Resolve ids to configs. No risk id means the action's first risk."""
        action = get_action(self.actions, action_id)
        if risk_id is None:
            return action, action.risks[0]
        try:
            return action, action.get_risk(risk_id)
        except KeyError:
            raise UnknownActionError(f"Action '{action_id}' has no risk '{risk_id}'") from None

    def build_roll_source(self) -> RollSource:
        """Random dice, or the manual roll strings with random fill-in."""
        if self.settings.auto_roll:
            return self.fallback_source
        return QueuedRollSource(
            checks=parse_roll_queue(self.settings.manual_checks),
            salvage=parse_roll_queue(self.settings.manual_salvage),
            fallback=self.fallback_source,
            repeat=True,
        )

    def preview(
        self,
        action_id: str,
        risk_id: str | None = None,
        batch: int = 1,
        extra: int = 0,
    ) -> ActionPreview:
        action, risk = self.select(action_id, risk_id)
        batch = max(1, batch)
        extra = max(0, extra)
        inventory = self.state.get_inventory()

        missing = missing_resources(inventory, action, risk, batch, extra)
        feasible = max_feasible_attempts(
            inventory, risk, PREVIEW_ATTEMPT_CAP, extra, action.optional_cost
        )
        needs_tool = not tool_requirement_met(risk, self.settings.toolkit)
        odds = compute_odds(
            risk, self.settings.crafting_mod, self.settings.roll_mode, extra, action.optional_cost
        )

        return ActionPreview(
            action_id=action.id,
            risk_id=risk.id,
            batch=batch,
            extra=extra,
            requirements=total_requirements(risk, batch, extra, action.optional_cost),
            flex_labels=[flex.label for flex in risk.flex_inputs],
            missing=missing,
            feasible=feasible,
            needs_tool=needs_tool,
            tool_label=risk.tool_requirement.label if risk.tool_requirement else None,
            can_run=batch <= feasible and not missing and not needs_tool,
            odds=odds,
            expectation=compute_expected_value(risk, odds, action.optional_cost, extra, inventory),
            wasted_units=wasted_extra_units(risk, extra, action.optional_cost),
        )

    def run(
        self,
        action_id: str,
        risk_id: str | None = None,
        batch: int = 1,
        extra: int = 0,
    ) -> ControllerResponse:
        """
        Run a whole batch or nothing.

        The tool gate and the feasibility of every requested attempt are
        checked first; a refusal leaves the session untouched.
        """
        action, risk = self.select(action_id, risk_id)
        batch = max(1, batch)
        extra = max(0, extra)

        if not tool_requirement_met(risk, self.settings.toolkit):
            return ControllerResponse(
                ok=False, message=f"{risk.tool_requirement.label}: equip it before rolling."
            )

        inventory = self.state.get_inventory()
        feasible = max_feasible_attempts(inventory, risk, batch, extra, action.optional_cost)
        if feasible <= 0:
            return ControllerResponse(ok=False, message="Insufficient resources for this action.")
        if feasible < batch:
            return ControllerResponse(
                ok=False,
                message=f"Not enough resources for the requested batch size ({feasible}/{batch}).",
            )

        self.state.store_undo_snapshot()
        result = self.engine.run_action(
            action=action,
            risk=risk,
            attempts=batch,
            inventory=inventory,
            modifier=self.settings.crafting_mod,
            roll_mode=self.settings.roll_mode,
            roll_source=self.build_roll_source(),
            extra_cost=extra,
        )

        lines = [f"Attempt {a.attempt}: {describe_attempt(a)}" for a in result.attempts]
        if result.summary.stopped_reason:
            lines.append(f"Stopped: {result.summary.stopped_reason}")
        title = f"{action.tier.value} {risk.label} (x{len(result.attempts)})"
        self.state.record_run(result, title=title, details="\n".join(lines))

        return ControllerResponse(
            ok=True,
            message=f"{action.tier.value} run complete: {len(result.attempts)}/{batch} attempts resolved.",
            result=result,
        )

    def quick_set(self, text: str) -> Inventory:
        """Overwrite the inventory from a preset string in this table's quick-set order."""
        return self.state.quick_set(text, self.quick_set_order)

    def undo(self) -> ControllerResponse:
        if self.state.undo():
            return ControllerResponse(ok=True, message="Last run undone.")
        return ControllerResponse(ok=False, message="Nothing to undo yet.")


# ============================================================
# NARRATION
# ============================================================

def _describe_roll(roll: RollDetail) -> str:
    return f"d20 {roll.die} + {roll.modifier} = {roll.total} vs DC {roll.dc}"


def describe_attempt(attempt: AttemptResult) -> str:
    """
    One log line for an attempt, e.g.
    'FAIL (d20 3 + 0 = 3 vs DC 24); Salvage stage 1 FAIL (...); Salvage stage 2 SUCCESS (...) → -1 Superior EE'
    """
    check = attempt.check
    detail = f"{'SUCCESS' if check.success else 'FAIL'} ({_describe_roll(check)})"
    for roll in attempt.salvage:
        stage = f" stage {roll.stage}" if roll.stage else ""
        outcome = "SUCCESS" if roll.success else "FAIL"
        detail += f"; Salvage{stage} {outcome} ({_describe_roll(roll)})"
    diff = format_delta(attempt.inventory_delta)
    if diff:
        detail += f" → {diff}"
    return detail
