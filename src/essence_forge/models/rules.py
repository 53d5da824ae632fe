from typing import List
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, model_validator
from pydantic.alias_generators import to_camel

from essence_forge.models.schemas import EssenceFamily, Resource, Tier

# ========================================================================================
# RULES: Static crafting configuration. Created at startup, immutable, shared read-only
# across every resolution. Field aliases follow the camelCase keys of exported tables.
# ========================================================================================
ResourceMap = dict[Resource, NonNegativeInt]


class RuleModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SalvageStage(RuleModel):
    """Resources returned when a salvage roll meets the stage DC"""
    dc: PositiveInt
    returns: ResourceMap = {}
    label: str | None = None


class SalvageCascade(RuleModel):
    """Ordered salvage stages. First success wins, later stages are skipped."""
    stages: List[SalvageStage] = Field(min_length=1)


class FlexInput(RuleModel):
    """A quantity payable from any of several interchangeable resources"""
    id: str
    label: str
    amount: NonNegativeInt
    options: List[Resource] = Field(min_length=1)     # Consumed greedily in this order


class ToolRequirement(RuleModel):
    """Equipped-tool gate for a risk. The engine only checks it, never stores tool state."""
    id: str
    label: str
    description: str | None = None


class RiskConfig(RuleModel):
    """One selectable difficulty/cost/output/salvage profile of an action"""
    id: str
    label: str
    description: str | None = None
    base_dc: PositiveInt
    inputs: ResourceMap = {}
    outputs: ResourceMap = {}
    salvage: SalvageStage | SalvageCascade | None = None
    flex_inputs: List[FlexInput] = []
    tool_requirement: ToolRequirement | None = None
    time_minutes: NonNegativeInt = 0

    @property
    def salvage_stages(self) -> tuple[SalvageStage, ...]:
        """Salvage as an ordered tuple of stages, empty when the risk has none."""
        if self.salvage is None:
            return ()
        if isinstance(self.salvage, SalvageCascade):
            return tuple(self.salvage.stages)
        return (self.salvage,)

    @property
    def has_staged_salvage(self) -> bool:
        return isinstance(self.salvage, SalvageCascade)


class OptionalCostConfig(RuleModel):
    """
    A resource that may be spent per unit, per attempt, to lower a risk's DC.
    Units spent past the floor are still consumed but reduce nothing further.
    """
    resource: Resource
    label: str
    per_unit_dc_reduction: PositiveInt
    min_dc: PositiveInt


class ActionConfig(RuleModel):
    """A named crafting operation offering one or more risk profiles"""
    id: str
    tier: Tier
    title: str
    subtitle: str = ""
    family: EssenceFamily | None = None
    risks: List[RiskConfig] = Field(min_length=1)
    optional_cost: OptionalCostConfig | None = None

    @model_validator(mode="after")
    def _unique_risk_ids(self) -> "ActionConfig":
        ids = [risk.id for risk in self.risks]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Action {self.id} has duplicate risk ids: {ids}")
        return self

    @model_validator(mode="after")
    def _floor_not_above_base_dc(self) -> "ActionConfig":
        # Spending extra units must never raise a risk's DC
        if self.optional_cost is not None:
            for risk in self.risks:
                if risk.base_dc < self.optional_cost.min_dc:
                    raise ValueError(
                        f"Action {self.id}: risk {risk.id} base DC {risk.base_dc} "
                        f"is below the optional-cost floor {self.optional_cost.min_dc}"
                    )
        return self

    def get_risk(self, risk_id: str) -> RiskConfig:
        """Look up a risk by id. Raises KeyError if the action has no such risk."""
        for risk in self.risks:
            if risk.id == risk_id:
                return risk
        raise KeyError(f"Action {self.id} has no risk '{risk_id}'")
