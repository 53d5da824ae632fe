from .schemas import (
    Resource,
    RESOURCE_LABELS,
    RESOURCE_ORDER,
    Tier,
    EssenceFamily,
    RollMode,
    RollType,
    Toolkit,
)

from .rules import (
    ResourceMap,
    SalvageStage,
    SalvageCascade,
    FlexInput,
    ToolRequirement,
    RiskConfig,
    OptionalCostConfig,
    ActionConfig,
)

from .results import (
    Inventory,
    ResourceDelta,
    RollDetail,
    RollLogEntry,
    AttemptResult,
    RunSummary,
    ActionRunResult,
    OddsResult,
)

__all__ = [
    # Schemas
    "Resource",
    "RESOURCE_LABELS",
    "RESOURCE_ORDER",
    "Tier",
    "EssenceFamily",
    "RollMode",
    "RollType",
    "Toolkit",

    # Rules
    "ResourceMap",
    "SalvageStage",
    "SalvageCascade",
    "FlexInput",
    "ToolRequirement",
    "RiskConfig",
    "OptionalCostConfig",
    "ActionConfig",

    # Results
    "Inventory",
    "ResourceDelta",
    "RollDetail",
    "RollLogEntry",
    "AttemptResult",
    "RunSummary",
    "ActionRunResult",
    "OddsResult",
]
