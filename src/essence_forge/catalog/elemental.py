"""
Elemental essence action table: wells, catalysis, infusion, tempering, ascension.
"""
from essence_forge.models import (
    ActionConfig,
    EssenceFamily,
    FlexInput,
    OptionalCostConfig,
    Resource,
    RiskConfig,
    SalvageCascade,
    SalvageStage,
    Tier,
    ToolRequirement,
)


def create_elemental_actions() -> list[ActionConfig]:
    """
    Builds the elemental family, tiers T1 to T5.

    Returns:
        list[ActionConfig]: Actions in tier order.
    """

    # ==================== SHARED ====================

    raw_any = FlexInput(
        id="raw-any",
        label="Raw essence (any family)",
        amount=1,
        options=[Resource.RAW, Resource.RAW_ELEMENTAL],
    )
    fused_any = FlexInput(
        id="fused-any",
        label="Fused essence (any family)",
        amount=1,
        options=[Resource.FUSED, Resource.FUSED_ELEMENTAL],
    )
    greater_condenser = ToolRequirement(
        id="greater",
        label="Requires greater elemental condenser",
        description="Superior refinement needs a greater-grade tool set.",
    )

    # ==================== T1 ====================

    wells = ActionConfig(
        id="t1",
        tier=Tier.T1,
        family=EssenceFamily.ELEMENTAL,
        title="Extract Elemental Wells",
        subtitle="Tap planar vents to gather raw elemental essence alongside volatile arcane residue.",
        risks=[
            RiskConfig(
                id="steady",
                label="Steady channel",
                description="DC 10 • Outputs: +1 Raw EE & +1 RawAE • Salvage: DC 12 → +1 Raw EE",
                base_dc=10,
                outputs={Resource.RAW_ELEMENTAL: 1, Resource.RAW_AE: 1},
                salvage=SalvageStage(dc=12, returns={Resource.RAW_ELEMENTAL: 1}),
                time_minutes=45,
            ),
            RiskConfig(
                id="surge",
                label="Surge tapping",
                description="DC 16 • Outputs: +2 Raw EE & +1 RawAE • Salvage: DC 14 → +1 Raw EE",
                base_dc=16,
                outputs={Resource.RAW_ELEMENTAL: 2, Resource.RAW_AE: 1},
                salvage=SalvageStage(dc=14, returns={Resource.RAW_ELEMENTAL: 1}),
                time_minutes=60,
            ),
        ],
    )

    # ==================== T2 ====================

    catalyze = ActionConfig(
        id="t2",
        tier=Tier.T2,
        family=EssenceFamily.ELEMENTAL,
        title="Catalyze Raw → Fine",
        subtitle="Fuse elemental motes with any raw essence to stabilize fine elemental essence.",
        risks=[
            RiskConfig(
                id="standard",
                label="Catalytic mix",
                description="DC 14 • 1 Raw EE + 1 Raw (any family) → 1 Fine EE • Salvage: DC 12 → +1 Raw EE",
                base_dc=14,
                inputs={Resource.RAW_ELEMENTAL: 1},
                flex_inputs=[raw_any],
                outputs={Resource.FINE_ELEMENTAL: 1},
                salvage=SalvageStage(dc=12, returns={Resource.RAW_ELEMENTAL: 1}),
                time_minutes=90,
            ),
        ],
    )

    # ==================== T3 ====================

    infuse = ActionConfig(
        id="t3",
        tier=Tier.T3,
        family=EssenceFamily.ELEMENTAL,
        title="Infuse Fine + Arcane",
        subtitle="Blend elemental essence with fine arcane catalysts to create fused essence.",
        risks=[
            RiskConfig(
                id="infuse",
                label="Arcane infusion",
                description="DC 18 • 1 Fine EE + 1 Fine Arcane → 1 Fused EE • Salvage: DC 14 → +1 Fine EE",
                base_dc=18,
                inputs={Resource.FINE_ELEMENTAL: 1, Resource.FINE_ARCANE: 1},
                outputs={Resource.FUSED_ELEMENTAL: 1},
                salvage=SalvageStage(dc=14, returns={Resource.FINE_ELEMENTAL: 1}),
                time_minutes=120,
            ),
        ],
    )

    # ==================== T4 ====================

    refine = ActionConfig(
        id="t4",
        tier=Tier.T4,
        family=EssenceFamily.ELEMENTAL,
        title="Refine Fused → Superior",
        subtitle="Channel fused essence through greater tools; spend RawAE to ease the DC.",
        optional_cost=OptionalCostConfig(
            resource=Resource.RAW_AE,
            label="RawAE boosters (−2 DC each)",
            per_unit_dc_reduction=2,
            min_dc=12,
        ),
        risks=[
            RiskConfig(
                id="steady",
                label="Careful tempering",
                description="Base DC 20 • 1 Fused EE + 1 Fused (any family) → 1 Superior EE • Salvage: DC 16 → +2 Fine EE",
                base_dc=20,
                inputs={Resource.FUSED_ELEMENTAL: 1},
                flex_inputs=[fused_any],
                outputs={Resource.SUPERIOR_ELEMENTAL: 1},
                salvage=SalvageStage(dc=16, returns={Resource.FINE_ELEMENTAL: 2}),
                tool_requirement=greater_condenser,
                time_minutes=150,
            ),
            RiskConfig(
                id="surge",
                label="Aggressive channel",
                description="Base DC 26 • 1 Fused EE + 1 Fused (any family) → 1 Superior EE • Salvage: DC 18 → +1 Fine EE",
                base_dc=26,
                inputs={Resource.FUSED_ELEMENTAL: 1},
                flex_inputs=[fused_any],
                outputs={Resource.SUPERIOR_ELEMENTAL: 1},
                salvage=SalvageStage(dc=18, returns={Resource.FINE_ELEMENTAL: 1}),
                tool_requirement=greater_condenser,
                time_minutes=210,
            ),
        ],
    )

    # ==================== T5 ====================

    elevate = ActionConfig(
        id="t5",
        tier=Tier.T5,
        family=EssenceFamily.ELEMENTAL,
        title="Elevate Superior → Supreme",
        subtitle="Complete the cycle by marrying superior and fused elemental essence.",
        risks=[
            RiskConfig(
                id="ascend",
                label="Ascension weave",
                description="DC 24 • 1 Superior EE + 1 Fused EE → 1 Supreme EE • "
                            "Salvage: DC 22 → +1 Superior EE / DC 18 → +1 Fused EE",
                base_dc=24,
                inputs={Resource.SUPERIOR_ELEMENTAL: 1, Resource.FUSED_ELEMENTAL: 1},
                outputs={Resource.SUPREME_ELEMENTAL: 1},
                salvage=SalvageCascade(stages=[
                    SalvageStage(dc=22, returns={Resource.SUPERIOR_ELEMENTAL: 1}),
                    SalvageStage(dc=18, returns={Resource.FUSED_ELEMENTAL: 1}),
                ]),
                time_minutes=240,
            ),
        ],
    )

    return [wells, catalyze, infuse, refine, elevate]


ELEMENTAL_ACTIONS: list[ActionConfig] = create_elemental_actions()

# Quick-set positions for the elemental table, elemental resources first.
ELEMENTAL_QUICK_SET_ORDER: list[Resource] = [
    Resource.RAW_ELEMENTAL,
    Resource.FINE_ELEMENTAL,
    Resource.FUSED_ELEMENTAL,
    Resource.SUPERIOR_ELEMENTAL,
    Resource.SUPREME_ELEMENTAL,
    Resource.RAW_AE,
    Resource.FINE_ARCANE,
    Resource.RAW,
    Resource.FINE,
    Resource.FUSED,
]
