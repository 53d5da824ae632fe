from enum import Enum
# Enum Classes
class Resource(str, Enum):              # Countable crafting materials tracked in an Inventory.
    RAW = "raw"                             # --Natural
    FINE = "fine"
    FUSED = "fused"
    SUPERIOR = "superior"
    SUPREME = "supreme"
    RAW_AE = "rawAE"                        # --Arcane residue, spent to ease DCs
    RAW_ELEMENTAL = "rawElemental"          # --Elemental
    FINE_ELEMENTAL = "fineElemental"
    FUSED_ELEMENTAL = "fusedElemental"
    SUPERIOR_ELEMENTAL = "superiorElemental"
    SUPREME_ELEMENTAL = "supremeElemental"
    FINE_ARCANE = "fineArcane"

    @property
    def label(self) -> str:
        return RESOURCE_LABELS[self]


RESOURCE_LABELS: dict[Resource, str] = {
    Resource.RAW: "Raw",
    Resource.FINE: "Fine",
    Resource.FUSED: "Fused",
    Resource.SUPERIOR: "Superior",
    Resource.SUPREME: "Supreme",
    Resource.RAW_AE: "RawAE",
    Resource.RAW_ELEMENTAL: "Raw EE",
    Resource.FINE_ELEMENTAL: "Fine EE",
    Resource.FUSED_ELEMENTAL: "Fused EE",
    Resource.SUPERIOR_ELEMENTAL: "Superior EE",
    Resource.SUPREME_ELEMENTAL: "Supreme EE",
    Resource.FINE_ARCANE: "Fine Arcane",
}

# Display order for inventories, deltas and quick-set presets.
RESOURCE_ORDER: list[Resource] = list(Resource)

class Tier(str, Enum):                  # Crafting tiers, T1 (extraction) to T5 (supreme)
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"
    T5 = "T5"
class EssenceFamily(str, Enum):         # Families of actions sharing one runner
    NATURAL = "natural"
    ELEMENTAL = "elemental"
class RollMode(str, Enum):              # How the two drawn check values resolve into one die
    NORMAL = "normal"                       # --First value
    ADVANTAGE = "adv"                       # --Higher value
    DISADVANTAGE = "dis"                    # --Lower value
class RollType(str, Enum):
    """Types of dice rolls"""
    CHECK = "check"                         # d20 + modifier vs effective DC
    SALVAGE = "salvage"                     # d20 + modifier vs salvage stage DC
class Toolkit(str, Enum):               # Tool harness a crafter can have equipped
    STANDARD = "standard"
    GREATER = "greater"
