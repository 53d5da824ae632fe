"""essence-forge: d20 crafting resolution for tabletop essence refinement."""

from essence_forge.core.probability import chance_normal, chance_with_advantage, pick_advantage
from essence_forge.core.requirements import (
    effective_dc,
    max_feasible_attempts,
    resolve_attempt_requirement,
    tool_requirement_met,
)
from essence_forge.core.resolution_engine import ResolutionEngine, run_action
from essence_forge.core.expectation import compute_expected_value, compute_odds
from essence_forge.core.roll_source import QueuedRollSource, RandomRollSource, RollSource
from essence_forge.exceptions import (
    ConfigurationError,
    CraftingError,
    InvalidInventoryError,
    UnknownActionError,
)

__version__ = "0.1.0"

__all__ = [
    "chance_normal",
    "chance_with_advantage",
    "pick_advantage",
    "effective_dc",
    "max_feasible_attempts",
    "resolve_attempt_requirement",
    "tool_requirement_met",
    "ResolutionEngine",
    "run_action",
    "compute_odds",
    "compute_expected_value",
    "RollSource",
    "RandomRollSource",
    "QueuedRollSource",
    "CraftingError",
    "ConfigurationError",
    "InvalidInventoryError",
    "UnknownActionError",
]
