from typing import List
from pydantic import BaseModel

from essence_forge.models.schemas import Resource, RollType

# ========================================================================================
# RESULTS: Ephemeral records produced by one resolution call. The engine gives them no
# persistent identity or timestamp; the caller stamps them if it logs them.
# ========================================================================================
Inventory = dict[Resource, int]                 # Every resource, counts >= 0
ResourceDelta = dict[Resource, float]           # Sparse; absent keys mean zero

# ============================================================
# ROLL STRUCTURES
# ============================================================
class RollDetail(BaseModel):
    """One die result as it was faced"""
    type: RollType
    tier: str
    action_id: str
    risk_id: str
    dc: int                                 # Difficulty faced (effective DC for checks)
    die: int                                # Die value used, after advantage resolution
    modifier: int
    total: int
    success: bool
    stage: int | None = None                # 1-based, cascade salvage only


class RollLogEntry(RollDetail):
    """A RollDetail stamped for the session roll log"""
    id: str
    timestamp: float

# ============================================================
# ATTEMPT & RUN
# ============================================================
class AttemptResult(BaseModel):
    """The record of one resolved attempt"""
    attempt: int                            # 1-based index within the batch
    risk_id: str
    dc: int                                 # Base DC
    effective_dc: int
    success: bool
    time_minutes: int
    check: RollDetail
    salvage: List[RollDetail] = []          # Salvage rolls actually attempted, in order
    consumed: dict[Resource, int] = {}      # Reserved cost, flex choices resolved
    inventory_delta: dict[Resource, int] = {}


class RunSummary(BaseModel):
    attempts_requested: int
    attempts_completed: int
    stopped_reason: str | None = None
    total_time: int = 0


class ActionRunResult(BaseModel):
    """Everything a batch run hands back to the caller"""
    attempts: List[AttemptResult] = []
    final_inventory: Inventory
    rolls: List[RollDetail] = []            # Flat log, check then salvage per attempt
    summary: RunSummary
    requirement_met: bool

# ============================================================
# ODDS
# ============================================================
class OddsResult(BaseModel):
    effective_dc: int
    success: float                          # Check chance under the roll mode
    salvage: float | None = None            # Chance any salvage stage succeeds
    stage_chances: List[float] = []         # Per-stage normal odds
