import copy
import re
import time
import logging
from dataclasses import dataclass, field
from typing import List, Mapping

from essence_forge.exceptions import InvalidInventoryError
from essence_forge.models import (
    ActionRunResult,
    Inventory,
    Resource,
    RESOURCE_ORDER,
    RollDetail,
    RollLogEntry,
    RollType,
)
from essence_forge.core.inventory import empty_inventory, normalize_inventory

logger = logging.getLogger(__name__)

LOG_LIMIT = 200
ROLL_LIMIT = 200


@dataclass
class LogEntry:
    id: str
    title: str
    details: str
    timestamp: float


@dataclass
class UndoSnapshot:
    inventory: Inventory
    log: List[LogEntry]
    rolls: List[RollLogEntry]
    session_minutes: int


@dataclass
class SessionState:
    """Aggregate root - everything one crafting session accumulates"""
    inventory: Inventory = field(default_factory=empty_inventory)
    log: List[LogEntry] = field(default_factory=list)          # Newest first
    rolls: List[RollLogEntry] = field(default_factory=list)    # Newest first
    session_minutes: int = 0
    undo_snapshot: UndoSnapshot | None = None

    def summary(self) -> str:
        """One line: non-zero inventory and elapsed crafting time."""
        stock = ", ".join(
            f"{self.inventory[r]} {r.label}" for r in RESOURCE_ORDER if self.inventory.get(r)
        ) or "empty"
        return f"{stock} | {self.session_minutes}m"


def parse_inventory_preset(text: str) -> list[int]:
    """
    Parse a quick-set string such as '4, 0 2' into counts.
    Non-numeric tokens are ignored; negative counts become zero.
    """
    if not text or not text.strip():
        return []
    counts = []
    for token in re.split(r"[\s,]+", text.strip()):
        if re.fullmatch(r"[+-]?\d+", token):
            counts.append(max(0, int(token)))
    return counts


class StateManager:
    """
    Central owner of the session state.
    Every inventory change and every log append goes through here.
    """
    def __init__(
        self,
        initial_state: SessionState | None = None,
        log_limit: int = LOG_LIMIT,
        roll_limit: int = ROLL_LIMIT,
    ):
        self._state = initial_state or SessionState()
        self.log_limit = log_limit
        self.roll_limit = roll_limit

    def get_current_state(self) -> SessionState:
        """Return the current snapshot of the session state."""
        return self._state

    def get_inventory(self) -> Inventory:
        """A copy of the current inventory, safe to hand to the engine."""
        return dict(self._state.inventory)

    def set_resource(self, resource: Resource | str, count: int) -> None:
        """Set one resource count. Negative counts are clamped to zero."""
        try:
            resource = Resource(resource)
        except ValueError:
            raise InvalidInventoryError(f"Unknown resource: {resource!r}") from None
        self._state.inventory[resource] = max(0, int(count))
        logger.info("Inventory set: %s = %d", resource.value, self._state.inventory[resource])

    def replace_inventory(self, inventory: Mapping[Resource | str, int]) -> None:
        self._state.inventory = normalize_inventory(inventory)

    def quick_set(self, text: str, order: list[Resource] | None = None) -> Inventory:
        """
        Overwrite resources positionally from a preset string.
        Counts map onto `order` (resource display order by default). Resources
        in `order` past the end of the string are set to zero; resources not
        in `order` keep their current counts.
        """
        order = order or RESOURCE_ORDER
        counts = parse_inventory_preset(text)
        for index, resource in enumerate(order):
            self._state.inventory[resource] = counts[index] if index < len(counts) else 0
        logger.info("Quick set %d resources", len(order))
        return self.get_inventory()

    # ============================================================
    # UNDO
    # ============================================================

    def store_undo_snapshot(self) -> None:
        state = self._state
        state.undo_snapshot = UndoSnapshot(
            inventory=dict(state.inventory),
            log=list(state.log),
            rolls=list(state.rolls),
            session_minutes=state.session_minutes,
        )

    def undo(self) -> bool:
        """Restore the last snapshot. Returns False if there is nothing to undo."""
        snapshot = self._state.undo_snapshot
        if snapshot is None:
            return False
        self._state = SessionState(
            inventory=dict(snapshot.inventory),
            log=list(snapshot.log),
            rolls=list(snapshot.rolls),
            session_minutes=snapshot.session_minutes,
            undo_snapshot=None,
        )
        logger.info("Undo restored session to %s", self._state.summary())
        return True

    # ============================================================
    # RUN RECORDING
    # ============================================================

    def stamp_rolls(self, rolls: List[RollDetail], now: float | None = None) -> List[RollLogEntry]:
        """Give each roll a log id and a timestamp, preserving roll order."""
        now = time.time() if now is None else now
        stamp = int(now * 1000)
        return [
            RollLogEntry(
                **roll.model_dump(),
                id=f"{roll.type.value}-{roll.action_id}-{roll.risk_id}-{stamp}-{index}",
                timestamp=now + index / 1000,
            )
            for index, roll in enumerate(rolls)
        ]

    def record_run(
        self,
        result: ActionRunResult,
        title: str,
        details: str,
        now: float | None = None,
    ) -> List[RollLogEntry]:
        """
        Commit a finished run: replace the inventory, add its time, and push
        one log entry plus its stamped rolls onto the front of the logs.
        """
        now = time.time() if now is None else now
        stamped = self.stamp_rolls(result.rolls, now)
        state = self._state

        state.inventory = normalize_inventory(result.final_inventory)
        state.session_minutes += result.summary.total_time

        entry = LogEntry(
            id=f"{title}-{int(now * 1000)}",
            title=title,
            details=details,
            timestamp=now,
        )
        state.log = ([entry] + state.log)[: self.log_limit]
        # Newest roll first, matching the log
        state.rolls = (list(reversed(stamped)) + state.rolls)[: self.roll_limit]
        return stamped

    def recent_rolls(self, roll_type: RollType, limit: int) -> List[RollLogEntry]:
        return [roll for roll in self._state.rolls if roll.type == roll_type][:limit]

    def export_state(self) -> SessionState:
        """A deep copy of the state for a caller that persists sessions."""
        return copy.deepcopy(self._state)
