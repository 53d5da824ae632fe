import re
import random
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable

logger = logging.getLogger(__name__)

# ============================================================
# ROLL SOURCES
# ============================================================

class RollSource(ABC):
    """
    Where the engine gets its integers from.
    The engine never rolls dice itself, so tests and manual play can supply
    fixed sequences without the engine knowing the difference.
    """

    @abstractmethod
    def next_check_pair(self) -> tuple[int, int]:
        """Two independent check values; the roll mode picks between them."""
        pass

    @abstractmethod
    def next_salvage(self) -> int:
        """One salvage value. Salvage is never rolled with advantage."""
        pass


class RandomRollSource(RollSource):
    """Uniform dice from a random.Random instance."""

    def __init__(self, rng: random.Random | None = None, faces: int = 20):
        if faces < 1:
            raise ValueError(f"Die must have at least one face, got {faces}")
        self.rng = rng or random.Random()
        self.faces = faces

    def roll(self) -> int:
        return self.rng.randint(1, self.faces)

    def next_check_pair(self) -> tuple[int, int]:
        return self.roll(), self.roll()

    def next_salvage(self) -> int:
        return self.roll()


class QueuedRollSource(RollSource):
    """
    Rolls taken from queues typed in by a player.

    Once a queue runs dry the shortfall comes from the fallback source, so a
    finite queue never stalls a batch. With ``repeat`` the queue is topped up
    from its original sequence whenever it runs low, like re-reading a roll
    string that was entered once for a whole session.
    """

    def __init__(
        self,
        checks: Iterable[int] = (),
        salvage: Iterable[int] = (),
        fallback: RollSource | None = None,
        repeat: bool = False,
    ):
        self._check_source = list(checks)
        self._salvage_source = list(salvage)
        self._checks = deque(self._check_source)
        self._salvage = deque(self._salvage_source)
        self.fallback = fallback or RandomRollSource()
        self.repeat = repeat

    @property
    def pending_checks(self) -> int:
        return len(self._checks)

    @property
    def pending_salvage(self) -> int:
        return len(self._salvage)

    def next_check_pair(self) -> tuple[int, int]:
        if self.repeat and len(self._checks) < 2:
            self._checks.extend(self._check_source)

        if not self._checks:
            pair = self.fallback.next_check_pair()
            logger.debug("Check queue empty, drew %s from fallback", pair)
            return pair

        roll = self._checks.popleft()
        if self._checks:
            return roll, self._checks.popleft()
        # Half-empty queue: the queued value stands, the fallback fills the other
        other = self.fallback.next_check_pair()[0]
        logger.debug("Check queue ran out, drew %s from fallback", other)
        return roll, other

    def next_salvage(self) -> int:
        if self.repeat and not self._salvage:
            self._salvage.extend(self._salvage_source)

        if self._salvage:
            return self._salvage.popleft()
        value = self.fallback.next_salvage()
        logger.debug("Salvage queue empty, drew %s from fallback", value)
        return value


def parse_roll_queue(text: str) -> list[int]:
    """
    Parse a typed roll string such as '17, 4 12' into positive integers.
    Tokens that are not positive integers are ignored.
    """
    if not text or not text.strip():
        return []

    values = []
    for token in re.split(r"[\s,]+", text.strip()):
        if re.fullmatch(r"[+-]?\d+", token):
            value = int(token)
            if value > 0:
                values.append(value)
    return values
