"""
Static action catalogs.

Actions are loaded once at startup and shared read-only. Tables exported by
other tools can be loaded from JSON using the camelCase keys of the models
(``baseDc``, ``flexInputs``, ``optionalCost`` ...).
"""
import logging
from pathlib import Path

from pydantic import TypeAdapter

from essence_forge.catalog.elemental import (
    ELEMENTAL_ACTIONS,
    ELEMENTAL_QUICK_SET_ORDER,
    create_elemental_actions,
)
from essence_forge.exceptions import UnknownActionError
from essence_forge.models import ActionConfig

logger = logging.getLogger(__name__)

_action_list = TypeAdapter(list[ActionConfig])


def load_catalog(path: Path | str) -> list[ActionConfig]:
    """
    Load and validate an action table from a JSON file.

    Raises:
        pydantic.ValidationError: the table is malformed.
    """
    path = Path(path)
    actions = _action_list.validate_json(path.read_text(encoding="utf-8"))
    logger.info("Loaded %d actions from %s", len(actions), path)
    return actions


def index_actions(actions: list[ActionConfig]) -> dict[str, ActionConfig]:
    """Map action id -> action. Raises ValueError on duplicate ids."""
    index: dict[str, ActionConfig] = {}
    for action in actions:
        if action.id in index:
            raise ValueError(f"Duplicate action id: {action.id}")
        index[action.id] = action
    return index


def get_action(actions: dict[str, ActionConfig], action_id: str) -> ActionConfig:
    if action_id not in actions:
        raise UnknownActionError(f"Unknown action '{action_id}'")
    return actions[action_id]


__all__ = [
    "ELEMENTAL_ACTIONS",
    "ELEMENTAL_QUICK_SET_ORDER",
    "create_elemental_actions",
    "get_action",
    "index_actions",
    "load_catalog",
]
