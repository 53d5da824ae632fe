from typing import List

from essence_forge.config.settings import Settings
from essence_forge.models import ActionConfig, Resource
from essence_forge.core.resolution_engine import ResolutionEngine, resolution_engine, run_action
from essence_forge.core.roll_source import RollSource, RandomRollSource, QueuedRollSource, parse_roll_queue
from essence_forge.core.state_manager import StateManager, SessionState
from essence_forge.core.crafting_controller import CraftingController, ActionPreview, ControllerResponse


def initialize_crafting_controller(
    actions: List[ActionConfig],
    settings: Settings,
    initial_state: SessionState | None = None,
    quick_set_order: List[Resource] | None = None,
) -> CraftingController:
    """Instantiate all session components and return the CraftingController."""

    # Initialize core systems
    state_manager = StateManager(
        initial_state=initial_state,
        log_limit=settings.log_limit,
        roll_limit=settings.roll_limit,
    )
    # Create and return the controller
    controller = CraftingController(
        actions=actions,
        state_manager=state_manager,
        settings=settings.crafting_settings(),
        resolution_engine=resolution_engine,
        quick_set_order=quick_set_order,
    )

    return controller

__all__ = [
    'ResolutionEngine',
    'RollSource',
    'RandomRollSource',
    'QueuedRollSource',
    'StateManager',
    'SessionState',
    'CraftingController',
    'ActionPreview',
    'ControllerResponse',
    'parse_roll_queue',
    'resolution_engine',
    'run_action',
    'initialize_crafting_controller',
]
