"""Entry point for the crafting table command line."""

from essence_forge.config.settings import settings
from essence_forge.utils.logging import setup_logging
from essence_forge.catalog import ELEMENTAL_ACTIONS, ELEMENTAL_QUICK_SET_ORDER
from essence_forge.core import initialize_crafting_controller, CraftingController
from essence_forge.core.inventory import format_delta
from essence_forge.exceptions import CraftingError
from essence_forge.models import RESOURCE_ORDER, RollType

HELP_TEXT = """Commands:
  inv                                   show inventory
  set <resource> <count>                set one resource (e.g. set fusedElemental 3)
  quick <counts>                        set resources in order: {order}
  actions                               list actions and risks
  odds <action> [risk] [extra]          preview odds and expected value
  run <action> [risk] [batch] [extra]   roll a batch
  rolls                                 recent check and salvage rolls
  undo                                  revert the last run
  quit"""


# ─────────────────────────────────────────────────────────────────────────────
# Command handling
# ─────────────────────────────────────────────────────────────────────────────
def _format_inventory(controller: CraftingController) -> str:
    inventory = controller.state.get_inventory()
    lines = [f"  {resource.label:<12} {inventory[resource]}" for resource in RESOURCE_ORDER]
    minutes = controller.state.get_current_state().session_minutes
    return "\n".join(lines + [f"  Session time  {minutes}m"])


def _format_actions(controller: CraftingController) -> str:
    lines = []
    for action in controller.actions.values():
        lines.append(f"{action.id} [{action.tier.value}] {action.title}")
        for risk in action.risks:
            lines.append(f"    {risk.id}: {risk.description or risk.label}")
    return "\n".join(lines)


def _format_preview(controller: CraftingController, args: list[str]) -> str:
    action_id = args[0]
    risk_id = args[1] if len(args) > 1 else None
    extra = int(args[2]) if len(args) > 2 else 0
    preview = controller.preview(action_id, risk_id, extra=extra)

    odds = preview.odds
    lines = [
        f"Effective DC {odds.effective_dc} | success {odds.success:.0%}"
        + (f" | salvage {odds.salvage:.0%}" if odds.salvage is not None else ""),
        f"Expected per attempt: {format_delta(preview.expectation) or 'nothing'}",
        f"Feasible attempts: {preview.feasible}",
    ]
    if preview.missing:
        lines.append(f"Needs {', '.join(preview.missing)}")
    if preview.needs_tool:
        lines.append(f"{preview.tool_label}: equip it before rolling.")
    if preview.wasted_units:
        lines.append(f"{preview.wasted_units} extra unit(s) per attempt past the DC floor are wasted.")
    return "\n".join(lines)


def _format_run(controller: CraftingController, args: list[str]) -> str:
    action_id = args[0]
    risk_id = args[1] if len(args) > 1 else None
    batch = int(args[2]) if len(args) > 2 else 1
    extra = int(args[3]) if len(args) > 3 else 0
    response = controller.run(action_id, risk_id, batch=batch, extra=extra)
    if not response.ok:
        return response.message
    entry = controller.state.get_current_state().log[0]
    return f"{response.message}\n{entry.title}\n{entry.details}"


def _format_rolls(controller: CraftingController) -> str:
    tray = controller.settings.tray_size
    lines = []
    for roll_type in (RollType.CHECK, RollType.SALVAGE):
        lines.append(f"{roll_type.value.title()}s:")
        for roll in controller.state.recent_rolls(roll_type, tray):
            mark = "✓" if roll.success else "✗"
            lines.append(
                f"  {roll.tier} ({roll.risk_id}) DC {roll.dc} · d20={roll.die} + {roll.modifier} = {roll.total} {mark}"
            )
    return "\n".join(lines)


def handle_command(controller: CraftingController, text: str) -> str:
    """Execute one command line and return what to print."""
    command, *args = text.split()
    command = command.lower()

    match command:
        case "help" | "?":
            return HELP_TEXT.format(order=", ".join(r.value for r in controller.quick_set_order))
        case "inv":
            return _format_inventory(controller)
        case "set" if len(args) == 2:
            controller.state.set_resource(args[0], int(args[1]))
            return _format_inventory(controller)
        case "quick" if args:
            controller.quick_set(" ".join(args))
            return _format_inventory(controller)
        case "actions":
            return _format_actions(controller)
        case "odds" if args:
            return _format_preview(controller, args)
        case "run" if args:
            return _format_run(controller, args)
        case "rolls":
            return _format_rolls(controller)
        case "undo":
            return controller.undo().message
        case _:
            return f"Unknown command: {text!r}. Type 'help' for commands."


# ─────────────────────────────────────────────────────────────────────────────
# Session Loop
# ─────────────────────────────────────────────────────────────────────────────
def get_player_input() -> str | None:
    """Get input from the player, handling EOF and interrupts."""
    try:
        text = input("\n> ").strip()
        return text if text else None
    except (EOFError, KeyboardInterrupt):
        return "quit"


def session_loop(controller: CraftingController) -> None:
    """Main loop - process commands until quit."""

    while True:
        player_input = get_player_input()

        if player_input is None:
            print("(Type 'help' for commands)")
            continue

        if player_input.lower() in ("quit", "exit", "q"):
            print("Session closed.")
            break

        try:
            print(f"\n{handle_command(controller, player_input)}")
        except (CraftingError, ValueError) as e:
            print(f"\n[ERROR] {e}")


def main() -> None:
    """Main entry point."""
    # Setup logging
    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        enable_color=settings.enable_color,
    )

    logger.info("Starting crafting session")
    logger.debug("Configuration: %s", settings)

    controller = initialize_crafting_controller(
        ELEMENTAL_ACTIONS, settings, quick_set_order=ELEMENTAL_QUICK_SET_ORDER
    )
    print("Essence forge ready. Type 'help' for commands.")
    session_loop(controller)


if __name__ == "__main__":
    main()
