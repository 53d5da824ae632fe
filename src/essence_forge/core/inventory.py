"""Inventory helpers. Inventories are plain dicts keyed by every Resource."""

from typing import Mapping

from essence_forge.exceptions import InvalidInventoryError
from essence_forge.models import Inventory, Resource, RESOURCE_ORDER


def empty_inventory() -> Inventory:
    """Return an inventory holding zero of every resource."""
    return {resource: 0 for resource in RESOURCE_ORDER}


def normalize_inventory(source: Mapping[Resource | str, int]) -> Inventory:
    """
    Build a fresh, total inventory from a possibly sparse mapping.

    Keys may be Resource members or their string values ("fused", "rawAE").
    Missing resources count as zero. The source mapping is never returned
    or modified.

    Raises:
        InvalidInventoryError: a key is not a known resource or a count is negative.
    """
    inventory = empty_inventory()
    for key, count in source.items():
        try:
            resource = Resource(key)
        except ValueError:
            raise InvalidInventoryError(f"Unknown resource in inventory: {key!r}") from None
        if count < 0:
            raise InvalidInventoryError(f"Inventory count for {resource.value} is negative: {count}")
        inventory[resource] = int(count)
    return inventory


def apply_delta(inventory: Inventory, delta: Mapping[Resource, int]) -> None:
    """Add a signed delta to an inventory in place."""
    for resource, change in delta.items():
        inventory[resource] = inventory.get(resource, 0) + change


def format_delta(delta: Mapping[Resource, float]) -> str:
    """Readable delta in resource order, e.g. '-1 Fused EE, +2 Fine EE'."""
    parts = []
    for resource in RESOURCE_ORDER:
        change = delta.get(resource)
        if not change:
            continue
        prefix = "+" if change > 0 else ""
        parts.append(f"{prefix}{change:g} {resource.label}")
    return ", ".join(parts)
