# ============================================================
# CRAFTING EXCEPTIONS
# ============================================================

class CraftingError(Exception):
    """Base exception for crafting engine errors"""
    pass


class ConfigurationError(CraftingError):
    """A risk, action or run request is internally inconsistent"""
    pass


class InvalidInventoryError(CraftingError):
    """Inventory holds a negative count or an unknown resource"""
    pass


class UnknownActionError(CraftingError, KeyError):
    """No action or risk is registered under the requested id"""
    pass
