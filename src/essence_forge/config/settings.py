from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from essence_forge.models import RollMode, Toolkit


class CraftingSettings(BaseModel):
    """Per-session table settings a crafter can change between runs"""
    crafting_mod: int = 0
    auto_roll: bool = True                  # False: take rolls from the manual strings
    roll_mode: RollMode = RollMode.NORMAL
    manual_checks: str = ""                 # e.g. "17 4, 12 9"
    manual_salvage: str = ""
    toolkit: Toolkit = Toolkit.STANDARD
    tray_size: int = 12                     # Recent rolls shown per roll type


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    enable_color: bool = True

    # Crafting defaults
    crafting_mod: int = 0
    roll_mode: RollMode = RollMode.NORMAL
    auto_roll: bool = True
    toolkit: Toolkit = Toolkit.STANDARD
    manual_checks: str = ""
    manual_salvage: str = ""
    tray_size: int = 12

    # Session log limits
    log_limit: int = 200
    roll_limit: int = 200

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FORGE_", extra="ignore")

    def crafting_settings(self) -> CraftingSettings:
        """Starting table settings for a new session."""
        return CraftingSettings(
            crafting_mod=self.crafting_mod,
            auto_roll=self.auto_roll,
            roll_mode=self.roll_mode,
            manual_checks=self.manual_checks,
            manual_salvage=self.manual_salvage,
            toolkit=self.toolkit,
            tray_size=self.tray_size,
        )

settings = Settings()
