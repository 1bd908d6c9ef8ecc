"""Achievement rarity thresholds."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

RARITIES = ("common", "rare", "epic", "legendary")


class RaritySettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    common_threshold: int = 50
    rare_threshold: int = 25
    epic_threshold: int = 10
    legendary_threshold: int = 2
    enable_dynamic_rarity: bool = True


def validate_rarity_settings(settings: RaritySettings) -> tuple[bool, str]:
    """Thresholds are completion percentages and must strictly descend."""
    values = [
        settings.common_threshold,
        settings.rare_threshold,
        settings.epic_threshold,
        settings.legendary_threshold,
    ]
    if any(v < 0 or v > 100 for v in values):
        return False, "Thresholds must be percentages between 0 and 100."
    if not values[0] > values[1] > values[2] > values[3]:
        return False, "Thresholds must be in descending order: Common > Rare > Epic > Legendary"
    return True, ""


def rarity_for_completion(completion_rate: float, settings: RaritySettings) -> str:
    """Rarity label for the percentage of characters holding an achievement."""
    if completion_rate >= settings.common_threshold:
        return "common"
    if completion_rate >= settings.rare_threshold:
        return "rare"
    if completion_rate >= settings.epic_threshold:
        return "epic"
    return "legendary"
