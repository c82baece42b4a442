from __future__ import annotations

from typing import Optional

from .models import IconCategory, SnowCondition

# Checked in order; first substring hit wins.
_CONDITION_KEYWORDS = (
    ("snow", IconCategory.SNOW),
    ("rain", IconCategory.RAIN),
    ("clear", IconCategory.SUN),
    ("cloud", IconCategory.CLOUD),
)

_ICONS = {
    IconCategory.SNOW: "❄️",
    IconCategory.RAIN: "🌧️",
    IconCategory.SUN: "☀️",
    IconCategory.CLOUD: "☁️",
    IconCategory.DEFAULT: "⛅",
}

ICY_THRESHOLD_M = 200

MIXED = SnowCondition("Mixed conditions", highlight=False)
POWDER = SnowCondition("Dry, Powder Snow!", highlight=True)
ICY = SnowCondition("Icy or Sticky Snow", highlight=False)
SLUSHY = SnowCondition("Wet, Slushy Snow", highlight=False)


def classify_condition(phrase: Optional[str]) -> IconCategory:
    if not phrase:
        return IconCategory.DEFAULT
    lowered = phrase.lower()
    for keyword, category in _CONDITION_KEYWORDS:
        if keyword in lowered:
            return category
    return IconCategory.DEFAULT


def icon_for(category: IconCategory) -> str:
    return _ICONS.get(category, _ICONS[IconCategory.DEFAULT])


def classify_snow_quality(freezing_level: Optional[float], base_elevation: Optional[float]) -> SnowCondition:
    """Judge surface snow from where the freezing level sits relative to the base.

    A freezing level below the base means the whole mountain stayed cold.
    Within 200 m above it the lower runs refreeze; anything higher is wet.
    """

    if not freezing_level or not base_elevation:
        return MIXED

    if freezing_level < base_elevation:
        return POWDER
    if freezing_level - base_elevation <= ICY_THRESHOLD_M:
        return ICY
    return SLUSHY
