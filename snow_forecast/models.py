from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

SENTINEL = "-"

Reading = Union[float, str]


class IconCategory(str, Enum):
    SNOW = "snow"
    RAIN = "rain"
    SUN = "sun"
    CLOUD = "cloud"
    DEFAULT = "default"


class Elevation(str, Enum):
    BASE = "base"
    MID = "mid"
    PEAK = "peak"

    @classmethod
    def parse(cls, value: Union[str, "Elevation"]) -> "Elevation":
        if isinstance(value, Elevation):
            return value
        normalized = str(value).strip().lower()
        aliases = {"bot": cls.BASE, "bottom": cls.BASE, "top": cls.PEAK}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown elevation tier: {value!r}") from None


class SortMetric(str, Enum):
    TEMPERATURE = "temperature"
    SNOWFALL = "snowfall"
    WIND = "wind"

    @classmethod
    def parse(cls, value: Union[str, "SortMetric"]) -> "SortMetric":
        if isinstance(value, SortMetric):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown sort metric: {value!r}") from None


class DayWindow(str, Enum):
    NEXT_3_DAYS = "next3days"
    NEXT_7_DAYS = "next7days"

    @property
    def days(self) -> int:
        return 3 if self is DayWindow.NEXT_3_DAYS else 7

    @property
    def label(self) -> str:
        return f"Next {self.days} Days"


@dataclass(frozen=True)
class SnowCondition:
    text: str
    highlight: bool = False


@dataclass(frozen=True)
class Period:
    """One sub-day forecast slot.

    Snowfall, rainfall and wind degrade to :data:`SENTINEL` when the upstream
    reading is missing or zero; temperature is ``None`` when absent.
    """

    label: str
    temperature: Optional[float]
    snowfall: Reading
    rainfall: Reading
    wind: Reading
    condition: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "temperature": self.temperature,
            "snowfall": self.snowfall,
            "rainfall": self.rainfall,
            "wind": self.wind,
            "condition": self.condition,
        }


@dataclass(frozen=True)
class DayForecast:
    name: str
    weather: str
    icon: IconCategory
    periods: Tuple[Period, ...]
    freezing_level: str
    snow_condition: SnowCondition

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "weather": self.weather,
            "icon": self.icon.value,
            "periods": [period.to_dict() for period in self.periods],
            "freezing_level": self.freezing_level,
            "snow_condition": {
                "text": self.snow_condition.text,
                "highlight": self.snow_condition.highlight,
            },
        }


@dataclass(frozen=True)
class ProcessedResort:
    """One resort at one elevation tier, days in chronological order."""

    resort_id: str
    name: str
    elevation: str
    days: Tuple[DayForecast, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resort_id": self.resort_id,
            "name": self.name,
            "elevation": self.elevation,
            "days": [day.to_dict() for day in self.days],
        }


@dataclass(frozen=True)
class DayStats:
    max_temp: float = 0.0
    total_snow: float = 0.0
    wind: int = 0


@dataclass(frozen=True)
class SnowTotals:
    next_3_days: int = 0
    next_7_days: int = 0
