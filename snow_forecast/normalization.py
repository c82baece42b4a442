from __future__ import annotations

import math
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .classification import classify_condition, classify_snow_quality
from .models import SENTINEL, DayForecast, Period, Reading
from .schema import ResortBlocks

DAYS_OF_WEEK = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Labels keyed by how many periods the day has, not by the clock.
_PERIOD_LABELS = {
    1: ("Night",),
    2: ("PM", "Night"),
    3: ("AM", "PM", "Night"),
}

# Rainfall arrives in centimetres.
RAIN_SCALE = 10

EARLY_MORNING_END_HOUR = 6

UNKNOWN_CONDITION = "Unknown"


def period_label(index: int, total: int) -> str:
    labels = _PERIOD_LABELS.get(total)
    if labels is not None:
        return labels[index]
    return f"Period {index + 1}"


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _at(series: Optional[Sequence], index: int):
    if series is None or index >= len(series):
        return None
    return series[index]


def _reading(value: Optional[float], scale: int = 1) -> Reading:
    if value is None or math.isnan(value):
        return SENTINEL
    scaled = round(value * scale, 3) if scale != 1 else value
    return scaled or SENTINEL


def build_periods(
    temps: Optional[Sequence[Optional[float]]],
    snow: Optional[Sequence[Optional[float]]],
    rain: Optional[Sequence[Optional[float]]],
    wind: Optional[Sequence[Optional[float]]],
    phrases: Optional[Sequence[Optional[str]]],
) -> List[Period]:
    """Turn one day's parallel series into labelled periods.

    The temperature series sets the period count. A missing or zero reading in
    any other series degrades that field to the sentinel and never drops the
    period.
    """

    if not temps:
        return []

    total = len(temps)
    periods: List[Period] = []
    for index in range(total):
        periods.append(
            Period(
                label=period_label(index, total),
                temperature=temps[index],
                snowfall=_reading(_at(snow, index)),
                rainfall=_reading(_at(rain, index), RAIN_SCALE),
                wind=_reading(_at(wind, index)),
                condition=_at(phrases, index) or UNKNOWN_CONDITION,
            )
        )
    return periods


def highest_freezing_level(levels: Optional[Sequence[Optional[float]]]) -> Optional[float]:
    if not levels:
        return None
    valid = [level for level in levels if level is not None and not math.isnan(level)]
    return max(valid) if valid else None


def start_weekday_index(blocks: ResortBlocks, *, now: datetime) -> int:
    """Weekday index (Monday=0) that day offset 0 of the feed belongs to.

    Between midnight and 6am a lone first period is last night's forecast, so
    the feed starts on the previous calendar day.
    """

    index = now.weekday()
    first_day = blocks.row(blocks.temperature_blocks, 0)
    if 0 <= now.hour < EARLY_MORNING_END_HOUR and first_day is not None and len(first_day) == 1:
        index = (index - 1) % 7
    return index


def normalize_day(
    blocks: ResortBlocks,
    day_offset: int,
    start_index: int,
    *,
    base_elevation: Optional[float] = None,
) -> DayForecast:
    phrases = blocks.row(blocks.phrases_blocks, day_offset)
    main_condition = (phrases[0] if phrases else None) or ""
    freezing_level = highest_freezing_level(blocks.row(blocks.freezing_level_blocks, day_offset))
    elevation = blocks.bottom_elevation if base_elevation is None else base_elevation

    periods: Tuple[Period, ...] = tuple(
        build_periods(
            blocks.row(blocks.temperature_blocks, day_offset),
            blocks.row(blocks.snow_blocks, day_offset),
            blocks.row(blocks.rain_blocks, day_offset),
            blocks.row(blocks.wind_blocks, day_offset),
            phrases,
        )
    )

    return DayForecast(
        name=DAYS_OF_WEEK[(start_index + day_offset) % 7],
        weather=main_condition,
        icon=classify_condition(main_condition),
        periods=periods,
        freezing_level=f"{format_number(freezing_level) if freezing_level else SENTINEL} m",
        snow_condition=classify_snow_quality(freezing_level, elevation),
    )
