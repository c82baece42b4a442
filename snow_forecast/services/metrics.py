from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from snow_forecast.models import DayForecast, DayStats, Period, ProcessedResort, Reading, SnowTotals


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a chart label would: halves always go up, including negatives."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def is_numeric(reading: Optional[Reading]) -> bool:
    return isinstance(reading, (int, float)) and not isinstance(reading, bool) and not math.isnan(reading)


def reading_value(reading: Optional[Reading]) -> float:
    return float(reading) if is_numeric(reading) else 0.0


def _period_snow(periods: Iterable[Period]) -> float:
    return sum(reading_value(period.snowfall) for period in periods)


def _representative_wind(periods: Sequence[Period]) -> float:
    for period in periods:
        if period.label == "PM":
            return reading_value(period.wind)
    return reading_value(periods[0].wind) if periods else 0.0


def day_stats(day: Optional[DayForecast]) -> DayStats:
    if day is None or not day.periods:
        return DayStats()

    # Missing temperatures are left out of the maximum.
    temps = [float(period.temperature) for period in day.periods if is_numeric(period.temperature)]
    max_temp = max(temps) if temps else 0.0
    return DayStats(
        max_temp=round_half_up(max_temp, 1),
        total_snow=round_half_up(_period_snow(day.periods), 1),
        wind=int(round_half_up(_representative_wind(day.periods))),
    )


def snow_totals(resort: Optional[ProcessedResort]) -> SnowTotals:
    if resort is None or not resort.days:
        return SnowTotals()

    def window(days: Sequence[DayForecast]) -> int:
        return int(round_half_up(sum(_period_snow(day.periods) for day in days)))

    return SnowTotals(next_3_days=window(resort.days[:3]), next_7_days=window(resort.days[:7]))


def weather_summary(periods: Sequence[Period]) -> str:
    if not periods:
        return "No data"

    am = next((period for period in periods if period.label == "AM"), None)
    pm = next((period for period in periods if period.label == "PM"), None)
    if am and pm:
        if am.condition == pm.condition:
            return am.condition
        return f"{am.condition} / {pm.condition}"
    if pm:
        return pm.condition
    return periods[0].condition
