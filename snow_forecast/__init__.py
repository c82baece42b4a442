"""Ski resort forecast normalization and ranking."""

from .classification import classify_condition, classify_snow_quality
from .models import DayForecast, DayWindow, Elevation, Period, ProcessedResort, SnowCondition, SortMetric
from .normalization import build_periods, normalize_day
from .processing import process_resort
from .schema import ForecastPayload
from .services.metrics import day_stats, snow_totals
from .services.ranking import RankingKey, rank_resorts
from .snapshot import ResortSnapshot, load_resorts, merge_snapshot

__all__ = [
    "DayForecast",
    "DayWindow",
    "Elevation",
    "ForecastPayload",
    "Period",
    "ProcessedResort",
    "RankingKey",
    "ResortSnapshot",
    "SnowCondition",
    "SortMetric",
    "build_periods",
    "classify_condition",
    "classify_snow_quality",
    "day_stats",
    "load_resorts",
    "merge_snapshot",
    "normalize_day",
    "process_resort",
    "rank_resorts",
    "snow_totals",
]
