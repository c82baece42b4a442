"""Service layer utilities for forecast statistics and ranking."""

from .metrics import day_stats, snow_totals, weather_summary
from .ranking import RankingKey, rank_resorts

__all__ = ["RankingKey", "day_stats", "rank_resorts", "snow_totals", "weather_summary"]
