from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Union

from snow_forecast.logging import get_logger
from snow_forecast.models import DayWindow, Elevation, ProcessedResort, SortMetric
from snow_forecast.processing import PayloadLike, load_payload, process_resort
from snow_forecast.services.metrics import day_stats, snow_totals

logger = get_logger(__name__)

DaySelector = Union[int, DayWindow]


def parse_day_selector(value: Union[int, str, DayWindow]) -> DaySelector:
    if isinstance(value, DayWindow):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Unknown day selector: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    try:
        return DayWindow(text)
    except ValueError:
        pass
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Unknown day selector: {value!r}") from None


@dataclass(frozen=True)
class RankingKey:
    metric: SortMetric = SortMetric.TEMPERATURE
    day: DaySelector = 0
    elevation: Elevation = Elevation.BASE
    reversed: bool = False

    @classmethod
    def parse(
        cls,
        metric: Union[str, SortMetric] = SortMetric.TEMPERATURE,
        day: Union[int, str, DayWindow] = 0,
        elevation: Union[str, Elevation] = Elevation.BASE,
        reversed: bool = False,
    ) -> "RankingKey":
        return cls(
            metric=SortMetric.parse(metric),
            day=parse_day_selector(day),
            elevation=Elevation.parse(elevation),
            reversed=bool(reversed),
        )


def _single_day_scalar(resort: ProcessedResort, metric: SortMetric, day: int) -> float:
    if day < 0 or day >= len(resort.days):
        return 0.0
    stats = day_stats(resort.days[day])
    if metric is SortMetric.TEMPERATURE:
        return stats.max_temp
    if metric is SortMetric.SNOWFALL:
        return stats.total_snow
    return float(stats.wind)


def resort_scalar(resort: Optional[ProcessedResort], metric: SortMetric, day: DaySelector) -> float:
    """The value a resort is compared on.

    Aggregate windows only widen snowfall; temperature and wind still compare
    the first forecast day.
    """

    if resort is None:
        return 0.0
    if isinstance(day, DayWindow):
        if metric is SortMetric.SNOWFALL:
            totals = snow_totals(resort)
            return float(totals.next_3_days if day is DayWindow.NEXT_3_DAYS else totals.next_7_days)
        return _single_day_scalar(resort, metric, 0)
    return _single_day_scalar(resort, metric, day)


def rank_by_scalar(resort_ids: Sequence[str], scalars: Mapping[str, float], *, reversed: bool = False) -> List[str]:
    # sorted() is stable, so ties keep the caller's order in both directions.
    if reversed:
        return sorted(resort_ids, key=lambda resort_id: scalars.get(resort_id, 0.0))
    return sorted(resort_ids, key=lambda resort_id: -scalars.get(resort_id, 0.0))


@dataclass(frozen=True)
class RankedResort:
    resort_id: str
    value: float
    resort: Optional[ProcessedResort] = None


def ranked_entries(
    payload: Optional[PayloadLike],
    resort_ids: Sequence[str],
    key: RankingKey,
    *,
    now: Optional[datetime] = None,
) -> List[RankedResort]:
    """Score and order resorts for ``key``, keeping the processed records.

    An unusable payload scores every resort zero, which leaves the input order.
    """

    forecast = load_payload(payload)
    now = now or datetime.now()

    entries: Dict[str, RankedResort] = {}
    for resort_id in resort_ids:
        if resort_id in entries:
            continue
        resort = process_resort(forecast, resort_id, key.elevation, now=now) if forecast is not None else None
        entries[resort_id] = RankedResort(resort_id, resort_scalar(resort, key.metric, key.day), resort)

    logger.debug(
        "ranking.computed",
        metric=key.metric.value,
        day=key.day.value if isinstance(key.day, DayWindow) else key.day,
        elevation=key.elevation.value,
        reversed=key.reversed,
        count=len(entries),
        usable_payload=forecast is not None,
    )
    scalars = {resort_id: entry.value for resort_id, entry in entries.items()}
    return [entries[resort_id] for resort_id in rank_by_scalar(list(entries), scalars, reversed=key.reversed)]


def rank_resorts(
    payload: Optional[PayloadLike],
    resort_ids: Sequence[str],
    metric: Union[str, SortMetric] = SortMetric.TEMPERATURE,
    elevation: Union[str, Elevation] = Elevation.BASE,
    day: Union[int, str, DayWindow] = 0,
    reversed: bool = False,
    *,
    now: Optional[datetime] = None,
) -> List[str]:
    """Order resort ids by one metric, highest first unless ``reversed``.

    Resorts that fail to process stay in the ordering with a value of zero.
    """

    key = RankingKey.parse(metric=metric, day=day, elevation=elevation, reversed=reversed)
    return [entry.resort_id for entry in ranked_entries(payload, resort_ids, key, now=now)]


def sort_day_options(resort: Optional[ProcessedResort]) -> List[Dict[str, Union[str, int]]]:
    """Choices for the day selector: aggregate windows, then one per forecast day."""

    options: List[Dict[str, Union[str, int]]] = [
        {"name": window.label, "value": window.value} for window in DayWindow
    ]
    if resort is not None:
        options.extend({"name": day.name, "value": index} for index, day in enumerate(resort.days))
    return options


def sort_day_label(day: DaySelector, resort: Optional[ProcessedResort]) -> str:
    if isinstance(day, DayWindow):
        return day.label
    if resort is not None and 0 <= day < len(resort.days):
        return resort.days[day].name
    return "Today"
