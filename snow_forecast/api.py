from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from snow_forecast.classification import icon_for
from snow_forecast.config import app_config
from snow_forecast.http_client import HttpFetcher
from snow_forecast.logging import get_logger, setup_logging, trace_context
from snow_forecast.models import DayForecast, Elevation
from snow_forecast.processing import process_resort
from snow_forecast.resorts import ResortMeta, all_resorts, display_name, filter_resorts, resort_lookup
from snow_forecast.scheduler import build_scheduler
from snow_forecast.schema import ForecastPayload
from snow_forecast.services.metrics import day_stats, snow_totals, weather_summary
from snow_forecast.services.ranking import RankingKey, ranked_entries, sort_day_label, sort_day_options

setup_logging(app_config.logging)
logger = get_logger(__name__)

app = FastAPI(title="Snow Forecast API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ResortPayload(BaseModel):
    id: str
    name: str
    region: str
    webcam_url: Optional[str] = None


class PeriodPayload(BaseModel):
    label: str
    temperature: Optional[float] = None
    snowfall: Union[float, str]
    rainfall: Union[float, str]
    wind: Union[float, str]
    condition: str


class DayPayload(BaseModel):
    name: str
    weather: str
    summary: str
    icon: str
    emoji: str
    freezing_level: str
    snow_condition: str
    highlight: bool
    max_temp: float
    total_snow: float
    wind: int
    periods: List[PeriodPayload]


class ResortForecastResponse(BaseModel):
    resort_id: str
    name: str
    elevation: str
    tier: str
    next_3_days_snow: int
    next_7_days_snow: int
    days: List[DayPayload]


class RankingEntry(BaseModel):
    resort_id: str
    name: str
    value: float
    available: bool


class RankingsResponse(BaseModel):
    metric: str
    day: Union[int, str]
    day_label: str
    elevation: str
    reversed: bool
    rankings: List[RankingEntry]


class SortDayOption(BaseModel):
    name: str
    value: Union[int, str]


class RefreshResponse(BaseModel):
    updated_at: datetime
    resorts: int


@dataclass
class _State:
    payload: Optional[ForecastPayload] = None
    updated_at: Optional[datetime] = None


_state = _State()
fetcher = HttpFetcher.from_config(app_config.fetch)

_resorts: List[ResortMeta] = all_resorts()
_resort_index: Dict[str, ResortMeta] = resort_lookup(_resorts)


def set_payload(payload: Optional[ForecastPayload], *, updated_at: Optional[datetime] = None) -> None:
    _state.payload = payload
    _state.updated_at = updated_at or datetime.now(timezone.utc)


def _require_payload() -> ForecastPayload:
    if _state.payload is None:
        raise HTTPException(status_code=503, detail="Forecast data has not been loaded yet")
    return _state.payload


def _day_to_payload(day: DayForecast) -> DayPayload:
    stats = day_stats(day)
    return DayPayload(
        name=day.name,
        weather=day.weather,
        summary=weather_summary(day.periods),
        icon=day.icon.value,
        emoji=icon_for(day.icon),
        freezing_level=day.freezing_level,
        snow_condition=day.snow_condition.text,
        highlight=day.snow_condition.highlight,
        max_temp=stats.max_temp,
        total_snow=stats.total_snow,
        wind=stats.wind,
        periods=[PeriodPayload(**period.to_dict()) for period in day.periods],
    )


def _parse_key(metric: str, day: str, elevation: str, reversed: bool) -> RankingKey:
    try:
        return RankingKey.parse(metric=metric, day=day, elevation=elevation, reversed=reversed)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _parse_elevation(elevation: str) -> Elevation:
    try:
        return Elevation.parse(elevation)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def refresh_forecasts() -> RefreshResponse:
    with trace_context(url=app_config.fetch.data_url) as trace_id:
        logger.info("refresh.start")
        payload = fetcher.fetch_payload(app_config.fetch.data_url, trace_id=trace_id)
        set_payload(payload)
        count = len(payload.resort_ids())
        logger.info("refresh.complete", resorts=count)
    return RefreshResponse(updated_at=_state.updated_at, resorts=count)


def _scheduled_refresh() -> None:
    try:
        refresh_forecasts()
    except Exception as exc:  # pragma: no cover - keep the last good payload when a refresh fails
        logger.error("refresh.error", error=str(exc))


@app.get("/resorts", response_model=List[ResortPayload])
def get_resorts(search: str = "") -> List[ResortPayload]:
    ids = filter_resorts([resort.id for resort in _resorts], search)
    return [
        ResortPayload(
            id=resort_id,
            name=_resort_index[resort_id].name,
            region=_resort_index[resort_id].region,
            webcam_url=_resort_index[resort_id].webcam_url,
        )
        for resort_id in ids
    ]


@app.get("/resorts/{resort_id}", response_model=ResortForecastResponse)
def get_resort_forecast(resort_id: str, elevation: str = app_config.defaults.elevation) -> ResortForecastResponse:
    tier = _parse_elevation(elevation)
    resort = process_resort(_require_payload(), resort_id, tier)
    if resort is None:
        raise HTTPException(status_code=404, detail=f"No forecast available for {resort_id}")

    totals = snow_totals(resort)
    return ResortForecastResponse(
        resort_id=resort_id,
        name=display_name(resort_id, _resort_index),
        elevation=resort.elevation,
        tier=tier.value,
        next_3_days_snow=totals.next_3_days,
        next_7_days_snow=totals.next_7_days,
        days=[_day_to_payload(day) for day in resort.days],
    )


@app.get("/rankings", response_model=RankingsResponse)
def get_rankings(
    ids: Optional[List[str]] = Query(default=None),
    metric: str = app_config.defaults.sort,
    day: str = str(app_config.defaults.sort_day),
    elevation: str = app_config.defaults.elevation,
    reversed: bool = False,
) -> RankingsResponse:
    key = _parse_key(metric, day, elevation, reversed)
    payload = _require_payload()
    resort_ids = list(dict.fromkeys(ids or app_config.defaults.selected_resorts))

    ranked = ranked_entries(payload, resort_ids, key)

    by_id = {entry.resort_id: entry for entry in ranked}
    first = by_id[resort_ids[0]].resort if resort_ids else None
    return RankingsResponse(
        metric=key.metric.value,
        day=key.day if isinstance(key.day, int) else key.day.value,
        day_label=sort_day_label(key.day, first),
        elevation=key.elevation.value,
        reversed=key.reversed,
        rankings=[
            RankingEntry(
                resort_id=entry.resort_id,
                name=display_name(entry.resort_id, _resort_index),
                value=entry.value,
                available=entry.resort is not None,
            )
            for entry in ranked
        ],
    )


@app.get("/sort-days", response_model=List[SortDayOption])
def get_sort_days(
    ids: Optional[List[str]] = Query(default=None),
    elevation: str = app_config.defaults.elevation,
) -> List[SortDayOption]:
    tier = _parse_elevation(elevation)
    resort_ids = ids or app_config.defaults.selected_resorts
    first = None
    if resort_ids and _state.payload is not None:
        first = process_resort(_state.payload, resort_ids[0], tier)
    return [SortDayOption(**option) for option in sort_day_options(first)]


@app.post("/refresh", response_model=RefreshResponse)
def refresh() -> RefreshResponse:
    return refresh_forecasts()


_scheduler = build_scheduler(_scheduled_refresh, app_config.scheduler)


@app.on_event("startup")
async def _start_scheduler() -> None:
    if _scheduler and not _scheduler.running:
        logger.info("scheduler.start")
        _scheduler.start()


@app.on_event("shutdown")
async def _stop_scheduler() -> None:
    if _scheduler and _scheduler.running:
        logger.info("scheduler.stop")
        _scheduler.shutdown()
