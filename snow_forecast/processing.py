from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from .logging import get_logger
from .models import DayForecast, Elevation, ProcessedResort
from .normalization import format_number, normalize_day, start_weekday_index
from .schema import ForecastPayload

logger = get_logger(__name__)

PayloadLike = Union[ForecastPayload, Mapping[str, Any]]


def coerce_payload(payload: PayloadLike) -> ForecastPayload:
    if isinstance(payload, ForecastPayload):
        return payload
    return ForecastPayload.model_validate(payload)


def load_payload(payload: Optional[PayloadLike]) -> Optional[ForecastPayload]:
    """Like :func:`coerce_payload`, but an unusable blob becomes ``None``."""

    try:
        return coerce_payload(payload)
    except ValueError as exc:
        logger.warning("payload.invalid", error=str(exc))
        return None


def resort_display_name(resort_id: str) -> str:
    return resort_id.replace("-", " ")


def process_resort(
    payload: PayloadLike,
    resort_id: str,
    elevation: Union[Elevation, str] = Elevation.BASE,
    *,
    now: Optional[datetime] = None,
) -> Optional[ProcessedResort]:
    """Build the full day-by-day forecast for one resort at one elevation.

    Returns ``None`` instead of raising when the resort cannot be built; the
    reason is logged.
    """

    now = now or datetime.now()
    try:
        tier = Elevation.parse(elevation)
        forecast = coerce_payload(payload)

        section = forecast.section(tier)
        if section is None:
            logger.warning("resort.section_missing", resort_id=resort_id, elevation=tier.value)
            return None

        entry = section.find(resort_id)
        if entry is None or entry.data is None:
            logger.warning("resort.not_found", resort_id=resort_id, elevation=tier.value)
            return None

        blocks = entry.data
        if not blocks.success:
            logger.warning("resort.unsuccessful", resort_id=resort_id, elevation=tier.value)
            return None

        start_index = start_weekday_index(blocks, now=now)
        days: List[DayForecast] = [
            normalize_day(blocks, offset, start_index) for offset in range(blocks.day_count)
        ]
        if not days:
            logger.warning("resort.no_days", resort_id=resort_id, elevation=tier.value)
            return None

        elevation_text = f"{format_number(blocks.bottom_elevation)}m" if blocks.bottom_elevation else "N/A"
        return ProcessedResort(
            resort_id=resort_id,
            name=resort_display_name(resort_id),
            elevation=elevation_text,
            days=tuple(days),
        )
    except ValueError as exc:
        logger.warning("resort.invalid_input", resort_id=resort_id, error=str(exc))
        return None
    except Exception:  # pragma: no cover - fault isolation for unexpected payload shapes
        logger.exception("resort.processing_failed", resort_id=resort_id)
        return None
