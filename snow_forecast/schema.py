"""Validated view of the upstream forecast blob.

Upstream has shipped two spellings for several keys over time, so each field
accepts either. Malformed numeric entries are coerced to ``None`` rather than
failing the whole payload, and resort entries that cannot be validated at all
are dropped from their section.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterator, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .logging import get_logger
from .models import Elevation

logger = get_logger(__name__)

NumericRow = Optional[List[Optional[float]]]
PhraseRow = Optional[List[Optional[str]]]


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _numeric_rows(value: Any) -> List[NumericRow]:
    if not isinstance(value, list):
        return []
    return [[_as_number(item) for item in row] if isinstance(row, list) else None for row in value]


def _phrase_rows(value: Any) -> List[PhraseRow]:
    if not isinstance(value, list):
        return []
    return [
        [item if isinstance(item, str) else None for item in row] if isinstance(row, list) else None
        for row in value
    ]


class ResortBlocks(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    success: bool = False
    bottom_elevation: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("bottomElevation", "bottomElevationMeters", "bottom_elevation"),
    )
    temperature_blocks: List[NumericRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("temperatureBlocks", "temperature_blocks"),
    )
    snow_blocks: List[NumericRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("snowBlocks", "snow_blocks"),
    )
    rain_blocks: List[NumericRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("rainBlocks", "rain_blocks"),
    )
    wind_blocks: List[NumericRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("windBlocks", "wind_blocks"),
    )
    phrases_blocks: List[PhraseRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("phrasesBlocks", "phrases_blocks"),
    )
    freezing_level_blocks: List[NumericRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("freezinglevelBlocks", "freezingLevelBlocks", "freezing_level_blocks"),
    )

    @field_validator("success", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("bottom_elevation", mode="before")
    @classmethod
    def _elevation(cls, value: Any) -> Optional[float]:
        number = _as_number(value)
        if number is None or math.isnan(number):
            return None
        return number

    @field_validator(
        "temperature_blocks",
        "snow_blocks",
        "rain_blocks",
        "wind_blocks",
        "freezing_level_blocks",
        mode="before",
    )
    @classmethod
    def _numbers(cls, value: Any) -> List[NumericRow]:
        return _numeric_rows(value)

    @field_validator("phrases_blocks", mode="before")
    @classmethod
    def _phrases(cls, value: Any) -> List[PhraseRow]:
        return _phrase_rows(value)

    @property
    def day_count(self) -> int:
        return len(self.temperature_blocks)

    def row(self, blocks: List[Any], day: int) -> Optional[List[Any]]:
        if 0 <= day < len(blocks):
            return blocks[day]
        return None


class ResortEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    resort_id: str = Field(validation_alias=AliasChoices("resort", "id", "resort_id"))
    data: Optional[ResortBlocks] = None


class ElevationSection(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    resorts: List[ResortEntry] = Field(default_factory=list)

    @field_validator("resorts", mode="before")
    @classmethod
    def _drop_invalid(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        entries: List[Any] = []
        for raw in value:
            try:
                entries.append(ResortEntry.model_validate(raw))
            except ValidationError as exc:
                logger.warning("payload.resort_invalid", error_count=exc.error_count())
        return entries

    def find(self, resort_id: str) -> Optional[ResortEntry]:
        for entry in self.resorts:
            if entry.resort_id == resort_id:
                return entry
        return None


class ForecastPayload(BaseModel):
    """The whole upstream blob: one section per elevation tier."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    base: Optional[ElevationSection] = Field(
        default=None, validation_alias=AliasChoices("botData", "baseData", "base")
    )
    mid: Optional[ElevationSection] = Field(
        default=None, validation_alias=AliasChoices("midData", "mid")
    )
    peak: Optional[ElevationSection] = Field(
        default=None, validation_alias=AliasChoices("topData", "peakData", "peak")
    )

    @field_validator("base", "mid", "peak", mode="before")
    @classmethod
    def _section(cls, value: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(value, dict) or not isinstance(value.get("resorts"), list):
            return None
        return value

    def section(self, elevation: Elevation) -> Optional[ElevationSection]:
        return getattr(self, Elevation.parse(elevation).value)

    def resort_ids(self) -> List[str]:
        seen: Dict[str, None] = {}
        for section in self._sections():
            for entry in section.resorts:
                seen.setdefault(entry.resort_id, None)
        return list(seen)

    def _sections(self) -> Iterator[ElevationSection]:
        for section in (self.base, self.mid, self.peak):
            if section is not None:
                yield section
