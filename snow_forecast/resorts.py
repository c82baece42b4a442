from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from snow_forecast.config import app_config


@dataclass
class ResortMeta:
    """Lightweight metadata for known resorts."""

    id: str
    name: str
    region: str = ""
    webcam_url: Optional[str] = None


def all_resorts() -> List[ResortMeta]:
    return [
        ResortMeta(id=resort.id, name=resort.name, region=resort.region, webcam_url=resort.webcam_url)
        for resort in app_config.resorts
    ]


def resort_lookup(resorts: Iterable[ResortMeta]) -> Dict[str, ResortMeta]:
    return {resort.id: resort for resort in resorts}


def display_name(resort_id: str, lookup: Optional[Dict[str, ResortMeta]] = None) -> str:
    lookup = resort_lookup(all_resorts()) if lookup is None else lookup
    meta = lookup.get(resort_id)
    if meta:
        return meta.name
    return resort_id.replace("-", " ")


def filter_resorts(resort_ids: Sequence[str], term: str) -> List[str]:
    """Keep ids whose hyphen-free name contains ``term`` (case-insensitive)."""

    if not term:
        return list(resort_ids)
    needle = term.lower()
    return [resort_id for resort_id in resort_ids if needle in resort_id.replace("-", " ").lower()]
