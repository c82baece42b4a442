"""Immutable per-selection view of processed resorts.

Callers that load resorts incrementally fold each batch into a new snapshot
with :func:`merge_snapshot`; an existing snapshot is never modified.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .logging import get_logger
from .models import Elevation, ProcessedResort
from .processing import PayloadLike, load_payload, process_resort

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResortSnapshot(Mapping[str, Optional[ProcessedResort]]):
    elevation: Elevation = Elevation.BASE
    entries: Mapping[str, Optional[ProcessedResort]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, resort_id: str) -> Optional[ProcessedResort]:
        return self.entries[resort_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def loaded(self) -> Dict[str, ProcessedResort]:
        return {resort_id: resort for resort_id, resort in self.entries.items() if resort is not None}


def merge_snapshot(
    previous: Optional[ResortSnapshot],
    resolved: Union[Mapping[str, Optional[ProcessedResort]], Iterable[Tuple[str, Optional[ProcessedResort]]]],
    *,
    elevation: Optional[Elevation] = None,
) -> ResortSnapshot:
    """Return a new snapshot with ``resolved`` layered over ``previous``.

    A different elevation starts from an empty snapshot, since records from one
    tier never describe another.
    """

    tier = Elevation.parse(elevation) if elevation is not None else (
        previous.elevation if previous is not None else Elevation.BASE
    )
    base: Dict[str, Optional[ProcessedResort]] = {}
    if previous is not None and previous.elevation is tier:
        base.update(previous.entries)

    items = resolved.items() if isinstance(resolved, Mapping) else resolved
    base.update(dict(items))
    return ResortSnapshot(elevation=tier, entries=base)


async def load_resorts(
    payload: Optional[PayloadLike],
    resort_ids: Iterable[str],
    elevation: Union[str, Elevation] = Elevation.BASE,
    *,
    previous: Optional[ResortSnapshot] = None,
    cancel: Optional[asyncio.Event] = None,
    now: Optional[datetime] = None,
) -> Optional[ResortSnapshot]:
    """Process several resorts concurrently and merge them into a snapshot.

    ``cancel`` belongs to the caller. It is checked before work starts and
    after it finishes; when set, results are discarded and ``None`` returned.
    """

    tier = Elevation.parse(elevation)
    if cancel is not None and cancel.is_set():
        logger.info("snapshot.load_cancelled", stage="before", elevation=tier.value)
        return None

    forecast = load_payload(payload)
    now = now or datetime.now()
    ids = list(dict.fromkeys(resort_ids))

    if forecast is None:
        results = [None] * len(ids)
    else:
        results = await asyncio.gather(
            *(asyncio.to_thread(process_resort, forecast, resort_id, tier, now=now) for resort_id in ids)
        )

    if cancel is not None and cancel.is_set():
        logger.info("snapshot.load_cancelled", stage="after", elevation=tier.value)
        return None

    logger.info("snapshot.loaded", elevation=tier.value, requested=len(ids), loaded=sum(1 for r in results if r))
    return merge_snapshot(previous, zip(ids, results), elevation=tier)
