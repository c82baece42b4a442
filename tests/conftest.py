from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import pytest

# 2024-01-15 is a Monday.
MONDAY_NOON = datetime(2024, 1, 15, 12, 0)
MONDAY_3AM = datetime(2024, 1, 15, 3, 0)


def resort_data(
    temps,
    *,
    snow=None,
    rain=None,
    wind=None,
    phrases=None,
    freezing=None,
    elevation: Optional[float] = 1000,
    success: Any = True,
) -> Dict[str, Any]:
    return {
        "success": success,
        "bottomElevation": elevation,
        "temperatureBlocks": temps,
        "snowBlocks": snow if snow is not None else [[0] * len(day) for day in temps],
        "rainBlocks": rain if rain is not None else [[0] * len(day) for day in temps],
        "windBlocks": wind if wind is not None else [[10] * len(day) for day in temps],
        "phrasesBlocks": phrases if phrases is not None else [["cloudy"] * len(day) for day in temps],
        "freezinglevelBlocks": freezing if freezing is not None else [[1500] * len(day) for day in temps],
    }


def payload(base=None, mid=None, top=None) -> Dict[str, Any]:
    def section(resorts):
        if resorts is None:
            return None
        return {"resorts": [{"resort": resort_id, "data": data} for resort_id, data in resorts.items()]}

    blob = {"botData": section(base), "midData": section(mid), "topData": section(top)}
    return {key: value for key, value in blob.items() if value is not None}


@pytest.fixture
def monday_noon() -> datetime:
    return MONDAY_NOON
