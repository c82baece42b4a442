import pytest

from conftest import MONDAY_NOON, payload, resort_data

from snow_forecast.models import DayWindow, Elevation, SortMetric
from snow_forecast.processing import process_resort
from snow_forecast.services.ranking import (
    RankingKey,
    parse_day_selector,
    rank_resorts,
    ranked_entries,
    resort_scalar,
    sort_day_label,
    sort_day_options,
)


def _snow_payload():
    # Three-day snow totals: A=10, B=25, C=5, D=10
    return payload(
        base={
            "A": resort_data([[0], [0], [0], [0]], snow=[[4], [3], [3], [50]], wind=[[30], [5], [5], [5]]),
            "B": resort_data([[5], [0], [0]], snow=[[20], [5], [0]], wind=[[10], [5], [5]]),
            "C": resort_data([[-5], [0], [0]], snow=[[1], [2], [2]], wind=[[20], [5], [5]]),
            "D": resort_data([[2], [0], [0]], snow=[[5], [5], [0]], wind=[[10], [5], [5]]),
        }
    )


def test_rank_by_three_day_snowfall():
    ranked = rank_resorts(_snow_payload(), ["A", "B", "C", "D"], "snowfall", "base", "next3days", now=MONDAY_NOON)
    assert ranked == ["B", "A", "D", "C"]


def test_ties_keep_input_order():
    ranked = rank_resorts(_snow_payload(), ["D", "A"], "snowfall", "base", DayWindow.NEXT_3_DAYS, now=MONDAY_NOON)
    assert ranked == ["D", "A"]

    ascending = rank_resorts(
        _snow_payload(), ["D", "A"], "snowfall", "base", DayWindow.NEXT_3_DAYS, reversed=True, now=MONDAY_NOON
    )
    assert ascending == ["D", "A"]


def test_seven_day_window_widens_snowfall():
    ranked = rank_resorts(_snow_payload(), ["B", "A"], "snowfall", "base", "next7days", now=MONDAY_NOON)
    assert ranked == ["A", "B"]


def test_reversed_flips_order():
    ids = ["A", "B", "C", "D"]
    forward = rank_resorts(_snow_payload(), ids, SortMetric.TEMPERATURE, Elevation.BASE, 0, now=MONDAY_NOON)
    backward = rank_resorts(_snow_payload(), ids, SortMetric.TEMPERATURE, Elevation.BASE, 0, reversed=True, now=MONDAY_NOON)

    assert forward == ["B", "D", "A", "C"]
    assert backward == ["C", "A", "D", "B"]


def test_window_selection_does_not_change_wind_or_temperature():
    data = _snow_payload()
    ids = ["A", "B", "C", "D"]
    for metric in ("wind", "temperature"):
        today = rank_resorts(data, ids, metric, "base", 0, now=MONDAY_NOON)
        for window in ("next3days", "next7days"):
            assert rank_resorts(data, ids, metric, "base", window, now=MONDAY_NOON) == today


def test_out_of_range_day_scores_zero():
    data = _snow_payload()
    resort = process_resort(data, "A", "base", now=MONDAY_NOON)

    assert resort_scalar(resort, SortMetric.SNOWFALL, 3) == 50
    assert resort_scalar(resort, SortMetric.SNOWFALL, 9) == 0
    assert resort_scalar(resort, SortMetric.SNOWFALL, -1) == 0

    ranked = rank_resorts(data, ["B", "A"], "snowfall", "base", 3, now=MONDAY_NOON)
    assert ranked == ["A", "B"]


def test_failed_resorts_sort_as_zero():
    data = _snow_payload()
    ranked = rank_resorts(data, ["missing", "C", "B"], "temperature", "base", 0, now=MONDAY_NOON)

    assert ranked == ["B", "missing", "C"]


def test_missing_elevation_section_keeps_everyone():
    ranked = rank_resorts(_snow_payload(), ["A", "B"], "snowfall", "peak", 0, now=MONDAY_NOON)
    assert ranked == ["A", "B"]


def test_parse_day_selector():
    assert parse_day_selector("2") == 2
    assert parse_day_selector(4) == 4
    assert parse_day_selector("next3days") is DayWindow.NEXT_3_DAYS
    with pytest.raises(ValueError):
        parse_day_selector("tomorrow")


def test_ranking_key_rejects_unknown_metric():
    with pytest.raises(ValueError):
        RankingKey.parse(metric="humidity")
    key = RankingKey.parse(metric="Wind", day="next7days", elevation="top", reversed=True)
    assert key == RankingKey(SortMetric.WIND, DayWindow.NEXT_7_DAYS, Elevation.PEAK, True)


def test_sort_day_options_and_labels():
    resort = process_resort(_snow_payload(), "B", "base", now=MONDAY_NOON)

    options = sort_day_options(resort)

    assert options[:2] == [
        {"name": "Next 3 Days", "value": "next3days"},
        {"name": "Next 7 Days", "value": "next7days"},
    ]
    assert options[2:] == [
        {"name": "Monday", "value": 0},
        {"name": "Tuesday", "value": 1},
        {"name": "Wednesday", "value": 2},
    ]
    assert sort_day_options(None) == options[:2]
    assert sort_day_label(1, resort) == "Tuesday"
    assert sort_day_label(DayWindow.NEXT_7_DAYS, resort) == "Next 7 Days"
    assert sort_day_label(12, resort) == "Today"


def test_missing_temperature_does_not_outrank_colder_readings():
    blob = payload(base={"COLD": resort_data([[-5, "n/a"]]), "MILD": resort_data([[-1, -2]])})

    ranked = rank_resorts(blob, ["COLD", "MILD"], "temperature", "base", 0, now=MONDAY_NOON)

    assert ranked == ["MILD", "COLD"]


@pytest.mark.parametrize("reversed_", [False, True])
def test_unusable_payload_keeps_input_order(reversed_):
    ranked = rank_resorts(None, ["A", "B"], "snowfall", "base", 0, reversed_, now=MONDAY_NOON)

    assert ranked == ["A", "B"]


def test_unusable_payload_scores_every_resort_zero():
    key = RankingKey.parse(metric="wind", day="next7days", elevation="top")

    entries = ranked_entries(["not", "a", "forecast"], ["B", "A", "B"], key, now=MONDAY_NOON)

    assert [entry.resort_id for entry in entries] == ["B", "A"]
    assert all(entry.value == 0 and entry.resort is None for entry in entries)
