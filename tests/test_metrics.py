import pytest

from conftest import MONDAY_NOON, payload, resort_data

from snow_forecast.models import SENTINEL, DayForecast, DayStats, IconCategory, Period, SnowCondition
from snow_forecast.processing import process_resort
from snow_forecast.services.metrics import day_stats, round_half_up, snow_totals, weather_summary


def make_day(*periods):
    return DayForecast(
        name="Monday",
        weather="",
        icon=IconCategory.DEFAULT,
        periods=tuple(periods),
        freezing_level="- m",
        snow_condition=SnowCondition("Mixed conditions"),
    )


def make_period(label, temp=0.0, snow=SENTINEL, wind=SENTINEL, condition="Cloudy"):
    return Period(label=label, temperature=temp, snowfall=snow, rainfall=SENTINEL, wind=wind, condition=condition)


def test_empty_day_has_zero_stats():
    assert day_stats(make_day()) == DayStats(0, 0, 0)
    assert day_stats(None) == DayStats()


def test_day_stats_uses_pm_wind():
    day = make_day(
        make_period("AM", temp=-3.25, snow=2.3, wind=10),
        make_period("PM", temp=1.25, snow=4.0, wind=22.5),
        make_period("Night", temp=-6, snow=SENTINEL, wind=40),
    )

    stats = day_stats(day)

    assert stats.max_temp == pytest.approx(1.3)
    assert stats.total_snow == pytest.approx(6.3)
    assert stats.wind == 23


def test_day_stats_falls_back_to_first_wind():
    day = make_day(make_period("Night", temp=-2, wind=14))
    assert day_stats(day).wind == 14

    calm = make_day(make_period("Night", temp=-2, wind=SENTINEL))
    assert day_stats(calm).wind == 0


def test_round_half_up_matches_display_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.25, 1) == pytest.approx(0.3)


def test_snow_totals_windows():
    data = payload(
        base={
            "X": resort_data(
                [[0, 0]] * 8,
                snow=[[1.4, 1.4], [2, 0], [3, 0], [4, 0], [0, 0], [5, 0], [6, 0], [100, 0]],
            )
        }
    )
    resort = process_resort(data, "X", "base", now=MONDAY_NOON)

    totals = snow_totals(resort)

    assert totals.next_3_days == 8
    assert totals.next_7_days == 23
    assert totals.next_7_days >= totals.next_3_days


def test_snow_totals_short_and_missing_resorts():
    data = payload(base={"X": resort_data([[0], [0]], snow=[[2], [3]])})
    resort = process_resort(data, "X", "base", now=MONDAY_NOON)

    assert snow_totals(resort).next_3_days == 5
    assert snow_totals(resort).next_7_days == 5
    assert snow_totals(None).next_3_days == 0
    assert snow_totals(None).next_7_days == 0


def test_weather_summary():
    assert weather_summary([]) == "No data"
    same = [make_period("AM", condition="Snow"), make_period("PM", condition="Snow"), make_period("Night")]
    assert weather_summary(same) == "Snow"
    mixed = [make_period("AM", condition="Snow"), make_period("PM", condition="Clear")]
    assert weather_summary(mixed) == "Snow / Clear"
    assert weather_summary([make_period("PM", condition="Rain"), make_period("Night")]) == "Rain"
    assert weather_summary([make_period("Night", condition="Fog")]) == "Fog"


def test_missing_temperature_is_left_out_of_max():
    day = make_day(make_period("AM", temp=-5), make_period("PM", temp=SENTINEL))

    assert day_stats(day).max_temp == -5


def test_day_without_numeric_temperature_reports_zero():
    day = make_day(make_period("AM", temp=SENTINEL), make_period("PM", temp=SENTINEL))

    assert day_stats(day).max_temp == 0
