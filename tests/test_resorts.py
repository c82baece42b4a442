from snow_forecast.resorts import ResortMeta, all_resorts, display_name, filter_resorts, resort_lookup


def test_catalogue_comes_from_config():
    lookup = resort_lookup(all_resorts())
    assert lookup["Silver-Star"].name == "SilverStar Mountain"
    assert lookup["Sunshine"].region == "Alberta"


def test_display_name_prefers_alias():
    lookup = {"HemlockResort": ResortMeta(id="HemlockResort", name="Sasquatch Mountain")}
    assert display_name("HemlockResort", lookup) == "Sasquatch Mountain"
    assert display_name("New-Hill", lookup) == "New Hill"


def test_filter_resorts_matches_display_text():
    ids = ["Big-White", "Red-Mountain", "Whitewater"]
    assert filter_resorts(ids, "WHITE") == ["Big-White", "Whitewater"]
    assert filter_resorts(ids, "big w") == ["Big-White"]
    assert filter_resorts(ids, "") == ids
