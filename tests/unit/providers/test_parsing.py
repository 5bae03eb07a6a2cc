"""Parsers accept an enumerated set of payload shapes and reject the rest."""

import pytest

from holiday_atlas.core.exceptions import ResponseParseError, UpstreamError
from holiday_atlas.providers.parsing import (
    calendarific_date_iso,
    is_iso2,
    parse_calendarific_holidays,
    parse_is_today,
    parse_nager_countries,
    parse_nager_country_table,
    parse_nager_holidays,
    parse_world_countries,
)
from tests.helpers import cal_holiday, calendarific_body, nager_row, world_geojson

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "date, expected",
    [
        ({"iso": "2025-07-14"}, "2025-07-14"),
        ({"datetime": {"iso": "2025-07-14T00:00:00"}}, "2025-07-14T00:00:00"),
        ({"datetime": "2025-07-14"}, "2025-07-14"),
        ("2025-07-14", "2025-07-14"),
        (None, ""),
        ({"year": 2025}, ""),
    ],
)
def test_calendarific_date_shapes(date, expected):
    assert calendarific_date_iso(date) == expected


def test_calendarific_holidays_parsed_with_country_name():
    body = calendarific_body(
        [
            cal_holiday("Bastille Day", "2025-07-14", country="France"),
            cal_holiday("Assumption", "2025-08-15", types=["Christian"]),
        ]
    )
    page = parse_calendarific_holidays(body)
    assert page.country_name == "France"
    assert [h.name for h in page.holidays] == ["Bastille Day", "Assumption"]
    assert page.holidays[1].types == ("Christian",)


def test_calendarific_empty_list_response():
    page = parse_calendarific_holidays({"meta": {"code": 200}, "response": []})
    assert page.holidays == ()
    assert page.country_name is None


def test_calendarific_single_string_type():
    body = calendarific_body([{"name": "X", "date": "2025-01-01", "type": "Bank holiday"}])
    assert parse_calendarific_holidays(body).holidays[0].types == ("Bank holiday",)


def test_calendarific_meta_error_becomes_upstream_error():
    with pytest.raises(UpstreamError) as exc_info:
        parse_calendarific_holidays(
            {"meta": {"code": 401, "error_detail": "bad key"}, "response": []}
        )
    assert exc_info.value.status == 401
    assert "bad key" in str(exc_info.value)


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"response": {"holidays": []}},
        {"meta": {"code": 200}, "response": "oops"},
        {"meta": {"code": 200}, "response": {"holidays": {"a": 1}}},
    ],
)
def test_calendarific_rejects_unknown_shapes(payload):
    with pytest.raises(ResponseParseError):
        parse_calendarific_holidays(payload)


def test_nager_holidays_rows():
    rows = parse_nager_holidays(
        [
            nager_row("2025-01-01", "New Year"),
            nager_row("2025-03-19", "St Joseph", global_=False, counties=["ES-MC"]),
        ]
    )
    assert rows[0].global_ is True
    assert rows[0].counties is None
    assert rows[1].counties == ("ES-MC",)
    assert rows[1].to_dict()["global"] is False
    assert rows[1].to_dict()["localName"] == "St Joseph"


def test_nager_holidays_require_date():
    with pytest.raises(ResponseParseError):
        parse_nager_holidays([{"name": "no date"}])
    with pytest.raises(ResponseParseError):
        parse_nager_holidays({"not": "a list"})


def test_nager_countries():
    parsed = parse_nager_countries(
        [{"countryCode": "fr", "name": "France"}, {"countryCode": "DE", "name": "Germany"}]
    )
    assert parsed == [("FR", "France"), ("DE", "Germany")]
    with pytest.raises(ResponseParseError):
        parse_nager_countries([{"countryCode": "FRA"}])


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (204, b"", False),
        (200, b"", True),
        (200, b"  ", True),
        (200, b"true", True),
        (200, b"false", False),
    ],
)
def test_is_today_accepted_shapes(status, body, expected):
    assert parse_is_today(status, body) is expected


def test_is_today_rejects_other_statuses_and_bodies():
    with pytest.raises(UpstreamError):
        parse_is_today(404, b"")
    with pytest.raises(ResponseParseError):
        parse_is_today(200, b"<html>")
    with pytest.raises(ResponseParseError):
        parse_is_today(200, b'{"holiday": true}')


def test_country_table_html():
    html = """
    <table>
      <tr><th>Country</th><th>Code</th><th>Holidays</th></tr>
      <tr><td>France</td><td>FR</td><td>11</td></tr>
      <tr><td>Germany</td><td> de </td><td>9</td></tr>
      <tr><td>Broken</td><td>XX</td><td>n/a</td></tr>
      <tr><td>Short</td></tr>
    </table>
    """
    assert parse_nager_country_table(html) == {"FR": 11, "DE": 9}


def test_world_countries_skip_invalid_and_repeated():
    doc = world_geojson({"FR": "France", "-99": "Somaliland", "XK": "Kosovo"})
    doc["features"].append({"properties": {"iso_a2": "fr", "ADMIN": "France again"}})
    doc["features"].append({"properties": {"cca2": "jp", "name": "Japan"}})
    doc["features"].append("not a feature")
    assert parse_world_countries(doc) == [("FR", "France"), ("JP", "Japan")]


def test_world_countries_requires_object():
    with pytest.raises(ResponseParseError):
        parse_world_countries([])


def test_is_iso2():
    assert is_iso2("FR")
    assert not is_iso2("fr")
    assert not is_iso2("FRA")
