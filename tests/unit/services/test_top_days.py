import json

import pytest

from holiday_atlas.core.exceptions import DataSourceNotFoundError
from holiday_atlas.services.top_days import pick_date, pick_name, rank_days, top_days

pytestmark = pytest.mark.unit


def _write(path, doc):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc))


@pytest.mark.parametrize(
    "holiday, expected",
    [
        ({"date": "2025-01-01"}, "2025-01-01"),
        ({"isoDate": "2025-02-02"}, "2025-02-02"),
        ({"on": "2025-03-03"}, "2025-03-03"),
        ({"d": "2025-04-04"}, "2025-04-04"),
        ({"date": {"iso": "2025-05-05"}}, "2025-05-05"),
        ({"month": 6, "day": 7}, "2025-06-07"),
        ({"name": "no date"}, None),
        ("not a mapping", None),
    ],
)
def test_pick_date_shapes(holiday, expected):
    assert pick_date(holiday, 2025) == expected


def test_pick_name_fallbacks():
    assert pick_name({"title": "T"}) == "T"
    assert pick_name({"localName": "L"}) == "L"
    assert pick_name({}) == "Holiday"


def test_rank_days_orders_by_count_then_date():
    item = {"iso2": "FR", "country": "France", "name": "x"}
    entries = [
        ("2025-12-25", item),
        ("2025-01-01", item),
        ("2025-12-25", item),
        ("2025-01-01", item),
        ("2025-05-01", item),
        ("", item),
    ]
    ranked = rank_days(entries, limit=2)
    assert [(r["date"], r["count"]) for r in ranked] == [
        ("2025-01-01", 2),
        ("2025-12-25", 2),
    ]


def test_prebuilt_file_served_verbatim(tmp_path):
    doc = {"year": 2025, "top": [{"date": "2025-01-01", "count": 99, "items": []}]}
    _write(tmp_path / "top-days-2025.json", doc)
    _write(tmp_path / "totals-2025.json", {"totals": {}})
    assert top_days(tmp_path, year=2025) == doc


def test_from_holidays_by_date(tmp_path):
    _write(
        tmp_path / "holidays-by-date-2025.json",
        {
            "2025-01-01": [
                {"iso2": "FR", "country": "France", "name": "New Year"},
                {"code": "DE", "countryName": "Germany", "title": "Neujahr"},
            ],
            "2025-07-14": [{"iso2": "FR", "country": "France", "name": "Bastille Day"}],
        },
    )
    out = top_days(tmp_path, year=2025, limit=5)
    assert out["year"] == 2025
    assert out["top"][0] == {
        "date": "2025-01-01",
        "count": 2,
        "items": [
            {"iso2": "FR", "country": "France", "name": "New Year"},
            {"iso2": "DE", "country": "Germany", "name": "Neujahr"},
        ],
    }
    assert out["top"][1]["date"] == "2025-07-14"


def test_from_totals_object_nested(tmp_path):
    _write(
        tmp_path / "totals-2025.json",
        {
            "year": 2025,
            "totals": {
                "FR": {"name": "France", "holidays": [{"date": "2025-05-01", "name": "Fête du Travail"}]},
                "DE": {"name": "Germany", "days": [{"month": 5, "day": 1, "title": "Tag der Arbeit"}]},
                "JP": {"name": "Japan", "national": 16},
            },
        },
    )
    out = top_days(tmp_path, year=2025)
    assert len(out["top"]) == 1
    row = out["top"][0]
    assert row["date"] == "2025-05-01"
    assert row["count"] == 2
    assert {i["iso2"] for i in row["items"]} == {"FR", "DE"}


def test_from_totals_list(tmp_path):
    _write(
        tmp_path / "totals-2025.json",
        [{"code": "FR", "country": "France", "entries": [{"date": "2025-01-01"}]}],
    )
    out = top_days(tmp_path, year=2025)
    assert out["top"][0]["items"] == [
        {"iso2": "FR", "country": "France", "name": "Holiday"}
    ]


def test_from_country_directory(tmp_path):
    _write(tmp_path / "countries" / "FR" / "2025.json", [{"date": "2025-01-01", "name": "Jour de l'an"}])
    _write(tmp_path / "countries" / "DE" / "2025.json", [{"date": "2025-01-01", "name": "Neujahr"}])
    _write(tmp_path / "countries" / "JP" / "2024.json", [{"date": "2024-01-01"}])
    (tmp_path / "countries" / "US").mkdir()
    (tmp_path / "countries" / "US" / "2025.json").write_text("{broken")

    out = top_days(tmp_path, year=2025)
    assert out["top"] == [
        {
            "date": "2025-01-01",
            "count": 2,
            "items": [
                {"iso2": "DE", "country": "DE", "name": "Neujahr"},
                {"iso2": "FR", "country": "FR", "name": "Jour de l'an"},
            ],
        }
    ]


def test_no_source_raises(tmp_path):
    with pytest.raises(DataSourceNotFoundError):
        top_days(tmp_path, year=2025)


@pytest.mark.parametrize(
    "doc",
    [
        [{"date": "2025-01-01", "iso2": "FR"}],
        "2025-01-01",
    ],
)
def test_by_date_file_of_wrong_shape(tmp_path, doc):
    _write(tmp_path / "holidays-by-date-2025.json", doc)
    with pytest.raises(DataSourceNotFoundError, match="keyed by date"):
        top_days(tmp_path, year=2025)


def test_by_date_skips_malformed_entries(tmp_path):
    _write(
        tmp_path / "holidays-by-date-2025.json",
        {
            "2025-01-01": ["FR", None, {"iso2": "DE", "name": "Neujahr"}],
            "2025-05-01": "not a list",
        },
    )
    out = top_days(tmp_path, year=2025)
    assert out["top"] == [
        {
            "date": "2025-01-01",
            "count": 1,
            "items": [{"iso2": "DE", "country": "Neujahr", "name": "Neujahr"}],
        }
    ]


def test_invalid_json_source(tmp_path):
    (tmp_path / "totals-2025.json").write_text("{truncated")
    with pytest.raises(DataSourceNotFoundError, match="not valid JSON"):
        top_days(tmp_path, year=2025)


def test_totals_record_with_non_list_holidays(tmp_path):
    _write(tmp_path / "totals-2025.json", {"FR": {"name": "France", "holidays": 11}})
    assert top_days(tmp_path, year=2025) == {"year": 2025, "top": []}
