import json

import pytest

from holiday_atlas.__main__ import EXIT_ERROR, EXIT_OK, EXIT_USAGE, build_parser, main

pytestmark = pytest.mark.unit


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "data"
    path.mkdir()
    return path


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_count_options_parsed():
    args = build_parser().parse_args(["count", "FR", "2025", "7", "--type", "religious"])
    assert args.command == "count"
    assert args.type_ == "religious"
    assert args.scope == "national"


def test_top_days_prints_json(data_dir, capsys):
    (data_dir / "holidays-by-date-2025.json").write_text(
        json.dumps({"2025-01-01": [{"iso2": "FR", "country": "France", "name": "New Year"}]})
    )
    code = main(["--data-dir", str(data_dir), "top-days", "2025", "--limit", "1"])
    assert code == EXIT_OK
    out = json.loads(capsys.readouterr().out)
    assert out["year"] == 2025
    assert out["top"][0]["date"] == "2025-01-01"


def test_top_days_without_data_is_an_error(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "top-days", "2025"]) == EXIT_ERROR
    assert capsys.readouterr().out == ""


def test_count_without_key_is_usage_error(data_dir):
    assert main(["count", "FR", "2025", "7"]) == EXIT_USAGE


def test_count_with_bad_month_is_usage_error(data_dir, monkeypatch):
    monkeypatch.setenv("CALENDARIFIC_API_KEY", "k")
    assert main(["count", "FR", "2025", "13"]) == EXIT_USAGE


def test_config_command_redacts_key(data_dir, monkeypatch, capsys):
    monkeypatch.setenv("CALENDARIFIC_API_KEY", "super-secret")
    assert main(["config"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "super-secret" not in out
    assert "calendarific_api_key: env:[REDACTED]" in out


def test_bad_env_file_is_an_error(data_dir):
    assert main(["--env-file", str(data_dir / "missing.env"), "config"]) == EXIT_ERROR


def test_details_and_totals_year_optional():
    parser = build_parser()
    assert parser.parse_args(["details", "FR"]).year is None
    assert parser.parse_args(["totals"]).year is None
