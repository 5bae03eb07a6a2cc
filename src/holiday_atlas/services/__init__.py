"""Endpoint operations returning JSON-ready payloads."""

from holiday_atlas.services.build_totals import build_totals
from holiday_atlas.services.holiday_count import holiday_count
from holiday_atlas.services.holiday_details import holiday_details
from holiday_atlas.services.holiday_totals import holiday_totals
from holiday_atlas.services.today_set import today_set
from holiday_atlas.services.top_days import top_days

__all__ = [
    "build_totals",
    "holiday_count",
    "holiday_details",
    "holiday_totals",
    "today_set",
    "top_days",
]
