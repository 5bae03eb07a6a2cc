"""Provider clients for Calendarific, Nager.Date and the world country list."""

from holiday_atlas.providers.calendarific import CalendarificClient
from holiday_atlas.providers.nager import NagerClient
from holiday_atlas.providers.parsing import (
    CalendarificHoliday,
    CalendarificPage,
    NagerHoliday,
)
from holiday_atlas.providers.world import WorldCountriesClient

__all__ = [
    "CalendarificClient",
    "CalendarificHoliday",
    "CalendarificPage",
    "NagerClient",
    "NagerHoliday",
    "WorldCountriesClient",
]
