"""Builders for fake provider traffic.

`FakeProviders` routes requests for the test hosts used by the
`frozen_config` fixture to canned responses, and records every request so
tests can assert on call counts and query parameters.
"""

from collections import Counter
from collections.abc import Callable
from typing import Any

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


def calendarific_body(holidays: list[dict[str, Any]], code: int = 200) -> dict[str, Any]:
    return {"meta": {"code": code}, "response": {"holidays": holidays}}


def cal_holiday(
    name: str,
    date: str,
    types: list[str] | None = None,
    country: str | None = None,
) -> dict[str, Any]:
    row: dict[str, Any] = {
        "name": name,
        "date": {"iso": date},
        "type": types or ["National holiday"],
    }
    if country:
        row["country"] = {"id": country[:2].lower(), "name": country}
    return row


def nager_row(
    date: str,
    name: str,
    *,
    global_: bool = True,
    counties: list[str] | None = None,
    types: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "date": date,
        "localName": name,
        "name": name,
        "countryCode": "XX",
        "global": global_,
        "counties": counties,
        "types": types or ["Public"],
    }


def world_geojson(countries: dict[str, str]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"ISO_A2": code, "NAME": name}}
            for code, name in countries.items()
        ],
    }


class FakeProviders:
    """Route table keyed by URL path, backed by `httpx.MockTransport`."""

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, handler: Handler | Any, status: int = 200) -> None:
        """Register a handler, or a static JSON body served with `status`."""
        if callable(handler):
            self.routes[path] = handler
        else:
            body = handler
            self.routes[path] = lambda _req: httpx.Response(status, json=body)

    def add_calendarific(self, country: str, body: Any, status: int = 200) -> None:
        """Calendarific is one path; dispatch on the ``country`` query param."""
        existing = self.routes.get("/api/v2/holidays")
        per_country: dict[str, tuple[int, Any]] = getattr(existing, "per_country", {})
        per_country[country] = (status, body)

        def _handler(request: httpx.Request) -> httpx.Response:
            status_, body_ = per_country.get(
                request.url.params.get("country", ""), (404, {"meta": {"code": 404}})
            )
            return httpx.Response(status_, json=body_)

        _handler.per_country = per_country  # type: ignore[attr-defined]
        self.routes["/api/v2/holidays"] = _handler

    def hits(self, path_prefix: str = "") -> Counter[str]:
        return Counter(
            r.url.path for r in self.requests if r.url.path.startswith(path_prefix)
        )

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))

