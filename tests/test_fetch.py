from __future__ import annotations

from datetime import date

import pytest
import requests

from clubreport.config import StravaSettings
from clubreport.pipeline.fetch import StravaClient, fetch_report_data, parse_activity, parse_member


class FakeResponse:
    def __init__(self, payload=None, status: int = 200, content: bytes = b"") -> None:
        self._payload = payload
        self.status_code = status
        self.content = content

    def json(self):
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, pages: dict[str, list], token_status: int = 200) -> None:
        self.pages = pages
        self.token_status = token_status
        self.calls: list[tuple[str, dict]] = []

    def post(self, url, data=None, timeout=None):  # noqa: ARG002 - signature matches requests
        self.calls.append(("POST", {"url": url}))
        return FakeResponse({"access_token": "tok"}, status=self.token_status)

    def get(self, url, headers=None, params=None, timeout=None):  # noqa: ARG002
        self.calls.append(("GET", {"url": url, "params": params, "headers": headers}))
        if url.endswith("logo.png"):
            return FakeResponse(content=b"PNGDATA")
        for suffix, pages in self.pages.items():
            if url.endswith(suffix):
                index = params["page"] - 1
                return FakeResponse(pages[index] if index < len(pages) else [])
        return FakeResponse(status=404)


SETTINGS = StravaSettings(
    client_id="id",
    client_secret="secret",
    refresh_token="refresh",
    club_id="42",
    logo_url="https://example.com/logo.png",
)


def test_parse_activity_handles_wrapped_entries() -> None:
    wrapped = {"activity": {"distance": 500.0, "type": "Walk", "athlete": {"id": 7, "firstname": "Ann", "lastname": "Lee"}}}
    record = parse_activity(wrapped)
    assert record.owner_id == "7"
    assert record.owner_name == "Ann Lee"
    assert record.category == "Walk"

    flat = parse_activity({"distance": 10, "sport_type": "Ride", "athlete": {"firstname": "Bo", "lastname": "K."}})
    assert flat.owner_id == ""
    assert flat.category == "Ride"


def test_parse_member_without_id() -> None:
    member = parse_member({"firstname": "Ann", "lastname": "L."})
    assert member.id == ""
    assert member.name == "Ann L."


def test_fetch_pages_until_empty_page() -> None:
    session = FakeSession({"/activities": [[{"distance": 1}], [{"distance": 2}, {"distance": 3}]]})
    client = StravaClient(SETTINGS, session=session)
    rows = client.fetch_pages("clubs/42/activities")
    assert [row["distance"] for row in rows] == [1, 2, 3]
    pages_requested = [call[1]["params"]["page"] for call in session.calls if call[0] == "GET"]
    assert pages_requested == [1, 2, 3]
    assert all(call[1]["headers"]["Authorization"] == "Bearer tok" for call in session.calls if call[0] == "GET")


def test_token_is_requested_once() -> None:
    session = FakeSession({"/activities": [], "/members": []})
    client = StravaClient(SETTINGS, session=session)
    client.club_activities()
    client.club_members()
    assert sum(1 for call in session.calls if call[0] == "POST") == 1


def test_token_failure_propagates() -> None:
    session = FakeSession({}, token_status=401)
    client = StravaClient(SETTINGS, session=session)
    with pytest.raises(requests.HTTPError):
        client.club_activities()


def test_fetch_report_data_materializes_everything() -> None:
    session = FakeSession(
        {
            "/activities": [[{"distance": 1609.34, "type": "Run", "athlete": {"firstname": "Jo", "lastname": "Ray"}}]],
            "/members": [[{"firstname": "Jo", "lastname": "Ray"}, {"firstname": "Al", "lastname": "Ito"}]],
        }
    )
    data = fetch_report_data(StravaClient(SETTINGS, session=session), date(2026, 10, 17))
    assert data.report_date == date(2026, 10, 17)
    assert len(data.activities) == 1
    assert [m.name for m in data.members] == ["Jo Ray", "Al Ito"]
    assert data.logo == b"PNGDATA"


def test_fetching_twice_returns_the_same_records() -> None:
    pages = {"/members": [[{"id": 1, "firstname": "A", "lastname": "B"}]]}
    client = StravaClient(SETTINGS, session=FakeSession(pages))
    assert client.club_members() == client.club_members()
