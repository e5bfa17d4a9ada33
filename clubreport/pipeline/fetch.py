from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

import requests

from .. import config
from ..config import StravaSettings
from ..models import ActivityRecord, MemberRecord, ReportData

logger = logging.getLogger(__name__)


def _athlete_name(athlete: dict) -> str:
    first = str(athlete.get("firstname") or "").strip()
    last = str(athlete.get("lastname") or "").strip()
    return " ".join(part for part in (first, last) if part)


def parse_activity(raw: dict) -> ActivityRecord:
    # some club feeds wrap each entry as {"activity": {...}}
    activity = raw.get("activity") if isinstance(raw.get("activity"), dict) else raw
    athlete = activity.get("athlete") or {}
    owner_id = athlete.get("id")
    return ActivityRecord(
        distance=activity.get("distance"),
        category=activity.get("type") or activity.get("sport_type"),
        owner_id=str(owner_id) if owner_id is not None else "",
        owner_name=_athlete_name(athlete),
        start_date=activity.get("start_date"),
    )


def parse_member(raw: dict) -> MemberRecord:
    member_id = raw.get("id")
    return MemberRecord(
        id=str(member_id) if member_id is not None else "",
        name=_athlete_name(raw),
    )


class StravaClient:
    """Thin client for the club endpoints the daily report reads."""

    def __init__(self, settings: StravaSettings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self._token: Optional[str] = None

    def access_token(self) -> str:
        if self._token:
            return self._token
        logger.info("Requesting Strava access token")
        resp = self.session.post(
            config.STRAVA_TOKEN_URL,
            data={
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "refresh_token": self.settings.refresh_token,
                "grant_type": "refresh_token",
            },
            timeout=config.HTTP_TIMEOUT,
        )
        resp.raise_for_status()
        token = resp.json().get("access_token")
        if not token:
            raise ValueError("Strava token response has no access_token")
        self._token = token
        return token

    def fetch_pages(self, path: str, page_size: int = config.PAGE_SIZE) -> List[dict]:
        """GET every page of ``path`` until an empty page comes back."""
        headers = {"Authorization": f"Bearer {self.access_token()}"}
        url = f"{config.STRAVA_API_URL}/{path.lstrip('/')}"
        rows: List[dict] = []
        page = 1
        while True:
            logger.info("Fetching %s page %d", path, page)
            resp = self.session.get(
                url,
                headers=headers,
                params={"page": page, "per_page": page_size},
                timeout=config.HTTP_TIMEOUT,
            )
            resp.raise_for_status()
            batch = resp.json()
            if not batch:
                break
            rows.extend(batch)
            page += 1
        return rows

    def club_activities(self) -> List[ActivityRecord]:
        rows = self.fetch_pages(f"clubs/{self.settings.club_id}/activities")
        return [parse_activity(row) for row in rows if isinstance(row, dict)]

    def club_members(self) -> List[MemberRecord]:
        rows = self.fetch_pages(f"clubs/{self.settings.club_id}/members")
        return [parse_member(row) for row in rows if isinstance(row, dict)]

    def fetch_logo(self) -> Optional[bytes]:
        if not self.settings.logo_url:
            return None
        logger.info("Fetching banner image %s", self.settings.logo_url)
        resp = self.session.get(self.settings.logo_url, timeout=config.HTTP_TIMEOUT)
        resp.raise_for_status()
        return resp.content


def fetch_report_data(client: StravaClient, report_date: date) -> ReportData:
    activities = client.club_activities()
    members = client.club_members()
    logo = client.fetch_logo()
    logger.info("Fetched %d activities and %d members", len(activities), len(members))
    return ReportData(report_date=report_date, activities=activities, members=members, logo=logo)
