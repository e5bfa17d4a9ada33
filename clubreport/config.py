from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"

REPORT_TITLE = "Strava Daily Report"
REPORT_PREFIX = "report"

STRAVA_API_URL = "https://www.strava.com/api/v3"
STRAVA_TOKEN_URL = "https://www.strava.com/oauth/token"
PAGE_SIZE = 200
HTTP_TIMEOUT = 30

METERS_PER_MILE = 1609.34
DISTANCE_UNIT = "mi"

# "surname" or "surname_initial"
SORT_KEY = "surname"

CATEGORY_TITLES: Dict[str, str] = {
    "Walk": "Walk",
    "Run": "Run",
    "Ride": "Ride",
    "Hike": "Hike",
    "NoActivity": "No Activity",
}

# Each entry: (column categories, banner, start on a new page). "" is a placeholder column.
SECTION_LAYOUT: List[tuple[List[str], bool, bool]] = [
    (["Walk", "Run", "Ride"], True, False),
    (["Hike", "NoActivity", ""], False, True),
]


@dataclass
class StravaSettings:
    client_id: str
    client_secret: str
    refresh_token: str
    club_id: str
    logo_url: str = ""


@dataclass
class MailSettings:
    host: str
    port: int
    user: str
    password: str
    bcc: List[str] = field(default_factory=list)


def _require(names: List[str]) -> Dict[str, str]:
    values = {name: os.getenv(name, "").strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing environment variables: {', '.join(missing)}")
    return values


def load_strava_settings() -> StravaSettings:
    values = _require(
        ["STRAVA_CLIENT_ID", "STRAVA_CLIENT_SECRET", "STRAVA_REFRESH_TOKEN", "STRAVA_CLUB_ID"]
    )
    return StravaSettings(
        client_id=values["STRAVA_CLIENT_ID"],
        client_secret=values["STRAVA_CLIENT_SECRET"],
        refresh_token=values["STRAVA_REFRESH_TOKEN"],
        club_id=values["STRAVA_CLUB_ID"],
        logo_url=os.getenv("STRAVA_LOGO_URL", "").strip(),
    )


def load_mail_settings() -> MailSettings:
    values = _require(["EMAIL_HOST", "EMAIL_USER", "EMAIL_PASS", "EMAIL_BCC"])
    bcc = [addr.strip() for addr in values["EMAIL_BCC"].split(",") if addr.strip()]
    if not bcc:
        raise ValueError("EMAIL_BCC lists no recipients")
    return MailSettings(
        host=values["EMAIL_HOST"],
        port=int(os.getenv("EMAIL_PORT", "587") or 587),
        user=values["EMAIL_USER"],
        password=values["EMAIL_PASS"],
        bcc=bcc,
    )


def set_out_dir(path: Path) -> None:
    global OUT_DIR
    OUT_DIR = path
