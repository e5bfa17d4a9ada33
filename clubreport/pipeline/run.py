from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from .. import config
from ..models import ReportData
from ..storage import artifact_path
from .deliver import send_report
from .fetch import StravaClient, fetch_report_data
from .geometry import PageGeometry
from .render_pdf import render_report

logger = logging.getLogger(__name__)


def yesterday(today: Optional[date] = None) -> date:
    return (today or date.today()) - timedelta(days=1)


def load_snapshot(path: Path) -> ReportData:
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")
    return ReportData.from_dict(json.loads(path.read_text(encoding="utf-8")))


def write_snapshot(data: ReportData, base_dir: Path | None = None) -> Path:
    path = artifact_path(data.report_date, "snapshot", base_dir=base_dir)
    path.write_text(json.dumps(data.to_dict(), indent=2), encoding="utf-8")
    return path


def fetch_stage(report_date: date, client: Optional[StravaClient] = None) -> ReportData:
    client = client or StravaClient(config.load_strava_settings())
    return fetch_report_data(client, report_date)


def run_report(
    report_date: Optional[date] = None,
    snapshot: Optional[Path] = None,
    send: bool = True,
    geometry: Optional[PageGeometry] = None,
    client: Optional[StravaClient] = None,
) -> Path:
    """Fetch, render and (optionally) mail one daily report.

    The fetch stage finishes completely before layout starts, and mail goes
    out only once the PDF has been finalized.
    """
    mail_settings = config.load_mail_settings() if send else None
    try:
        if snapshot is not None:
            data = load_snapshot(snapshot)
            if report_date is not None and data.report_date != report_date:
                raise ValueError(
                    f"Snapshot is for {data.report_date.isoformat()}, not {report_date.isoformat()}"
                )
        else:
            data = fetch_stage(report_date or yesterday(), client=client)

        report_path = render_report(data, geometry=geometry)

        if mail_settings is not None:
            send_report(report_path, data.report_date, mail_settings)
    except Exception:
        logger.exception("Daily report failed")
        raise
    return report_path
