from __future__ import annotations

from datetime import date
from pathlib import Path

from . import config


ARTIFACT_NAMES = {
    "report": "{prefix}-{day}.pdf",
    "snapshot": "{prefix}-{day}.json",
}


def out_dir(base_dir: Path | None = None) -> Path:
    path = base_dir or config.OUT_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(report_date: date, artifact_type: str, base_dir: Path | None = None) -> Path:
    filename = ARTIFACT_NAMES[artifact_type].format(
        prefix=config.REPORT_PREFIX,
        day=report_date.isoformat(),
    )
    return out_dir(base_dir) / filename


def temp_path(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")
