from __future__ import annotations

import locale
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer

from . import config
from .pipeline.geometry import LayoutConfigError
from .pipeline.run import fetch_stage, run_report, write_snapshot, yesterday

app = typer.Typer(help="Daily club activity report")
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("System locale unavailable; names sort by code point")


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


@app.command()
def run(
    day: Optional[str] = typer.Option(None, "--date", help="Report date YYYY-MM-DD (default: yesterday)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Render from a saved JSON snapshot"),
    email: bool = typer.Option(True, "--email/--no-email", help="Mail the finished report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    _setup_logging(verbose)
    if out:
        config.set_out_dir(out)
    try:
        path = run_report(report_date=_parse_date(day), snapshot=snapshot, send=email)
    except LayoutConfigError as exc:
        typer.echo(f"Layout error: {exc}", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"REPORT: {path}")


@app.command()
def fetch(
    day: Optional[str] = typer.Option(None, "--date", help="Report date YYYY-MM-DD (default: yesterday)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    _setup_logging(verbose)
    if out:
        config.set_out_dir(out)
    data = fetch_stage(_parse_date(day) or yesterday())
    path = write_snapshot(data)
    typer.echo(f"Activities: {len(data.activities)}")
    typer.echo(f"Members: {len(data.members)}")
    typer.echo(f"SNAPSHOT: {path}")


if __name__ == "__main__":
    app()
