from __future__ import annotations

import locale
import math
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .. import config
from ..models import ActivityRecord, Category, MemberRecord


RECORD_CATEGORIES = {c.value: c for c in Category if c is not Category.NO_ACTIVITY}


def _normalize_name(name: str) -> str:
    return " ".join((name or "").split()).casefold()


def _split_name(name: str) -> Tuple[str, str]:
    """Return (given, surname); the surname is the last whitespace token."""
    parts = (name or "").split()
    if not parts:
        return "", ""
    return " ".join(parts[:-1]), parts[-1]


def display_name(name: str) -> str:
    given, surname = _split_name(name)
    if not given:
        return surname
    return f"{surname}, {given}"


def format_line(name: str, miles: float) -> str:
    return f"{display_name(name)} — {miles:.2f} {config.DISTANCE_UNIT}"


def sort_key(name: str, policy: str = "surname") -> Tuple[str, ...]:
    given, surname = _split_name(name)
    if policy == "surname_initial":
        return (locale.strxfrm(surname[:1].casefold()),)
    if policy == "surname":
        return (locale.strxfrm(surname.casefold()), locale.strxfrm(given.casefold()))
    raise ValueError(f"Unsupported sort policy: {policy}")


def to_miles(distance) -> Optional[float]:
    """Metres to miles; None for anything that is not a positive number."""
    if distance is None or isinstance(distance, bool):
        return None
    try:
        meters = float(distance)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(meters) or meters <= 0:
        return None
    return meters / config.METERS_PER_MILE


def _on_day(start_date: Optional[str], day: Optional[date]) -> bool:
    if day is None or not start_date:
        return True
    try:
        started = datetime.fromisoformat(start_date.replace("Z", "+00:00"))
    except ValueError:
        return False
    if started.tzinfo is not None:
        started = started.astimezone()
    return started.date() == day


def _is_active(member: MemberRecord, ids: Set[str], names: Set[str], unidentified: Set[str]) -> bool:
    """Match by id when the member has one; names only stand in for missing ids."""
    name = _normalize_name(member.name)
    if member.id:
        return member.id in ids or name in unidentified
    return bool(name) and name in names


def aggregate(
    activities: Iterable[ActivityRecord],
    members: Iterable[MemberRecord],
    report_date: Optional[date] = None,
    policy: Optional[str] = None,
) -> Dict[str, List[str]]:
    """Bucket activities per category as sorted, formatted lines.

    One line per valid activity. Members with no valid activity are listed
    under ``NoActivity`` with a zero distance. Invalid records are dropped.
    """
    policy = policy or config.SORT_KEY
    buckets: Dict[str, List[Tuple[Tuple[str, ...], str]]] = {c.value: [] for c in Category}
    active_ids: Set[str] = set()
    active_names: Set[str] = set()
    # names of valid activities that carry no athlete id
    unidentified: Set[str] = set()

    for record in activities:
        category = RECORD_CATEGORIES.get(record.category or "")
        miles = to_miles(record.distance)
        if category is None or miles is None:
            continue
        if not (record.owner_id or record.owner_name.strip()):
            continue
        if not _on_day(record.start_date, report_date):
            continue
        name = _normalize_name(record.owner_name)
        active_names.add(name)
        if record.owner_id:
            active_ids.add(record.owner_id)
        else:
            unidentified.add(name)
        buckets[category.value].append(
            (sort_key(record.owner_name, policy), format_line(record.owner_name, miles))
        )

    for member in members:
        if not (member.id or member.name.strip()):
            continue
        if _is_active(member, active_ids, active_names, unidentified):
            continue
        buckets[Category.NO_ACTIVITY.value].append(
            (sort_key(member.name, policy), format_line(member.name, 0.0))
        )

    return {
        key: [line for _, line in sorted(entries, key=lambda entry: entry[0])]
        for key, entries in buckets.items()
    }
