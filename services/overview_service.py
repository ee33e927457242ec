"""Calendar overview: work-diary entries, due to-dos and recurring occurrences in one feed.

Stored instants are naive UTC. Every instant is projected to the viewer's
local calendar before its day is compared with the requested range, so an
entry at 23:30 local time never lands on the neighbouring day.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

import pytz

from date_utils import to_civil_date
from errors import InvalidDate, InvalidRange
from recurrence import MONTHLY, YEARLY, materialize

logger = logging.getLogger(__name__)

UNTITLED = '(untitled)'
KIND_WORK = 'work'
KIND_TODO = 'todo'
KIND_RECURRING_MONTHLY = 'recurring-monthly'
KIND_RECURRING_YEARLY = 'recurring-yearly'
RECURRING_KINDS = {YEARLY: KIND_RECURRING_YEARLY, MONTHLY: KIND_RECURRING_MONTHLY}


@dataclass(frozen=True)
class OverviewItem:
    kind: str
    id: str
    title: str
    date: object
    time_hhmm: Optional[str] = None
    priority: Optional[str] = None

    def to_dict(self):
        data = {
            'kind': self.kind,
            'id': self.id,
            'title': self.title,
            'dateISO': self.date.isoformat(),
        }
        if self.kind == KIND_WORK and self.time_hhmm:
            data['timeHHMM'] = self.time_hhmm
        if self.kind == KIND_TODO:
            data['priority'] = self.priority
        return data


def resolve_timezone(name, default_name='UTC'):
    """pytz timezone for a user setting, falling back to the configured default."""
    for candidate in (name, default_name):
        if not candidate:
            continue
        try:
            return pytz.timezone(candidate)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{candidate}', falling back")
    return pytz.UTC


def _as_utc(instant):
    if instant.tzinfo is None:
        return pytz.UTC.localize(instant)
    return instant.astimezone(pytz.UTC)


def to_local(instant, tz):
    return _as_utc(instant).astimezone(tz)


def local_date(instant, tz):
    return to_local(instant, tz).date()


def local_hhmm(instant, tz):
    return to_local(instant, tz).strftime('%H:%M')


def local_day_bounds(start, end, tz):
    """Naive-UTC [lower, upper) window covering the local days start..end."""
    lower = tz.localize(datetime.combine(start, time.min))
    upper = tz.localize(datetime.combine(end + timedelta(days=1), time.min))
    return (
        lower.astimezone(pytz.UTC).replace(tzinfo=None),
        upper.astimezone(pytz.UTC).replace(tzinfo=None),
    )


def normalize_priority(value):
    s = str(value or '').strip().lower()
    if s.startswith('h'):
        return 'high'
    if s.startswith('l'):
        return 'low'
    return 'med'


def parse_range(from_raw, to_raw):
    """Validate inclusive `from`/`to` bounds; raises InvalidRange."""
    if not from_raw or not to_raw:
        raise InvalidRange("from/to are required (YYYY-MM-DD)")
    try:
        start = to_civil_date(from_raw)
        end = to_civil_date(to_raw)
    except InvalidDate as exc:
        raise InvalidRange(str(exc))
    if start > end:
        raise InvalidRange("'from' must be on/before 'to'")
    return start, end


def _work_items(start, end, work_entries, tz):
    entries = [e for e in work_entries if e.start_at is not None]
    items = []
    for entry in sorted(entries, key=lambda e: _as_utc(e.start_at)):
        day = local_date(entry.start_at, tz)
        if not (start <= day <= end):
            continue
        items.append(OverviewItem(
            kind=KIND_WORK,
            id=str(entry.id),
            title=entry.title or UNTITLED,
            date=day,
            time_hhmm=None if getattr(entry, 'all_day', False) else local_hhmm(entry.start_at, tz),
        ))
    return items


def _todo_items(start, end, due_items, tz):
    dated = [i for i in due_items if getattr(i, 'due', None) is not None]
    items = []
    for item in sorted(dated, key=lambda i: _as_utc(i.due)):
        day = local_date(item.due, tz)
        if not (start <= day <= end):
            continue
        items.append(OverviewItem(
            kind=KIND_TODO,
            id=str(item.id),
            title=item.title or UNTITLED,
            date=day,
            priority=normalize_priority(getattr(item, 'priority', None)),
        ))
    return items


def _recurring_items(start, end, rules):
    items = []
    for occ in materialize(rules, start, end):
        items.append(OverviewItem(
            kind=RECURRING_KINDS[occ.frequency],
            id=f"{occ.rule_id}@{occ.date.isoformat()}",
            title=occ.title,
            date=occ.date,
        ))
    return items


def build_overview(start, end, work_entries, due_items, rules, tz=pytz.UTC):
    """
    One feed for the inclusive local-date range [start, end].

    Order is work items (chronological), then to-dos (by due date), then
    recurring occurrences (by date, then rule order). Kinds are not interleaved.
    """
    start, end = parse_range(start, end)
    return (
        _work_items(start, end, work_entries, tz)
        + _todo_items(start, end, due_items, tz)
        + _recurring_items(start, end, rules)
    )
