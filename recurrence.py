"""Recurring rule matching: which rule fires on which day, and with what content.

Only two frequencies exist: YEARLY (same month and day as the base date) and
MONTHLY (same day of month). Per-date skips suppress an occurrence outright;
per-date overrides replace the title/notes of a single occurrence and also pin
an occurrence on a date the base pattern would not hit.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional

from date_utils import civil_date_equals, days_inclusive, month_bounds, same_day_of_month, same_month_day

logger = logging.getLogger(__name__)

YEARLY = 'YEARLY'
MONTHLY = 'MONTHLY'
FREQUENCIES = (MONTHLY, YEARLY)


@dataclass(frozen=True)
class OverrideFields:
    title: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class RecurringRule:
    id: int
    title: str
    base_date: date
    frequency: str
    notes: Optional[str] = None
    skips: FrozenSet[date] = frozenset()
    overrides: Dict[date, OverrideFields] = field(default_factory=dict)


@dataclass(frozen=True)
class Occurrence:
    rule_id: int
    date: date
    title: str
    frequency: str
    notes: Optional[str] = None

    def to_dict(self):
        data = {
            'id': str(self.rule_id),
            'title': self.title,
            'on': self.date.isoformat(),
        }
        if self.notes:
            data['notes'] = self.notes
        return data


def _occurrence(rule, day, title, notes):
    return Occurrence(rule_id=rule.id, date=day, title=title, notes=notes, frequency=rule.frequency)


def resolve(rule: RecurringRule, day: date) -> Optional[Occurrence]:
    """Return the occurrence of `rule` on `day`, or None when it does not fire."""
    if day in rule.skips:
        return None

    override = rule.overrides.get(day)
    if override is not None:
        # Unset (None or blank) override fields keep the rule's own text.
        return _occurrence(
            rule,
            day,
            override.title or rule.title,
            override.notes or rule.notes,
        )

    if rule.frequency == YEARLY and same_month_day(day, rule.base_date):
        return _occurrence(rule, day, rule.title, rule.notes)
    if rule.frequency == MONTHLY and same_day_of_month(day, rule.base_date):
        return _occurrence(rule, day, rule.title, rule.notes)
    return None


def materialize(rules: Iterable[RecurringRule], start: date, end: date) -> List[Occurrence]:
    """All occurrences in [start, end], by date and then by rule input order."""
    days = days_inclusive(start, end)
    rules = list(rules)
    occurrences = []
    for day in days:
        for rule in rules:
            occ = resolve(rule, day)
            if occ is not None:
                occurrences.append(occ)
    logger.debug("Materialized %s occurrences from %s rules over %s days", len(occurrences), len(rules), len(days))
    return occurrences


def month_dates(rules: Iterable[RecurringRule], year, month) -> List[str]:
    """ISO dates in a month that carry at least one occurrence (month grid markers)."""
    first, last = month_bounds(year, month)
    seen = []
    for occ in materialize(rules, first, last):
        if not seen or not civil_date_equals(seen[-1], occ.date):
            seen.append(occ.date)
    return [day.isoformat() for day in seen]
