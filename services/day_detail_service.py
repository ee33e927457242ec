from dataclasses import dataclass, field
from datetime import date
from typing import Any, List

from date_utils import to_civil_date
from recurrence import Occurrence, materialize


@dataclass
class DayDetail:
    day: date
    day_log: Any = None
    occurrences: List[Occurrence] = field(default_factory=list)

    def to_dict(self):
        return {
            'dayLog': self.day_log.to_dict() if self.day_log is not None else None,
            'occurrences': [occ.to_dict() for occ in self.occurrences],
        }


def assemble_day(day, day_log_lookup, rules):
    """The day's log plus its recurring occurrences; the date is validated before the lookup runs."""
    day = to_civil_date(day)
    return DayDetail(
        day=day,
        day_log=day_log_lookup(day),
        occurrences=materialize(rules, day, day),
    )
