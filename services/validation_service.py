import re

from date_utils import to_civil_date
from errors import InvalidDate, InvalidPayload
from recurrence import FREQUENCIES


TITLE_MAX_CHARS = 120
NOTES_MAX_CHARS = 500
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _require_str(data, key, max_chars, min_chars=0):
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidPayload(f"'{key}' must be a string")
    value = value.strip()
    if len(value) < min_chars:
        raise InvalidPayload(f"'{key}' is required")
    if len(value) > max_chars:
        raise InvalidPayload(f"'{key}' must be at most {max_chars} characters")
    return value


def _optional_str(data, key, max_chars):
    if data.get(key) is None:
        return None
    return _require_str(data, key, max_chars) or None


def _iso_date(raw, label):
    try:
        return to_civil_date(raw)
    except InvalidDate:
        raise InvalidPayload(f"'{label}' must be a date (YYYY-MM-DD)")


def normalize_skips(raw):
    if not isinstance(raw, list):
        raise InvalidPayload("'skips' must be a list of dates")
    days = {_iso_date(value, 'skips') for value in raw}
    return [d.isoformat() for d in sorted(days)]


def normalize_overrides(raw):
    """Validate override entries; a later entry for the same date replaces an earlier one."""
    if not isinstance(raw, list):
        raise InvalidPayload("'overrides' must be a list")
    by_day = {}
    for entry in raw:
        if not isinstance(entry, dict):
            raise InvalidPayload("each override must be an object")
        day = _iso_date(entry.get('date'), 'overrides.date')
        cleaned = {'date': day.isoformat()}
        title = _optional_str(entry, 'title', TITLE_MAX_CHARS)
        notes = _optional_str(entry, 'notes', NOTES_MAX_CHARS)
        if title is not None:
            cleaned['title'] = title
        if notes is not None:
            cleaned['notes'] = notes
        by_day[day] = cleaned
    return [by_day[d] for d in sorted(by_day)]


def parse_recurring_payload(data, partial=False):
    """
    Validate a recurring rule body and return RecurringEvent column values.

    With partial=True only the keys present in `data` are validated and returned.
    """
    if not isinstance(data, dict):
        raise InvalidPayload("Expected a JSON object")

    fields = {}
    if not partial or 'title' in data:
        fields['title'] = _require_str(data, 'title', TITLE_MAX_CHARS, min_chars=1)
    if not partial or 'baseDate' in data:
        fields['base_date'] = _iso_date(data.get('baseDate'), 'baseDate')
    if not partial or 'recurrence' in data:
        recurrence = data.get('recurrence')
        if recurrence not in FREQUENCIES:
            raise InvalidPayload(f"'recurrence' must be one of {', '.join(FREQUENCIES)}")
        fields['recurrence'] = recurrence
    if 'notes' in data:
        fields['notes'] = _optional_str(data, 'notes', NOTES_MAX_CHARS)
    if 'skips' in data:
        fields['skips'] = normalize_skips(data.get('skips') or [])
    elif not partial:
        fields['skips'] = []
    if 'overrides' in data:
        fields['overrides'] = normalize_overrides(data.get('overrides') or [])
    elif not partial:
        fields['overrides'] = []
    return fields


def parse_day_log_payload(data):
    """Return (day, color). `dayColor` must be present: a hex color, or null to clear."""
    if not isinstance(data, dict):
        raise InvalidPayload("Expected a JSON object")
    day = _iso_date(data.get('date'), 'date')
    if 'dayColor' not in data:
        raise InvalidPayload("At least one field must be provided.")
    color = data.get('dayColor')
    if color is not None and not (isinstance(color, str) and HEX_COLOR_PATTERN.match(color)):
        raise InvalidPayload("'dayColor' must be a hex color like #0ea5e9 or null")
    return day, color
