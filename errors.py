"""Error types shared by the calendar core and the route handlers."""


class CalendarError(Exception):
    """Base error; carries the HTTP status the route handlers answer with."""

    status_code = 400
    kind = 'error'

    def to_dict(self):
        return {'error': str(self), 'kind': self.kind}


class InvalidDate(CalendarError, ValueError):
    kind = 'invalid_date'


class InvalidRange(CalendarError, ValueError):
    kind = 'invalid_range'


class InvalidPayload(CalendarError, ValueError):
    kind = 'invalid_payload'


class NotFound(CalendarError, LookupError):
    status_code = 404
    kind = 'not_found'
