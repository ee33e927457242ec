from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime

from date_utils import to_civil_date
from recurrence import OverrideFields, RecurringRule

db = SQLAlchemy()

class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    password_hash = db.Column(db.String(200), nullable=False)
    timezone = db.Column(db.String(64), nullable=True)  # IANA name; None -> DEFAULT_TIMEZONE
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


class RecurringEvent(db.Model):
    """
    Yearly/monthly anniversary rule. Occurrences are computed on demand, never stored.
    skips: JSON list of 'YYYY-MM-DD'; overrides: JSON list of {date, title?, notes?}.
    Both are validated before they are written (services/validation_service.py).
    """
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)  # None = shared/global scope
    title = db.Column(db.String(120), nullable=False)
    notes = db.Column(db.String(500), nullable=True)
    base_date = db.Column(db.Date, nullable=False)
    recurrence = db.Column(db.String(10), nullable=False, default='YEARLY')  # YEARLY | MONTHLY
    skips = db.Column(db.JSON, nullable=False, default=list)
    overrides = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_rule(self):
        overrides = {}
        for entry in self.overrides or []:
            overrides[to_civil_date(entry['date'])] = OverrideFields(
                title=entry.get('title'),
                notes=entry.get('notes'),
            )
        return RecurringRule(
            id=self.id,
            title=self.title,
            notes=self.notes,
            base_date=self.base_date,
            frequency=self.recurrence,
            skips=frozenset(to_civil_date(s) for s in (self.skips or [])),
            overrides=overrides,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'notes': self.notes,
            'baseDate': self.base_date.isoformat() if self.base_date else None,
            'recurrence': self.recurrence,
            'skips': list(self.skips or []),
            'overrides': list(self.overrides or []),
        }


class DayLog(db.Model):
    """Per-day record for the month grid (currently just the day color)."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    date = db.Column(db.Date, nullable=False)
    day_color = db.Column(db.String(7), nullable=True)  # '#abc' / '#aabbcc'; None clears
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'date': self.date.isoformat() if self.date else None,
            'dayColor': self.day_color,
        }


class WorkDiaryEntry(db.Model):
    """Timed work-diary entry. start_at/end_at are naive UTC instants."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    type = db.Column(db.String(20), default='task')  # task | job | meeting | other
    title = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    start_at = db.Column(db.DateTime, nullable=False)
    end_at = db.Column(db.DateTime, nullable=True)
    all_day = db.Column(db.Boolean, default=False)
    status = db.Column(db.String(20), default='planned')  # planned | in_progress | done | cancelled


class TodoItem(db.Model):
    """To-do with an optional due date, stored as UTC noon of the chosen day."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    title = db.Column(db.String(200), nullable=False)
    note = db.Column(db.Text, nullable=True)
    done = db.Column(db.Boolean, default=False)
    priority = db.Column(db.String(10), default='med')  # stored loosely: LOW/low/med/High...
    due = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
