import os

from dotenv import load_dotenv
from flask import Flask, request, jsonify, session

load_dotenv()

from date_utils import month_bounds, to_civil_date
from errors import CalendarError, NotFound
from models import db, User, RecurringEvent, DayLog, WorkDiaryEntry, TodoItem
from recurrence import materialize, month_dates
from services.day_detail_service import assemble_day
from services.overview_service import build_overview, local_day_bounds, parse_range, resolve_timezone
from services.validation_service import parse_day_log_payload, parse_recurring_payload
from services import daylog_routes, overview_routes, recurring_routes

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///organizer.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['PERMANENT_SESSION_LIFETIME'] = 365 * 24 * 60 * 60  # 1 year in seconds
app.config['API_SHARED_KEY'] = os.environ.get('API_SHARED_KEY')  # Optional shared key for API callers
app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', 'Europe/Riga')
app.logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

db.init_app(app)


def get_current_user():
    """Resolve the current user from a shared API key + user id header, else fall back to session."""
    # Header-based auth for service callers
    api_key = request.headers.get('X-API-Key')
    api_user_id = request.headers.get('X-User-Id')
    shared_key = app.config.get('API_SHARED_KEY')
    if shared_key and api_key and api_user_id:
        try:
            api_uid_int = int(api_user_id)
        except (TypeError, ValueError):
            api_uid_int = None
        if api_uid_int and api_key == shared_key:
            user = db.session.get(User, api_uid_int)
            if user:
                return user

    # Session-based auth for browser users
    user_id = session.get('user_id')
    if user_id:
        return db.session.get(User, user_id)
    return None


def current_scope_id():
    """Owning scope for reads/writes: the user's id, or None for the shared (unowned) rows."""
    user = get_current_user()
    return user.id if user else None


def scoped_query(model, user_id):
    if user_id is None:
        return model.query.filter(model.user_id.is_(None))
    return model.query.filter(model.user_id == user_id)


def load_rules(user_id):
    """Typed rules for a scope, in creation order (the order occurrences share a day in)."""
    rows = scoped_query(RecurringEvent, user_id).order_by(RecurringEvent.id.asc()).all()
    return [row.to_rule() for row in rows]


def user_timezone(user):
    return resolve_timezone(user.timezone if user else None, app.config['DEFAULT_TIMEZONE'])


with app.app_context():
    db.create_all()


# Day detail
@app.route('/api/daylog', methods=['GET'])
def get_day_log():
    return daylog_routes.get_day_log()


@app.route('/api/daylog', methods=['POST'])
def save_day_log():
    return daylog_routes.save_day_log()


# Overview feed
@app.route('/api/overview', methods=['GET'])
def get_overview():
    return overview_routes.get_overview()


# Recurring rules
@app.route('/api/recurring', methods=['GET'])
def list_recurring():
    return recurring_routes.list_recurring()


@app.route('/api/recurring', methods=['POST'])
def create_recurring():
    return recurring_routes.create_recurring()


@app.route('/api/recurring/<int:rule_id>', methods=['PATCH'])
def update_recurring(rule_id):
    return recurring_routes.update_recurring(rule_id)


@app.route('/api/recurring/<int:rule_id>', methods=['DELETE'])
def delete_recurring(rule_id):
    return recurring_routes.delete_recurring(rule_id)


if __name__ == '__main__':
    app.run(host='0.0.0.0', debug=True)
