"""Recurring rule routes extracted from app.py for readability."""
import re

MONTH_PARAM_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def _find_rule(a, rule_id, user_id):
    rule = a.scoped_query(a.RecurringEvent, user_id).filter(a.RecurringEvent.id == rule_id).first()
    if not rule:
        raise a.NotFound(f"Recurring event {rule_id} not found")
    return rule


def list_recurring():
    """
    GET /api/recurring
      ?month=YYYY-MM   -> {'dates': [...]} days with at least one occurrence
      ?date=YYYY-MM-DD -> {'occurrences': [...]}
      (no params)      -> stored rules for the current scope
    """
    import app as a

    jsonify = a.jsonify
    request = a.request
    user_id = a.current_scope_id()

    month_raw = request.args.get('month')
    if month_raw:
        if not MONTH_PARAM_PATTERN.match(month_raw):
            return jsonify({'error': 'Invalid month', 'kind': 'invalid_date'}), 400
        year, month = month_raw.split('-')
        try:
            a.month_bounds(year, month)
        except a.CalendarError as exc:
            return jsonify(exc.to_dict()), exc.status_code
        return jsonify({'dates': a.month_dates(a.load_rules(user_id), year, month)})

    if 'date' in request.args:
        try:
            day = a.to_civil_date(request.args.get('date'))
        except a.CalendarError as exc:
            return jsonify(exc.to_dict()), exc.status_code
        occurrences = a.materialize(a.load_rules(user_id), day, day)
        return jsonify({'occurrences': [occ.to_dict() for occ in occurrences]})

    rows = a.scoped_query(a.RecurringEvent, user_id).order_by(a.RecurringEvent.id.asc()).all()
    return jsonify([r.to_dict() for r in rows])


def create_recurring():
    import app as a

    jsonify = a.jsonify
    user_id = a.current_scope_id()
    try:
        fields = a.parse_recurring_payload(a.request.get_json(silent=True))
    except a.CalendarError as exc:
        a.app.logger.warning(f"Rejected recurring event payload: {exc}")
        return jsonify(exc.to_dict()), exc.status_code

    rule = a.RecurringEvent(user_id=user_id, **fields)
    a.db.session.add(rule)
    a.db.session.commit()
    a.app.logger.info(f"Created recurring event {rule.id} ({rule.recurrence}) for scope {user_id}")
    return jsonify({'ok': True, 'recurring': rule.to_dict()}), 201


def update_recurring(rule_id):
    import app as a

    jsonify = a.jsonify
    user_id = a.current_scope_id()
    try:
        rule = _find_rule(a, rule_id, user_id)
        fields = a.parse_recurring_payload(a.request.get_json(silent=True), partial=True)
    except a.NotFound as exc:
        return jsonify(exc.to_dict()), exc.status_code
    except a.CalendarError as exc:
        a.app.logger.warning(f"Rejected update for recurring event {rule_id}: {exc}")
        return jsonify(exc.to_dict()), exc.status_code

    for key, value in fields.items():
        setattr(rule, key, value)
    a.db.session.commit()
    a.app.logger.info(f"Updated recurring event {rule.id}: {', '.join(sorted(fields)) or 'no fields'}")
    return jsonify({'ok': True, 'recurring': rule.to_dict()})


def delete_recurring(rule_id):
    import app as a

    jsonify = a.jsonify
    try:
        rule = _find_rule(a, rule_id, a.current_scope_id())
    except a.NotFound as exc:
        return jsonify(exc.to_dict()), exc.status_code

    a.db.session.delete(rule)
    a.db.session.commit()
    a.app.logger.info(f"Deleted recurring event {rule_id}")
    return jsonify({'ok': True})
