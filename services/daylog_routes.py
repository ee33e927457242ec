"""Day detail routes extracted from app.py for readability."""


def _find_day_log(a, day, user_id):
    return a.scoped_query(a.DayLog, user_id).filter(a.DayLog.date == day).first()


def get_day_log():
    import app as a

    jsonify = a.jsonify
    user_id = a.current_scope_id()
    try:
        day = a.to_civil_date(a.request.args.get('date'))
    except a.CalendarError as exc:
        return jsonify(exc.to_dict()), exc.status_code

    detail = a.assemble_day(
        day,
        lambda d: _find_day_log(a, d, user_id),
        a.load_rules(user_id),
    )
    return jsonify(detail.to_dict())


def save_day_log():
    """Create or update the day's color; dayColor=null clears it."""
    import app as a

    jsonify = a.jsonify
    user_id = a.current_scope_id()
    try:
        day, color = a.parse_day_log_payload(a.request.get_json(silent=True))
    except a.CalendarError as exc:
        a.app.logger.warning(f"Rejected day log payload: {exc}")
        return jsonify(exc.to_dict()), exc.status_code

    day_log = _find_day_log(a, day, user_id)
    if day_log is None:
        day_log = a.DayLog(user_id=user_id, date=day)
        a.db.session.add(day_log)
    day_log.day_color = color
    a.db.session.commit()
    a.app.logger.info(f"Saved day log {day.isoformat()} for scope {user_id}")
    return jsonify({'ok': True, 'dayLog': day_log.to_dict()})
