"""Overview route extracted from app.py for readability."""


def get_overview():
    import app as a

    jsonify = a.jsonify
    request = a.request
    try:
        start, end = a.parse_range(request.args.get('from'), request.args.get('to'))
    except a.CalendarError as exc:
        return jsonify(exc.to_dict()), exc.status_code

    user = a.get_current_user()
    user_id = user.id if user else None
    tz = a.user_timezone(user)
    lower, upper = a.local_day_bounds(start, end, tz)

    WorkDiaryEntry = a.WorkDiaryEntry
    TodoItem = a.TodoItem
    work = a.scoped_query(WorkDiaryEntry, user_id).filter(
        WorkDiaryEntry.start_at >= lower,
        WorkDiaryEntry.start_at < upper
    ).order_by(WorkDiaryEntry.start_at.asc()).all()
    todos = a.scoped_query(TodoItem, user_id).filter(
        TodoItem.done.is_(False),
        TodoItem.due.isnot(None),
        TodoItem.due >= lower,
        TodoItem.due < upper
    ).order_by(TodoItem.due.asc()).all()

    items = a.build_overview(start, end, work, todos, a.load_rules(user_id), tz)
    return jsonify({'items': [item.to_dict() for item in items]})
