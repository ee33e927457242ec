from datetime import date, datetime

from models import DayLog, RecurringEvent, TodoItem, User, WorkDiaryEntry, db


def _create_rule(client, **overrides):
    body = {'title': 'Anniversary', 'baseDate': '2020-06-01', 'recurrence': 'YEARLY'}
    body.update(overrides)
    resp = client.post('/api/recurring', json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['recurring']


# --- /api/daylog ---

def test_daylog_requires_valid_date(client):
    assert client.get('/api/daylog').status_code == 400
    resp = client.get('/api/daylog?date=2025-9-20')
    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'invalid_date'


def test_daylog_returns_log_and_occurrences(user_client, user):
    db.session.add(DayLog(user_id=user.id, date=date(2025, 6, 1), day_color='#ff0000'))
    db.session.commit()
    rule = _create_rule(user_client, notes='Dinner')

    resp = user_client.get('/api/daylog?date=2025-06-01')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['dayLog']['dayColor'] == '#ff0000'
    assert data['occurrences'] == [{'id': str(rule['id']), 'title': 'Anniversary', 'notes': 'Dinner', 'on': '2025-06-01'}]


def test_daylog_without_record(client):
    resp = client.get('/api/daylog?date=2025-06-02')
    assert resp.get_json() == {'dayLog': None, 'occurrences': []}


def test_daylog_post_upserts_color(user_client, user):
    resp = user_client.post('/api/daylog', json={'date': '2025-06-01', 'dayColor': '#abc'})
    assert resp.status_code == 200
    resp = user_client.post('/api/daylog', json={'date': '2025-06-01', 'dayColor': None})
    assert resp.get_json()['dayLog']['dayColor'] is None
    assert DayLog.query.filter_by(user_id=user.id).count() == 1


def test_daylog_post_rejects_bad_color(client):
    resp = client.post('/api/daylog', json={'date': '2025-06-01', 'dayColor': 'red'})
    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'invalid_payload'


# --- /api/recurring ---

def test_recurring_crud_cycle(user_client, user):
    rule = _create_rule(user_client, skips=['2025-06-01'])
    assert rule['userId'] == user.id
    assert rule['skips'] == ['2025-06-01']

    resp = user_client.patch(f"/api/recurring/{rule['id']}", json={
        'overrides': [{'date': '2027-06-01', 'title': 'Anniversary!'}],
    })
    assert resp.status_code == 200
    updated = resp.get_json()['recurring']
    assert updated['title'] == 'Anniversary'
    assert updated['overrides'] == [{'date': '2027-06-01', 'title': 'Anniversary!'}]

    assert user_client.get('/api/recurring?date=2025-06-01').get_json() == {'occurrences': []}
    occurrences = user_client.get('/api/recurring?date=2027-06-01').get_json()['occurrences']
    assert [o['title'] for o in occurrences] == ['Anniversary!']

    assert user_client.delete(f"/api/recurring/{rule['id']}").get_json() == {'ok': True}
    assert RecurringEvent.query.count() == 0


def test_recurring_list_and_month_view(user_client):
    _create_rule(user_client, title='Rent', baseDate='2024-01-15', recurrence='MONTHLY')
    _create_rule(user_client, title='Birthday', baseDate='1990-04-02')

    rules = user_client.get('/api/recurring').get_json()
    assert [r['title'] for r in rules] == ['Rent', 'Birthday']

    resp = user_client.get('/api/recurring?month=2025-04')
    assert resp.get_json() == {'dates': ['2025-04-02', '2025-04-15']}
    assert user_client.get('/api/recurring?month=2025-13').status_code == 400
    assert user_client.get('/api/recurring?month=April').status_code == 400


def test_recurring_rejects_invalid_payload(client):
    resp = client.post('/api/recurring', json={'title': 'Weekly?', 'baseDate': '2024-01-01', 'recurrence': 'WEEKLY'})
    assert resp.status_code == 400
    assert client.post('/api/recurring', data='not json').status_code == 400


def test_recurring_scope_isolation(user_client, user):
    other = User(username='janis')
    other.set_password('x')
    db.session.add(other)
    db.session.commit()
    foreign = RecurringEvent(user_id=other.id, title='Theirs', base_date=date(2020, 6, 1), recurrence='YEARLY')
    shared = RecurringEvent(user_id=None, title='Shared', base_date=date(2020, 6, 1), recurrence='YEARLY')
    db.session.add_all([foreign, shared])
    db.session.commit()

    assert user_client.patch(f"/api/recurring/{foreign.id}", json={'title': 'Mine now'}).status_code == 404
    assert user_client.delete(f"/api/recurring/{foreign.id}").status_code == 404
    assert user_client.get('/api/recurring?date=2025-06-01').get_json() == {'occurrences': []}


def test_anonymous_scope_uses_unowned_rules(client, user):
    db.session.add(RecurringEvent(user_id=user.id, title='Private', base_date=date(2020, 6, 1), recurrence='YEARLY'))
    db.session.commit()
    rule = _create_rule(client, title='Name day')
    assert rule['userId'] is None
    occurrences = client.get('/api/recurring?date=2025-06-01').get_json()['occurrences']
    assert [o['title'] for o in occurrences] == ['Name day']


def test_api_key_header_selects_user(client, user):
    headers = {'X-API-Key': 'test-shared-key', 'X-User-Id': str(user.id)}
    resp = client.post('/api/recurring', json={
        'title': 'Rent', 'baseDate': '2024-01-05', 'recurrence': 'MONTHLY',
    }, headers=headers)
    assert resp.get_json()['recurring']['userId'] == user.id


# --- /api/overview ---

def test_overview_requires_both_bounds(client):
    assert client.get('/api/overview?from=2025-09-20').status_code == 400
    assert client.get('/api/overview?to=2025-09-20').status_code == 400
    resp = client.get('/api/overview?from=2025-09-21&to=2025-09-20')
    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'invalid_range'


def test_padded_dates_are_rejected(client):
    resp = client.get('/api/overview?from=%202025-09-20%20&to=2025-09-20')
    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'invalid_range'
    resp = client.get('/api/daylog?date=2025-09-20%20')
    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'invalid_date'


def test_overview_merges_sources_for_user(user_client, user):
    db.session.add_all([
        # 09:00 Riga summer time
        WorkDiaryEntry(user_id=user.id, title='Standup', start_at=datetime(2025, 9, 20, 6, 0)),
        # 00:30 on the 21st in Riga, still the 20th in UTC
        WorkDiaryEntry(user_id=user.id, title='Night shift', start_at=datetime(2025, 9, 20, 21, 30)),
        WorkDiaryEntry(user_id=None, title='Not mine', start_at=datetime(2025, 9, 20, 7, 0)),
        TodoItem(user_id=user.id, title='Taxes', priority='HIGH', due=datetime(2025, 9, 20, 12, 0)),
        TodoItem(user_id=user.id, title='Done already', done=True, due=datetime(2025, 9, 20, 12, 0)),
        TodoItem(user_id=user.id, title='Someday'),
    ])
    db.session.commit()
    rule = _create_rule(user_client, title='Name day', baseDate='2000-09-20')

    resp = user_client.get('/api/overview?from=2025-09-20&to=2025-09-20')
    assert resp.status_code == 200
    items = resp.get_json()['items']
    work_id = WorkDiaryEntry.query.filter_by(title='Standup').one().id
    todo_id = TodoItem.query.filter_by(title='Taxes').one().id
    assert items == [
        {'kind': 'work', 'id': str(work_id), 'title': 'Standup', 'dateISO': '2025-09-20', 'timeHHMM': '09:00'},
        {'kind': 'todo', 'id': str(todo_id), 'title': 'Taxes', 'dateISO': '2025-09-20', 'priority': 'high'},
        {'kind': 'recurring-yearly', 'id': f"{rule['id']}@2025-09-20", 'title': 'Name day', 'dateISO': '2025-09-20'},
    ]

    next_day = user_client.get('/api/overview?from=2025-09-21&to=2025-09-21').get_json()['items']
    assert [i['title'] for i in next_day] == ['Night shift']
    assert next_day[0]['timeHHMM'] == '00:30'


def test_overview_uses_user_timezone(user_client, user):
    user.timezone = 'America/New_York'
    db.session.add(WorkDiaryEntry(user_id=user.id, title='Evening', start_at=datetime(2025, 9, 21, 1, 0)))
    db.session.commit()
    items = user_client.get('/api/overview?from=2025-09-20&to=2025-09-20').get_json()['items']
    assert [(i['dateISO'], i['timeHHMM']) for i in items] == [('2025-09-20', '21:00')]
