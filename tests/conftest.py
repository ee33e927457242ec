import os

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['DEFAULT_TIMEZONE'] = 'Europe/Riga'
os.environ['API_SHARED_KEY'] = 'test-shared-key'

import pytest

from app import app as flask_app, db
from models import User


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    u = User(username='ilze', email='ilze@example.com', timezone='Europe/Riga')
    u.set_password('secret')
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def user_client(client, user):
    with client.session_transaction() as sess:
        sess['user_id'] = user.id
    return client
