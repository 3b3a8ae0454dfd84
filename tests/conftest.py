import pytest

from app import create_app
from models import db

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "OPENAI_API_KEY": "",
    "ATOMIC_POINTS": False,
    "ALLOW_INIT_DB": False,
}


@pytest.fixture
def make_app():
    apps = []

    def _make(**overrides):
        app = create_app({**TEST_CONFIG, **overrides})
        apps.append(app)
        return app

    yield _make

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user():
    return {"X-User-Id": "student-1"}


@pytest.fixture
def other_user():
    return {"X-User-Id": "student-2"}
