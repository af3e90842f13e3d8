import pytest
from config import Config
from app import create_app
from app.extensions import db
from app.models.user import User

PASSWORD = "secret123"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SUBJECT_LIMIT = 6
    TOPIC_LIMIT = 20
    REQUIRE_EMAIL_CONFIRMATION = False
    WTF_CSRF_ENABLED = False
    RESEND_API_KEY = ""


@pytest.fixture()
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(app):
    """Active app context for tests that call services and views directly."""
    with app.app_context():
        yield app


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(app, email, password=PASSWORD, confirmed=True):
    with app.app_context():
        user = User(email=email, email_confirmed=confirmed)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture()
def user_id(app):
    return make_user(app, "aluno@example.com")


@pytest.fixture()
def other_user_id(app):
    return make_user(app, "outro@example.com")


@pytest.fixture()
def login(client, user_id):
    def _login(email="aluno@example.com", password=PASSWORD):
        return client.post("/auth/login", data={"email": email, "password": password})
    return _login
