import jwt
import pytest
from unittest.mock import patch
from datetime import datetime, timezone, timedelta
from flask_login import current_user
from app.errors import AuthError, InvalidCredentials, EmailNotConfirmed
from app.extensions import db
from app.models.user import User
from app.services import session_service
from tests.conftest import PASSWORD, make_user


def test_sign_in_success(app, user_id):
    with app.test_request_context():
        user = session_service.sign_in("  Aluno@Example.com ", PASSWORD)
        assert user.id == user_id
        assert session_service.current_user_id() == user_id


def test_sign_in_wrong_password(app, user_id):
    with app.test_request_context():
        with pytest.raises(InvalidCredentials):
            session_service.sign_in("aluno@example.com", "wrong")
        assert session_service.current_user_id() is None


def test_sign_in_unknown_email(app):
    with app.test_request_context():
        with pytest.raises(InvalidCredentials):
            session_service.sign_in("ninguem@example.com", PASSWORD)


def test_sign_in_unconfirmed(app):
    make_user(app, "novo@example.com", confirmed=False)
    with app.test_request_context():
        with pytest.raises(EmailNotConfirmed):
            session_service.sign_in("novo@example.com", PASSWORD)


def test_sign_out_clears_session(app, user_id):
    with app.test_request_context():
        session_service.sign_in("aluno@example.com", PASSWORD)
        session_service.sign_out()
        assert not current_user.is_authenticated


def test_sign_up_creates_confirmed_user(app):
    with app.test_request_context():
        user = session_service.sign_up(" Nova@Example.com", "abcdef")
        assert user.email == "nova@example.com"
        assert user.email_confirmed is True
        assert user.check_password("abcdef")


def test_sign_up_validation(app, user_id):
    with app.test_request_context():
        with pytest.raises(AuthError):
            session_service.sign_up("", "abcdef")
        with pytest.raises(AuthError):
            session_service.sign_up("curta@example.com", "123")
        with pytest.raises(AuthError) as exc:
            session_service.sign_up("aluno@example.com", "abcdef")
        assert "já está registrado" in exc.value.message


def test_sign_up_requires_confirmation_when_enabled(app):
    app.config["REQUIRE_EMAIL_CONFIRMATION"] = True
    app.config["RESEND_API_KEY"] = "re_test"
    with app.test_request_context():
        with patch("app.services.mail_service.resend.Emails.send") as send:
            user = session_service.sign_up("pendente@example.com", "abcdef")
        assert user.email_confirmed is False

        params = send.call_args.args[0]
        assert params["to"] == ["pendente@example.com"]
        assert "/auth/confirm/" in params["html"]

        token = params["html"].split("/auth/confirm/")[1].split('"')[0]
        confirmed = session_service.confirm_email(token)
        assert confirmed.email_confirmed is True
        assert session_service.sign_in("pendente@example.com", "abcdef").id == user.id


def test_sign_up_without_mailer_keeps_no_account(app):
    app.config["REQUIRE_EMAIL_CONFIRMATION"] = True
    with app.test_request_context():
        with patch("app.services.mail_service.resend.Emails.send") as send:
            with pytest.raises(AuthError) as exc:
                session_service.sign_up("semchave@example.com", "abcdef")
        send.assert_not_called()
        assert "email de confirmação" in exc.value.message
        assert User.query.filter_by(email="semchave@example.com").first() is None


def test_sign_up_send_failure_keeps_no_account(app):
    app.config["REQUIRE_EMAIL_CONFIRMATION"] = True
    app.config["RESEND_API_KEY"] = "re_test"
    with app.test_request_context():
        with patch("app.services.mail_service.resend.Emails.send", side_effect=RuntimeError("boom")):
            with pytest.raises(AuthError):
                session_service.sign_up("falhou@example.com", "abcdef")
        assert User.query.filter_by(email="falhou@example.com").first() is None

def test_confirm_email_rejects_bad_tokens(app, user_id):
    with app.test_request_context():
        with pytest.raises(AuthError):
            session_service.confirm_email("not-a-token")

        expired = jwt.encode(
            {"confirm": user_id, "exp": datetime.now(timezone.utc) - timedelta(hours=1)},
            app.config["SECRET_KEY"],
            algorithm="HS256",
        )
        with pytest.raises(AuthError) as exc:
            session_service.confirm_email(expired)
        assert "expirou" in exc.value.message

        forged = jwt.encode({"confirm": user_id}, "other-secret", algorithm="HS256")
        with pytest.raises(AuthError):
            session_service.confirm_email(forged)

        assert db.session.get(User, user_id).email_confirmed is True
