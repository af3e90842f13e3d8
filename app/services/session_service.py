from datetime import datetime, timezone, timedelta
import jwt
from flask import current_app, url_for
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import SQLAlchemyError
from app.extensions import db
from app.errors import AuthError, InvalidCredentials, EmailNotConfirmed
from app.models.user import User
from app.services.mail_service import MailError, send_confirmation_email


def _normalize_email(email):
    return (email or "").strip().lower()


def current_user_id():
    """Id of the signed-in user, or None."""
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def sign_up(email, password):
    """Create an account. Returns the new user.

    Unconfirmed users cannot sign in while REQUIRE_EMAIL_CONFIRMATION is on.
    The account is only kept once the confirmation email has been sent.
    """
    email = _normalize_email(email)
    password = password or ""
    min_length = current_app.config.get("MIN_PASSWORD_LENGTH", 6)

    if not email or not password:
        raise AuthError("Preencha email e senha")
    if "@" not in email:
        raise AuthError("Email inválido")
    if len(password) < min_length:
        raise AuthError(f"A senha deve ter pelo menos {min_length} caracteres")
    if User.query.filter_by(email=email).first():
        raise AuthError("Este email já está registrado")

    require_confirmation = current_app.config.get("REQUIRE_EMAIL_CONFIRMATION", False)
    user = User(email=email, email_confirmed=not require_confirmation)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.flush()
        if require_confirmation:
            token = generate_confirmation_token(user)
            link = url_for("auth.confirm_email", token=token, _external=True)
            send_confirmation_email(email, link)
        db.session.commit()
    except MailError as e:
        db.session.rollback()
        raise AuthError("Falha ao enviar o email de confirmação") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Sign-up failed for {email}: {e}")
        raise AuthError() from e

    current_app.logger.info(f"User registered: {email}")
    return user


def generate_confirmation_token(user):
    hours = current_app.config.get("CONFIRMATION_TOKEN_HOURS", 24)
    payload = {
        "confirm": user.id,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def confirm_email(token):
    """Mark the token's user as confirmed. Returns the user."""
    try:
        data = jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
    except jwt.ExpiredSignatureError as e:
        raise AuthError("O link de confirmação expirou") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Link de confirmação inválido") from e

    user = db.session.get(User, data.get("confirm"))
    if not user:
        raise AuthError("Link de confirmação inválido")
    if not user.email_confirmed:
        user.email_confirmed = True
        db.session.commit()
        current_app.logger.info(f"Email confirmed: {user.email}")
    return user


def sign_in(email, password):
    email = _normalize_email(email)
    try:
        user = User.query.filter_by(email=email).first()
    except SQLAlchemyError as e:
        current_app.logger.error(f"Sign-in lookup failed: {e}")
        raise AuthError() from e

    if not user or not user.check_password(password or ""):
        current_app.logger.warning(f"Rejected sign-in for {email}")
        raise InvalidCredentials()
    if not user.email_confirmed:
        current_app.logger.warning(f"Sign-in before confirmation for {email}")
        raise EmailNotConfirmed()

    if not login_user(user, remember=True):
        raise AuthError()
    current_app.logger.info(f"User signed in: {email}")
    return user


def sign_out():
    email = current_user.email if current_user.is_authenticated else None
    logout_user()
    current_app.logger.info(f"User signed out: {email}")
