import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Caps enforced by the data service
    SUBJECT_LIMIT = int(os.getenv("SUBJECT_LIMIT", 6))
    TOPIC_LIMIT = int(os.getenv("TOPIC_LIMIT", 20))

    # Auth
    REQUIRE_EMAIL_CONFIRMATION = os.getenv("REQUIRE_EMAIL_CONFIRMATION", "false").lower() == "true"
    CONFIRMATION_TOKEN_HOURS = int(os.getenv("CONFIRMATION_TOKEN_HOURS", 24))
    MIN_PASSWORD_LENGTH = 6

    # Resend (confirmation emails)
    RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
    MAIL_FROM = os.getenv("MAIL_FROM", "Disciplinas <nao-responda@disciplinas.local>")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
