import resend
from flask import current_app


class MailError(Exception):
    pass


def send_confirmation_email(email, link):
    """Send the account confirmation link through Resend."""
    api_key = current_app.config.get("RESEND_API_KEY")
    if not api_key:
        current_app.logger.error("RESEND_API_KEY is not set; cannot send confirmation email")
        raise MailError("Mail delivery is not configured")

    resend.api_key = api_key
    params = {
        "from": current_app.config["MAIL_FROM"],
        "to": [email],
        "subject": "Confirme seu email",
        "html": f"""
            <p>Bem-vindo! Confirme seu email para começar a usar suas disciplinas.</p>
            <p><a href="{link}">Confirmar email</a></p>
            <p>Se você não criou esta conta, ignore esta mensagem.</p>
        """,
    }
    try:
        resend.Emails.send(params)
    except Exception as e:
        current_app.logger.error(f"Confirmation email to {email} failed: {e}")
        raise MailError(str(e)) from e
    current_app.logger.info(f"Confirmation email sent to {email}")
