from flask import Blueprint, request, jsonify, render_template, redirect, url_for, flash
from flask_login import login_required, current_user
from app.errors import AuthError, InvalidCredentials, EmailNotConfirmed
from app.services import session_service

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

INVALID_CREDENTIALS = "Este email não está registrado ou a senha está incorreta."
EMAIL_NOT_CONFIRMED = (
    "Por favor, confirme seu email antes de fazer login. "
    "Verifique sua caixa de entrada (incluindo spam) para o link de confirmação."
)
LOGIN_FAILED = "Falha ao fazer login"


def login_error_message(error):
    if isinstance(error, InvalidCredentials):
        return INVALID_CREDENTIALS
    if isinstance(error, EmailNotConfirmed):
        return EMAIL_NOT_CONFIRMED
    return LOGIN_FAILED


@auth_bp.route("/register", methods=["POST"])
def register():
    email = request.form.get("email", "")
    password = request.form.get("password", "")

    try:
        user = session_service.sign_up(email, password)
    except AuthError as e:
        return render_template("auth/register.html", error=e.message, email=email), 400

    if user.email_confirmed:
        flash("Conta criada com sucesso! Faça login para continuar.", "success")
    else:
        flash("Conta criada! Confirme seu email antes de fazer login.", "info")
    return redirect(url_for("pages.login_page"))


@auth_bp.route("/login", methods=["POST"])
def login():
    email = request.form.get("email", "")
    password = request.form.get("password", "")

    try:
        session_service.sign_in(email, password)
    except AuthError as e:
        return render_template(
            "auth/login.html",
            error=login_error_message(e),
            show_register_link=isinstance(e, InvalidCredentials),
            email=email,
        ), 401

    return redirect(url_for("pages.subjects_page"))


@auth_bp.route("/confirm/<token>")
def confirm_email(token):
    try:
        session_service.confirm_email(token)
    except AuthError as e:
        flash(e.message, "danger")
        return redirect(url_for("pages.login_page"))
    flash("Email confirmado! Faça login para continuar.", "success")
    return redirect(url_for("pages.login_page"))


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    session_service.sign_out()
    return redirect(url_for("pages.login_page"))


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})
