from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from app.views import SubjectsView, TopicsView, DashboardView
from app.views.dashboard import average_score

pages_bp = Blueprint("pages", __name__)


def _redirect_with_error(view, endpoint, **values):
    if view.error:
        flash(view.error, "danger")
    return redirect(url_for(endpoint, **values))


@pages_bp.route("/")
def index():
    return redirect(url_for("pages.subjects_page"))


@pages_bp.route("/login")
def login_page():
    if current_user.is_authenticated:
        return redirect(url_for("pages.subjects_page"))
    return render_template("auth/login.html")


@pages_bp.route("/register")
def register_page():
    return render_template("auth/register.html")


@pages_bp.route("/disciplinas", methods=["GET", "POST"])
@login_required
def subjects_page():
    view = SubjectsView(current_user.id)
    view.fetch_subjects()

    if request.method == "POST":
        if view.add_subject(request.form.get("title", "")):
            return redirect(url_for("pages.subjects_page"))
        status = 400 if view.error else 200
        return render_template("disciplinas.html", view=view), status

    return render_template("disciplinas.html", view=view)


@pages_bp.route("/disciplinas/<int:subject_id>", methods=["GET", "POST"])
@login_required
def subject_topics_page(subject_id):
    view = TopicsView(current_user.id)
    if not view.fetch_topics_for_subject(subject_id):
        status = 404 if view.not_found else 500
        return render_template("disciplina_topics.html", view=view), status

    if request.method == "POST":
        if view.add_topic(request.form.get("title", "")):
            return redirect(url_for("pages.subject_topics_page", subject_id=subject_id))
        status = 400 if view.error else 200
        return render_template("disciplina_topics.html", view=view), status

    return render_template("disciplina_topics.html", view=view)


@pages_bp.route("/disciplinas/<int:subject_id>/topics/<int:topic_id>/toggle", methods=["POST"])
@login_required
def toggle_subject_topic(subject_id, topic_id):
    view = TopicsView(current_user.id)
    if view.fetch_topics_for_subject(subject_id):
        view.toggle_topic_completion(topic_id)
    return _redirect_with_error(view, "pages.subject_topics_page", subject_id=subject_id)


@pages_bp.route("/dashboard")
@login_required
def dashboard_page():
    view = DashboardView(current_user.id)
    view.fetch_all()
    return render_template("dashboard.html", view=view, average_score=average_score)


@pages_bp.route("/dashboard/topics/<int:topic_id>/toggle", methods=["POST"])
@login_required
def toggle_dashboard_topic(topic_id):
    view = DashboardView(current_user.id)
    if view.fetch_all():
        view.toggle_topic(topic_id)
    return _redirect_with_error(view, "pages.dashboard_page")


@pages_bp.route("/dashboard/<int:subject_id>/evaluations", methods=["POST"])
@login_required
def add_evaluation(subject_id):
    view = DashboardView(current_user.id)
    if view.fetch_all():
        view.add_evaluation(subject_id, request.form.get("date"), request.form.get("score"))
    return _redirect_with_error(view, "pages.dashboard_page")


@pages_bp.route("/dashboard/<int:subject_id>/evaluations/<evaluation_id>", methods=["POST"])
@login_required
def update_evaluation(subject_id, evaluation_id):
    patch = {}
    if "date" in request.form:
        patch["date"] = request.form["date"]
    if "score" in request.form:
        patch["score"] = request.form["score"]
    if "completed" in request.form:
        patch["completed"] = request.form["completed"].lower() in ("1", "true", "on")

    view = DashboardView(current_user.id)
    if view.fetch_all():
        view.update_evaluation(subject_id, evaluation_id, patch)
    return _redirect_with_error(view, "pages.dashboard_page")


@pages_bp.route("/schedule")
@login_required
def schedule_page():
    return render_template("schedule.html")
