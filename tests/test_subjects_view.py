from app.errors import DataServiceError
from app.models.subject import Subject
from app.services.data_service import DataService
from app.views import SubjectsView


class BrokenService:
    """Data service stand-in whose every table call fails."""

    def __init__(self, message="connection refused"):
        self.message = message
        self.calls = 0

    def table(self, name):
        self.calls += 1
        raise DataServiceError(self.message)


def test_fetch_lists_newest_first(app_ctx, user_id):
    service = DataService(user_id)
    for title in ["Matemática", "Física"]:
        service.table("subjects").insert({"title": title}).execute()

    view = SubjectsView(user_id)
    assert view.fetch_subjects() is True
    assert [s["title"] for s in view.items] == ["Física", "Matemática"]


def test_fetch_failure_sets_banner(app_ctx, user_id):
    view = SubjectsView(user_id, service=BrokenService())
    assert view.fetch_subjects() is False
    assert view.error == "Falha ao carregar disciplinas"
    assert view.items == []


def test_add_below_cap_prepends_one(app_ctx, user_id):
    view = SubjectsView(user_id)
    view.fetch_subjects()
    view.add_subject("Química")
    before = len(view.items)

    assert view.add_subject("  Biologia ") is True
    assert len(view.items) == before + 1
    assert view.items[0]["title"] == "Biologia"
    assert view.error == ""


def test_add_at_cap_is_rejected_locally(app_ctx, user_id):
    view = SubjectsView(user_id)
    view.fetch_subjects()
    for i in range(6):
        assert view.add_subject(f"Disciplina {i}")
    assert view.can_add is False

    assert view.add_subject("Sétima") is False
    assert view.error == "Você pode criar até 6 disciplinas"
    assert len(view.items) == 6
    assert Subject.query.filter_by(user_id=user_id).count() == 6


def test_cap_violation_from_service_gets_friendly_message(app_ctx, user_id):
    # A stale view believes it has room; the service still refuses
    service = DataService(user_id)
    for i in range(6):
        service.table("subjects").insert({"title": f"D{i}"}).execute()

    view = SubjectsView(user_id)
    assert view.add_subject("Extra") is False
    assert view.error == "Você pode criar até 6 disciplinas"
    assert view.items == []


def test_blank_title_is_ignored(app_ctx, user_id):
    service = BrokenService()
    view = SubjectsView(user_id, service=service)
    assert view.add_subject("   ") is False
    assert view.error == ""
    assert service.calls == 0


def test_remote_error_message_is_surfaced_verbatim(app_ctx, user_id):
    view = SubjectsView(user_id, service=BrokenService("duplicate key value"))
    assert view.add_subject("Artes") is False
    assert view.error == "duplicate key value"
    assert view.items == []


def test_remote_error_without_message_uses_fallback(app_ctx, user_id):
    view = SubjectsView(user_id, service=BrokenService(""))
    view.add_subject("Artes")
    assert view.error == "Falha ao adicionar disciplina"
