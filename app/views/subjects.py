from flask import current_app
from app.errors import ConstraintViolation, DataServiceError
from app.views.base import View

LOAD_FAILED = "Falha ao carregar disciplinas"
ADD_FAILED = "Falha ao adicionar disciplina"


def limit_message(limit):
    return f"Você pode criar até {limit} disciplinas"


class SubjectsView(View):
    """The user's subjects, newest first."""

    def __init__(self, user_id, service=None):
        super().__init__(user_id, service)
        self.items = []
        self.limit = current_app.config.get("SUBJECT_LIMIT", 6)

    @property
    def can_add(self):
        return len(self.items) < self.limit

    def fetch_subjects(self):
        try:
            self.items = (
                self.service.table("subjects")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return True
        except DataServiceError as e:
            return self.fail(LOAD_FAILED, e)

    def add_subject(self, title):
        title = (title or "").strip()
        if not title:
            return False

        if not self.can_add:
            return self.fail(limit_message(self.limit))

        self.error = ""
        try:
            row = (
                self.service.table("subjects")
                .insert({"title": title, "user_id": self.user_id})
                .execute()
            )
        except ConstraintViolation as e:
            if e.constraint == "subjects_limit":
                return self.fail(limit_message(self.limit), e)
            return self.fail(e.message or ADD_FAILED, e)
        except DataServiceError as e:
            return self.fail(e.message or ADD_FAILED, e)

        self.items = [row] + self.items
        return True
