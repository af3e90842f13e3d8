from flask import current_app
from app.errors import ConstraintViolation, DataServiceError, NotFound
from app.views.base import View

LOAD_FAILED = "Falha ao carregar dados"
NOT_FOUND = "Disciplina não encontrada"
ADD_FAILED = "Falha ao adicionar assunto"
TOGGLE_FAILED = "Falha ao atualizar status do assunto"


def limit_message(limit):
    return f"Você pode criar até {limit} assuntos por disciplina"


class TopicsView(View):
    """One subject and its topics, oldest first."""

    def __init__(self, user_id, service=None):
        super().__init__(user_id, service)
        self.subject = None
        self.not_found = False
        self.items = []
        self.limit = current_app.config.get("TOPIC_LIMIT", 20)

    @property
    def completed_count(self):
        return sum(1 for t in self.items if t["completed"])

    @property
    def progress(self):
        """Share of completed topics as a whole percentage."""
        if not self.items:
            return 0
        return round(100 * self.completed_count / len(self.items))

    def fetch_topics_for_subject(self, subject_id):
        try:
            self.subject = (
                self.service.table("subjects")
                .select("*")
                .eq("id", subject_id)
                .single()
                .execute()
            )
            self.items = (
                self.service.table("topics")
                .select("*")
                .eq("subject_id", subject_id)
                .order("created_at")
                .execute()
            )
            return True
        except NotFound as e:
            self.subject = None
            self.not_found = True
            return self.fail(NOT_FOUND, e)
        except DataServiceError as e:
            return self.fail(LOAD_FAILED, e)

    def add_topic(self, title):
        title = (title or "").strip()
        if not title or self.subject is None:
            return False

        self.error = ""
        try:
            row = (
                self.service.table("topics")
                .insert({"subject_id": self.subject["id"], "title": title})
                .execute()
            )
        except ConstraintViolation as e:
            if e.constraint == "topics_limit":
                return self.fail(limit_message(self.limit), e)
            return self.fail(e.message or ADD_FAILED, e)
        except DataServiceError as e:
            return self.fail(e.message or ADD_FAILED, e)

        self.items = self.items + [row]
        return True

    def toggle_topic_completion(self, topic_id):
        topic = next((t for t in self.items if t["id"] == topic_id), None)
        if topic is None:
            return False

        completed = not topic["completed"]
        try:
            (
                self.service.table("topics")
                .update({"completed": completed})
                .eq("id", topic_id)
                .single()
                .execute()
            )
        except DataServiceError as e:
            return self.fail(TOGGLE_FAILED, e)

        self.items = [
            dict(t, completed=completed) if t["id"] == topic_id else t
            for t in self.items
        ]
        return True
