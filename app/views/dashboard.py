import uuid
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from app.errors import DataServiceError
from app.views.base import View

LOAD_FAILED = "Falha ao carregar dados"
TOGGLE_FAILED = "Falha ao atualizar status do tópico"
EVALUATION_FAILED = "Falha ao atualizar avaliação"
INVALID_SCORE = "A nota deve estar entre 0 e 10"
INVALID_DATE = "Data inválida"

EVALUATION_FIELDS = ("date", "score", "completed")
ONE_DECIMAL = Decimal("0.1")


def round_half_up(value):
    """Round to one decimal, halves away from zero."""
    return Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def parse_score(value):
    """Parse a 0-10 score with one decimal. Returns None when invalid."""
    try:
        score = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return None
    if not score.is_finite() or score < 0 or score > 10:
        return None
    return float(round_half_up(score))


def parse_date(value):
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError:
        return None


def average_score(subject):
    """Mean evaluation score with one decimal, or None when there are none."""
    evaluations = subject.get("evaluations") or []
    if not evaluations:
        return None
    total = sum(Decimal(str(e["score"])) for e in evaluations)
    return str(round_half_up(total / len(evaluations)))


class DashboardView(View):
    """All subjects with nested topics and evaluations."""

    def __init__(self, user_id, service=None):
        super().__init__(user_id, service)
        self.subjects = []

    def fetch_all(self):
        try:
            self.subjects = (
                self.service.table("subjects")
                .select("*, topics(*)")
                .order("created_at", desc=True)
                .execute()
            )
            return True
        except DataServiceError as e:
            return self.fail(LOAD_FAILED, e)

    def find_subject(self, subject_id):
        return next((s for s in self.subjects if s["id"] == subject_id), None)

    def toggle_topic(self, topic_id):
        topic = None
        for subject in self.subjects:
            topic = next((t for t in subject.get("topics", []) if t["id"] == topic_id), None)
            if topic:
                break
        if topic is None:
            return False

        try:
            (
                self.service.table("topics")
                .update({"completed": not topic["completed"]})
                .eq("id", topic_id)
                .execute()
            )
        except DataServiceError as e:
            return self.fail(TOGGLE_FAILED, e)
        return self.fetch_all()

    def add_evaluation(self, subject_id, when, score):
        subject = self.find_subject(subject_id)
        if subject is None:
            return False

        parsed_score = parse_score(score)
        if parsed_score is None:
            return self.fail(INVALID_SCORE)
        parsed_date = parse_date(when)
        if parsed_date is None:
            return self.fail(INVALID_DATE)

        evaluations = [dict(e) for e in subject.get("evaluations") or []]
        evaluations.append({
            "id": str(uuid.uuid4()),
            "date": parsed_date,
            "score": parsed_score,
            "completed": False,
        })
        return self._write_evaluations(subject_id, evaluations)

    def update_evaluation(self, subject_id, evaluation_id, patch):
        """Merge ``patch`` into one evaluation and write the whole list back.

        There is no version check: a concurrent edit to the same subject is
        overwritten by whichever write lands last.
        """
        subject = self.find_subject(subject_id)
        if subject is None:
            return False

        evaluations = [dict(e) for e in subject.get("evaluations") or []]
        index = next((i for i, e in enumerate(evaluations) if e["id"] == evaluation_id), None)
        if index is None:
            return False

        updates = {k: v for k, v in patch.items() if k in EVALUATION_FIELDS}
        if "score" in updates:
            updates["score"] = parse_score(updates["score"])
            if updates["score"] is None:
                return self.fail(INVALID_SCORE)
        if "date" in updates:
            updates["date"] = parse_date(updates["date"])
            if updates["date"] is None:
                return self.fail(INVALID_DATE)
        if "completed" in updates:
            updates["completed"] = bool(updates["completed"])

        evaluations[index] = {**evaluations[index], **updates}
        return self._write_evaluations(subject_id, evaluations)

    def _write_evaluations(self, subject_id, evaluations):
        try:
            (
                self.service.table("subjects")
                .update({"evaluations": evaluations})
                .eq("id", subject_id)
                .execute()
            )
        except DataServiceError as e:
            return self.fail(EVALUATION_FAILED, e)
        return self.fetch_all()
