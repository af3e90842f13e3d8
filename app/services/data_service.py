from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.extensions import db
from app.errors import DataServiceError, NotFound, ConstraintViolation
from app.models.subject import Subject
from app.models.topic import Topic

TABLES = {
    "subjects": Subject,
    "topics": Topic,
}

# Columns a client may patch through update()
WRITABLE_COLUMNS = {
    "subjects": {"title", "evaluations"},
    "topics": {"title", "completed"},
}


class DataService:
    """Table-style query client over the study tracker tables.

    Every query is scoped to ``user_id``: subjects must belong to the user and
    topics must hang off one of the user's subjects. Row caps are enforced on
    insert and raised as named ``ConstraintViolation`` errors.

        service = DataService(current_user.id)
        rows = service.table("subjects").select("*, topics(*)").order("created_at", desc=True).execute()
        row = service.table("topics").insert({"subject_id": 1, "title": "Limites"}).execute()
        service.table("topics").update({"completed": True}).eq("id", row["id"]).execute()
    """

    def __init__(self, user_id, subject_limit=None, topic_limit=None):
        self.user_id = user_id
        self.subject_limit = current_app.config.get("SUBJECT_LIMIT", 6) if subject_limit is None else subject_limit
        self.topic_limit = current_app.config.get("TOPIC_LIMIT", 20) if topic_limit is None else topic_limit

    def table(self, name):
        if name not in TABLES:
            raise DataServiceError(f'relation "{name}" does not exist')
        return TableQuery(self, name)

    # Ownership

    def scoped_query(self, name):
        if name == "subjects":
            return Subject.query.filter(Subject.user_id == self.user_id)
        return Topic.query.join(Subject, Topic.subject_id == Subject.id).filter(Subject.user_id == self.user_id)

    def owns_subject(self, subject_id):
        return self.scoped_query("subjects").filter(Subject.id == subject_id).first() is not None

    # Writes

    def insert_row(self, name, row):
        if name == "subjects":
            return self._insert_subject(row)
        return self._insert_topic(row)

    def _insert_subject(self, row):
        if row.get("user_id") not in (None, self.user_id):
            raise DataServiceError('new row violates row-level security policy for table "subjects"')
        title = (row.get("title") or "").strip()
        if not title:
            raise ConstraintViolation("subjects", "subjects_title_check")

        count = Subject.query.filter_by(user_id=self.user_id).count()
        if count >= self.subject_limit:
            raise ConstraintViolation("subjects", "subjects_limit")

        subject = Subject(
            user_id=self.user_id,
            title=title,
            evaluations=list(row.get("evaluations") or []),
        )
        db.session.add(subject)
        db.session.commit()
        return subject.to_dict()

    def _insert_topic(self, row):
        subject_id = row.get("subject_id")
        if subject_id is None or not self.owns_subject(subject_id):
            raise DataServiceError('new row violates row-level security policy for table "topics"')
        title = (row.get("title") or "").strip()
        if not title:
            raise ConstraintViolation("topics", "topics_title_check")

        count = Topic.query.filter_by(subject_id=subject_id).count()
        if count >= self.topic_limit:
            raise ConstraintViolation("topics", "topics_limit")

        topic = Topic(subject_id=subject_id, title=title, completed=bool(row.get("completed", False)))
        db.session.add(topic)
        db.session.commit()
        return topic.to_dict()

    def update_rows(self, name, patch, query):
        unknown = set(patch) - WRITABLE_COLUMNS[name]
        if unknown:
            raise DataServiceError(f"column {sorted(unknown)[0]!r} of relation \"{name}\" cannot be updated")

        rows = query.all()
        for obj in rows:
            for key, value in patch.items():
                if key == "evaluations":
                    # New list object so the JSON column is flagged dirty
                    value = [dict(e) for e in (value or [])]
                setattr(obj, key, value)
        db.session.commit()
        return [obj.to_dict() for obj in rows]


class TableQuery:
    """Builder for a single select / insert / update against one table."""

    def __init__(self, service, name):
        self.service = service
        self.name = name
        self.model = TABLES[name]
        self._action = "select"
        self._payload = None
        self._with_topics = False
        self._filters = []
        self._order = []
        self._single = False

    def select(self, columns="*"):
        # Only subjects -> topics expansion is supported
        self._with_topics = self.name == "subjects" and "topics(" in columns.replace(" ", "")
        return self

    def insert(self, row):
        self._action = "insert"
        self._payload = dict(row)
        return self

    def update(self, patch):
        self._action = "update"
        self._payload = dict(patch)
        return self

    def eq(self, column, value):
        self._filters.append((self._column(column), value))
        return self

    def order(self, column, desc=False):
        self._order.append((self._column(column), desc))
        return self

    def single(self):
        self._single = True
        return self

    def _column(self, column):
        if column not in self.model.__table__.columns:
            raise DataServiceError(f"column {self.name}.{column} does not exist")
        return getattr(self.model, column)

    def _build(self):
        query = self.service.scoped_query(self.name)
        for column, value in self._filters:
            query = query.filter(column == value)
        for column, desc in self._order:
            query = query.order_by(column.desc() if desc else column.asc())
        # Tie-break on id so rows created within the same tick keep insertion order
        if self._order:
            query = query.order_by(self.model.id.desc() if self._order[0][1] else self.model.id.asc())
        return query

    def execute(self):
        try:
            if self._action == "insert":
                return self.service.insert_row(self.name, self._payload)
            if self._action == "update":
                if not self._filters:
                    raise DataServiceError("UPDATE requires a WHERE clause")
                rows = self.service.update_rows(self.name, self._payload, self._build())
                if self._single:
                    if not rows:
                        raise NotFound(self.name, self._filter_value("id"))
                    return rows[0]
                return rows

            query = self._build()
            if self._single:
                obj = query.first()
                if obj is None:
                    raise NotFound(self.name, self._filter_value("id"))
                return self._serialize(obj)
            return [self._serialize(obj) for obj in query.all()]
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Query on {self.name} failed: {e}")
            raise DataServiceError(str(e)) from e

    def _filter_value(self, column):
        for col, value in self._filters:
            if col.key == column:
                return value
        return None

    def _serialize(self, obj):
        if self.name == "subjects":
            return obj.to_dict(with_topics=self._with_topics)
        return obj.to_dict()
