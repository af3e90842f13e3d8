from datetime import datetime, timezone
from app.extensions import db


class Subject(db.Model):
    __tablename__ = "subjects"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    # Embedded list of {"id", "date", "score", "completed"}; always rewritten whole
    evaluations = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    topics = db.relationship(
        "Topic",
        backref="subject",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="Topic.id",
    )

    def to_dict(self, with_topics=False):
        d = {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "evaluations": [dict(e) for e in (self.evaluations or [])],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_topics:
            d["topics"] = [t.to_dict() for t in self.topics]
        return d
