# Models package: import all models so SQLAlchemy sees them
from app.models.user import User  # noqa
from app.models.subject import Subject  # noqa
from app.models.topic import Topic  # noqa
