from app.views.subjects import SubjectsView  # noqa
from app.views.topics import TopicsView  # noqa
from app.views.dashboard import DashboardView  # noqa
