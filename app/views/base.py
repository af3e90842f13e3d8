from flask import current_app
from app.services.data_service import DataService


class View:
    """Per-request view state over the data service.

    ``error`` holds the banner message of the last failed operation. Failures
    are logged and never raised to the caller.
    """

    def __init__(self, user_id, service=None):
        self.user_id = user_id
        self.service = service or DataService(user_id)
        self.error = ""

    def fail(self, message, exc=None):
        if exc is not None:
            current_app.logger.error(f"{type(self).__name__}: {message} ({exc})")
        self.error = message
        return False
