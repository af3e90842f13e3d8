"""Error kinds raised by the data and session services.

Views catch these at the call site and turn them into banner messages.
"""


class AuthError(Exception):
    """Generic authentication failure."""

    def __init__(self, message="Falha na autenticação"):
        super().__init__(message)
        self.message = message


class InvalidCredentials(AuthError):
    def __init__(self, message="Invalid login credentials"):
        super().__init__(message)


class EmailNotConfirmed(AuthError):
    def __init__(self, message="email_not_confirmed"):
        super().__init__(message)


class DataServiceError(Exception):
    """Uncategorized backend failure."""

    def __init__(self, message=""):
        super().__init__(message)
        self.message = message


class NotFound(DataServiceError):
    def __init__(self, table, row_id=None):
        self.table = table
        self.row_id = row_id
        super().__init__(f"No {table} row found for id {row_id}")


class ConstraintViolation(DataServiceError):
    def __init__(self, table, constraint):
        self.table = table
        self.constraint = constraint
        super().__init__(
            f'new row for relation "{table}" violates check constraint "{constraint}"'
        )
