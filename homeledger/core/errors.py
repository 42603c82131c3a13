"""Domain errors raised by the service layer.

Each error carries the HTTP status the API answers with; the mapping to a
response lives in ``api/error_handlers.py``.
"""


class HomeLedgerError(Exception):
    http_status: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(HomeLedgerError):
    http_status = 400


class PermissionDenied(HomeLedgerError):
    http_status = 403


class NotFound(HomeLedgerError):
    http_status = 404


class Conflict(HomeLedgerError):
    http_status = 409
