# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain error taxonomy; each kind maps to one HTTP status."""


class EnrolmentError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(EnrolmentError):
    kind = "unauthenticated"
    status_code = 401


class Forbidden(EnrolmentError):
    kind = "forbidden"
    status_code = 403


class NotFound(EnrolmentError):
    kind = "not_found"
    status_code = 404


class Conflict(EnrolmentError):
    kind = "conflict"
    status_code = 409


class ValidationFailed(EnrolmentError):
    kind = "validation_failed"
    status_code = 400


class EmptyPayload(EnrolmentError):
    kind = "empty_payload"
    status_code = 400


class StoreFailure(EnrolmentError):
    kind = "store_failure"
    status_code = 503
