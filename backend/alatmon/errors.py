class AlatError(Exception):
    """Base error rendered to clients as ``{"error": message, "details": detail}``."""

    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message)

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.detail is not None:
            body["details"] = self.detail
        return body


# --- ValidationConflict ---

class ValidationConflict(AlatError):
    status_code = 400
    message = "Conflict"

class DuplicateEmail(ValidationConflict):
    message = "Email already registered"

class DuplicateDeviceId(ValidationConflict):
    message = "ID Alat already registered"


# --- NotFound ---

class NotFound(AlatError):
    status_code = 404
    message = "Not found"

class UserNotFound(NotFound):
    message = "User not found"

class HistoryNotFound(NotFound):
    message = "No history found for this alat"


# --- AuthFailure ---

class AuthFailure(AlatError):
    status_code = 401
    message = "Authentication failed"

class MissingToken(AuthFailure):
    message = "Access denied, no token provided"

class InvalidToken(AuthFailure):
    status_code = 400
    message = "Invalid token"

class InvalidPassword(AuthFailure):
    message = "Invalid password"


# --- NoBaselineData ---

class NoBaselineData(AlatError):
    status_code = 404
    message = "No baseline data"

class NoMonitoringData(NoBaselineData):
    message = "No data found for this alat"


# --- PersistenceError ---

class PersistenceError(AlatError):
    status_code = 500
    message = "Database error"

class PurgeFailed(PersistenceError):
    """History was computed but the live rows were already gone.

    Signals a concurrent archive or an out-of-band delete; needs reconciliation.
    """
    message = "Error deleting data from monitoring table"

    def __init__(self, idalat: str):
        self.idalat = idalat
        super().__init__(detail="No rows affected")
