"""
errors.py — Failure taxonomy shared by services and routes.
Services raise these; main.py renders them as JSON with the matching status code.
"""


class MindTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class ValidationError(MindTrackerError):
    """Malformed input. Raised before anything is written."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class NotFoundError(MindTrackerError):
    """Missing resource, or one owned by somebody else (indistinguishable to the caller)."""

    status_code = 404


class ConflictError(MindTrackerError):
    status_code = 409


class ConsistencyWarning(UserWarning):
    """A two-sided relationship was found with only one side persisted."""
