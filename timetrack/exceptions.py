from __future__ import annotations


class TimeTrackError(Exception):
    """Base class for errors raised by the tracking engine and its repositories."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TimeTrackError):
    status_code = 400


class ConflictError(TimeTrackError):
    """The user already has an active entry at the repository level."""

    status_code = 409


class AlreadyPunchedInError(ConflictError):
    status_code = 400


class NotFoundError(TimeTrackError):
    status_code = 404


class ForbiddenError(TimeTrackError):
    status_code = 403


class AlreadyClosedError(TimeTrackError):
    status_code = 400


class DataIntegrityError(TimeTrackError):
    """Stored data breaks an invariant: never corrected, always surfaced."""

    status_code = 500
