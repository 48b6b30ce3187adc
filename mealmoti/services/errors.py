"""Domain errors raised by services and mapped to HTTP responses in main."""

from fastapi import status


class MealmotiError(Exception):
    """Base class for recoverable errors surfaced to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, **extra):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra


class NotFoundError(MealmotiError):
    """Resource absent, or not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(MealmotiError):
    """Caller can see the resource but lacks the required right."""

    status_code = status.HTTP_403_FORBIDDEN


class AlreadyExistsError(MealmotiError):
    """Uniqueness conflict; ``existing_id`` points at the surviving record."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, detail: str, existing_id: int):
        super().__init__(detail, existing_id=existing_id)
        self.existing_id = existing_id


class InvalidInputError(MealmotiError):
    """Input is well-formed but semantically invalid."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(MealmotiError):
    """Concurrent mutation that could not be resolved."""

    status_code = status.HTTP_409_CONFLICT
