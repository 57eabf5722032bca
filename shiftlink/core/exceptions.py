"""Error taxonomy shared by services and API handlers."""

from typing import Optional

from fastapi import status


class ShiftLinkError(Exception):
    """Base class for classified failures returned to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal"
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ShiftLinkError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(ShiftLinkError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You don't have permission to perform this action"


class NotFound(ShiftLinkError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class InvalidInput(ShiftLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    default_message = "Invalid input"


class InvalidState(ShiftLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_state"
    default_message = "Operation not allowed in the current state"


class InvalidTransition(InvalidState):
    default_message = "Invalid status transition"


class Conflict(ShiftLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "conflict"
    default_message = "Resource already exists"


class DuplicateApplication(Conflict):
    default_message = "You have already applied for this job"


class Internal(ShiftLinkError):
    pass
