from dataclasses import dataclass, field
from typing import Tuple


class LinkShortError(Exception):
    """Base class for errors that map onto an API response"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LinkShortError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(LinkShortError):
    status_code = 401
    default_message = "Could not validate credentials"


class ForbiddenError(LinkShortError):
    status_code = 403
    default_message = "Not enough permissions"


class NotFoundError(LinkShortError):
    status_code = 404
    default_message = "Not found"


class ConflictError(LinkShortError):
    status_code = 409
    default_message = "Already exists"


class ExpiredError(LinkShortError):
    status_code = 410
    default_message = "Link has expired"


class InternalError(LinkShortError):
    status_code = 500


@dataclass(frozen=True)
class RecordOutcome:
    """
    Result of a non-critical side effect such as click recording.

    Returned, never raised: a failed write is reported here and logged by the
    producer, and callers on the redirect path are free to ignore it.
    """

    event_recorded: bool
    counter_incremented: bool
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.event_recorded and self.counter_incremented
