"""Error taxonomy shared by every component.

Each expected outcome has a distinct code and a user-visible message so a
client can tell "no such resume" from "not yours" from "name taken" from
"invalid operation".  Internal failures always map to one opaque message.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


class ResumeLedgerError(RuntimeError):
    """Base class for all errors raised by the resumeledger core."""

    code: str = "error"
    public_message: str = INTERNAL_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        if message is not None and self.code != "internal":
            self.public_message = message


class NotFoundError(ResumeLedgerError):
    """Raised when an owner, ledger, profile or version does not exist."""

    code = "not_found"
    public_message = "Resume not found"


class ForbiddenError(ResumeLedgerError):
    """Raised when the caller does not own the referenced resource."""

    code = "forbidden"
    public_message = "Not authorized to access this resource"


class ConflictError(ResumeLedgerError):
    """Raised on a duplicate name or an unresolved concurrent write."""

    code = "conflict"
    public_message = "Resource already exists"

    def __init__(self, message: str | None = None, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class BadRequestError(ResumeLedgerError):
    """Raised when an operation's preconditions are violated."""

    code = "bad_request"
    public_message = "Invalid operation"


class AlreadyLiveError(BadRequestError):
    """Raised by set-live when the target version is already master."""

    public_message = "This version is already live"


class InternalError(ResumeLedgerError):
    """Raised on storage failures unrelated to the caller's request.

    The detail is kept on the exception for logs; ``public_message`` stays
    opaque.
    """

    code = "internal"
    retryable = False


class TransactionTimeoutError(InternalError):
    """Raised when a write transaction exceeds its wait or execution budget."""

    retryable = True


class LedgerIntegrityError(InternalError):
    """Raised when a ledger audit finds a broken invariant."""


def describe_error(exc: BaseException) -> tuple[str, str]:
    """Map any exception to a ``(code, user-visible message)`` pair.

    Anything outside the expected taxonomy is logged and reported with the
    opaque internal message.
    """
    if isinstance(exc, ResumeLedgerError) and not isinstance(exc, InternalError):
        return exc.code, exc.public_message
    logger.error("Internal failure: %s", exc, exc_info=exc)
    return InternalError.code, INTERNAL_MESSAGE
