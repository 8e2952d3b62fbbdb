"""
Failure taxonomy for the quiz core.

Every failure the core reports is one of four kinds. The kinds describe what
went wrong, not how a transport should present it; a service layer maps
``error.kind`` to its own status codes.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum


class PolicyReason(str, Enum):
    """Why the eligibility policy rejected an operation."""

    CROSS_STUDENT = "cross_student"
    COOLDOWN_ACTIVE = "cooldown_active"
    ALREADY_PASSED = "already_passed"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    ANSWER_COUNT_MISMATCH = "answer_count_mismatch"
    CONCURRENT_ATTEMPT = "concurrent_attempt"
    COMPREHENSION_ALREADY_SET = "comprehension_already_set"


class LexiquizError(Exception):
    """Base class for modeled failures."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(LexiquizError):
    """A question, answer, quiz or rating is structurally malformed."""

    kind = "invalid_input"


class ReferenceNotFoundError(LexiquizError):
    """A referenced book, quiz, user or submission does not exist."""

    kind = "reference_not_found"


class PolicyViolationError(LexiquizError):
    """The eligibility policy rejected the attempt."""

    kind = "policy_violation"

    def __init__(self, message: str, reason: PolicyReason, retry_at: datetime | None = None):
        super().__init__(message)
        self.reason = reason
        self.retry_at = retry_at


class NotModifiedError(LexiquizError):
    """An update or delete found nothing to change at write time."""

    kind = "not_modified"
