"""Exception hierarchy for the notifi-client core.

Every failure the core surfaces derives from ``NotifiError`` so callers can
catch the whole family at the edge while still distinguishing kinds.
"""

from __future__ import annotations


class NotifiError(Exception):
    """Base for all notifi-client exceptions."""


class ProtocolError(NotifiError):
    """The remote service returned a malformed or missing response."""


class SequenceError(NotifiError):
    """An operation was invoked out of its required order."""


class InvalidArgumentError(NotifiError, ValueError):
    """A caller-supplied precondition was violated."""


class DuplicateNameError(NotifiError):
    """A name that must be unique is already taken."""


class ConflictError(NotifiError):
    """An item with the same natural key exists with different attributes."""


class ImmutableReferenceError(NotifiError):
    """An alert would be repointed to a different group."""


class NotFoundError(NotifiError, LookupError):
    """A referenced id is absent from the current fetch."""


class UnauthorizedError(NotifiError):
    """The session lacks the role an operation requires."""


class SigningError(NotifiError):
    """The external signer rejected or failed to sign a payload."""


class InvariantViolationError(NotifiError):
    """The remote service returned state the core cannot work with."""


class InvalidTopicError(NotifiError):
    """A broadcast topic has no name."""
