"""Exception hierarchy shared by every signin-capabilities component.

All errors derive from :class:`CapabilityError` so callers can reject a
message with a single ``except`` clause. Validation errors additionally
derive from :class:`ValueError`.

Decoding errors are deliberately distinct from a ``False`` verification
result: a message whose capability resources cannot be decoded cannot be
authenticated at all and must be rejected.
"""
from __future__ import annotations


class CapabilityError(Exception):
    """Base class for all capability-related errors."""


class InvalidNamespaceError(CapabilityError, ValueError):
    """Raised when text does not satisfy the namespace grammar."""

    def __init__(self, namespace: object, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Invalid namespace {namespace!r}: {reason}")


class InvalidActionError(CapabilityError, ValueError):
    """Raised when an action token is empty or not a string."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Invalid action {action!r}: actions must be non-empty strings")


class InvalidResourceError(CapabilityError, ValueError):
    """Raised when a resource identifier is empty or not a string."""

    def __init__(self, resource: object) -> None:
        self.resource = resource
        super().__init__(
            f"Invalid resource {resource!r}: resources must be non-empty strings"
        )


class EncodingError(CapabilityError):
    """Raised when a capability payload cannot be serialized."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Could not encode capabilities for {namespace!r}: {reason}")


class DecodingError(CapabilityError):
    """Raised when a capability resource is malformed.

    Parameters
    ----------
    resource:
        The resource text that failed to decode.
    reason:
        Human-readable description of the failure.
    """

    def __init__(self, resource: str, reason: str) -> None:
        self.resource = resource
        self.reason = reason
        super().__init__(f"Could not decode capability resource {resource!r}: {reason}")


class BuilderConsumedError(CapabilityError):
    """Raised when a Builder is used after :meth:`Builder.build`."""

    def __init__(self) -> None:
        super().__init__("Builder has already been built and cannot be reused")


__all__ = [
    "BuilderConsumedError",
    "CapabilityError",
    "DecodingError",
    "EncodingError",
    "InvalidActionError",
    "InvalidNamespaceError",
    "InvalidResourceError",
]
