"""Namespace — validated category key for a family of capabilities.

A namespace groups the capabilities delegated for one class of resources
(e.g. ``"credential"`` or ``"kepler"``). Namespaces appear verbatim in the
capability resource URI, terminated by ``":"``, so the grammar excludes
that delimiter:

    namespace = 1*( ALPHA / DIGIT / "-" / "_" / "." )
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from signin_capabilities.errors import InvalidNamespaceError

_NAMESPACE_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


@dataclass(frozen=True, order=True)
class Namespace:
    """A grammar-valid namespace token.

    Construction always validates, so an existing instance is guaranteed
    to be well formed. Prefer :meth:`parse` at input boundaries.

    Parameters
    ----------
    value:
        The raw namespace text.

    Raises
    ------
    InvalidNamespaceError
        If ``value`` is empty or contains characters outside the grammar.

    Examples
    --------
    >>> Namespace.parse("credential")
    Namespace('credential')
    >>> str(Namespace.parse("kepler"))
    'kepler'
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidNamespaceError(self.value, "namespace must be a string")
        if not self.value:
            raise InvalidNamespaceError(self.value, "namespace must not be empty")
        if not _NAMESPACE_PATTERN.fullmatch(self.value):
            raise InvalidNamespaceError(
                self.value,
                "only ASCII letters, digits, '-', '_' and '.' are allowed",
            )

    @classmethod
    def parse(cls, text: str) -> "Namespace":
        """Parse and validate *text* as a Namespace."""
        return cls(text)

    @classmethod
    def coerce(cls, namespace: "Namespace | str") -> "Namespace":
        """Return *namespace* unchanged, or parse it when given as text."""
        if isinstance(namespace, Namespace):
            return namespace
        return cls.parse(namespace)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Namespace({self.value!r})"


__all__ = ["Namespace"]
