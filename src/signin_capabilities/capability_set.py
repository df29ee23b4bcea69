"""CapabilitySet — every capability delegated by one sign-in message.

The set maps each :class:`~signin_capabilities.namespace.Namespace` to its
:class:`~signin_capabilities.capability.Capability`. Namespaces are kept in
first-declaration order, which is the order their resource URIs are
emitted in. Content (and therefore equality and the generated statement)
never depends on that order: every insert is a union.

Namespaces with nothing granted are never stored.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from signin_capabilities.capability import Capability, validate_actions, validate_resource
from signin_capabilities.errors import InvalidNamespaceError
from signin_capabilities.namespace import Namespace

logger = logging.getLogger(__name__)


class CapabilitySet:
    """Ordered, union-merging aggregate of capabilities keyed by namespace.

    Instances are not thread-safe; guard concurrent mutation externally.

    Examples
    --------
    >>> caps = CapabilitySet()
    >>> caps.add_default_actions("credential", ["present"])
    >>> caps.add_resource_actions("credential", "type:type1", ["present"])
    >>> caps.permits("credential", "present", resource="type:type2")
    True
    """

    def __init__(self) -> None:
        self._entries: dict[Namespace, Capability] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_default_actions(
        self,
        namespace: Namespace | str,
        actions: Iterable[str],
    ) -> None:
        """Grant *actions* namespace-wide.

        Parameters
        ----------
        namespace:
            Target namespace; text is parsed and validated.
        actions:
            Action tokens to union into the namespace defaults.

        Raises
        ------
        InvalidNamespaceError
            If *namespace* is text that fails validation.
        InvalidActionError
            If any action is empty or not a string.
        """
        key = Namespace.coerce(namespace)
        validated = validate_actions(actions)
        if not validated:
            return
        self._entry(key).add_default_actions(validated)

    def add_resource_actions(
        self,
        namespace: Namespace | str,
        resource: str,
        actions: Iterable[str],
    ) -> None:
        """Grant *actions* on *resource* within *namespace*.

        Raises
        ------
        InvalidNamespaceError
            If *namespace* is text that fails validation.
        InvalidResourceError
            If *resource* is empty or not a string.
        InvalidActionError
            If any action is empty or not a string.
        """
        key = Namespace.coerce(namespace)
        validate_resource(resource)
        validated = validate_actions(actions)
        if not validated:
            return
        self._entry(key).add_targeted_actions(resource, validated)

    def add_capability(self, namespace: Namespace | str, capability: Capability) -> None:
        """Union a whole :class:`Capability` into *namespace*.

        Raises
        ------
        InvalidActionError
            If *capability* holds an empty or non-string action.
        InvalidResourceError
            If *capability* holds an empty or non-string resource.
        """
        key = Namespace.coerce(namespace)
        validated = Capability()
        validated.merge(capability)
        if validated.is_empty():
            return
        self._entry(key).merge(validated)

    def merge(self, other: "CapabilitySet") -> None:
        """Union every entry of *other* into this set.

        Namespaces new to this set are appended in *other*'s order.
        """
        for namespace, capability in other.items():
            logger.debug("Merging capabilities for namespace %s", namespace)
            self.add_capability(namespace, capability)

    def _entry(self, namespace: Namespace) -> Capability:
        if namespace not in self._entries:
            self._entries[namespace] = Capability()
        return self._entries[namespace]

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        """Return True when no namespace holds any grant."""
        return not self._entries

    def get(self, namespace: Namespace | str) -> Capability | None:
        """Return the capability for *namespace*, or None if absent."""
        return self._entries.get(Namespace.coerce(namespace))

    def items(self) -> list[tuple[Namespace, Capability]]:
        """Return ``(namespace, capability)`` pairs in insertion order."""
        return list(self._entries.items())

    def sorted_items(self) -> list[tuple[Namespace, Capability]]:
        """Return ``(namespace, capability)`` pairs ordered by namespace text."""
        return sorted(self._entries.items(), key=lambda item: item[0])

    def permits(
        self,
        namespace: Namespace | str,
        action: str,
        resource: str | None = None,
    ) -> bool:
        """Return True when *action* is granted in *namespace*.

        With no *resource*, only namespace-wide grants count. With a
        *resource*, default actions and that resource's actions count.
        This reports what was delegated; it does not decide policy.
        """
        capability = self.get(namespace)
        if capability is None:
            return False
        if resource is None:
            return action in capability.default_actions
        return action in capability.actions_for(resource)

    def copy(self) -> "CapabilitySet":
        """Return an independent deep copy of this set."""
        duplicate = CapabilitySet()
        for namespace, capability in self._entries.items():
            duplicate._entries[namespace] = capability.copy()
        return duplicate

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary keyed by namespace text."""
        return {
            str(namespace): capability.to_dict()
            for namespace, capability in self.sorted_items()
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Namespace]:
        return iter(list(self._entries))

    def __contains__(self, namespace: object) -> bool:
        if isinstance(namespace, str):
            try:
                namespace = Namespace.parse(namespace)
            except InvalidNamespaceError:
                return False
        return namespace in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CapabilitySet):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        namespaces = ", ".join(str(namespace) for namespace in self._entries)
        return f"CapabilitySet(namespaces=[{namespaces}])"


__all__ = ["CapabilitySet"]
