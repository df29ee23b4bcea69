"""Capability — the actions delegated within a single namespace.

A Capability holds two kinds of grant:

- *default actions* apply to the namespace as a whole, and therefore to
  every resource under it;
- *targeted actions* apply to one specific resource.

All mutation is a set union, so repeating a declaration is harmless and
the order in which declarations (or decoded resources) arrive never
changes the resulting content.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from signin_capabilities.errors import InvalidActionError, InvalidResourceError


def validate_actions(actions: Iterable[str]) -> set[str]:
    """Return *actions* as a set, rejecting empty or non-string tokens.

    A bare string is treated as a single action rather than an iterable
    of characters.

    Raises
    ------
    InvalidActionError
        If any action is not a non-empty string.
    """
    if isinstance(actions, str):
        actions = [actions]
    validated: set[str] = set()
    for action in actions:
        if not isinstance(action, str) or not action:
            raise InvalidActionError(action)
        validated.add(action)
    return validated


def validate_resource(resource: str) -> str:
    """Return *resource* unchanged if it is a non-empty string."""
    if not isinstance(resource, str) or not resource:
        raise InvalidResourceError(resource)
    return resource


@dataclass
class Capability:
    """The default and per-resource actions granted under one namespace.

    Parameters
    ----------
    default_actions:
        Actions granted namespace-wide.
    targeted_actions:
        Mapping of resource identifier to the actions granted on it,
        in first-declaration order.

    Examples
    --------
    >>> cap = Capability()
    >>> cap.add_default_actions(["present"])
    >>> cap.add_targeted_actions("type:type1", ["present", "present"])
    >>> cap.to_dict()
    {'default_actions': ['present'], 'targeted_actions': {'type:type1': ['present']}}
    """

    default_actions: set[str] = field(default_factory=set)
    targeted_actions: dict[str, set[str]] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_default_actions(self, actions: Iterable[str]) -> None:
        """Union *actions* into the namespace-wide action set."""
        self.default_actions |= validate_actions(actions)

    def add_targeted_actions(self, resource: str, actions: Iterable[str]) -> None:
        """Union *actions* into the action set for *resource*.

        A resource is only recorded once it holds at least one action.
        """
        validate_resource(resource)
        validated = validate_actions(actions)
        if not validated:
            return
        self.targeted_actions.setdefault(resource, set()).update(validated)

    def merge(self, other: "Capability") -> None:
        """Union every grant held by *other* into this capability.

        *other* is validated in full before anything is added, so a
        rejected merge leaves this capability unchanged.

        Raises
        ------
        InvalidActionError
            If *other* holds an empty or non-string action.
        InvalidResourceError
            If *other* holds an empty or non-string resource.
        """
        defaults = validate_actions(other.default_actions)
        targeted = {
            validate_resource(resource): validate_actions(actions)
            for resource, actions in other.targeted_actions.items()
        }
        self.default_actions |= defaults
        for resource, actions in targeted.items():
            if actions:
                self.targeted_actions.setdefault(resource, set()).update(actions)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        """Return True when no action is granted at all."""
        return not self.default_actions and not any(self.targeted_actions.values())

    def actions_for(self, resource: str) -> frozenset[str]:
        """Return the actions effective on *resource*.

        This is the resource's own actions plus the namespace defaults.
        """
        return frozenset(self.default_actions | self.targeted_actions.get(resource, set()))

    def copy(self) -> "Capability":
        """Return an independent copy of this capability."""
        return Capability(
            default_actions=set(self.default_actions),
            targeted_actions={
                resource: set(actions) for resource, actions in self.targeted_actions.items()
            },
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary with sorted action lists."""
        return {
            "default_actions": sorted(self.default_actions),
            "targeted_actions": {
                resource: sorted(self.targeted_actions[resource])
                for resource in sorted(self.targeted_actions)
            },
        }


__all__ = ["Capability", "validate_actions", "validate_resource"]
