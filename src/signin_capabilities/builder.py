"""Builder — fluent accumulation of capabilities into a sign-in message.

Example
-------
::

    from signin_capabilities import Builder

    message = (
        Builder()
        .with_default_actions("credential", ["present"])
        .with_actions("kepler", "kepler:ens:example.eth://default/kv", ["get", "list"])
        .build(message)
    )
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from signin_capabilities.capability_set import CapabilitySet
from signin_capabilities.errors import BuilderConsumedError
from signin_capabilities.message import SignInMessage
from signin_capabilities.namespace import Namespace
from signin_capabilities.translation import (
    capabilities_to_resources,
    capabilities_to_statement,
    extract_capabilities,
)

logger = logging.getLogger(__name__)

_STATEMENT_SEPARATOR = " "


class Builder:
    """Accumulates capability declarations and writes them into a message.

    The builder owns its :class:`CapabilitySet` until :meth:`build` is
    called; building consumes the builder, and any later declaration or
    build raises :class:`BuilderConsumedError`.

    Instances are not thread-safe; use one builder per message.
    """

    def __init__(self) -> None:
        self._capabilities: CapabilitySet | None = CapabilitySet()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def with_default_actions(
        self,
        namespace: Namespace | str,
        actions: Iterable[str],
    ) -> "Builder":
        """Grant *actions* across the whole of *namespace*.

        Parameters
        ----------
        namespace:
            A :class:`Namespace` or namespace text (validated).
        actions:
            Action tokens to grant.

        Returns
        -------
        Builder
            This builder, for chaining.
        """
        self._owned().add_default_actions(namespace, actions)
        return self

    def with_actions(
        self,
        namespace: Namespace | str,
        resource: str,
        actions: Iterable[str],
    ) -> "Builder":
        """Grant *actions* on *resource* within *namespace*.

        Returns
        -------
        Builder
            This builder, for chaining.
        """
        self._owned().add_resource_actions(namespace, resource, actions)
        return self

    @property
    def capabilities(self) -> CapabilitySet:
        """A copy of the capabilities declared so far."""
        return self._owned().copy()

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------

    def build(self, message: SignInMessage) -> SignInMessage:
        """Return a copy of *message* carrying the declared capabilities.

        The generated statement is appended to the existing statement
        (separated by a single space) or becomes the statement when there
        was none. It describes the union of the declared capabilities and
        any already encoded in *message*, so delegating again from a built
        message still verifies. One resource URI per declared namespace is
        appended after the existing resources. With no declarations the
        message is returned unchanged.

        Parameters
        ----------
        message:
            The message to delegate from; it is not modified.

        Returns
        -------
        SignInMessage

        Raises
        ------
        EncodingError
            If a capability payload cannot be serialized.
        DecodingError
            If a capability resource already in *message* is malformed.
        BuilderConsumedError
            If this builder has already been built.
        """
        capabilities = self._owned()
        self._capabilities = None

        if capabilities.is_empty():
            return message.model_copy(deep=True)

        delegated = extract_capabilities(message)
        delegated.merge(capabilities)
        generated = capabilities_to_statement(delegated, message.uri)

        if message.statement:
            statement = f"{message.statement}{_STATEMENT_SEPARATOR}{generated}"
        else:
            statement = generated
        resources = list(message.resources) + capabilities_to_resources(capabilities)

        logger.info(
            "Delegated %d namespace(s) to %s",
            len(capabilities),
            message.uri,
        )
        return message.model_copy(
            update={"statement": statement, "resources": resources},
            deep=True,
        )

    def _owned(self) -> CapabilitySet:
        if self._capabilities is None:
            raise BuilderConsumedError()
        return self._capabilities


__all__ = ["Builder"]
