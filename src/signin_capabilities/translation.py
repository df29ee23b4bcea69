"""Translation between a CapabilitySet and its two message representations.

A set is written into a sign-in message twice:

1. as one resource URI per namespace, machine readable::

       urn:capability:<namespace>:<base64url(json payload), unpadded>

   where the JSON payload is ``{"def": [...], "tar": {resource: [...]}}``
   with empty members omitted;

2. as a human-readable statement naming the delegate URI and listing
   every granted action as a numbered clause.

Both are derived from the same set, and decoding the URIs back yields a
set that regenerates the identical statement. Statement clauses follow a
fixed canonical order (namespaces, resources and actions each sorted by
raw text, default actions before targeted ones) so the text never
depends on declaration order or on where entries sit in the resource
list.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from signin_capabilities.capability import Capability, validate_actions, validate_resource
from signin_capabilities.capability_set import CapabilitySet
from signin_capabilities.errors import (
    DecodingError,
    EncodingError,
    InvalidActionError,
    InvalidResourceError,
)
from signin_capabilities.message import MessageLike
from signin_capabilities.namespace import Namespace

logger = logging.getLogger(__name__)

RESOURCE_PREFIX: str = "urn:capability:"
NAMESPACE_DELIMITER: str = ":"
STATEMENT_PREAMBLE: str = (
    "I further authorize {uri} to perform the following actions on my behalf:"
)

_B64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


# ---------------------------------------------------------------------------
# Wire payload
# ---------------------------------------------------------------------------


class CapabilityPayload(BaseModel):
    """JSON shape of one namespace's grants inside a resource URI."""

    model_config = ConfigDict(extra="forbid", strict=True)

    default_actions: Optional[list[str]] = Field(default=None, alias="def")
    targeted_actions: Optional[dict[str, list[str]]] = Field(default=None, alias="tar")

    @classmethod
    def from_capability(cls, capability: Capability) -> "CapabilityPayload":
        """Build the canonical payload: sorted lists, empty parts omitted.

        Raises
        ------
        InvalidActionError
            If *capability* holds an empty or non-string action.
        InvalidResourceError
            If *capability* holds an empty or non-string resource.
        """
        targeted = {
            validate_resource(resource): sorted(validate_actions(actions))
            for resource, actions in capability.targeted_actions.items()
            if actions
        }
        return cls.model_validate(
            {
                "def": sorted(validate_actions(capability.default_actions)) or None,
                "tar": targeted or None,
            }
        )

    def to_capability(self) -> Capability:
        """Convert to a :class:`Capability`, validating every token."""
        capability = Capability()
        capability.add_default_actions(self.default_actions or [])
        for resource, actions in (self.targeted_actions or {}).items():
            capability.add_targeted_actions(resource, actions)
        return capability


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def encode_namespace(namespace: Namespace, capability: Capability) -> str:
    """Encode one namespace's grants as a capability resource URI.

    Parameters
    ----------
    namespace:
        The namespace the grants belong to.
    capability:
        The grants to encode.

    Returns
    -------
    str
        ``urn:capability:<namespace>:<payload>``.

    Raises
    ------
    EncodingError
        If the payload cannot be serialized.
    """
    try:
        payload = CapabilityPayload.from_capability(capability)
        payload_bytes = json.dumps(
            payload.model_dump(by_alias=True, exclude_none=True),
            sort_keys=True,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError(str(namespace), str(exc)) from exc

    encoded = _b64url_encode(payload_bytes)
    resource = f"{RESOURCE_PREFIX}{namespace}{NAMESPACE_DELIMITER}{encoded}"
    logger.debug("Encoded capabilities for namespace %s (%d bytes)", namespace, len(payload_bytes))
    return resource


def capabilities_to_resources(capabilities: CapabilitySet) -> list[str]:
    """Encode every namespace of *capabilities*, in first-declaration order."""
    return [
        encode_namespace(namespace, capability)
        for namespace, capability in capabilities.items()
    ]


def capabilities_to_statement(capabilities: CapabilitySet, uri: str) -> Optional[str]:
    """Generate the human-readable description of *capabilities*.

    Parameters
    ----------
    capabilities:
        The grants to describe.
    uri:
        The delegate URI (the message's ``uri`` field).

    Returns
    -------
    str or None
        None when the set is empty, otherwise the preamble followed by one
        numbered clause per granted action, e.g.::

            I further authorize did:key:example to perform the following
            actions on my behalf: (1) credential: present for any.
            (2) credential: present for type:type1.

        (shown wrapped; the real text is a single line).
    """
    if capabilities.is_empty():
        return None

    parts = [STATEMENT_PREAMBLE.format(uri=uri)]
    clause_number = 0
    for namespace, capability in capabilities.sorted_items():
        for action in sorted(capability.default_actions):
            clause_number += 1
            parts.append(f"({clause_number}) {namespace}: {action} for any.")
        for resource in sorted(capability.targeted_actions):
            for action in sorted(capability.targeted_actions[resource]):
                clause_number += 1
                parts.append(f"({clause_number}) {namespace}: {action} for {resource}.")
    return " ".join(parts)


generate_statement = capabilities_to_statement


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def _reject_duplicate_keys(pairs: list[tuple[str, object]]) -> dict[str, object]:
    """``object_pairs_hook`` refusing JSON objects that repeat a key."""
    result: dict[str, object] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key {key!r}")
        result[key] = value
    return result


def is_capability_resource(resource: str) -> bool:
    """Return True when *resource* carries the capability prefix."""
    return resource.startswith(RESOURCE_PREFIX)


def decode_resource(resource: str) -> tuple[Namespace, Capability]:
    """Decode a single capability resource URI.

    Raises
    ------
    DecodingError
        If the prefix or delimiter is missing, the payload is not
        canonical unpadded base64url, the JSON repeats a key, or the
        payload has the wrong shape.
    InvalidNamespaceError
        If the namespace segment fails validation.
    """
    if not is_capability_resource(resource):
        raise DecodingError(resource, f"missing {RESOURCE_PREFIX!r} prefix")

    remainder = resource[len(RESOURCE_PREFIX):]
    namespace_text, delimiter, encoded = remainder.partition(NAMESPACE_DELIMITER)
    if not delimiter:
        raise DecodingError(resource, "missing namespace delimiter")

    namespace = Namespace.parse(namespace_text)

    if not _B64URL_PATTERN.fullmatch(encoded):
        raise DecodingError(resource, "payload is not unpadded base64url")
    try:
        payload_bytes = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    except (binascii.Error, ValueError) as exc:
        raise DecodingError(resource, f"invalid base64url payload: {exc}") from exc
    if _b64url_encode(payload_bytes) != encoded:
        raise DecodingError(resource, "payload is not canonical base64url")

    try:
        data = json.loads(payload_bytes, object_pairs_hook=_reject_duplicate_keys)
    except ValueError as exc:
        raise DecodingError(resource, f"invalid payload JSON: {exc}") from exc

    try:
        payload = CapabilityPayload.model_validate(data)
        capability = payload.to_capability()
    except ValidationError as exc:
        raise DecodingError(
            resource, f"invalid payload: {exc.error_count()} validation error(s)"
        ) from exc
    except (InvalidActionError, InvalidResourceError) as exc:
        raise DecodingError(resource, f"invalid payload: {exc}") from exc

    logger.debug("Decoded capabilities for namespace %s", namespace)
    return namespace, capability


def extract_capabilities(message: MessageLike) -> CapabilitySet:
    """Decode every capability resource of *message* into one set.

    Non-capability resources are ignored. Entries for the same namespace
    are merged wherever they appear in the list.

    Raises
    ------
    DecodingError
        If any prefixed resource is malformed.
    InvalidNamespaceError
        If any prefixed resource names an invalid namespace.
    """
    capabilities = CapabilitySet()
    for resource in message.resources:
        if not is_capability_resource(resource):
            continue
        namespace, capability = decode_resource(resource)
        capabilities.add_capability(namespace, capability)
    return capabilities


__all__ = [
    "CapabilityPayload",
    "NAMESPACE_DELIMITER",
    "RESOURCE_PREFIX",
    "STATEMENT_PREAMBLE",
    "capabilities_to_resources",
    "capabilities_to_statement",
    "decode_resource",
    "encode_namespace",
    "extract_capabilities",
    "generate_statement",
    "is_capability_resource",
]
