"""signin-capabilities — delegated capabilities for sign-in messages.

Attaches a machine-verifiable set of capability grants to a sign-in
message as resource URIs, and appends a deterministic human-readable
description of the same grants to the message statement. Verifiers
regenerate the description from the resources and the message URI and
confirm the signer saw exactly what was delegated.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick start
-----------
::

    from signin_capabilities import Builder, SignInMessage, verify_statement

    message = SignInMessage(
        domain="example.com",
        address="0x0000000000000000000000000000000000000000",
        uri="did:key:example",
        nonce="mynonce1",
        issued_at="2022-06-21T12:00:00.000Z",
    )
    delegated = (
        Builder()
        .with_default_actions("credential", ["present"])
        .build(message)
    )
    assert verify_statement(delegated)
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Model
# ------------------------------------------------------------------
from signin_capabilities.capability import Capability
from signin_capabilities.capability_set import CapabilitySet
from signin_capabilities.message import MessageLike, SignInMessage
from signin_capabilities.namespace import Namespace

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from signin_capabilities.errors import (
    BuilderConsumedError,
    CapabilityError,
    DecodingError,
    EncodingError,
    InvalidActionError,
    InvalidNamespaceError,
    InvalidResourceError,
)

# ------------------------------------------------------------------
# Translation, building and verification
# ------------------------------------------------------------------
from signin_capabilities.builder import Builder
from signin_capabilities.translation import (
    RESOURCE_PREFIX,
    capabilities_to_resources,
    capabilities_to_statement,
    decode_resource,
    encode_namespace,
    extract_capabilities,
    generate_statement,
)
from signin_capabilities.verification import verify_statement

__all__ = [
    # version
    "__version__",
    # model
    "Capability",
    "CapabilitySet",
    "MessageLike",
    "Namespace",
    "SignInMessage",
    # errors
    "BuilderConsumedError",
    "CapabilityError",
    "DecodingError",
    "EncodingError",
    "InvalidActionError",
    "InvalidNamespaceError",
    "InvalidResourceError",
    # translation
    "RESOURCE_PREFIX",
    "Builder",
    "capabilities_to_resources",
    "capabilities_to_statement",
    "decode_resource",
    "encode_namespace",
    "extract_capabilities",
    "generate_statement",
    "verify_statement",
]
