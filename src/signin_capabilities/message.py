"""Sign-in message record consumed and produced by this library.

The host application owns the sign-in message: its text grammar, field
validation and signing all happen elsewhere. This module only models the
fields so messages can be passed around and stored as JSON. Capability
handling reads and writes exactly three of them:

- ``statement`` — read, and overwritten by :class:`~signin_capabilities.builder.Builder`
- ``uri`` — read only; named as the delegate in the generated statement
- ``resources`` — read, and appended to by the builder

Every other field is carried through untouched.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from pydantic import BaseModel, Field


class MessageLike(Protocol):
    """Any object exposing the three fields capability verification reads."""

    statement: Optional[str]
    uri: str
    resources: Sequence[str]


class SignInMessage(BaseModel):
    """A sign-in message in the shape of EIP-4361 (Sign-In with Ethereum)."""

    domain: str
    address: str
    statement: Optional[str] = None
    uri: str
    version: str = "1"
    chain_id: int = 1
    nonce: str
    issued_at: str
    expiration_time: Optional[str] = None
    not_before: Optional[str] = None
    request_id: Optional[str] = None
    resources: list[str] = Field(default_factory=list)


__all__ = ["MessageLike", "SignInMessage"]
