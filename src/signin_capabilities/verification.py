"""verify_statement — check a statement against the encoded capabilities.

The capabilities encoded in a message's resources are decoded, the
statement describing them is regenerated for the message's ``uri``, and
the result is compared with the statement the signer actually saw.
"""
from __future__ import annotations

import logging

from signin_capabilities.message import MessageLike
from signin_capabilities.translation import capabilities_to_statement, extract_capabilities

logger = logging.getLogger(__name__)


def verify_statement(message: MessageLike) -> bool:
    """Return True when *message*'s statement matches its capabilities.

    Comparison of ``(message.statement, generated)``:

    - both absent: match;
    - both present: match when the statement ends with the generated
      text exactly, so any caller-chosen prefix is allowed;
    - only one present: no match.

    Parameters
    ----------
    message:
        Any object exposing ``statement``, ``uri`` and ``resources``.

    Returns
    -------
    bool
        False means the capabilities are well formed but do not match
        the statement.

    Raises
    ------
    DecodingError
        If a capability resource cannot be decoded. The message cannot
        be authenticated and must be rejected.
    InvalidNamespaceError
        If a capability resource names an invalid namespace.
    """
    capabilities = extract_capabilities(message)
    generated = capabilities_to_statement(capabilities, message.uri)
    statement = message.statement

    if statement is None and generated is None:
        return True
    if statement is not None and generated is not None:
        verified = statement.endswith(generated)
    else:
        verified = False

    if not verified:
        logger.warning(
            "Statement does not match the %d delegated namespace(s) for %s",
            len(capabilities),
            message.uri,
        )
    return verified


__all__ = ["verify_statement"]
