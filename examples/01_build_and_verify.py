#!/usr/bin/env python3
"""Example: Build and verify a delegation

Delegates capabilities into a sign-in message, prints the resulting
statement and resources, then verifies the statement and shows that
tampering is detected.

Usage:
    python examples/01_build_and_verify.py

Requirements:
    pip install signin-capabilities
"""
from __future__ import annotations

import signin_capabilities
from signin_capabilities import Builder, SignInMessage, extract_capabilities, verify_statement


def main() -> None:
    print(f"signin-capabilities version: {signin_capabilities.__version__}")

    # Step 1: The host application prepares a sign-in message
    message = SignInMessage(
        domain="example.com",
        address="0x0000000000000000000000000000000000000000",
        statement="Sign in to Example.",
        uri="did:key:example",
        nonce="mynonce1",
        issued_at="2022-06-21T12:00:00.000Z",
        resources=["https://example.com/terms"],
    )

    # Step 2: Delegate capabilities to the session key named by `uri`
    delegated = (
        Builder()
        .with_default_actions("credential", ["present"])
        .with_actions("kepler", "kepler:ens:example.eth://default/kv", ["list", "get"])
        .build(message)
    )
    print(f"\nStatement:\n  {delegated.statement}")
    print("\nResources:")
    for resource in delegated.resources:
        print(f"  - {resource}")

    # Step 3: A verifier decodes the grants and checks the statement
    print(f"\nDecoded: {extract_capabilities(delegated).to_dict()}")
    print(f"Verified: {verify_statement(delegated)}")

    # Step 4: Changing the delegate URI breaks verification
    tampered = delegated.model_copy(update={"uri": "did:key:attacker"})
    print(f"Verified after tampering: {verify_statement(tampered)}")


if __name__ == "__main__":
    main()
