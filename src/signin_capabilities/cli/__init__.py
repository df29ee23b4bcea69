"""Command-line interface for signin-capabilities."""
