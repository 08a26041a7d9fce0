"""Command-line interface for token-auth-session."""
