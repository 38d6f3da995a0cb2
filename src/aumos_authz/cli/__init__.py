"""Command-line interface for aumos-authz."""
