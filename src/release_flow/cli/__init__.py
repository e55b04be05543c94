"""Command line interface for release-flow."""
