"""Command-line interface for ygosearch."""
