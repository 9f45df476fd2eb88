"""Command line interface for depview."""
