"""Paginated, turn-aligned feed over AI assistant session logs."""
