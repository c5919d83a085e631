"""Errors raised while reading input documents."""

from __future__ import annotations


class DocumentError(ValueError):
    """An input document is unreadable or does not match its schema."""
