"""Opaque ID generation for domain objects."""

from __future__ import annotations

from uuid import uuid4


def new_id() -> str:
    """Generate a new random identifier (UUID v4, hex form) for workouts."""
    return uuid4().hex
