"""Cascade guard settings for clone runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_positive_int


@dataclass(frozen=True, slots=True)
class CloneSettings:
    cycle_guard: bool = True
    max_depth: int | None = None


def get_clone_settings() -> CloneSettings:
    return CloneSettings(
        cycle_guard=env_flag("ARCHIVIST_CYCLE_GUARD", default=True),
        max_depth=env_positive_int("ARCHIVIST_MAX_DEPTH"),
    )
