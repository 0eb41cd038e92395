"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .folders import bp as folders_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .routines import bp as routines_bp  # noqa: E402
from .student import bp as student_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (routines_bp, "/routines"),
    (folders_bp, "/folders"),
    (student_bp, "/student"),
]
