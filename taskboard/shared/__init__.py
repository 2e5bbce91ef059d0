"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from taskboard.shared.utils import system_now, system_today, to_system_date

__all__ = [
    "system_now",
    "system_today",
    "to_system_date",
]
