"""Shared utilities: datetime helpers."""

from taskboard.shared.utils.datetime import system_now, system_today, to_system_date

__all__ = [
    "system_now",
    "system_today",
    "to_system_date",
]
