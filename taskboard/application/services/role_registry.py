"""Role registry: capability lookup for free-form role strings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from taskboard.domain.value_objects.core import Role

if TYPE_CHECKING:
    from taskboard.core.config import Settings


class RoleRegistry:
    """Answer capability questions about roles without enumerating them.

    Roles not present in the configured maps are valid; they simply have no
    admin capability and use the fallback task code prefix.
    """

    def __init__(
        self,
        admin_roles: Iterable[str],
        role_prefixes: Mapping[str, str],
        unknown_prefix: str = "XX",
    ) -> None:
        self._admin_roles = frozenset(Role(r).value for r in admin_roles)
        self._prefixes = {Role(r).value: p for r, p in role_prefixes.items()}
        self._unknown_prefix = unknown_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> RoleRegistry:
        return cls(
            admin_roles=settings.admin_role_set,
            role_prefixes=settings.role_prefixes,
            unknown_prefix=settings.unknown_role_prefix,
        )

    def is_admin(self, role: str) -> bool:
        try:
            return Role(role).value in self._admin_roles
        except ValueError:
            return False

    def prefix_for(self, role: str) -> str:
        try:
            normalized = Role(role).value
        except ValueError:
            return self._unknown_prefix
        return self._prefixes.get(normalized, self._unknown_prefix)
