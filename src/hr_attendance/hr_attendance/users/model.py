from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Authenticated user as supplied by the external auth/session layer.

    Note: The attendance core trusts this identity unconditionally.
    """

    user_id: int
    full_name: str
    username: str
    role: Role = Role.EMPLOYEE
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
