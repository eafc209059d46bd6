"""Caller identity passed explicitly into every core operation."""

from __future__ import annotations

from dataclasses import dataclass

from rjilat.core.errors import ForbiddenError
from rjilat.models.status import UserRole


@dataclass(frozen=True)
class Caller:
    """Authenticated principal making a request."""

    id: int
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class RequestMeta:
    """Requester metadata recorded alongside admin actions."""

    ip_address: str | None = None
    user_agent: str | None = None


def require_admin(caller: Caller | None) -> Caller:
    """Return the caller if it is an administrator, else raise ``ForbiddenError``."""
    if caller is None or not caller.is_admin:
        raise ForbiddenError("Administrator privileges required", code="admin_required")
    return caller
