"""
Role authorization.

Role gates are data: each route declares the set of role names it admits
through `RequireRoles`, and `check_role` is the one predicate that
evaluates every gate. Neither touches storage.
"""

import logging
from typing import Iterable, Optional

from fastapi import Depends, Request

from core.exceptions import Forbidden, Unauthenticated
from core.middleware.authentication import Principal
from core.middleware.tenancy import require_tenant
from database.models.users import UserRole

logger = logging.getLogger(__name__)

# Roles allowed to manage jobs and applications
ELEVATED_ROLES: tuple[str, ...] = (UserRole.ADMIN.value, UserRole.HR.value)


def check_role(principal: Optional[Principal], allowed_roles: Iterable[str]) -> Principal:
    """
    Check that the principal holds one of the allowed roles.

    Args:
        principal: Authenticated principal, or None
        allowed_roles: Permitted role names

    Returns:
        The principal, unchanged

    Raises:
        Unauthenticated: If there is no principal
        Forbidden: If the principal's role is not permitted
    """
    if principal is None:
        raise Unauthenticated()

    required = list(allowed_roles)
    if principal.role not in required:
        logger.warning(
            f"User {principal.user_id} with role {principal.role} attempted action "
            f"requiring roles: {required}"
        )
        raise Forbidden(required=required, current=principal.role)

    return principal


class RequireRoles:
    """
    FastAPI dependency gating a route to a fixed set of roles.

    Usage:
        @router.post("", dependencies=[Depends(RequireRoles(*ELEVATED_ROLES))])
    """

    def __init__(self, *allowed_roles: str):
        self.allowed_roles = tuple(allowed_roles)

    async def __call__(
        self,
        request: Request,
        _: int = Depends(require_tenant),
    ) -> Principal:
        return check_role(getattr(request.state, "principal", None), self.allowed_roles)

    def __repr__(self) -> str:
        return f"RequireRoles{self.allowed_roles}"


require_hr_or_admin = RequireRoles(*ELEVATED_ROLES)
