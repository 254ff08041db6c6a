"""
Tenant isolation dependency.

Publishes the caller's company id on request.state.company_id. That value
is the only company scope handlers may use: every query against a
tenant-owned table must filter on it.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from core.exceptions import NoTenantContext
from core.middleware.authentication import Principal, authenticate

logger = logging.getLogger(__name__)


def tenant_scope_for(principal: Optional[Principal]) -> int:
    """
    Derive the company scope from an authenticated principal.

    Raises:
        NoTenantContext: If there is no principal or it carries no company
    """
    if principal is None or not principal.company_id:
        raise NoTenantContext()
    return principal.company_id


async def require_tenant(
    request: Request,
    _: Principal = Depends(authenticate),
) -> int:
    """FastAPI dependency returning the caller's company id."""
    company_id = tenant_scope_for(getattr(request.state, "principal", None))
    request.state.company_id = company_id
    return company_id
