"""
Tests for tenant isolation and role authorization.

Tests:
- Tenant scope derivation
- Role checks and the Forbidden payload
- RequireRoles dependency
"""

import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from core.exceptions import Forbidden, NoTenantContext, Unauthenticated
from core.middleware.authentication import Principal
from core.middleware.authorization import (
    ELEVATED_ROLES,
    RequireRoles,
    check_role,
    require_hr_or_admin,
)
from core.middleware.tenancy import require_tenant, tenant_scope_for


def make_principal(role="admin", company_id=1):
    user = SimpleNamespace(id=10, company_id=company_id, role=role)
    return Principal(user=user, company=SimpleNamespace(id=company_id))


def make_request(principal=None):
    request = Mock()
    request.state = SimpleNamespace()
    if principal is not None:
        request.state.principal = principal
    return request


class TestTenantScope:
    """Test company scope derivation."""

    def test_company_id_from_principal(self):
        assert tenant_scope_for(make_principal(company_id=5)) == 5

    def test_no_principal(self):
        with pytest.raises(NoTenantContext) as exc_info:
            tenant_scope_for(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Company context required"

    def test_principal_without_company(self):
        with pytest.raises(NoTenantContext):
            tenant_scope_for(make_principal(company_id=None))

    @pytest.mark.asyncio
    async def test_require_tenant_publishes_company_id(self):
        principal = make_principal(company_id=8)
        request = make_request(principal)

        company_id = await require_tenant(request, principal)

        assert company_id == 8
        assert request.state.company_id == 8


class TestCheckRole:
    """Test the role predicate."""

    def test_elevated_roles(self):
        assert ELEVATED_ROLES == ("admin", "hr")

    @pytest.mark.parametrize("role", ["admin", "hr"])
    def test_allowed(self, role):
        principal = make_principal(role=role)
        assert check_role(principal, ELEVATED_ROLES) is principal

    @pytest.mark.parametrize("role", ["manager", "employee", "contractor"])
    def test_denied_reports_required_and_current(self, role):
        with pytest.raises(Forbidden) as exc_info:
            check_role(make_principal(role=role), ELEVATED_ROLES)

        body = exc_info.value.to_dict()
        assert exc_info.value.status_code == 403
        assert body["error"] == "Insufficient permissions"
        assert body["required"] == ["admin", "hr"]
        assert body["current"] == role

    def test_no_principal(self):
        with pytest.raises(Unauthenticated):
            check_role(None, ELEVATED_ROLES)


class TestRequireRoles:
    """Test the role gate dependency."""

    @pytest.mark.asyncio
    async def test_passes_principal_through(self):
        principal = make_principal(role="hr")
        gate = RequireRoles("hr")
        assert await gate(make_request(principal), 1) is principal

    @pytest.mark.asyncio
    async def test_rejects_other_roles(self):
        with pytest.raises(Forbidden):
            await require_hr_or_admin(make_request(make_principal(role="employee")), 1)

    def test_repr_lists_roles(self):
        assert repr(RequireRoles("admin", "hr")) == "RequireRoles('admin', 'hr')"
