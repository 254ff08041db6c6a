"""
Endpoints reserved for upcoming modules.

Each router is authenticated and company-scoped already, so the access
rules are in place when the real handlers land.
"""

from fastapi import APIRouter, Depends

from core.middleware.authorization import require_hr_or_admin
from core.middleware.tenancy import require_tenant

tenant_scoped = [Depends(require_tenant)]
elevated = [Depends(require_hr_or_admin)]


def coming_soon(feature: str) -> dict:
    return {"message": f"{feature} endpoint - coming soon!"}


# ==================== Onboarding ==================== #

onboarding_router = APIRouter(tags=["onboarding"], dependencies=tenant_scoped)


@onboarding_router.get("/tasks")
async def list_onboarding_tasks():
    return coming_soon("Onboarding tasks")


@onboarding_router.post("/tasks", dependencies=elevated)
async def create_onboarding_task():
    return coming_soon("Create onboarding task")


# ==================== Time tracking ==================== #

time_router = APIRouter(tags=["time"], dependencies=tenant_scoped)


@time_router.get("/entries")
async def list_time_entries():
    return coming_soon("Time entries")


@time_router.post("/entries")
async def create_time_entry():
    return coming_soon("Create time entry")


@time_router.get("/reports", dependencies=elevated)
async def time_reports():
    return coming_soon("Time reports")


# ==================== Tickets ==================== #

tickets_router = APIRouter(tags=["tickets"], dependencies=tenant_scoped)


@tickets_router.get("")
async def list_tickets():
    return coming_soon("List tickets")


@tickets_router.post("")
async def create_ticket():
    return coming_soon("Create ticket")


@tickets_router.put("/{ticket_id}/status", dependencies=elevated)
async def update_ticket_status(ticket_id: int):
    return coming_soon("Update ticket status")


# ==================== Analytics ==================== #

analytics_router = APIRouter(tags=["analytics"], dependencies=tenant_scoped + elevated)


@analytics_router.get("/dashboard")
async def analytics_dashboard():
    return coming_soon("Analytics dashboard")


@analytics_router.get("/hiring-funnel")
async def hiring_funnel():
    return coming_soon("Hiring funnel analytics")


@analytics_router.get("/turnover")
async def turnover():
    return coming_soon("Turnover analytics")
