from fastapi import APIRouter, Depends

from app.api.deps import get_request_context
from app.api.v1 import (
    audit_logs,
    auth,
    business_units,
    departments,
    employees,
    job_titles,
    onboarding,
    roles,
    tenants,
    users,
)

# Every tenant-scoped router requires a valid bearer token
protected_router = APIRouter(dependencies=[Depends(get_request_context)])
protected_router.include_router(business_units.router, prefix="/business-units", tags=["business-units"])
protected_router.include_router(departments.router, prefix="/departments", tags=["departments"])
protected_router.include_router(job_titles.router, prefix="/job-titles", tags=["job-titles"])
protected_router.include_router(employees.router, prefix="/employees", tags=["employees"])
protected_router.include_router(onboarding.router, prefix="/onboard", tags=["onboarding"])
protected_router.include_router(users.router, prefix="/users", tags=["users"])
protected_router.include_router(roles.router, prefix="/roles", tags=["roles"])
protected_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])

# Login and tenant provisioning happen before a tenant-scoped token exists
api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(protected_router)
