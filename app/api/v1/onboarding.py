from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, require_admin
from app.schemas.common import ErrorMessage
from app.schemas.onboarding import OnboardingResult, OnboardRequest
from app.services.onboarding_service import OnboardingService, get_onboarding_service

router = APIRouter()


@router.post(
    "",
    response_model=OnboardingResult,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorMessage}, 409: {"model": ErrorMessage}},
)
async def onboard_employee(
    request_in: OnboardRequest,
    ctx: RequestContext = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    service: OnboardingService = Depends(get_onboarding_service),
) -> Any:
    """
    Create an employee, their login and initial role grant in one transaction.

    Nothing is persisted when any step fails.
    """
    return await service.execute_onboarding(db, ctx.tenant_id, ctx.user_id, request_in)
