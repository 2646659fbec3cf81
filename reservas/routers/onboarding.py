from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from reservas.database import get_db
from reservas.models.user import User
from reservas.schemas.onboarding import OnboardingRequest, OnboardingResponse
from reservas.services.auth import get_current_user
from reservas.services.onboarding import TenantSlugTakenError, onboard_tenant

router = APIRouter()


@router.post("", response_model=OnboardingResponse, status_code=201)
def complete_onboarding(
    request: OnboardingRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Crea la barbería del usuario autenticado junto con sus servicios
    iniciales y el barbero principal.
    """
    try:
        return onboard_tenant(db, current_user, request)
    except TenantSlugTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
