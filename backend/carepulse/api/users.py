"""User identity endpoints: the first step of patient onboarding."""
from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas.patient import User, UserCreate
from ..services.patient_service import PatientService
from .deps import get_patient_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    service: PatientService = Depends(get_patient_service),
):
    """Create an identity. An already-registered email returns the existing user."""
    return await service.create_user(user_in)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    service: PatientService = Depends(get_patient_service),
):
    user = await service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
