from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from ..constants import DOCTORS, IDENTIFICATION_TYPES

router = APIRouter(tags=["catalogue"])


class DoctorResponse(BaseModel):
    name: str
    image: str


@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors():
    return DOCTORS


@router.get("/identification-types", response_model=List[str])
def list_identification_types():
    return IDENTIFICATION_TYPES
