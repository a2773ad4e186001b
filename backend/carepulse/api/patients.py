from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..schemas.patient import Patient, PatientRegistration
from ..services.patient_service import IdentificationDocument, PatientService
from .deps import get_patient_service

router = APIRouter(prefix="/patients", tags=["patients"])


@router.post("/register", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient: str = Form(..., description="Patient registration form as JSON"),
    identificationDocument: Optional[UploadFile] = File(None),
    service: PatientService = Depends(get_patient_service),
):
    """Register a patient profile, optionally with an identification scan."""
    try:
        registration = PatientRegistration.model_validate_json(patient)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        raise RequestValidationError(
            [{**err, "loc": ("body", "patient", *err["loc"])} for err in errors]
        )

    document = None
    if identificationDocument is not None and identificationDocument.filename:
        content = await identificationDocument.read()
        document = IdentificationDocument(filename=identificationDocument.filename, content=content)

    return await service.register_patient(registration, document)


@router.get("/{user_id}", response_model=Patient)
async def get_patient(
    user_id: str,
    service: PatientService = Depends(get_patient_service),
):
    """Look up the patient profile belonging to a user."""
    patient = await service.get_patient(user_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient
