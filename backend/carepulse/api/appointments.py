"""Appointments API: request, fetch, schedule and cancel."""
from fastapi import APIRouter, Depends, HTTPException, status

from ..core.security import require_admin
from ..schemas.appointment import Appointment, AppointmentUpdate, CreateAppointmentRequest
from ..services.appointment_service import AppointmentWorkflow
from .deps import get_appointment_workflow

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_in: CreateAppointmentRequest,
    workflow: AppointmentWorkflow = Depends(get_appointment_workflow),
):
    """Request a new appointment. It starts out pending."""
    return await workflow.create(appointment_in)


@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str,
    workflow: AppointmentWorkflow = Depends(get_appointment_workflow),
):
    appointment = await workflow.get(appointment_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.patch("/{appointment_id}", response_model=Appointment)
async def update_appointment(
    appointment_id: str,
    body: AppointmentUpdate,
    workflow: AppointmentWorkflow = Depends(get_appointment_workflow),
    _admin=Depends(require_admin),
):
    """Admin-only: schedule or cancel, notifying the patient by SMS."""
    appointment = await workflow.update(appointment_id, body.root)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment
