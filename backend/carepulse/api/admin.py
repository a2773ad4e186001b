"""Admin endpoints: session login and the appointment dashboard."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from ..core.revalidation import ADMIN_VIEW_PATH, Revalidator
from ..core.security import ADMIN_ROLE, create_access_token, require_admin, verify_passkey
from ..schemas.appointment import AppointmentList
from ..services.appointment_service import AppointmentWorkflow
from .deps import get_appointment_workflow, get_revalidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class SessionRequest(BaseModel):
    passkey: str


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/session", response_model=SessionResponse)
def create_session(req: SessionRequest):
    """Exchange the admin passkey for a short-lived bearer token."""
    if not verify_passkey(req.passkey):
        logger.warning("Rejected admin passkey attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid passkey. Please try again.",
        )
    return SessionResponse(access_token=create_access_token({"sub": "admin", "role": ADMIN_ROLE}))


@router.get("/appointments", response_model=AppointmentList)
async def recent_appointments(
    response: Response,
    workflow: AppointmentWorkflow = Depends(get_appointment_workflow),
    revalidator: Revalidator = Depends(get_revalidator),
    _admin=Depends(require_admin),
):
    """Newest appointments with scheduled/pending/cancelled counts."""
    response.headers["Cache-Control"] = "no-store"
    response.headers["X-View-Revision"] = str(revalidator.revision(ADMIN_VIEW_PATH))
    return await workflow.list_recent()

