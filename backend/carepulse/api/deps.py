"""Request-scoped dependencies wiring services to the app-wide Appwrite client."""
from fastapi import Depends, Request

from ..core.revalidation import Revalidator
from ..services.appointment_service import AppointmentWorkflow
from ..services.appwrite_client import AppwriteClient
from ..services.notification_service import NotificationService
from ..services.patient_service import PatientService


def get_appwrite_client(request: Request) -> AppwriteClient:
    return request.app.state.appwrite


def get_revalidator(request: Request) -> Revalidator:
    return request.app.state.revalidator


def get_appointment_workflow(
    client: AppwriteClient = Depends(get_appwrite_client),
    revalidator: Revalidator = Depends(get_revalidator),
) -> AppointmentWorkflow:
    return AppointmentWorkflow(client, NotificationService(client), revalidator)


def get_patient_service(client: AppwriteClient = Depends(get_appwrite_client)) -> PatientService:
    return PatientService(client)
