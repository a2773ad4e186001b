"""
Appointment workflow.
Maps an intent (create, schedule, cancel) to the resulting status, persists the
change in Appwrite and sends the matching SMS to the patient.
"""
import logging
from typing import Dict, Iterable, Optional, Union

import httpx

from ..core.config import settings
from ..core.exceptions import AppwriteError, PersistenceError, UnsupportedIntentError
from ..core.revalidation import ADMIN_VIEW_PATH, Revalidator
from ..core.time_utils import format_date_time
from ..schemas.appointment import (
    Appointment,
    AppointmentForm,
    AppointmentIntent,
    AppointmentList,
    AppointmentStatus,
    CancelAppointmentRequest,
    CreateAppointmentRequest,
    ScheduleAppointmentRequest,
    get_appointment_schema,
)
from .appwrite_client import UNIQUE_ID, AppwriteClient, Query
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

UpdateAction = Union[ScheduleAppointmentRequest, CancelAppointmentRequest]

_UPDATE_STATUS: Dict[AppointmentIntent, AppointmentStatus] = {
    AppointmentIntent.SCHEDULE: AppointmentStatus.SCHEDULED,
    AppointmentIntent.CANCEL: AppointmentStatus.CANCELLED,
}


def status_for_update(intent: str) -> AppointmentStatus:
    """Resulting status of an update intent. Raises UnsupportedIntentError for anything else."""
    try:
        return _UPDATE_STATUS[AppointmentIntent(intent)]
    except (KeyError, ValueError):
        raise UnsupportedIntentError(str(intent)) from None


def validate_form(intent: str, payload: AppointmentForm) -> AppointmentForm:
    """Check a payload against the form schema selected for its intent.

    Raises pydantic.ValidationError; nothing is written when it does.
    """
    schema = get_appointment_schema(intent)
    return schema.model_validate(payload.model_dump(by_alias=True, include=set(AppointmentForm.model_fields)))


def compose_sms_message(action: UpdateAction, product_name: str, tz_name: Optional[str] = None) -> str:
    when = format_date_time(action.schedule, tz_name)["date_time"]
    if status_for_update(action.type) == AppointmentStatus.SCHEDULED:
        body = f"Your appointment is confirmed for {when} with Dr. {action.primary_physician}"
    else:
        body = (
            f"We regret to inform that your appointment for {when} is cancelled. "
            f"Reason: {action.cancellation_reason}"
        )
    return f"Greetings from {product_name}. {body}."


def count_statuses(documents: Iterable[Dict]) -> Dict[str, int]:
    """Single pass over raw documents; unknown statuses are ignored."""
    counts = {"scheduled_count": 0, "pending_count": 0, "cancelled_count": 0}
    for doc in documents:
        status = doc.get("status")
        if status == AppointmentStatus.SCHEDULED.value:
            counts["scheduled_count"] += 1
        elif status == AppointmentStatus.PENDING.value:
            counts["pending_count"] += 1
        elif status == AppointmentStatus.CANCELLED.value:
            counts["cancelled_count"] += 1
    return counts


class AppointmentWorkflow:
    def __init__(
        self,
        client: AppwriteClient,
        notifications: NotificationService,
        revalidator: Revalidator,
        collection_id: Optional[str] = None,
        product_name: Optional[str] = None,
        list_limit: Optional[int] = None,
        tz_name: Optional[str] = None,
    ):
        self.client = client
        self.notifications = notifications
        self.revalidator = revalidator
        self.collection_id = collection_id or settings.APPOINTMENT_COLLECTION_ID
        self.product_name = product_name or settings.PRODUCT_NAME
        self.list_limit = list_limit or settings.APPOINTMENT_LIST_LIMIT
        self.tz_name = tz_name

    async def create(self, request: CreateAppointmentRequest) -> Appointment:
        """Persist a new appointment. Always ``pending``; no SMS is sent."""
        form = validate_form(AppointmentIntent.CREATE.value, request)
        data = {
            "userId": request.user_id,
            "patient": request.patient,
            "primaryPhysician": form.primary_physician,
            "schedule": form.schedule.isoformat(),
            "reason": form.reason,
            "note": form.note,
            "status": AppointmentStatus.PENDING.value,
        }
        try:
            document = await self.client.create_document(self.collection_id, UNIQUE_ID, data)
        except (AppwriteError, httpx.HTTPError) as exc:
            logger.error("Creating appointment for user %s failed: %s", request.user_id, exc)
            raise PersistenceError("Could not create appointment") from exc

        self.revalidator.revalidate_path(ADMIN_VIEW_PATH)
        logger.info("Appointment %s requested by user %s", document.get("$id"), request.user_id)
        return Appointment.model_validate(document)

    async def update(self, appointment_id: str, action: UpdateAction) -> Optional[Appointment]:
        """
        Schedule or cancel an appointment, then text the patient.
        Returns None when the appointment does not exist; no SMS is sent then.
        The SMS is best-effort: once the write succeeds the updated record is
        returned even if the message could not be delivered.
        """
        status = status_for_update(action.type)
        form = validate_form(action.type, action)
        data = {
            "primaryPhysician": form.primary_physician,
            "schedule": form.schedule.isoformat(),
            "status": status.value,
        }
        if status == AppointmentStatus.CANCELLED:
            data["cancellationReason"] = form.cancellation_reason

        try:
            document = await self.client.update_document(self.collection_id, appointment_id, data)
        except AppwriteError as exc:
            if exc.is_not_found:
                logger.info("Appointment %s not found, nothing to %s", appointment_id, action.type)
                return None
            logger.error("Updating appointment %s to %s failed: %s", appointment_id, status.value, exc)
            raise PersistenceError("Could not update appointment") from exc
        except httpx.HTTPError as exc:
            logger.error("Updating appointment %s to %s failed: %s", appointment_id, status.value, exc)
            raise PersistenceError("Could not update appointment") from exc
        logger.info("Appointment %s is now %s", appointment_id, status.value)

        message = compose_sms_message(action, self.product_name, self.tz_name)
        await self.notifications.send_sms(action.user_id, message)

        self.revalidator.revalidate_path(ADMIN_VIEW_PATH)
        return Appointment.model_validate(document)

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        try:
            document = await self.client.get_document(self.collection_id, appointment_id)
        except AppwriteError as exc:
            if exc.is_not_found:
                return None
            logger.error("Fetching appointment %s failed: %s", appointment_id, exc)
            raise PersistenceError("Could not fetch appointment") from exc
        except httpx.HTTPError as exc:
            logger.error("Fetching appointment %s failed: %s", appointment_id, exc)
            raise PersistenceError("Could not fetch appointment") from exc
        return Appointment.model_validate(document)

    async def list_recent(self) -> AppointmentList:
        """Newest-first appointments with per-status counts."""
        queries = [
            Query.order_desc("$createdAt"),
            Query.offset(0),
            Query.limit(self.list_limit),
        ]
        try:
            result = await self.client.list_documents(self.collection_id, queries)
        except (AppwriteError, httpx.HTTPError) as exc:
            logger.error("Listing recent appointments failed: %s", exc)
            raise PersistenceError("Could not list appointments") from exc

        documents = result.get("documents", [])
        return AppointmentList(
            total_count=result.get("total", len(documents)),
            documents=[Appointment.model_validate(doc) for doc in documents],
            **count_statuses(documents),
        )
