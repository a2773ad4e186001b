"""Tests for the appointment workflow against the in-memory Appwrite double."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from carepulse.core.exceptions import PersistenceError, UnsupportedIntentError
from carepulse.core.revalidation import ADMIN_VIEW_PATH
from carepulse.schemas.appointment import (
    AppointmentStatus,
    CancelAppointmentRequest,
    CreateAppointmentRequest,
    ScheduleAppointmentRequest,
)
from carepulse.services.appointment_service import (
    AppointmentWorkflow,
    compose_sms_message,
    count_statuses,
    status_for_update,
)
from carepulse.services.notification_service import NotificationService

SCHEDULE = datetime(2024, 6, 1, 10, 0)


@pytest.fixture
def workflow(appwrite, revalidator):
    return AppointmentWorkflow(
        appwrite,
        NotificationService(appwrite),
        revalidator,
        collection_id="appointments",
        product_name="CarePulse",
        tz_name="UTC",
    )


def _create_request(**overrides):
    data = {
        "userId": "user1",
        "patient": "patient1",
        "primaryPhysician": "John Green",
        "schedule": SCHEDULE,
        "reason": "Annual check-up",
        "note": "Prefer afternoons",
    }
    data.update(overrides)
    return CreateAppointmentRequest.model_validate(data)


def _schedule_action(**overrides):
    data = {"type": "schedule", "userId": "user1", "primaryPhysician": "John Green", "schedule": SCHEDULE}
    data.update(overrides)
    return ScheduleAppointmentRequest.model_validate(data)


def _cancel_action(**overrides):
    data = {
        "type": "cancel",
        "userId": "user1",
        "primaryPhysician": "John Green",
        "schedule": SCHEDULE,
        "cancellationReason": "Doctor unavailable",
    }
    data.update(overrides)
    return CancelAppointmentRequest.model_validate(data)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

class TestStatusForUpdate:
    def test_schedule_maps_to_scheduled(self):
        assert status_for_update("schedule") == AppointmentStatus.SCHEDULED

    def test_cancel_maps_to_cancelled(self):
        assert status_for_update("cancel") == AppointmentStatus.CANCELLED

    @pytest.mark.parametrize("intent", ["create", "pending", "", "Schedule"])
    def test_other_intents_rejected(self, intent):
        with pytest.raises(UnsupportedIntentError):
            status_for_update(intent)


def test_schedule_message():
    message = compose_sms_message(_schedule_action(), "CarePulse", "UTC")
    assert message == (
        "Greetings from CarePulse. Your appointment is confirmed for "
        "Jun 1, 2024, 10:00 AM with Dr. John Green."
    )


def test_cancel_message():
    message = compose_sms_message(_cancel_action(), "CarePulse", "UTC")
    assert message == (
        "Greetings from CarePulse. We regret to inform that your appointment for "
        "Jun 1, 2024, 10:00 AM is cancelled. Reason: Doctor unavailable."
    )


def test_count_statuses():
    docs = (
        [{"status": "pending"}] * 2
        + [{"status": "scheduled"}] * 3
        + [{"status": "cancelled"}]
        + [{"status": "archived"}, {}]
    )
    assert count_statuses(docs) == {"scheduled_count": 3, "pending_count": 2, "cancelled_count": 1}


# ---------------------------------------------------------------------------
# Workflow operations
# ---------------------------------------------------------------------------

class TestCreate:
    @pytest.mark.asyncio
    async def test_created_as_pending(self, workflow, appwrite):
        appointment = await workflow.create(_create_request())
        assert appointment.status == AppointmentStatus.PENDING
        assert appointment.id
        assert appointment.created_at is not None
        assert appwrite.collections["appointments"][appointment.id]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_caller_status_ignored(self, workflow, appwrite):
        appointment = await workflow.create(_create_request(status="scheduled"))
        assert appointment.status == AppointmentStatus.PENDING

    @pytest.mark.asyncio
    async def test_no_sms_on_create(self, workflow, appwrite):
        await workflow.create(_create_request())
        assert appwrite.sms == []

    @pytest.mark.asyncio
    async def test_signals_admin_revalidation(self, workflow, revalidator):
        await workflow.create(_create_request())
        assert revalidator.revision(ADMIN_VIEW_PATH) == 1

    @pytest.mark.asyncio
    async def test_create_form_checked_before_write(self, workflow, appwrite):
        request = CreateAppointmentRequest.model_construct(
            user_id="user1", patient="patient1", primary_physician="John Green",
            schedule=SCHEDULE, reason="x",
        )
        with pytest.raises(ValidationError):
            await workflow.create(request)
        assert appwrite.collections["appointments"] == {}

    @pytest.mark.asyncio
    async def test_remote_failure(self, workflow, appwrite, revalidator):
        appwrite.failing.add("create_document")
        with pytest.raises(PersistenceError):
            await workflow.create(_create_request())
        assert appwrite.collections["appointments"] == {}
        assert revalidator.revision(ADMIN_VIEW_PATH) == 0


class TestUpdate:
    @pytest.mark.asyncio
    async def test_schedule(self, workflow, appwrite, revalidator):
        created = await workflow.create(_create_request())
        updated = await workflow.update(created.id, _schedule_action(primaryPhysician="Leila Cameron"))

        assert updated.id == created.id
        assert updated.status == AppointmentStatus.SCHEDULED
        assert updated.primary_physician == "Leila Cameron"
        assert updated.reason == "Annual check-up"
        assert len(appwrite.sms) == 1
        assert appwrite.sms[0]["users"] == ["user1"]
        assert "with Dr. Leila Cameron." in appwrite.sms[0]["content"]
        assert revalidator.revision(ADMIN_VIEW_PATH) == 2

    @pytest.mark.asyncio
    async def test_cancel(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        updated = await workflow.update(created.id, _cancel_action())

        assert updated.status == AppointmentStatus.CANCELLED
        assert updated.cancellation_reason == "Doctor unavailable"
        assert appwrite.sms[0]["content"].endswith("Reason: Doctor unavailable.")

    @pytest.mark.asyncio
    async def test_schedule_does_not_write_cancellation_reason(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        await workflow.update(created.id, _schedule_action(cancellationReason="ignored"))
        assert "cancellationReason" not in appwrite.collections["appointments"][created.id]

    @pytest.mark.asyncio
    async def test_sms_failure_still_returns_record(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        appwrite.failing.add("create_sms")

        updated = await workflow.update(created.id, _schedule_action())

        assert updated.status == AppointmentStatus.SCHEDULED
        assert appwrite.collections["appointments"][created.id]["status"] == "scheduled"
        assert appwrite.sms == []

    @pytest.mark.asyncio
    async def test_write_failure_sends_nothing(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        appwrite.failing.add("update_document")

        with pytest.raises(PersistenceError):
            await workflow.update(created.id, _cancel_action())
        assert appwrite.sms == []
        assert appwrite.collections["appointments"][created.id]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_missing_appointment_is_none(self, workflow, appwrite, revalidator):
        assert await workflow.update("nope", _schedule_action()) is None
        assert appwrite.sms == []
        assert revalidator.revision(ADMIN_VIEW_PATH) == 0

    @pytest.mark.asyncio
    async def test_cancel_form_checked_before_write(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        action = CancelAppointmentRequest.model_construct(
            type="cancel", user_id="user1", primary_physician="John Green",
            schedule=SCHEDULE, cancellation_reason="x",
        )
        with pytest.raises(ValidationError) as exc:
            await workflow.update(created.id, action)
        assert exc.value.errors()[0]["loc"] == ("cancellationReason",)
        assert appwrite.collections["appointments"][created.id]["status"] == "pending"
        assert appwrite.sms == []

    @pytest.mark.asyncio
    async def test_unsupported_intent_rejected_before_write(self, workflow, appwrite):
        created = await workflow.create(_create_request())
        action = ScheduleAppointmentRequest.model_construct(
            type="create", user_id="user1", primary_physician="John Green", schedule=SCHEDULE,
        )
        with pytest.raises(UnsupportedIntentError):
            await workflow.update(created.id, action)
        assert appwrite.collections["appointments"][created.id]["status"] == "pending"


class TestGet:
    @pytest.mark.asyncio
    async def test_found(self, workflow):
        created = await workflow.create(_create_request())
        fetched = await workflow.get(created.id)
        assert fetched.id == created.id
        assert fetched.patient == "patient1"

    @pytest.mark.asyncio
    async def test_not_found_is_none(self, workflow):
        assert await workflow.get("missing") is None

    @pytest.mark.asyncio
    async def test_remote_failure(self, workflow, appwrite):
        appwrite.failing.add("get_document")
        with pytest.raises(PersistenceError):
            await workflow.get("anything")


class TestListRecent:
    @pytest.mark.asyncio
    async def test_counts(self, workflow, appwrite):
        for status in ["pending", "scheduled", "pending", "scheduled", "cancelled", "scheduled"]:
            await appwrite.create_document("appointments", "unique()", {
                "userId": "user1",
                "patient": {"$id": "patient1", "name": "Jane Doe"},
                "primaryPhysician": "John Green",
                "schedule": SCHEDULE.isoformat(),
                "status": status,
                "reason": "Check-up",
            })

        result = await workflow.list_recent()

        assert result.total_count == 6
        assert result.scheduled_count == 3
        assert result.pending_count == 2
        assert result.cancelled_count == 1
        assert len(result.documents) == 6
        assert result.documents[0].patient.name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_newest_first(self, workflow):
        first = await workflow.create(_create_request(reason="First visit"))
        second = await workflow.create(_create_request(reason="Second visit"))
        result = await workflow.list_recent()
        assert [a.id for a in result.documents] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_empty(self, workflow):
        result = await workflow.list_recent()
        assert (result.total_count, result.scheduled_count, result.pending_count, result.cancelled_count) == (0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_remote_failure(self, workflow, appwrite):
        appwrite.failing.add("list_documents")
        with pytest.raises(PersistenceError):
            await workflow.list_recent()
