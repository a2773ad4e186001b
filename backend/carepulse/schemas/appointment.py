"""
Appointment schemas.
Field names are camelCase on the wire to match the Appwrite collection.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Type, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class AppointmentIntent(str, Enum):
    CREATE = "create"
    SCHEDULE = "schedule"
    CANCEL = "cancel"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Form schemas, one per intent ─────────────────────────────────────────────

class AppointmentForm(CamelModel):
    primary_physician: str = Field(min_length=2)
    schedule: datetime
    reason: Optional[str] = None
    note: Optional[str] = None
    cancellation_reason: Optional[str] = None


class CreateAppointmentSchema(AppointmentForm):
    reason: str = Field(min_length=2, max_length=500)


class ScheduleAppointmentSchema(AppointmentForm):
    pass


class CancelAppointmentSchema(AppointmentForm):
    cancellation_reason: str = Field(min_length=2, max_length=500)


def get_appointment_schema(intent: str) -> Type[AppointmentForm]:
    """Pick the validation schema for an intent; unknown intents get the schedule schema."""
    if intent == AppointmentIntent.CREATE.value:
        return CreateAppointmentSchema
    if intent == AppointmentIntent.CANCEL.value:
        return CancelAppointmentSchema
    return ScheduleAppointmentSchema


# ── Request bodies ───────────────────────────────────────────────────────────

class CreateAppointmentRequest(CreateAppointmentSchema):
    type: Literal["create"] = "create"
    user_id: str = Field(min_length=1)
    patient: str = Field(min_length=1)


class ScheduleAppointmentRequest(ScheduleAppointmentSchema):
    type: Literal["schedule"]
    user_id: str = Field(min_length=1)


class CancelAppointmentRequest(CancelAppointmentSchema):
    type: Literal["cancel"]
    user_id: str = Field(min_length=1)


AppointmentUpdateRequest = Annotated[
    Union[ScheduleAppointmentRequest, CancelAppointmentRequest],
    Field(discriminator="type"),
]


class AppointmentUpdate(RootModel[AppointmentUpdateRequest]):
    """Update body: a schedule or cancel action, told apart by ``type``."""


# ── Records ──────────────────────────────────────────────────────────────────

class DocumentModel(CamelModel):
    """Fields Appwrite adds to every document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("$id", "id"), serialization_alias="id")
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("$createdAt", "createdAt", "created_at"),
        serialization_alias="createdAt",
    )


class PatientSummary(DocumentModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class Appointment(DocumentModel):
    user_id: str
    patient: Union[PatientSummary, str, None] = None
    primary_physician: str
    schedule: datetime
    status: AppointmentStatus
    reason: Optional[str] = None
    note: Optional[str] = None
    cancellation_reason: Optional[str] = None


class AppointmentList(CamelModel):
    total_count: int
    scheduled_count: int = 0
    pending_count: int = 0
    cancelled_count: int = 0
    documents: List[Appointment] = []
