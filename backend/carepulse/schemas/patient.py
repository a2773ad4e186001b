"""
User identity and patient profile schemas
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from .appointment import CamelModel, DocumentModel

PHONE_PATTERN = r"^\+\d{10,15}$"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class UserCreate(CamelModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)


class User(DocumentModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class PatientBase(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)
    birth_date: date
    gender: Gender
    address: str = Field(min_length=5, max_length=500)
    occupation: str = Field(min_length=2, max_length=500)
    emergency_contact_name: str = Field(min_length=2, max_length=50)
    emergency_contact_number: str = Field(pattern=PHONE_PATTERN)
    primary_physician: str = Field(min_length=2)
    insurance_provider: str = Field(min_length=2, max_length=50)
    insurance_policy_number: str = Field(min_length=2, max_length=50)
    allergies: Optional[str] = None
    current_medication: Optional[str] = None
    family_medical_history: Optional[str] = None
    past_medical_history: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None


_CONSENT_LABELS = {
    "treatment_consent": "treatment",
    "disclosure_consent": "disclosure",
    "privacy_consent": "privacy",
}


class PatientRegistration(PatientBase):
    """Registration form. Every consent must be given before anything is stored."""

    treatment_consent: bool = Field(False, validate_default=True)
    disclosure_consent: bool = Field(False, validate_default=True)
    privacy_consent: bool = Field(False, validate_default=True)

    @field_validator("treatment_consent", "disclosure_consent", "privacy_consent")
    @classmethod
    def consent_given(cls, v: bool, info: ValidationInfo) -> bool:
        if v is not True:
            label = _CONSENT_LABELS[info.field_name]
            raise ValueError(f"You must consent to {label} in order to proceed")
        return v


class Patient(DocumentModel):
    user_id: str
    name: str
    email: str
    phone: str
    birth_date: Optional[Union[datetime, date]] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    occupation: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None
    primary_physician: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    allergies: Optional[str] = None
    current_medication: Optional[str] = None
    family_medical_history: Optional[str] = None
    past_medical_history: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None
    identification_document_id: Optional[str] = None
    identification_document_url: Optional[str] = None
    privacy_consent: bool = False
