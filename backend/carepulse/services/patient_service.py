"""
User identity and patient registration.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..core.config import settings
from ..core.exceptions import AppwriteError, PersistenceError
from ..schemas.patient import Patient, PatientRegistration, User, UserCreate
from .appwrite_client import UNIQUE_ID, AppwriteClient, Query

logger = logging.getLogger(__name__)


@dataclass
class IdentificationDocument:
    """An uploaded identification scan."""
    filename: str
    content: bytes


class PatientService:
    def __init__(
        self,
        client: AppwriteClient,
        collection_id: Optional[str] = None,
        bucket_id: Optional[str] = None,
    ):
        self.client = client
        self.collection_id = collection_id or settings.PATIENT_COLLECTION_ID
        self.bucket_id = bucket_id or settings.BUCKET_ID

    async def create_user(self, user_in: UserCreate) -> User:
        """Create an identity, or return the existing one if the email is taken."""
        try:
            user = await self.client.create_user(
                UNIQUE_ID,
                email=user_in.email,
                phone=user_in.phone,
                name=user_in.name,
            )
            return User.model_validate(user)
        except AppwriteError as exc:
            if not exc.is_conflict:
                logger.error("Creating user %s failed: %s", user_in.email, exc)
                raise PersistenceError("Could not create user") from exc
        except httpx.HTTPError as exc:
            logger.error("Creating user %s failed: %s", user_in.email, exc)
            raise PersistenceError("Could not create user") from exc

        logger.info("User %s already registered, returning existing identity", user_in.email)
        try:
            existing = await self.client.list_users([Query.equal("email", [user_in.email])])
        except (AppwriteError, httpx.HTTPError) as exc:
            logger.error("Looking up existing user %s failed: %s", user_in.email, exc)
            raise PersistenceError("Could not look up existing user") from exc
        users = existing.get("users", [])
        if not users:
            raise PersistenceError("User reported as existing but was not found")
        return User.model_validate(users[0])

    async def get_user(self, user_id: str) -> Optional[User]:
        try:
            user = await self.client.get_user(user_id)
        except AppwriteError as exc:
            if exc.is_not_found:
                return None
            logger.error("Fetching user %s failed: %s", user_id, exc)
            raise PersistenceError("Could not fetch user") from exc
        except httpx.HTTPError as exc:
            logger.error("Fetching user %s failed: %s", user_id, exc)
            raise PersistenceError("Could not fetch user") from exc
        return User.model_validate(user)

    async def register_patient(
        self,
        registration: PatientRegistration,
        document: Optional[IdentificationDocument] = None,
    ) -> Patient:
        """
        Store a validated patient profile.
        The identification document, when given, is uploaded first and the
        patient keeps its file id and view URL; otherwise both are null.
        """
        document_id = None
        document_url = None
        if document is not None:
            try:
                uploaded = await self.client.create_file(
                    self.bucket_id, UNIQUE_ID, document.filename, document.content
                )
            except (AppwriteError, httpx.HTTPError) as exc:
                logger.error("Uploading identification for user %s failed: %s", registration.user_id, exc)
                raise PersistenceError("Could not register patient") from exc
            document_id = uploaded["$id"]
            document_url = self.client.file_view_url(self.bucket_id, document_id)

        data = registration.model_dump(
            mode="json",
            by_alias=True,
            exclude={"treatment_consent", "disclosure_consent"},
        )
        data["identificationDocumentId"] = document_id
        data["identificationDocumentUrl"] = document_url
        try:
            patient = await self.client.create_document(self.collection_id, UNIQUE_ID, data)
        except (AppwriteError, httpx.HTTPError) as exc:
            if document_id is not None:
                # The upload has no owning record now; it has to be removed by hand
                logger.error(
                    "Registering patient for user %s failed, orphaned file %s in bucket %s: %s",
                    registration.user_id, document_id, self.bucket_id, exc,
                )
            else:
                logger.error("Registering patient for user %s failed: %s", registration.user_id, exc)
            raise PersistenceError("Could not register patient") from exc

        logger.info("Registered patient %s for user %s", patient.get("$id"), registration.user_id)
        return Patient.model_validate(patient)

    async def get_patient(self, user_id: str) -> Optional[Patient]:
        queries = [Query.equal("userId", [user_id]), Query.offset(0)]
        try:
            result = await self.client.list_documents(self.collection_id, queries)
        except (AppwriteError, httpx.HTTPError) as exc:
            logger.error("Fetching patient for user %s failed: %s", user_id, exc)
            raise PersistenceError("Could not fetch patient") from exc
        documents = result.get("documents", [])
        if not documents:
            return None
        return Patient.model_validate(documents[0])
