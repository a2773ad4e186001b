"""
Appwrite REST client.
Covers the slices of the Appwrite API the application relies on: database
documents, storage files, user identities and SMS messaging.
"""
import json
import logging
import mimetypes
from typing import Any, Dict, List, Optional

import httpx

from ..core.exceptions import AppwriteError

logger = logging.getLogger(__name__)

# Passing this as an id asks Appwrite to generate one server-side
UNIQUE_ID = "unique()"


class Query:
    """Builders for Appwrite's JSON query strings."""

    @staticmethod
    def equal(attribute: str, value: Any) -> str:
        values = value if isinstance(value, list) else [value]
        return json.dumps({"method": "equal", "attribute": attribute, "values": values})

    @staticmethod
    def order_desc(attribute: str) -> str:
        return json.dumps({"method": "orderDesc", "attribute": attribute})

    @staticmethod
    def offset(value: int) -> str:
        return json.dumps({"method": "offset", "values": [value]})

    @staticmethod
    def limit(value: int) -> str:
        return json.dumps({"method": "limit", "values": [value]})


class AppwriteClient:
    """Async HTTP client for a single Appwrite project.

    The instance owns one ``httpx.AsyncClient``; call :meth:`close` when the
    application shuts down.
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        database_id: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.project_id = project_id
        self.database_id = database_id
        self._client = httpx.AsyncClient(
            base_url=self.endpoint,
            timeout=httpx.Timeout(timeout),
            headers={
                "X-Appwrite-Project": project_id,
                "X-Appwrite-Key": api_key,
                "X-Appwrite-Response-Format": "1.5.0",
            },
            transport=transport,
        )

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    def _documents_path(self, collection_id: str) -> str:
        return f"/databases/{self.database_id}/collections/{collection_id}/documents"

    async def create_document(self, collection_id: str, document_id: str, data: Dict) -> Dict:
        return await self._request(
            "POST",
            self._documents_path(collection_id),
            json={"documentId": document_id, "data": data},
        )

    async def get_document(self, collection_id: str, document_id: str) -> Dict:
        return await self._request("GET", f"{self._documents_path(collection_id)}/{document_id}")

    async def update_document(self, collection_id: str, document_id: str, data: Dict) -> Dict:
        return await self._request(
            "PATCH",
            f"{self._documents_path(collection_id)}/{document_id}",
            json={"data": data},
        )

    async def list_documents(self, collection_id: str, queries: Optional[List[str]] = None) -> Dict:
        """Return ``{"total": int, "documents": [...]}``."""
        return await self._request(
            "GET",
            self._documents_path(collection_id),
            params={"queries[]": queries or []},
        )

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    async def create_file(self, bucket_id: str, file_id: str, filename: str, content: bytes) -> Dict:
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return await self._request(
            "POST",
            f"/storage/buckets/{bucket_id}/files",
            data={"fileId": file_id},
            files={"file": (filename, content, content_type)},
        )

    def file_view_url(self, bucket_id: str, file_id: str) -> str:
        return f"{self.endpoint}/storage/buckets/{bucket_id}/files/{file_id}/view?project={self.project_id}"

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Dict:
        body = {"userId": user_id, "email": email, "phone": phone, "password": password, "name": name}
        return await self._request("POST", "/users", json={k: v for k, v in body.items() if v is not None})

    async def get_user(self, user_id: str) -> Dict:
        return await self._request("GET", f"/users/{user_id}")

    async def list_users(self, queries: Optional[List[str]] = None) -> Dict:
        """Return ``{"total": int, "users": [...]}``."""
        return await self._request("GET", "/users", params={"queries[]": queries or []})

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def create_sms(
        self,
        message_id: str,
        content: str,
        topics: Optional[List[str]] = None,
        users: Optional[List[str]] = None,
    ) -> Dict:
        return await self._request(
            "POST",
            "/messaging/messages/sms",
            json={
                "messageId": message_id,
                "content": content,
                "topics": topics or [],
                "users": users or [],
            },
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> Dict:
        resp = await self._client.request(method, path, **kwargs)
        if resp.is_success:
            return resp.json() if resp.content else {}

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        message = payload.get("message") or resp.reason_phrase or "Appwrite request failed"
        logger.debug("Appwrite %s %s -> %s: %s", method, path, resp.status_code, message)
        raise AppwriteError(message, code=resp.status_code, error_type=payload.get("type"))
