"""Shared fixtures: test settings and an in-memory stand-in for Appwrite."""
import json
import os
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

# Must be set before carepulse.core.config is imported
os.environ.setdefault("ADMIN_PASSKEY", "123456")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APPWRITE_ENDPOINT", "https://appwrite.test/v1")
os.environ.setdefault("APPWRITE_PROJECT_ID", "carepulse-test")
os.environ.setdefault("DATABASE_ID", "db")
os.environ.setdefault("PATIENT_COLLECTION_ID", "patients")
os.environ.setdefault("APPOINTMENT_COLLECTION_ID", "appointments")
os.environ.setdefault("BUCKET_ID", "ids")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")

from carepulse.core.exceptions import AppwriteError  # noqa: E402
from carepulse.core.revalidation import Revalidator  # noqa: E402
from carepulse.services.appwrite_client import UNIQUE_ID  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class FakeAppwrite:
    """In-memory double of AppwriteClient covering the calls the services make.

    Put a method name in ``failing`` to make that call raise a 500.
    """

    def __init__(self):
        self.endpoint = os.environ["APPWRITE_ENDPOINT"]
        self.project_id = os.environ["APPWRITE_PROJECT_ID"]
        self.collections = defaultdict(dict)
        self.users = {}
        self.files = {}
        self.sms = []
        self.failing = set()
        self._ids = count(1)

    def _next_id(self, prefix):
        return f"{prefix}{next(self._ids)}"

    def _created_at(self):
        return (BASE_TIME + timedelta(minutes=next(self._ids))).isoformat()

    def _check(self, method):
        if method in self.failing:
            raise AppwriteError("Server error", code=500, error_type="general_unknown")

    async def create_document(self, collection_id, document_id, data):
        self._check("create_document")
        doc_id = self._next_id("doc") if document_id == UNIQUE_ID else document_id
        doc = {"$id": doc_id, "$createdAt": self._created_at(), **data}
        self.collections[collection_id][doc_id] = doc
        return dict(doc)

    async def get_document(self, collection_id, document_id):
        self._check("get_document")
        doc = self.collections[collection_id].get(document_id)
        if doc is None:
            raise AppwriteError("Document not found", code=404, error_type="document_not_found")
        return dict(doc)

    async def update_document(self, collection_id, document_id, data):
        self._check("update_document")
        doc = self.collections[collection_id].get(document_id)
        if doc is None:
            raise AppwriteError("Document not found", code=404, error_type="document_not_found")
        doc.update(data)
        return dict(doc)

    async def list_documents(self, collection_id, queries=None):
        self._check("list_documents")
        docs = list(self.collections[collection_id].values())
        offset, limit = 0, 25
        for raw in queries or []:
            q = json.loads(raw)
            if q["method"] == "equal":
                docs = [d for d in docs if d.get(q["attribute"]) in q["values"]]
            elif q["method"] == "orderDesc":
                docs.sort(key=lambda d: d[q["attribute"]], reverse=True)
            elif q["method"] == "offset":
                offset = q["values"][0]
            elif q["method"] == "limit":
                limit = q["values"][0]
        return {"total": len(docs), "documents": [dict(d) for d in docs[offset:offset + limit]]}

    async def create_file(self, bucket_id, file_id, filename, content):
        self._check("create_file")
        fid = self._next_id("file") if file_id == UNIQUE_ID else file_id
        self.files[fid] = {"$id": fid, "bucketId": bucket_id, "name": filename, "content": content}
        return {"$id": fid, "bucketId": bucket_id, "name": filename}

    def file_view_url(self, bucket_id, file_id):
        return f"{self.endpoint}/storage/buckets/{bucket_id}/files/{file_id}/view?project={self.project_id}"

    async def create_user(self, user_id, email=None, phone=None, password=None, name=None):
        self._check("create_user")
        if any(u["email"] == email for u in self.users.values()):
            raise AppwriteError("A user with the same id, email, or phone already exists",
                                code=409, error_type="user_already_exists")
        uid = self._next_id("user") if user_id == UNIQUE_ID else user_id
        user = {"$id": uid, "$createdAt": self._created_at(), "name": name, "email": email, "phone": phone}
        self.users[uid] = user
        return dict(user)

    async def get_user(self, user_id):
        self._check("get_user")
        if user_id not in self.users:
            raise AppwriteError("User not found", code=404, error_type="user_not_found")
        return dict(self.users[user_id])

    async def list_users(self, queries=None):
        self._check("list_users")
        users = list(self.users.values())
        for raw in queries or []:
            q = json.loads(raw)
            if q["method"] == "equal":
                users = [u for u in users if u.get(q["attribute"]) in q["values"]]
        return {"total": len(users), "users": [dict(u) for u in users]}

    async def create_sms(self, message_id, content, topics=None, users=None):
        self._check("create_sms")
        message = {"$id": self._next_id("msg"), "content": content, "users": users or []}
        self.sms.append(message)
        return message

    async def close(self):
        pass


@pytest.fixture
def appwrite():
    return FakeAppwrite()


@pytest.fixture
def revalidator():
    return Revalidator()
