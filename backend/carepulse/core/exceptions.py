"""Domain exceptions raised by the CarePulse services."""
from typing import Optional


class CarePulseError(Exception):
    """Base class for errors raised by CarePulse services."""


class AppwriteError(CarePulseError):
    """Non-2xx response from the Appwrite REST API."""

    def __init__(self, message: str, code: int = 0, error_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.error_type = error_type

    @property
    def is_conflict(self) -> bool:
        return self.code == 409

    @property
    def is_not_found(self) -> bool:
        return self.code == 404


class PersistenceError(CarePulseError):
    """A read or write against the remote store failed."""


class UnsupportedIntentError(CarePulseError):
    """An update was requested with an intent that has no resulting status."""

    def __init__(self, intent: str):
        super().__init__(f"Unsupported appointment intent: {intent!r}")
        self.intent = intent
