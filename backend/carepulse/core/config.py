from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    APP_NAME: str = "CarePulse Appointments"
    VERSION: str = "1.0.0"
    PRODUCT_NAME: str = "CarePulse"
    LOG_LEVEL: str = "INFO"

    # Appwrite backend (databases, storage, users, messaging)
    APPWRITE_ENDPOINT: str = "https://cloud.appwrite.io/v1"
    APPWRITE_PROJECT_ID: str = ""
    APPWRITE_API_KEY: str = ""
    APPWRITE_TIMEOUT: float = 10.0

    DATABASE_ID: str = ""
    PATIENT_COLLECTION_ID: str = ""
    APPOINTMENT_COLLECTION_ID: str = ""
    BUCKET_ID: str = ""

    # Appwrite returns 25 documents per page unless told otherwise
    APPOINTMENT_LIST_LIMIT: int = 25
    DISPLAY_TIMEZONE: str = "UTC"

    # Admin access
    ADMIN_PASSKEY: str = "111111"
    SECRET_KEY: str = "change-me-in-production-use-strong-random-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
