"""
CarePulse - Patient Appointment Booking API
Patients register and request appointments; admins schedule or cancel them.
Storage, identity and SMS are provided by Appwrite.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .api import admin, appointments, doctors, patients, users
from .core.config import settings
from .core.exceptions import PersistenceError, UnsupportedIntentError
from .core.revalidation import Revalidator
from .services.appwrite_client import AppwriteClient

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.appwrite = AppwriteClient(
        endpoint=settings.APPWRITE_ENDPOINT,
        project_id=settings.APPWRITE_PROJECT_ID,
        api_key=settings.APPWRITE_API_KEY,
        database_id=settings.DATABASE_ID,
        timeout=settings.APPWRITE_TIMEOUT,
    )
    app.state.revalidator = Revalidator()
    logger.info("Connected to Appwrite project %s at %s", settings.APPWRITE_PROJECT_ID, settings.APPWRITE_ENDPOINT)
    try:
        yield
    finally:
        await app.state.appwrite.close()


app = FastAPI(
    title="CarePulse Appointments API",
    description=(
        "Patient registration and appointment booking. "
        "Admins schedule or cancel requests; patients are notified by SMS."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router, prefix="/api/v1")
app.include_router(patients.router, prefix="/api/v1")
app.include_router(appointments.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")
app.include_router(doctors.router, prefix="/api/v1")


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "The booking service is temporarily unavailable. Please try again."},
    )


@app.exception_handler(ValidationError)
async def form_validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
    )


@app.exception_handler(UnsupportedIntentError)
async def unsupported_intent_handler(request: Request, exc: UnsupportedIntentError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "CarePulse API", "version": settings.VERSION}
