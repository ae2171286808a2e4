"""
Studio Booking API - Main Application Entry Point

Booking backend for a studio/showroom with bookable equipment:
- Firebase Auth bearer tokens, admin role stored on the user profile
- Bookings and profiles in Cloud Firestore
- Credits as a prepaid payment method
- Google Calendar mirror of every booking
- Email notifications to clients and administrators
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studio_booking.core.config import get_settings
from studio_booking.core.exceptions import BookingAPIError
from studio_booking.core.logging import setup_logging, get_logger
from studio_booking.core.metrics import metrics_endpoint
from studio_booking.api.router import api_router
from studio_booking.api.middleware import RequestLoggingMiddleware
from studio_booking.infrastructure import (
    FirebaseIdentityProvider,
    FirestoreDocumentStore,
    GoogleCalendarClient,
    SmtpMailer,
    init_firebase,
    load_credentials,
)
from studio_booking.services.notification_service import NotificationService

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: build the external clients once, close them on shutdown."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    firebase_app = init_firebase(settings.FIREBASE_PROJECT_ID, settings.FIREBASE_CREDENTIALS_FILE)
    app.state.store = FirestoreDocumentStore(firebase_app)
    app.state.identity = FirebaseIdentityProvider(firebase_app)
    calendar = GoogleCalendarClient(
        calendar_id=settings.GOOGLE_CALENDAR_ID,
        credentials=load_credentials(settings.GOOGLE_CALENDAR_CREDENTIALS_FILE),
        timezone=settings.CALENDAR_TIMEZONE,
        timeout=settings.CALENDAR_TIMEOUT_SECONDS,
    )
    app.state.calendar = calendar
    mailer = SmtpMailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        sender=settings.mail_sender,
        use_tls=settings.SMTP_USE_TLS,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )
    app.state.notifier = NotificationService(
        mailer,
        admin_emails=settings.admin_email_list,
        admin_dashboard_url=settings.ADMIN_DASHBOARD_URL,
        frontend_url=settings.FRONTEND_URL,
    )

    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.warning("smtp_credentials_missing", message="Notification emails will fail to send")
    if not settings.FRONTEND_URL:
        logger.warning("frontend_url_missing", message="Account setup emails will not link to the app")
    if not settings.admin_email_list:
        logger.warning("admin_emails_missing", message="Admins will not be notified of bookings")

    yield

    await calendar.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Studio booking API with credits, calendar sync and email notifications",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)


@app.exception_handler(BookingAPIError)
async def booking_api_error_handler(request: Request, exc: BookingAPIError):
    if exc.status_code >= 500:
        logger.error("request_error", status_code=exc.status_code, error=exc.message, details=exc.details)
    else:
        logger.info("request_rejected", status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors: 400 with the first problem."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'Invalid request')}" if location else first.get("msg", "Invalid request")
    logger.info("request_validation_failed", errors=len(errors), error=message)
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/", tags=["Root"])
async def root():
    return {"status": "online"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()
