import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - registers tables on Base
from .clock import Clock
from .config import ALLOWED_ORIGINS, NOTIFICATIONS_ENABLED
from .database import Base, engine
from .domain.appointments import router as appointments_router
from .domain.feedback import router as feedback_router
from .exceptions import (
    BookingError,
    InvalidTransition,
    NotFound,
    PersistenceFailure,
    SlotTaken,
    ValidationError,
)
from .services.notification_channel import build_notification_channel
from .worker import get_redis_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")

    app.state.clock = Clock()
    app.state.notification_channel = await build_notification_channel(
        NOTIFICATIONS_ENABLED, get_redis_settings() if NOTIFICATIONS_ENABLED else None
    )

    yield

    logger.info("Application shutting down...")
    await app.state.notification_channel.close()


app = FastAPI(title="Clinic Booking API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


@app.exception_handler(ValidationError)
async def booking_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "fields": exc.fields})


@app.exception_handler(SlotTaken)
async def slot_taken_handler(request: Request, exc: SlotTaken):
    return JSONResponse(
        status_code=409,
        content={
            "detail": "This time slot is already booked. Please choose another time.",
            "date": exc.date.isoformat(),
            "time": exc.time,
        },
    )


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message, "current": exc.current, "requested": exc.requested},
    )


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure):
    logger.error(f"{request.method} {request.url.path} - {exc.message}: {exc.cause}")
    return JSONResponse(
        status_code=500, content={"detail": "Operation failed. Please try again."}
    )


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    logger.error(f"{request.method} {request.url.path} - {exc.message}")
    return JSONResponse(status_code=400, content={"detail": exc.message})


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(appointments_router)
app.include_router(feedback_router)


@app.get("/")
def root():
    return {"message": "Clinic Booking API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
