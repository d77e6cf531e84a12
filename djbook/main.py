import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .accounts import AccountService
from .config import ADMIN_EMAIL, ADMIN_PASSWORD, AUTO_CREATE_TABLES, LOG_LEVEL
from .db import SessionLocal, create_tables
from .errors import DJBookError
from .middleware import RequestLoggingMiddleware
from .rabbitmq import publisher
from .redis_client import redis_client
from .routes import admin_router, auth_router, bookings_router, directory_router, dj_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "System", "description": "Operational endpoints."},
    {"name": "Auth", "description": "Registration and login."},
    {"name": "Directory", "description": "Public DJ listings, profiles, availability and reviews."},
    {"name": "Bookings", "description": "Customer booking requests."},
    {"name": "DJ Dashboard", "description": "Profile, calendar and booking requests of the signed-in DJ."},
    {"name": "Admin", "description": "Moderation and platform-wide views."},
]

app = FastAPI(title="DJBook Service", openapi_tags=OPENAPI_TAGS)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth_router)
app.include_router(directory_router)
app.include_router(bookings_router)
app.include_router(dj_router)
app.include_router(admin_router)


@app.exception_handler(DJBookError)
async def djbook_error_handler(request: Request, exc: DJBookError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health", tags=["System"])
async def health():
    return {"status": "ok", "service": "djbook", "events_enabled": publisher.enabled}


@app.on_event("startup")
async def startup():
    try:
        await publisher.connect()
    except Exception as e:
        # events are best effort; the API still serves without a broker
        logger.error(f"Event publisher unavailable at startup: {e}")

    if AUTO_CREATE_TABLES:
        await create_tables()

    if ADMIN_EMAIL and ADMIN_PASSWORD:
        async with SessionLocal() as db:
            await AccountService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


@app.on_event("shutdown")
async def shutdown():
    await publisher.close()
    if redis_client is not None:
        await redis_client.aclose()
