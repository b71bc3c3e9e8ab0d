import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import BookingError
from .redis_client import redis_client
from .routers import availability, booking_overrides, booking_settings, bookings, slots

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Tablebook API")

app.include_router(availability.router)
app.include_router(bookings.router)
app.include_router(booking_settings.router)
app.include_router(booking_overrides.router)
app.include_router(slots.router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path}: {exc.code} {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
def health():
    if redis_client is None:
        return {"redis": None}
    try:
        return {"redis": redis_client.ping()}
    except Exception:
        logger.exception("Redis health check failed")
        return {"redis": False}
