"""FastAPI application for the match ticket service."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ticketmint import __version__
from ticketmint.config import get_settings
from ticketmint.storage.ipfs_client import IpfsClient
from ticketmint.telemetry.sentry import init_sentry
from ticketmint.tickets.models import ErrorResponse
from ticketmint.tickets.publisher import TicketPublisher
from ticketmint.tickets.routes import router as tickets_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking (before FastAPI app creation)
# Only activates if SENTRY_DSN is set in environment
init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the clients shared by every request and close them on shutdown."""
    http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    storage = IpfsClient.from_settings(settings)
    app.state.publisher = TicketPublisher(http_client, storage, settings)
    logger.info(f"Ticket service ready (IPFS API {storage.api_url})")
    try:
        yield
    finally:
        await storage.aclose()
        await http_client.aclose()
        logger.info("Ticket service stopped")


app = FastAPI(title="Match Ticket Service", version=__version__, lifespan=lifespan)
app.include_router(tickets_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Answer malformed tickets with the error envelope."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = f"invalid ticket: {location}: {first.get('msg', 'validation failed')}" if location else "invalid ticket"
    logger.warning(f"Rejected request to {request.url.path}: {len(errors)} validation error(s)")
    return JSONResponse(status_code=422, content=ErrorResponse.for_message(msg).model_dump())


@app.get("/health")
def health():
    return {"status": "ok"}
