"""API Routes for match tickets.

POST /upload_match renders the ticket image, publishes it and its token
document to IPFS, and answers with the token's gateway URL:

    {"response": {"token_uri": "https://ipfs.io/ipfs/<cid>"}}   success
    {"error": {"msg": "<description>"}}                         failure
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ticketmint.tickets.models import ErrorResponse, Ticket, UploadMatchResponse
from ticketmint.tickets.publisher import TicketPublisher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tickets"])


def get_publisher(request: Request) -> TicketPublisher:
    """Shared publisher created in the application lifespan."""
    return request.app.state.publisher


@router.post(
    "/upload_match",
    response_model=UploadMatchResponse,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def upload_match(ticket: Ticket, publisher: TicketPublisher = Depends(get_publisher)):
    """Render and publish a match ticket."""
    logger.info(f"upload_match: ticket {ticket.id} ({ticket.host_team.name} vs {ticket.guest_team.name})")
    status_code, envelope = await publisher.publish_envelope(ticket)
    return JSONResponse(status_code=status_code, content=envelope.model_dump())
