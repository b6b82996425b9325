"""Match Ticket Rendering and Publishing.

Turns a match description into:
- a 2048x1024 PNG with both team logos, the score and the date
- a token metadata document pointing at the published image

Both artifacts are published to IPFS; the token's gateway URL is returned.
"""

from ticketmint.tickets.models import Team, Ticket, FinishedStatus, FinishedScore
from ticketmint.tickets.publisher import TicketPublisher

__all__ = ["Team", "Ticket", "FinishedStatus", "FinishedScore", "TicketPublisher"]
