"""Token metadata documents.

The token document describes the collectible and points at the published
ticket image. Shape:

    {
      "image": "https://ipfs.io/ipfs/<cid>",
      "name": "<host> vs <guest> ticket",
      "description": "The match between ... The final score was ...",
      "external_link": null,
      "animation_url": null,
      "traits": []
    }
"""

import json
import logging
from pathlib import Path

from ticketmint.errors import SerializationError, WriteError
from ticketmint.tickets.models import Ticket
from ticketmint.tickets.naming import hashed_filename

logger = logging.getLogger(__name__)

TOKEN_EXTENSION = "json"


def new_token_document() -> dict:
    """Return a fresh, empty token document."""
    return {
        "image": "",
        "name": "",
        "description": "",
        "external_link": None,
        "animation_url": None,
        "traits": [],
    }


def build_token_document(ticket: Ticket, image_uri: str) -> dict:
    """Fill a token document for a ticket whose image lives at ``image_uri``."""
    host = ticket.host_team.name
    guest = ticket.guest_team.name

    token = new_token_document()
    token["image"] = image_uri
    token["name"] = f"{host} vs {guest} ticket"
    token["description"] = (
        f"The match between {host} and {guest} took place on {ticket.date_text}. "
        f"The final score was {ticket.score_text}"
    )
    return token


def serialize_token(token: dict) -> bytes:
    """Compact JSON bytes for a token document."""
    try:
        return json.dumps(token, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Token document not serializable: {e}") from e


def write_token(ticket: Ticket, image_uri: str, dest_dir: Path) -> Path:
    """Build, serialize and write the token document for a ticket.

    The file is named by the digest of its serialized bytes.

    Returns:
        Path of the written ``.json`` file

    Raises:
        InvalidTimestamp: ticket date out of range
        SerializationError: document could not be serialized
        WriteError: file could not be written
    """
    body = serialize_token(build_token_document(ticket, image_uri))
    path = dest_dir / hashed_filename(body, TOKEN_EXTENSION)

    try:
        path.write_bytes(body)
    except OSError as e:
        raise WriteError(f"Failed to write token {path}: {e}") from e

    logger.debug(f"Wrote token document {path.name} ({len(body)} bytes)")
    return path
