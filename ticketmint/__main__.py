"""Run the ticket service with uvicorn: ``python -m ticketmint``."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from ticketmint.config import get_settings

logger = logging.getLogger("ticketmint")


def main() -> None:
    """Load settings, then serve on 0.0.0.0:PORT. Exits if settings are invalid."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.ERROR)
        missing = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        logger.critical(f"Invalid configuration, check environment variables: {missing}")
        sys.exit(1)

    uvicorn.run(
        "ticketmint.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
