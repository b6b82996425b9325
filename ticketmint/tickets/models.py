"""Ticket data model and response envelopes.

Inbound JSON shape:

    {
      "id": "...",
      "host_team": {"name": "...", "logo_url": "..."},
      "guest_team": {"name": "...", "logo_url": "..."},
      "date": 1700000000,
      "status": "active" | {"finished": {"_0": 2, "_1": 1}}
    }
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ticketmint.errors import InvalidTimestamp

# Calendar range accepted for match dates
MIN_YEAR = -262144
MAX_YEAR = 262143


class Team(BaseModel):
    """A team as attached to a ticket."""

    model_config = ConfigDict(frozen=True)

    name: str
    logo_url: str


class FinishedScore(BaseModel):
    """Final score. Serialized with the positional keys ``_0`` / ``_1``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    home_score: int = Field(..., alias="_0", ge=0)
    away_score: int = Field(..., alias="_1", ge=0)


class FinishedStatus(BaseModel):
    """Tagged ``{"finished": {...}}`` status."""

    model_config = ConfigDict(frozen=True)

    finished: FinishedScore


# "active" = no score yet
TicketStatus = Union[Literal["active"], FinishedStatus]


class Ticket(BaseModel):
    """Match description driving artifact generation."""

    model_config = ConfigDict(frozen=True)

    id: str
    host_team: Team
    guest_team: Team
    date: int = Field(..., ge=0, description="Unix timestamp (seconds)")
    status: TicketStatus

    @property
    def score_text(self) -> str:
        return format_score(self.status)

    @property
    def date_text(self) -> str:
        return format_match_date(self.date)


def format_score(status: TicketStatus) -> str:
    """Score shown on the image and in the token description."""
    if isinstance(status, FinishedStatus):
        return f"{status.finished.home_score} - {status.finished.away_score}"
    return "0 - 0"


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for a day count from 1970-01-01.

    Plain integer arithmetic (H. Hinnant's civil_from_days), so years
    past 9999 work.
    """
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_match_date(timestamp: int) -> str:
    """Render a Unix timestamp as ``YYYY-MM-DD HH:MM`` in UTC.

    Years after 9999 carry a ``+`` sign (``+10000-01-01 00:00``).

    Raises:
        InvalidTimestamp: the year falls outside MIN_YEAR..MAX_YEAR
    """
    days, seconds = divmod(timestamp, 86400)
    year, month, day = civil_from_days(days)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidTimestamp(f"Timestamp {timestamp} out of range: year {year}")

    hour, minute = seconds // 3600, seconds % 3600 // 60
    year_text = f"+{year}" if year > 9999 else f"{year:04d}"
    return f"{year_text}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}"


# =============================================================================
# Response envelopes
# =============================================================================


class TokenURI(BaseModel):
    token_uri: str


class ErrorMessage(BaseModel):
    msg: str


class UploadMatchResponse(BaseModel):
    """Success envelope: ``{"response": {"token_uri": ...}}``."""

    response: TokenURI

    @classmethod
    def for_uri(cls, token_uri: str) -> "UploadMatchResponse":
        return cls(response=TokenURI(token_uri=token_uri))


class ErrorResponse(BaseModel):
    """Failure envelope: ``{"error": {"msg": ...}}``."""

    error: ErrorMessage

    @classmethod
    def for_message(cls, msg: str) -> "ErrorResponse":
        return cls(error=ErrorMessage(msg=msg))
