"""Errors raised by the render-and-publish pipeline.

Every error is fatal to the request that raised it and is answered with the
error envelope. ``public_message`` is safe to show to clients; the exception
text itself may carry paths or upstream details and only goes to the log.
"""


class TicketError(Exception):
    """Base class for request-fatal pipeline errors."""

    status_code: int = 500
    public_message: str = "ticket processing failed"

    def __init__(self, detail: str = "", public_message: str | None = None):
        self.detail = detail
        if public_message is not None:
            self.public_message = public_message
        super().__init__(detail or self.public_message)


class FetchError(TicketError):
    """Logo could not be downloaded or stored locally."""

    status_code = 502
    public_message = "failed to download team logo"


class DecodeError(TicketError):
    """Logo bytes are not a valid image."""

    status_code = 422
    public_message = "team logo is not a valid image"


class InvalidTimestamp(TicketError):
    """Match date is outside the representable range."""

    status_code = 422
    public_message = "match date is not a valid timestamp"


class RenderError(TicketError):
    """Font loading or canvas output failed."""

    public_message = "failed to render ticket image"


class SerializationError(TicketError):
    """Token document could not be serialized."""

    public_message = "failed to serialize token document"


class PublishError(TicketError):
    """Storage network rejected the upload or could not be reached."""

    status_code = 502
    public_message = "failed to publish to storage"


class FilesystemError(TicketError):
    """Local read or write failed."""

    public_message = "local storage failure"


class WriteError(FilesystemError):
    """Token document could not be written."""

    public_message = "failed to write token document"
