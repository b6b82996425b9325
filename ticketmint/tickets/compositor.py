"""Ticket Image Composition.

Builds the 2048x1024 ticket image: home logo on the left, guest logo on the
right, score in the middle with the match date below it.
Uses Pillow for decoding, resizing and drawing.

Output format: PNG (deterministic for equal inputs)
"""

import io
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from ticketmint.errors import DecodeError, RenderError

logger = logging.getLogger(__name__)

# ==========================================================================
# Layout
# ==========================================================================

IMAGE_WIDTH = 2048
IMAGE_HEIGHT = 1024
LOGO_MAX_WIDTH = 384
LOGO_MAX_HEIGHT = 512
LOGO_MARGIN = IMAGE_WIDTH // 12

SCORE_FONT_SIZE = 256
# Rough glyph width used to center the score without measuring it
SCORE_GLYPH_WIDTH = SCORE_FONT_SIZE // 7
DATE_FONT_SIZE = 64
DATE_OFFSET_X = 200

BACKGROUND = (255, 255, 255)
SCORE_COLOR = (0, 0, 255)
DATE_COLOR = (0, 0, 0)

# Bundled in ticketmint/assets/fonts (DejaVu, Bitstream Vera license)
BUNDLED_SCORE_FONT = "DejaVuSans-Bold.ttf"
BUNDLED_DATE_FONT = "DejaVuSans.ttf"
BOLD_STYLES = ("Bold", "Black", "Heavy")


@dataclass
class TicketFonts:
    """Fonts used for the score and date overlays."""

    score: ImageFont.FreeTypeFont
    date: ImageFont.FreeTypeFont


def _bundled_font_bytes(name: str) -> bytes:
    return resources.files("ticketmint.assets").joinpath(f"fonts/{name}").read_bytes()


def load_font(size: int, configured_path: str = "", bundled: str = "") -> ImageFont.FreeTypeFont:
    """Load a TrueType font at ``size``.

    ``configured_path`` wins when set; otherwise the bundled font is used.

    Raises:
        RenderError: the font could not be loaded
    """
    try:
        if configured_path:
            return ImageFont.truetype(configured_path, size=size)
        return ImageFont.truetype(io.BytesIO(_bundled_font_bytes(bundled)), size=size)
    except OSError as e:
        raise RenderError(f"Failed to load font {configured_path or bundled}: {e}") from e


def load_ticket_fonts(score_font_path: str = "", date_font_path: str = "") -> TicketFonts:
    """Load the score and date fonts.

    Raises:
        RenderError: a font could not be loaded, or the score font is not bold
    """
    score = load_font(SCORE_FONT_SIZE, score_font_path, BUNDLED_SCORE_FONT)
    family, style = score.getname()
    if not any(weight in (style or "") for weight in BOLD_STYLES):
        raise RenderError(f"Score font {family} {style} is not bold")

    return TicketFonts(
        score=score,
        date=load_font(DATE_FONT_SIZE, date_font_path, BUNDLED_DATE_FONT),
    )


def decode_logo(path: Path) -> Image.Image:
    """Open a downloaded logo as RGBA.

    Raises:
        DecodeError: file is not a readable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Invalid logo image {path.name}: {e}") from e


def fit_logo(logo: Image.Image) -> Image.Image:
    """Downscale (never upscale) into the logo box, keeping aspect ratio."""
    fitted = logo.copy()
    fitted.thumbnail((LOGO_MAX_WIDTH, LOGO_MAX_HEIGHT), Image.Resampling.LANCZOS)
    return fitted


def render_canvas(
    home_logo: Image.Image,
    guest_logo: Image.Image,
    score_text: str,
    date_text: str,
    fonts: TicketFonts,
) -> Image.Image:
    """Draw the ticket image in memory."""
    canvas = Image.new("RGB", (IMAGE_WIDTH, IMAGE_HEIGHT), BACKGROUND)

    home = fit_logo(home_logo)
    canvas.paste(home, (LOGO_MARGIN, IMAGE_HEIGHT // 2 - home.height // 2), home)

    guest = fit_logo(guest_logo)
    canvas.paste(
        guest,
        (IMAGE_WIDTH - LOGO_MARGIN - guest.width, IMAGE_HEIGHT // 2 - guest.height // 2),
        guest,
    )

    draw = ImageDraw.Draw(canvas)
    score_x = max(0, IMAGE_WIDTH // 2 - len(score_text) * SCORE_GLYPH_WIDTH)
    draw.text(
        (score_x, IMAGE_HEIGHT // 2 - SCORE_FONT_SIZE),
        score_text,
        font=fonts.score,
        fill=SCORE_COLOR,
    )
    draw.text(
        (IMAGE_WIDTH // 2 - DATE_OFFSET_X, IMAGE_HEIGHT // 2),
        date_text,
        font=fonts.date,
        fill=DATE_COLOR,
    )
    return canvas


def compose_ticket_image(
    home_logo_path: Path,
    guest_logo_path: Path,
    score_text: str,
    date_text: str,
    dest_dir: Path,
    stem: str,
    score_font_path: str = "",
    date_font_path: str = "",
) -> Path:
    """Compose the ticket image and write it to ``dest_dir/{stem}.png``.

    ``stem`` is the digest of the originating ticket, so the same ticket
    content always produces the same file name. Input logos are left in
    place for the caller to delete.

    Args:
        home_logo_path: Downloaded host team logo
        guest_logo_path: Downloaded guest team logo
        score_text: e.g. "2 - 1"
        date_text: e.g. "2023-11-14 22:13"
        dest_dir: Directory to write into
        stem: Output file name without extension
        score_font_path: TrueType font overriding the bundled bold score font
        date_font_path: TrueType font overriding the bundled date font

    Returns:
        Path of the written PNG

    Raises:
        DecodeError: a logo is not a valid image
        RenderError: font loading failed, the score font is not bold,
            or writing the PNG failed
    """
    home_logo = decode_logo(home_logo_path)
    guest_logo = decode_logo(guest_logo_path)
    fonts = load_ticket_fonts(score_font_path, date_font_path)

    canvas = render_canvas(home_logo, guest_logo, score_text, date_text, fonts)

    output_path = dest_dir / f"{stem}.png"
    try:
        canvas.save(output_path, format="PNG")
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to write ticket image {output_path}: {e}") from e

    logger.info(
        f"Composed ticket image {output_path.name} "
        f"(home {home_logo.width}x{home_logo.height}, guest {guest_logo.width}x{guest_logo.height})"
    )
    return output_path
