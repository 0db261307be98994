"""
Render a storybook into a printable A4 PDF.

Layout:
  * Cover: indigo-to-purple gradient, square cover illustration, title and
    the target age line.
  * One page per story page: square illustration (or grey placeholder),
    a "PAGE n" label and the page text, shrunk to fit when it is long.
"""

import logging
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from PIL import Image, ImageOps
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from .types import BookDocument, DocumentPage

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40
CORNER_RADIUS = 14

COVER_GRADIENT = (colors.HexColor("#6366f1"), colors.HexColor("#9333ea"))
ACCENT = colors.HexColor("#6366f1")
PLACEHOLDER = colors.HexColor("#f3f4f6")
TEXT_COLOR = colors.HexColor("#1f2937")

# Rasterisation size for illustrations (pixels per side)
IMAGE_PIXELS = 1024

TITLE_STYLE = ParagraphStyle(
    "CoverTitle",
    fontName="Helvetica-Bold",
    fontSize=36,
    leading=42,
    alignment=TA_CENTER,
    textColor=colors.white,
)

SUBTITLE_STYLE = ParagraphStyle(
    "CoverSubtitle",
    fontName="Helvetica-Bold",
    fontSize=13,
    leading=16,
    alignment=TA_CENTER,
    textColor=colors.white,
)

BODY_FONT_SIZE = 18
BODY_MIN_FONT_SIZE = 9


def load_square_image(data: Optional[bytes]) -> Optional[ImageReader]:
    """Decode image bytes and centre-crop them to a square (object-fit: cover)."""
    if not data:
        return None
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (OSError, ValueError) as e:
        logger.warning(f"Skipping undecodable image: {e}")
        return None
    image = ImageOps.fit(image.convert("RGB"), (IMAGE_PIXELS, IMAGE_PIXELS))
    return ImageReader(image)


def _draw_rounded_image(
    c: canvas.Canvas,
    image: Optional[ImageReader],
    x: float,
    y: float,
    side: float,
    placeholder=PLACEHOLDER,
) -> None:
    c.saveState()
    path = c.beginPath()
    path.roundRect(x, y, side, side, CORNER_RADIUS)
    c.clipPath(path, stroke=0, fill=0)
    if image is None:
        c.setFillColor(placeholder)
        c.rect(x, y, side, side, stroke=0, fill=1)
    else:
        c.drawImage(image, x, y, width=side, height=side)
    c.restoreState()


def _body_style(font_size: float) -> ParagraphStyle:
    return ParagraphStyle(
        "PageBody",
        fontName="Times-Roman",
        fontSize=font_size,
        leading=font_size * 1.6,
        alignment=TA_CENTER,
        textColor=TEXT_COLOR,
    )


def fit_paragraph(text: str, width: float, height: float) -> tuple[Paragraph, float]:
    """Build the body paragraph, shrinking the font until it fits the box."""
    markup = escape(text).replace("\n", "<br/>")
    font_size = BODY_FONT_SIZE
    while True:
        para = Paragraph(markup, _body_style(font_size))
        _, para_height = para.wrap(width, height)
        if para_height <= height or font_size <= BODY_MIN_FONT_SIZE:
            return para, para_height
        font_size -= 1


def draw_cover(c: canvas.Canvas, book: BookDocument, cover: Optional[ImageReader]) -> None:
    """Draw the cover page."""
    c.saveState()
    c.linearGradient(0, PAGE_HEIGHT, PAGE_WIDTH, 0, COVER_GRADIENT, extend=True)
    c.restoreState()

    content_width = PAGE_WIDTH - 2 * MARGIN
    image_side = content_width * 0.8 if cover is not None else 0
    gap = 30

    title = Paragraph(escape(book.title), TITLE_STYLE)
    _, title_height = title.wrap(content_width, PAGE_HEIGHT)
    subtitle = Paragraph(
        escape(f"A STORY FOR {book.target_age} YEARS OLD"), SUBTITLE_STYLE
    )
    _, subtitle_height = subtitle.wrap(content_width, PAGE_HEIGHT)

    block_height = title_height + gap / 2 + subtitle_height
    if cover is not None:
        block_height += image_side + gap

    # Vertically centre the whole block
    top = (PAGE_HEIGHT + block_height) / 2

    if cover is not None:
        image_x = (PAGE_WIDTH - image_side) / 2
        top -= image_side
        _draw_rounded_image(c, cover, image_x, top, image_side)
        top -= gap

    top -= title_height
    title.drawOn(c, MARGIN, top)
    top -= gap / 2 + subtitle_height
    subtitle.drawOn(c, MARGIN, top)


def draw_page(
    c: canvas.Canvas,
    index: int,
    page: DocumentPage,
    illustration: Optional[ImageReader],
) -> None:
    """Draw one story page: illustration, page label and text."""
    content_width = PAGE_WIDTH - 2 * MARGIN
    image_side = min(content_width, PAGE_HEIGHT * 0.55)
    image_x = (PAGE_WIDTH - image_side) / 2
    image_y = PAGE_HEIGHT - MARGIN - image_side
    _draw_rounded_image(c, illustration, image_x, image_y, image_side)

    label_y = image_y - 36
    c.setFillColor(ACCENT)
    c.setFont("Helvetica-Bold", 11)
    c.drawCentredString(PAGE_WIDTH / 2, label_y, f"PAGE {index}")

    text_top = label_y - 16
    text_height = text_top - MARGIN
    para, para_height = fit_paragraph(page.content, content_width, text_height)
    para.drawOn(c, MARGIN, text_top - para_height)


def render_book_pdf(book: BookDocument) -> bytes:
    """
    Render the book to PDF bytes.

    Args:
        book: Title, age group, cover image and pages with their images

    Returns:
        The PDF document (cover plus one page per story page)
    """
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(book.title)

    draw_cover(c, book, load_square_image(book.cover_image))
    c.showPage()

    for index, page in enumerate(book.pages, start=1):
        draw_page(c, index, page, load_square_image(page.illustration))
        c.showPage()

    c.save()
    return buffer.getvalue()
