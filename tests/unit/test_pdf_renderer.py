"""Unit tests for the storybook PDF renderer."""

import io
import re

from PIL import Image

from storyai.core.pdf_renderer import fit_paragraph, load_square_image, render_book_pdf
from storyai.core.types import BookDocument, DocumentPage


def _png(width: int = 64, height: int = 32, color=(200, 120, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def _page_count(pdf: bytes) -> int:
    return len(re.findall(rb"/Type /Page\b", pdf))


def _book(pages: int = 3, **kwargs) -> BookDocument:
    return BookDocument(
        title=kwargs.get("title", "Kiko Goes to the Moon"),
        target_age="3-5",
        cover_image=kwargs.get("cover_image"),
        pages=[
            DocumentPage(page_number=n, content=f"Page {n}: Kiko hops across the moon.", illustration=kwargs.get("illustration"))
            for n in range(1, pages + 1)
        ],
    )


class TestRenderBookPdf:
    def test_cover_plus_one_page_per_story_page(self):
        pdf = render_book_pdf(_book(pages=5))

        assert pdf.startswith(b"%PDF")
        assert _page_count(pdf) == 6

    def test_renders_images(self):
        pdf = render_book_pdf(_book(pages=2, cover_image=_png(), illustration=_png(30, 90)))

        assert _page_count(pdf) == 3
        assert b"/Subtype /Image" in pdf

    def test_undecodable_images_become_placeholders(self):
        pdf = render_book_pdf(_book(pages=1, cover_image=b"not an image", illustration=b"junk"))

        assert _page_count(pdf) == 2
        assert b"/Subtype /Image" not in pdf

    def test_escapes_markup_in_title_and_text(self):
        book = _book(pages=1, title="Kiko & <Friends>")
        book.pages[0].content = "Tom & Jerry <3"

        assert _page_count(render_book_pdf(book)) == 2


class TestHelpers:
    def test_load_square_image_crops_to_square(self):
        reader = load_square_image(_png(100, 40))

        assert reader.getSize()[0] == reader.getSize()[1]

    def test_load_square_image_rejects_garbage(self):
        assert load_square_image(b"garbage") is None
        assert load_square_image(None) is None

    def test_long_text_shrinks_font(self):
        short, _ = fit_paragraph("Short.", 400, 200)
        long_para, height = fit_paragraph("Once upon a time " * 80, 400, 200)

        assert long_para.style.fontSize < short.style.fontSize
        assert long_para.style.fontSize >= 9
