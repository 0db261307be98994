#!/usr/bin/env python3
"""
CLI for generating a children's storybook as a PDF.

Runs story writing and illustration locally; nothing is stored in the
database or object storage.

Usage:
    python cli/generate_book.py "a trip to the moon" --character Kiko
    python cli/generate_book.py "sharing toys" --character Budi --age 6-8 --pages 10
    python cli/generate_book.py "the ocean" --character Luna --language English --no-images
"""

import argparse
import logging
import re
import sys
import time
from datetime import datetime
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storyai.config import STORY_CONSTANTS, configure_dspy
from storyai.core import BookDocument, DocumentPage, StoryParams
from storyai.core.modules import Illustrator, StoryGenerationError, StoryWriter
from storyai.core.pdf_renderer import render_book_pdf


def main():
    parser = argparse.ArgumentParser(
        description="Generate a children's storybook PDF from a theme",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_book.py "a trip to the moon" --character Kiko
    python cli/generate_book.py "sharing toys" --character Budi --moral "Sharing makes friends"
    python cli/generate_book.py "the ocean" --character Luna --output luna.pdf --verbose
        """,
    )

    parser.add_argument(
        "theme",
        type=str,
        help="What the story is about",
    )

    parser.add_argument(
        "--character", "-c",
        type=str,
        required=True,
        help="Name of the main character",
    )

    parser.add_argument(
        "--age",
        type=str,
        default=STORY_CONSTANTS["default_age"],
        choices=STORY_CONSTANTS["age_groups"],
        help=f"Target age group (default: {STORY_CONSTANTS['default_age']})",
    )

    parser.add_argument(
        "--moral",
        type=str,
        default="",
        help="Moral value the story should teach",
    )

    parser.add_argument(
        "--language",
        type=str,
        default=STORY_CONSTANTS["default_language"],
        choices=STORY_CONSTANTS["languages"],
        help=f"Story language (default: {STORY_CONSTANTS['default_language']})",
    )

    parser.add_argument(
        "--pages",
        type=int,
        default=STORY_CONSTANTS["default_pages"],
        help=(
            f"Number of pages, {STORY_CONSTANTS['min_pages']}-{STORY_CONSTANTS['max_pages']} "
            f"(default: {STORY_CONSTANTS['default_pages']})"
        ),
    )

    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Skip cover and page illustrations (text-only PDF)",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file name (saved to output/ directory). Auto-generated if not specified.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress information",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    params = StoryParams(
        theme=args.theme,
        character_name=args.character,
        age=args.age,
        moral=args.moral,
        language=args.language,
        pages=args.pages,
    )
    try:
        params.validate()
    except ValueError as e:
        parser.error(str(e))

    if args.verbose:
        print("Configuring DSPy...")
    configure_dspy()

    if args.verbose:
        print(f"Writing a {params.pages}-page story about: {params.theme}")

    start = time.time()
    try:
        draft = StoryWriter()(params)
    except StoryGenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    cover_image = None
    page_images = [None] * draft.page_count
    if not args.no_images:
        illustrator = Illustrator()

        if args.verbose:
            print("Drawing the cover...")
        try:
            cover_image = illustrator.illustrate(draft.cover_prompt)
        except Exception as e:
            print(f"Cover failed, continuing without it: {e}", file=sys.stderr)

        for i, page in enumerate(draft.pages):
            if args.verbose:
                print(f"Illustrating page {page.page_number}/{draft.page_count}...")
            try:
                page_images[i] = illustrator.illustrate(page.illustration_prompt)
            except Exception as e:
                print(f"Page {page.page_number} failed, skipping: {e}", file=sys.stderr)
                continue
            time.sleep(STORY_CONSTANTS["batch_delay_seconds"])

    document = BookDocument(
        title=draft.title,
        target_age=params.age,
        cover_image=cover_image,
        pages=[
            DocumentPage(page_number=p.page_number, content=p.content, illustration=img)
            for p, img in zip(draft.pages, page_images)
        ],
    )
    pdf = render_book_pdf(document)

    # Determine output path
    output_dir = Path(__file__).parent.parent / "output"
    output_dir.mkdir(exist_ok=True)

    if args.output:
        filename = args.output if args.output.endswith(".pdf") else f"{args.output}.pdf"
    else:
        # Auto-generate filename from title and timestamp
        slug = re.sub(r"[^a-z0-9]+", "_", draft.title.lower())[:30].strip("_") or "storybook"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{slug}_{timestamp}.pdf"

    output_path = output_dir / filename
    output_path.write_bytes(pdf)
    print(f"Book saved to: {output_path}")

    # Print summary if verbose
    if args.verbose:
        print("\n--- Generation Summary ---")
        print(f"Title: {draft.title}")
        print(f"Pages: {draft.page_count}")
        print(f"Words: {draft.word_count}")
        print(f"Illustrated pages: {sum(1 for img in page_images if img)}")
        print(f"PDF pages: {document.pdf_page_count}")
        print(f"Time: {time.time() - start:.1f}s")


if __name__ == "__main__":
    main()
