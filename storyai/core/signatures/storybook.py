"""
DSPy Signature for writing a complete storybook from the wizard parameters.

One call returns everything the book needs: the title, a fixed character
description for illustration consistency, the cover prompt and every page.
"""

import dspy
from pydantic import BaseModel, Field


class StorybookPage(BaseModel):
    """One page of the generated storybook."""

    page_number: int = Field(description="1-based page number")
    content: str = Field(description="The story text printed on this page")
    illustration_prompt: str = Field(
        description="What to draw. Must start with the character description."
    )


class StorybookSignature(dspy.Signature):
    """
    Create a children's storybook outline and content.

    Make the story engaging, age-appropriate, and ensure character consistency.
    Write the page text in the requested language. For a bilingual book,
    write each page in Indonesian followed by its English translation.

    CHARACTER CONSISTENCY:
    - The character description must be very specific about hair color,
      clothing, and features, so every illustration shows the same character.
    - Each illustration prompt MUST start with a reference to the
      character description.

    PAGES:
    - Produce exactly the requested number of pages, numbered from 1.
    - Keep sentences short for the youngest age group.
    - Let the moral emerge from what happens; never lecture.
    """

    theme: str = dspy.InputField(desc="What the story is about")

    character_name: str = dspy.InputField(desc="Name of the main character")

    target_age: str = dspy.InputField(desc="Reader age group in years, e.g. '3-5'")

    moral: str = dspy.InputField(desc="Moral value the story should carry (may be empty)")

    page_count: int = dspy.InputField(desc="Number of pages to write")

    language: str = dspy.InputField(desc="Language of the page text")

    title: str = dspy.OutputField(desc="A fun title for the book")

    character_description: str = dspy.OutputField(
        desc="Detailed physical description of the main character"
    )

    cover_prompt: str = dspy.OutputField(
        desc="Detailed image generation prompt for the cover, including the character and setting"
    )

    pages: list[StorybookPage] = dspy.OutputField(desc="The story pages in reading order")
