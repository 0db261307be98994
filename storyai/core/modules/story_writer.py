"""
DSPy Module for writing a complete storybook from the wizard parameters.

The model returns title, character description, cover prompt and pages in
one structured response. The writer then normalises the result:
- pages are renumbered 1..N in reading order
- every illustration prompt is anchored on the character description so
  the image model draws the same character on every page
"""

import dspy

from storyai.config import llm_retry
from ..signatures.storybook import StorybookSignature
from ..types import PageDraft, StoryDraft, StoryParams

# How much of the description must open a prompt to count as anchored
ANCHOR_PREFIX_CHARS = 30


class StoryGenerationError(Exception):
    """The text model did not return a usable story."""


def anchor_prompt(prompt: str, character_description: str) -> str:
    """Make sure an illustration prompt starts with the character description."""
    prompt = (prompt or "").strip()
    description = (character_description or "").strip()
    if not description:
        return prompt

    head = description[:ANCHOR_PREFIX_CHARS].lower()
    if prompt.lower().startswith(head):
        return prompt
    return f"{description.rstrip('.')}. {prompt}".strip()


def _page_value(page, name: str) -> str:
    # Typed outputs arrive as StorybookPage; adapters may fall back to dicts
    if isinstance(page, dict):
        return page.get(name) or ""
    return getattr(page, name, "") or ""


class StoryWriter(dspy.Module):
    """
    Write a storybook (title, character description, cover prompt, pages).

    Args:
        lm: Optional explicit LM to use. If provided, bypasses global
            dspy.configure() state. Useful for testing and explicit control.
    """

    def __init__(self, lm: dspy.LM = None):
        super().__init__()
        self._lm = lm
        self.generate = dspy.Predict(StorybookSignature)

    def forward(self, params: StoryParams) -> StoryDraft:
        """Generate the story for the given wizard parameters."""
        params.validate()

        if self._lm is not None:
            with dspy.context(lm=self._lm):
                return self._write(params)
        return self._write(params)

    def _write(self, params: StoryParams) -> StoryDraft:
        result = llm_retry(self.generate)(
            theme=params.theme.strip(),
            character_name=params.character_name.strip(),
            target_age=params.age,
            moral=params.moral.strip(),
            page_count=params.pages,
            language=params.language,
        )
        return self._to_draft(result)

    def _to_draft(self, result) -> StoryDraft:
        """Convert the prediction into a StoryDraft, rejecting empty output."""
        title = (getattr(result, "title", "") or "").strip()
        raw_pages = getattr(result, "pages", None) or []

        if not title:
            raise StoryGenerationError("Failed to get story data from the model: missing title")

        description = (getattr(result, "character_description", "") or "").strip()

        pages = []
        for page in raw_pages:
            content = _page_value(page, "content").strip()
            if not content:
                continue
            pages.append(
                PageDraft(
                    page_number=len(pages) + 1,
                    content=content,
                    illustration_prompt=anchor_prompt(
                        _page_value(page, "illustration_prompt"), description
                    ),
                )
            )

        if not pages:
            raise StoryGenerationError("Failed to get story data from the model: no pages")

        return StoryDraft(
            title=title,
            character_description=description,
            cover_prompt=(getattr(result, "cover_prompt", "") or "").strip() or title,
            pages=pages,
        )
