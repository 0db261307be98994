"""Unit tests for the StoryWriter module."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from storyai.core.modules.story_writer import StoryGenerationError, StoryWriter, anchor_prompt
from storyai.core.signatures import StorybookPage
from storyai.core.types import StoryParams

DESCRIPTION = "A small orange cat with a blue scarf and green eyes"


def _prediction(**overrides):
    fields = {
        "title": "Kiko Goes to the Moon",
        "character_description": DESCRIPTION,
        "cover_prompt": "Kiko waving from a silver rocket",
        "pages": [
            StorybookPage(page_number=3, content="Kiko builds a rocket.", illustration_prompt="Kiko with tools"),
            StorybookPage(page_number=7, content="Kiko lands on the moon.", illustration_prompt="Kiko on grey dust"),
        ],
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def writer():
    writer = StoryWriter()
    writer.generate = MagicMock(return_value=_prediction())
    return writer


@pytest.fixture
def params():
    return StoryParams(theme="space", character_name="Kiko", age="3-5", moral="Be brave", language="English", pages=5)


class TestAnchorPrompt:
    def test_prefixes_description(self):
        result = anchor_prompt("Kiko on the moon", DESCRIPTION)

        assert result == f"{DESCRIPTION}. Kiko on the moon"

    def test_keeps_prompt_that_already_starts_with_description(self):
        prompt = f"{DESCRIPTION.upper()}, standing on the moon"

        assert anchor_prompt(prompt, DESCRIPTION) == prompt

    def test_without_description(self):
        assert anchor_prompt("  Kiko on the moon ", "") == "Kiko on the moon"

    def test_empty_prompt_falls_back_to_description(self):
        assert anchor_prompt("", DESCRIPTION) == f"{DESCRIPTION}."


class TestStoryWriter:
    def test_passes_wizard_fields_to_model(self, writer, params):
        writer.forward(params)

        kwargs = writer.generate.call_args.kwargs
        assert kwargs["theme"] == "space"
        assert kwargs["character_name"] == "Kiko"
        assert kwargs["target_age"] == "3-5"
        assert kwargs["moral"] == "Be brave"
        assert kwargs["page_count"] == 5
        assert kwargs["language"] == "English"

    def test_renumbers_pages_in_order(self, writer, params):
        draft = writer.forward(params)

        assert [p.page_number for p in draft.pages] == [1, 2]
        assert draft.pages[0].content == "Kiko builds a rocket."

    def test_anchors_every_illustration_prompt(self, writer, params):
        draft = writer.forward(params)

        assert all(p.illustration_prompt.startswith(DESCRIPTION) for p in draft.pages)

    def test_accepts_dict_pages(self, writer, params):
        writer.generate.return_value = _prediction(
            pages=[{"page_number": 1, "content": "Hello.", "illustration_prompt": "Kiko waves"}]
        )

        draft = writer.forward(params)

        assert draft.pages[0].content == "Hello."

    def test_skips_empty_pages(self, writer, params):
        writer.generate.return_value = _prediction(
            pages=[
                {"content": "  ", "illustration_prompt": "nothing"},
                {"content": "Real text.", "illustration_prompt": "Kiko"},
            ]
        )

        draft = writer.forward(params)

        assert draft.page_count == 1
        assert draft.pages[0].page_number == 1

    def test_missing_title_raises(self, writer, params):
        writer.generate.return_value = _prediction(title="")

        with pytest.raises(StoryGenerationError, match="missing title"):
            writer.forward(params)

    def test_no_pages_raises(self, writer, params):
        writer.generate.return_value = _prediction(pages=[])

        with pytest.raises(StoryGenerationError):
            writer.forward(params)

    def test_cover_prompt_falls_back_to_title(self, writer, params):
        writer.generate.return_value = _prediction(cover_prompt="")

        draft = writer.forward(params)

        assert draft.cover_prompt == "Kiko Goes to the Moon"

    def test_invalid_params_never_reach_model(self, writer):
        with pytest.raises(ValueError):
            writer.forward(StoryParams(theme="space", character_name="Kiko", pages=20))

        writer.generate.assert_not_called()
