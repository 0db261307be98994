"""
Module for generating cover and page illustrations with Gemini Flash Image.

Every prompt is wrapped in a fixed children's-book style prefix so that the
cover and all pages share one look. Rate-limit errors are retried with
exponential backoff (see ``storyai.config.image.image_retry``).
"""

import logging
from typing import Optional

from storyai.config import (
    IMAGE_CONSTANTS,
    extract_image_from_response,
    get_genai_client,
    get_image_config,
    get_image_model,
    image_retry,
)

logger = logging.getLogger(__name__)


class Illustrator:
    """
    Generate illustrations from text prompts.

    Args:
        client: Optional genai client. Defaults to a client built from
            GEMINI_API_KEY; pass a mock in tests.
    """

    def __init__(self, client=None):
        self.client = client or get_genai_client()
        self.model = get_image_model()
        self.config = get_image_config()

    @staticmethod
    def build_prompt(prompt: str) -> str:
        """Prefix the scene prompt with the house illustration style."""
        return f"{IMAGE_CONSTANTS['style_prefix']}{prompt.strip()}"

    def illustrate(self, prompt: str) -> Optional[bytes]:
        """
        Generate one illustration.

        Args:
            prompt: Scene description (cover prompt or page illustration prompt)

        Returns:
            PNG/JPEG image bytes, or None if the model returned no image

        Raises:
            google.genai.errors.APIError: non rate-limit errors, or a rate-limit
                error that persisted through every retry
        """
        image = self._generate_image(self.build_prompt(prompt))
        if image is None:
            logger.warning("Image model returned no image", extra={"stage": "illustration"})
        return image

    @image_retry
    def _generate_image(self, full_prompt: str) -> Optional[bytes]:
        """Call the image model once (retried on rate limits)."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=[full_prompt],
            config=self.config,
        )
        return extract_image_from_response(response)
