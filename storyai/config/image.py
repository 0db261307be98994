"""
Image generation configuration for the storybook generator.

Uses Gemini 2.5 Flash Image for covers and page illustrations.
The image endpoint is the one most likely to hit per-minute quotas, so
calls are wrapped in ``image_retry``: exponential backoff on rate-limit
errors only, everything else propagates immediately.
"""

import base64
import logging
from typing import Optional

from google import genai
from google.genai.types import GenerateContentConfig, ImageConfig, Modality
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from .llm import get_gemini_api_key

logger = logging.getLogger(__name__)

# Image generation constants
IMAGE_CONSTANTS = {
    "model": "gemini-2.5-flash-image",
    "aspect_ratio": "1:1",
    "style_prefix": (
        "Children's book illustration, cute cartoon style, bright colors, "
        "Disney-like aesthetic, high quality: "
    ),
    "max_retries": 3,  # Retries after the first attempt
    "backoff_base_seconds": 2,  # Wait before retry i is base * 2**i
    "backoff_jitter_seconds": 1,
}


def get_genai_client() -> genai.Client:
    """
    Get the Gemini client used for illustration and narration generation.

    Uses GEMINI_API_KEY (or GOOGLE_API_KEY) from environment.
    """
    return genai.Client(api_key=get_gemini_api_key())


def get_image_model() -> str:
    """Get the image model ID."""
    return IMAGE_CONSTANTS["model"]


def get_image_config() -> GenerateContentConfig:
    """Get the default config for image generation."""
    return GenerateContentConfig(
        response_modalities=[Modality.TEXT, Modality.IMAGE],
        image_config=ImageConfig(aspect_ratio=IMAGE_CONSTANTS["aspect_ratio"]),
    )


def is_rate_limit_error(error: BaseException) -> bool:
    """True when the error means the API quota is exhausted (HTTP 429)."""
    if getattr(error, "code", None) == 429:
        return True
    if getattr(error, "status", None) == "RESOURCE_EXHAUSTED":
        return True
    return "429" in str(error)


def _log_rate_limit(retry_state: RetryCallState) -> None:
    wait_seconds = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Rate limit hit, retrying in {round(wait_seconds * 1000)}ms... "
        f"(Attempt {retry_state.attempt_number}/{IMAGE_CONSTANTS['max_retries']})",
        extra={"attempt": retry_state.attempt_number},
    )


# Retry decorator for image calls: 2s, 4s, 8s (+ up to 1s jitter)
image_retry = retry(
    stop=stop_after_attempt(IMAGE_CONSTANTS["max_retries"] + 1),
    wait=wait_exponential(multiplier=IMAGE_CONSTANTS["backoff_base_seconds"])
    + wait_random(0, IMAGE_CONSTANTS["backoff_jitter_seconds"]),
    retry=retry_if_exception(is_rate_limit_error),
    before_sleep=_log_rate_limit,
    reraise=True,
)


def iter_inline_parts(response):
    """Yield every part of the first candidate that carries inline data."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        if getattr(part, "inline_data", None) and part.inline_data.data:
            yield part


def extract_image_from_response(response) -> Optional[bytes]:
    """
    Extract image bytes from a Gemini API response.

    Args:
        response: The response from genai.Client.models.generate_content()

    Returns:
        Image bytes (PNG/JPEG), or None if the response holds no image
    """
    for part in iter_inline_parts(response):
        data = part.inline_data.data
        return base64.b64decode(data) if isinstance(data, str) else data
    return None
