"""
Configuration module for the storybook generator.

Re-exports all configuration for convenient access.
"""

from .llm import (
    MissingAPIKeyError,
    configure_dspy,
    get_gemini_api_key,
    get_inference_lm,
    get_inference_model_name,
    llm_retry,
)
from .story import STORY_CONSTANTS
from .image import (
    IMAGE_CONSTANTS,
    get_genai_client,
    get_image_model,
    get_image_config,
    extract_image_from_response,
    image_retry,
    is_rate_limit_error,
)
from .speech import (
    SPEECH_CONSTANTS,
    get_speech_model,
    get_speech_config,
    extract_audio_from_response,
    pcm_to_wav,
)

__all__ = [
    # LLM
    "MissingAPIKeyError",
    "configure_dspy",
    "get_gemini_api_key",
    "get_inference_lm",
    "get_inference_model_name",
    "llm_retry",
    # Story
    "STORY_CONSTANTS",
    # Image
    "IMAGE_CONSTANTS",
    "get_genai_client",
    "get_image_model",
    "get_image_config",
    "extract_image_from_response",
    "image_retry",
    "is_rate_limit_error",
    # Speech
    "SPEECH_CONSTANTS",
    "get_speech_model",
    "get_speech_config",
    "extract_audio_from_response",
    "pcm_to_wav",
]
