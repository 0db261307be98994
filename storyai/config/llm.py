"""
LLM configuration for the storybook text generator.

The story text (title, character description, cover prompt and pages) is
written by Gemini through DSPy.

Includes:
- 120s timeout per LLM call to fail fast on hanging connections
- Retry with exponential backoff for transient network errors
"""

import os
import logging
from dotenv import load_dotenv
import dspy
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

# Load environment variables from .env file
load_dotenv()

# Logging for retry attempts
logger = logging.getLogger(__name__)

# Text model used for story generation
STORY_MODEL = "gemini-3-pro-preview"

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120

# Network errors that should trigger retry
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    BrokenPipeError,
    OSError,  # Catches [Errno 32] Broken pipe
)


class MissingAPIKeyError(RuntimeError):
    """No Gemini API key is configured on the server."""


def get_gemini_api_key() -> str:
    """
    Get the Gemini API key.

    GEMINI_API_KEY is preferred; GOOGLE_API_KEY is accepted as a fallback.

    Raises:
        MissingAPIKeyError: if neither variable is set
    """
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise MissingAPIKeyError("GEMINI_API_KEY is not set. Set it in .env file.")
    return api_key


def get_inference_lm() -> dspy.LM:
    """
    Get the inference LM for story generation.

    Gemini returns the whole book in one structured response, so the
    token budget is sized for 15 pages plus illustration prompts.
    """
    return dspy.LM(
        f"gemini/{STORY_MODEL}",
        api_key=get_gemini_api_key(),
        max_tokens=8192,
        temperature=1.0,  # Google recommends 1.0 for Gemini 3
        timeout=LLM_TIMEOUT,
    )


# Retry decorator for LLM calls with network errors
llm_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=2, min=2, max=10),
    retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def get_inference_model_name() -> str:
    """Get the name of the inference model that will be used."""
    return STORY_MODEL


def configure_dspy() -> None:
    """
    Configure DSPy with the inference LM globally.

    Note:
        For testing or when you need explicit control, prefer passing
        an LM directly to StoryWriter(lm=...) instead of using
        this global configuration.
    """
    dspy.configure(lm=get_inference_lm())
