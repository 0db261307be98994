"""Page narration with Gemini TTS."""

import logging
from typing import Optional

from storyai.config import (
    SPEECH_CONSTANTS,
    extract_audio_from_response,
    get_genai_client,
    get_speech_config,
    get_speech_model,
    pcm_to_wav,
)

logger = logging.getLogger(__name__)


class Narrator:
    """Read page text aloud with a prebuilt Gemini voice."""

    def __init__(self, client=None):
        self.client = client or get_genai_client()
        self.model = get_speech_model()

    def narrate(self, text: str, voice: Optional[str] = None) -> Optional[bytes]:
        """
        Synthesize narration for one page.

        Returns:
            WAV bytes, or None if the model returned no audio

        Raises:
            ValueError: if the text is empty or too long
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("No text provided")
        if len(text) > SPEECH_CONSTANTS["max_text_length"]:
            raise ValueError(
                f"Text too long (max {SPEECH_CONSTANTS['max_text_length']} chars)"
            )

        response = self.client.models.generate_content(
            model=self.model,
            contents=[text],
            config=get_speech_config(voice),
        )
        pcm = extract_audio_from_response(response)
        if pcm is None:
            logger.warning("TTS model returned no audio", extra={"stage": "narration"})
            return None
        return pcm_to_wav(pcm)
