"""
Narration (text-to-speech) configuration.

Gemini TTS returns raw 16-bit little-endian mono PCM at 24 kHz, which is
wrapped in a WAV container before it is stored.
"""

import base64
import io
import wave
from typing import Optional

from google.genai.types import (
    GenerateContentConfig,
    Modality,
    PrebuiltVoiceConfig,
    SpeechConfig,
    VoiceConfig,
)

from .image import iter_inline_parts

SPEECH_CONSTANTS = {
    "model": "gemini-2.5-flash-preview-tts",
    "default_voice": "Kore",
    "sample_rate": 24000,
    "sample_width": 2,  # bytes per sample (16-bit)
    "channels": 1,
    "max_text_length": 5000,
}


def get_speech_model() -> str:
    """Get the TTS model ID."""
    return SPEECH_CONSTANTS["model"]


def get_speech_config(voice: Optional[str] = None) -> GenerateContentConfig:
    """Get the config for narration with a prebuilt voice."""
    return GenerateContentConfig(
        response_modalities=[Modality.AUDIO],
        speech_config=SpeechConfig(
            voice_config=VoiceConfig(
                prebuilt_voice_config=PrebuiltVoiceConfig(
                    voice_name=voice or SPEECH_CONSTANTS["default_voice"],
                )
            )
        ),
    )


def pcm_to_wav(pcm: bytes) -> bytes:
    """Wrap raw PCM samples in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(SPEECH_CONSTANTS["channels"])
        wav.setsampwidth(SPEECH_CONSTANTS["sample_width"])
        wav.setframerate(SPEECH_CONSTANTS["sample_rate"])
        wav.writeframes(pcm)
    return buffer.getvalue()


def extract_audio_from_response(response) -> Optional[bytes]:
    """Extract the raw PCM payload from a TTS response, or None."""
    for part in iter_inline_parts(response):
        data = part.inline_data.data
        return base64.b64decode(data) if isinstance(data, str) else data
    return None
