"""Unit tests for the Narrator module and PCM to WAV wrapping."""

import io
import wave
from unittest.mock import MagicMock

import pytest

from storyai.config import pcm_to_wav
from storyai.core.modules.narrator import Narrator


@pytest.fixture
def tts_client():
    client = MagicMock()
    part = MagicMock()
    part.inline_data.data = b"\x00\x01" * 2400  # 0.1s of 24kHz mono PCM
    response = MagicMock()
    response.candidates = [MagicMock()]
    response.candidates[0].content.parts = [part]
    client.models.generate_content.return_value = response
    return client


class TestPcmToWav:
    def test_wav_header_matches_tts_format(self):
        wav_bytes = pcm_to_wav(b"\x00\x00" * 100)

        with wave.open(io.BytesIO(wav_bytes)) as wav:
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.getframerate() == 24000
            assert wav.getnframes() == 100


class TestNarrator:
    def test_returns_wav(self, tts_client):
        audio = Narrator(client=tts_client).narrate("Kiko looked at the stars.")

        assert audio[:4] == b"RIFF"
        assert audio[8:12] == b"WAVE"

    def test_uses_default_voice(self, tts_client):
        Narrator(client=tts_client).narrate("Hello")

        config = tts_client.models.generate_content.call_args.kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"

    def test_uses_requested_voice(self, tts_client):
        Narrator(client=tts_client).narrate("Hello", voice="Puck")

        config = tts_client.models.generate_content.call_args.kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Puck"

    def test_rejects_empty_text(self, tts_client):
        with pytest.raises(ValueError, match="No text"):
            Narrator(client=tts_client).narrate("   ")

    def test_rejects_long_text(self, tts_client):
        with pytest.raises(ValueError, match="too long"):
            Narrator(client=tts_client).narrate("a" * 5001)
        tts_client.models.generate_content.assert_not_called()

    def test_returns_none_without_audio(self, tts_client):
        tts_client.models.generate_content.return_value.candidates[0].content.parts = []

        assert Narrator(client=tts_client).narrate("Hello") is None
