"""Text-to-speech backends."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from google.cloud import texttospeech

from textcast.config import VoiceConfig

LOGGER = logging.getLogger(__name__)


class SynthesisBackend(Protocol):
    """Converts one piece of text to encoded audio bytes."""

    def synthesize_one(self, text: str, *, timeout: float | None = None) -> bytes:
        ...


class GoogleTTSBackend:
    """Thin wrapper around the Google Cloud Text-to-Speech client.

    Voice and encoding come from a fixed ``VoiceConfig``; nothing about a
    request depends on the text being synthesized.
    """

    def __init__(self, voice: VoiceConfig | None = None, client: Any | None = None) -> None:
        self.voice = voice or VoiceConfig()
        self._client = client or texttospeech.TextToSpeechClient()
        self._voice_params = texttospeech.VoiceSelectionParams(
            language_code=self.voice.language_code,
            name=self.voice.voice_name,
            ssml_gender=texttospeech.SsmlVoiceGender[self.voice.gender.upper()],
        )
        self._audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding[self.voice.audio_encoding.upper()],
            effects_profile_id=list(self.voice.effects_profile),
        )

    def synthesize_one(self, text: str, *, timeout: float | None = None) -> bytes:
        # The service answers INVALID_ARGUMENT for input without text.
        if not text.strip():
            raise ValueError("Cannot synthesize blank text")
        request: dict[str, Any] = {
            "input": texttospeech.SynthesisInput(text=text),
            "voice": self._voice_params,
            "audio_config": self._audio_config,
        }
        if timeout is not None:
            response = self._client.synthesize_speech(request=request, timeout=timeout)
        else:
            response = self._client.synthesize_speech(request=request)
        LOGGER.debug("Synthesized %d characters into %d bytes", len(text), len(response.audio_content))
        return response.audio_content
