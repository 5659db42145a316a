"""Application configuration defaults."""

from __future__ import annotations

import json
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

# Current per-request character limit of the Google Cloud TTS API.
DEFAULT_TTS_CHAR_LIMIT = 5000

# File extension and content type of the container each encoding produces.
AUDIO_FORMATS: Dict[str, Tuple[str, str]] = {
    "MP3": (".mp3", "audio/mpeg"),
    "OGG_OPUS": (".ogg", "audio/ogg"),
    "LINEAR16": (".wav", "audio/wav"),
}


@dataclass(slots=True, frozen=True)
class VoiceConfig:
    language_code: str = "en-US"
    voice_name: str = "en-US-Wavenet-F"
    gender: str = "FEMALE"
    audio_encoding: str = "MP3"
    effects_profile: Tuple[str, ...] = ("headphone-class-device",)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "VoiceConfig":
        values: Dict[str, Any] = {}
        aliases = {
            "languageCode": "language_code",
            "name": "voice_name",
            "ssmlGender": "gender",
            "audioEncoding": "audio_encoding",
            "effectsProfileId": "effects_profile",
        }
        for key, value in payload.items():
            name = aliases.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        profile = values.get("effects_profile")
        if isinstance(profile, str):
            values["effects_profile"] = (profile,)
        elif profile is not None:
            values["effects_profile"] = tuple(profile)
        return cls(**values)


@dataclass(slots=True)
class AppConfig:
    tts_char_limit: int = DEFAULT_TTS_CHAR_LIMIT
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    store_bucket: str = ""
    work_root: Path | None = None
    max_concurrency: int = 4
    synthesis_timeout: float | None = None
    upload_timeout: float | None = None
    ffmpeg_path: str = "ffmpeg"
    audio_extension: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.tts_char_limit, bool) or not isinstance(self.tts_char_limit, int):
            raise ValueError("tts_char_limit must be an integer")
        if self.tts_char_limit <= 0:
            raise ValueError("tts_char_limit must be positive")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.work_root is not None:
            self.work_root = Path(self.work_root)

        encoding = self.voice.audio_encoding.upper()
        if encoding not in AUDIO_FORMATS:
            raise ValueError(
                f"Unsupported audio encoding {self.voice.audio_encoding!r}; "
                f"expected one of {sorted(AUDIO_FORMATS)}"
            )
        extension = AUDIO_FORMATS[encoding][0]
        if self.audio_extension is None:
            self.audio_extension = extension
        elif self.audio_extension != extension:
            raise ValueError(
                f"audio_extension {self.audio_extension!r} does not match {encoding} audio ({extension})"
            )

    @property
    def audio_content_type(self) -> str:
        return AUDIO_FORMATS[self.voice.audio_encoding.upper()][1]

    def resolve_work_root(self) -> Path:
        if self.work_root is None:
            return Path(tempfile.gettempdir())
        return Path(self.work_root)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AppConfig":
        """Build a config from a flat mapping or the nested ``gcp`` layout."""
        values: Dict[str, Any] = {}
        gcp = payload.get("gcp")
        if isinstance(gcp, Mapping):
            if "bucket" in gcp:
                values["store_bucket"] = gcp["bucket"]
            if "ttsCharLimit" in gcp:
                values["tts_char_limit"] = gcp["ttsCharLimit"]
            voice = (gcp.get("ttsOptions") or {}).get("voice")
            if isinstance(voice, Mapping):
                values["voice"] = VoiceConfig.from_dict(voice)

        for key, value in payload.items():
            if key == "gcp" or key not in cls.__dataclass_fields__:
                continue
            if key == "voice" and isinstance(value, Mapping):
                value = VoiceConfig.from_dict(value)
            values[key] = value
        return cls(**values)

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, Mapping):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls.from_dict(payload)
