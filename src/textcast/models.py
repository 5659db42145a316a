"""Core Textcast data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

# Extraction stage payloads use these keys; snake_case keys are accepted too.
_WIRE_KEYS = {
    "url": "source_url",
    "content": "text",
    "date_published": "published_date",
    "datePublished": "published_date",
    "leadImageUrl": "lead_image_url",
}


@dataclass(slots=True, frozen=True)
class ContentRecord:
    """Extracted article text plus the metadata carried through to publishing."""

    source_url: str
    text: str
    title: str | None = None
    author: str | None = None
    published_date: str | None = None
    excerpt: str | None = None
    lead_image_url: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ContentRecord":
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            name = _WIRE_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value

        source_url = values.get("source_url")
        if not isinstance(source_url, str) or not source_url:
            raise ValueError("Content record is missing its source url")
        text = values.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise ValueError("Content record text must be a string")
        values["text"] = text

        for name in ("title", "author", "published_date", "excerpt", "lead_image_url"):
            value = values.get(name)
            if value is not None and not isinstance(value, str):
                values[name] = str(value)
        return cls(**values)


@dataclass(slots=True, frozen=True)
class Chunk:
    """Slice of the source text sized for one synthesis call."""

    index: int
    text: str


@dataclass(slots=True, frozen=True)
class AudioChunk:
    """Synthesized audio for the chunk with the same index."""

    index: int
    audio: bytes


@dataclass(slots=True)
class WorkingArea:
    path: Path
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True, frozen=True)
class Artifact:
    """Single assembled audio file inside a working area."""

    path: Path


@dataclass(slots=True)
class PublishedObject:
    object_name: str
    metadata: Dict[str, str]
    public: bool = True
    url: str | None = None
