"""Tests for core data models."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from textcast.models import AudioChunk, Chunk, ContentRecord, PublishedObject, WorkingArea


class TestContentRecord:
    """Test ContentRecord dataclass."""

    def test_create_record(self) -> None:
        """Should create a record with all fields."""
        record = ContentRecord(
            source_url="https://example.com/a",
            text="Body",
            title="Title",
            author="Author",
            published_date="2020-01-01",
            excerpt="Excerpt",
            lead_image_url="https://example.com/a.png",
        )

        assert record.source_url == "https://example.com/a"
        assert record.text == "Body"
        assert record.title == "Title"

    def test_record_is_immutable(self) -> None:
        """Records are read-only once created."""
        record = ContentRecord(source_url="https://example.com/a", text="Body")

        with pytest.raises(FrozenInstanceError):
            record.text = "changed"  # type: ignore[misc]

    def test_from_dict_wire_keys(self) -> None:
        """Should accept the extraction stage's payload keys."""
        record = ContentRecord.from_dict(
            {
                "url": "https://example.com/a",
                "content": "Body text",
                "title": "T",
                "author": "A",
                "date_published": "2020-01-01T00:00:00.000Z",
                "lead_image_url": "https://example.com/i.png",
                "excerpt": "E",
                "domain": "example.com",
                "word_count": 2,
            }
        )

        assert record.source_url == "https://example.com/a"
        assert record.text == "Body text"
        assert record.published_date == "2020-01-01T00:00:00.000Z"
        assert record.lead_image_url == "https://example.com/i.png"

    def test_from_dict_snake_case(self) -> None:
        record = ContentRecord.from_dict({"source_url": "https://example.com/a", "text": "Body"})

        assert record == ContentRecord(source_url="https://example.com/a", text="Body")

    def test_from_dict_missing_text_is_empty(self) -> None:
        record = ContentRecord.from_dict({"url": "https://example.com/a", "content": None})

        assert record.text == ""

    def test_from_dict_requires_url(self) -> None:
        with pytest.raises(ValueError):
            ContentRecord.from_dict({"content": "Body"})

    def test_from_dict_rejects_non_string_text(self) -> None:
        with pytest.raises(ValueError):
            ContentRecord.from_dict({"url": "https://example.com/a", "content": ["a"]})

    def test_from_dict_stringifies_metadata(self) -> None:
        record = ContentRecord.from_dict({"url": "https://example.com/a", "content": "x", "title": 12})

        assert record.title == "12"


class TestChunkModels:
    """Test Chunk and AudioChunk dataclasses."""

    def test_chunk_equality(self) -> None:
        assert Chunk(index=0, text="a") == Chunk(index=0, text="a")
        assert Chunk(index=0, text="a") != Chunk(index=1, text="a")

    def test_audio_chunk(self) -> None:
        chunk = AudioChunk(index=3, audio=b"\x00\x01")

        assert chunk.index == 3
        assert chunk.audio == b"\x00\x01"


class TestWorkingArea:
    """Test WorkingArea dataclass."""

    def test_created_at_is_set(self, tmp_path: Path) -> None:
        area = WorkingArea(path=tmp_path)

        assert area.path == tmp_path
        assert area.created_at.tzinfo is not None


class TestPublishedObject:
    """Test PublishedObject dataclass."""

    def test_defaults(self) -> None:
        published = PublishedObject(object_name="abc.mp3", metadata={"title": "T"})

        assert published.public is True
        assert published.url is None
