"""Utility helpers for naming files and objects."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, List

CHUNK_NAME_WIDTH = 5


def source_hash(source: str) -> str:
    """Deterministic hex digest identifying a source url."""
    return hashlib.md5(source.encode("utf-8")).hexdigest()


def object_name_for(source_url: str, extension: str = ".mp3") -> str:
    """Content-addressed object name for the audio of a source url."""
    if not extension.startswith("."):
        extension = "." + extension
    return source_hash(source_url) + extension


def chunk_filename(index: int, extension: str = ".mp3") -> str:
    """Zero-padded file name whose lexical order matches ``index`` order."""
    if index < 0:
        raise ValueError(f"Chunk index must be non-negative, got {index}")
    if not extension.startswith("."):
        extension = "." + extension
    return f"{index:0{CHUNK_NAME_WIDTH}d}{extension}"


def sorted_by_name(paths: Iterable[Path]) -> List[Path]:
    return sorted(paths, key=lambda path: path.name)
