"""Persist synthesized audio chunks inside a working area."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from textcast.errors import ChunkWriteFailed
from textcast.models import AudioChunk, WorkingArea
from textcast.utils.files import chunk_filename, sorted_by_name

LOGGER = logging.getLogger(__name__)


def write_audio_chunks(
    area: WorkingArea,
    audio_chunks: Sequence[AudioChunk],
    *,
    extension: str = ".mp3",
) -> List[Path]:
    """Write each chunk to its own file and return the paths in index order.

    File names sort lexically in the same order as the chunk indices. Any
    failure aborts the whole batch with ``ChunkWriteFailed``.
    """
    if not audio_chunks:
        raise ChunkWriteFailed("No audio chunks to write")
    for position, audio_chunk in enumerate(audio_chunks):
        if audio_chunk.index != position:
            raise ChunkWriteFailed(
                f"Audio chunk indices must be dense and ordered; found {audio_chunk.index} "
                f"at position {position}"
            )

    paths: List[Path] = []
    for audio_chunk in audio_chunks:
        path = area.path / chunk_filename(audio_chunk.index, extension)
        try:
            path.write_bytes(audio_chunk.audio)
        except OSError as exc:
            raise ChunkWriteFailed(f"Could not write audio chunk {audio_chunk.index} to {path}: {exc}") from exc
        paths.append(path)

    if sorted_by_name(paths) != paths:
        raise ChunkWriteFailed("Audio chunk file names do not sort in chunk order")

    LOGGER.debug("Wrote %d audio chunks to %s", len(paths), area.path)
    return paths
