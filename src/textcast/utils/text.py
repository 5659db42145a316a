"""Text helpers including whitespace-aware chunking for speech synthesis."""

from __future__ import annotations

import re
from typing import Iterator, List, Sequence

from textcast.errors import ChunkingImpossible
from textcast.models import Chunk

# \s matches every str.isspace() character, non-ASCII whitespace included.
_TOKEN_RE = re.compile(r"\s+|\S+")


def iter_tokens(text: str) -> Iterator[str]:
    """Yield alternating runs of whitespace and non-whitespace.

    Joining the yielded tokens reproduces ``text`` exactly.
    """
    for match in _TOKEN_RE.finditer(text):
        yield match.group(0)


def chunk_text(text: str, limit: int) -> List[Chunk]:
    """Split text into chunks of at most ``limit`` characters.

    Chunks only ever break at whitespace, so no word is split. Whitespace is
    kept at the end of the chunk it follows and only spills into the next
    chunk when the current one is full. Joining the chunk texts in index order
    gives back the original text.

    Raises:
        ValueError: ``limit`` is not a positive integer.
        ChunkingImpossible: a single word is longer than ``limit``.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"Chunk limit must be a positive integer, got {limit!r}")
    if not text:
        return [Chunk(index=0, text="")]

    pieces: List[str] = []
    current = ""

    for token in iter_tokens(text):
        if token[0].isspace():
            room = limit - len(current)
            while len(token) > room:
                current += token[:room]
                token = token[room:]
                pieces.append(current)
                current = ""
                room = limit
            current += token
            continue

        if len(token) > limit:
            raise ChunkingImpossible(
                f"Word of {len(token)} characters exceeds the chunk limit of {limit}: "
                f"{token[:40]!r}"
            )
        if len(current) + len(token) > limit:
            pieces.append(current)
            current = ""
        current += token

    if current or not pieces:
        pieces.append(current)

    return [Chunk(index=index, text=piece) for index, piece in enumerate(pieces)]


def speakable_chunks(chunks: Sequence[Chunk]) -> List[Chunk]:
    """Drop whitespace-only chunks and renumber the rest densely.

    Whitespace carries no speech, so leaving it out does not change the audio.
    When nothing is speakable the chunks are returned unchanged and the
    synthesis backend decides what blank input means.
    """
    kept = [chunk for chunk in chunks if chunk.text.strip()]
    if not kept:
        return list(chunks)
    return [Chunk(index=index, text=chunk.text) for index, chunk in enumerate(kept)]


def snippet(text: str, width: int = 80) -> str:
    """Collapse whitespace and shorten text for display."""
    flat = " ".join(text.split())
    if len(flat) <= width:
        return flat
    return flat[: max(width - 3, 0)] + "..."
