"""Concurrent fan-out of chunks to a synthesis backend."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from textcast.errors import SynthesisFailed
from textcast.models import AudioChunk, Chunk
from textcast.synthesis.backend import SynthesisBackend

LOGGER = logging.getLogger(__name__)


class SynthesisCoordinator:
    """Synthesizes every chunk concurrently and returns audio in chunk order.

    Results land in a slot per chunk index, so completion order never affects
    the output. The first failing request cancels everything still queued.
    """

    def __init__(
        self,
        backend: SynthesisBackend,
        *,
        max_concurrency: int = 4,
        timeout: float | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.backend = backend
        self.max_concurrency = max_concurrency
        self.timeout = timeout

    def synthesize(self, chunks: Sequence[Chunk]) -> List[AudioChunk]:
        if not chunks:
            raise ValueError("At least one chunk is required")
        for position, chunk in enumerate(chunks):
            if chunk.index != position:
                raise ValueError(
                    f"Chunk indices must be dense and ordered; found {chunk.index} at position {position}"
                )

        slots: List[Optional[AudioChunk]] = [None] * len(chunks)
        workers = min(self.max_concurrency, len(chunks))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="textcast-tts")
        futures: Dict[Future[bytes], Chunk] = {}
        try:
            for chunk in chunks:
                futures[executor.submit(self._synthesize_chunk, chunk)] = chunk

            for future in as_completed(futures):
                chunk = futures[future]
                slots[chunk.index] = AudioChunk(index=chunk.index, audio=future.result())
                LOGGER.debug("Chunk %d/%d synthesized", chunk.index + 1, len(chunks))
        except BaseException:
            cancelled = sum(1 for future in futures if future.cancel())
            if cancelled:
                LOGGER.debug("Cancelled %d pending synthesis requests", cancelled)
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        missing = [index for index, slot in enumerate(slots) if slot is None]
        if missing:
            raise SynthesisFailed(f"No audio returned for chunks {missing}")
        return [slot for slot in slots if slot is not None]

    def _synthesize_chunk(self, chunk: Chunk) -> bytes:
        try:
            audio = self.backend.synthesize_one(chunk.text, timeout=self.timeout)
        except SynthesisFailed:
            raise
        except Exception as exc:
            LOGGER.debug("Synthesis failed for chunk %d: %s", chunk.index, exc)
            raise SynthesisFailed(
                f"Synthesis failed for chunk {chunk.index}: {exc}", chunk_index=chunk.index
            ) from exc
        if not audio:
            raise SynthesisFailed(
                f"Synthesis returned no audio for chunk {chunk.index}", chunk_index=chunk.index
            )
        return bytes(audio)
