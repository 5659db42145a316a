"""Failure kinds reported by the synthesis pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CHUNKING_IMPOSSIBLE = "chunking_impossible"
    WORKING_AREA_SETUP_FAILED = "working_area_setup_failed"
    SYNTHESIS_FAILED = "synthesis_failed"
    CHUNK_WRITE_FAILED = "chunk_write_failed"
    CONCATENATION_FAILED = "concatenation_failed"
    PUBLISH_FAILED = "publish_failed"
    CLEANUP_FAILED = "cleanup_failed"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorKind.CHUNKING_IMPOSSIBLE: "Text contains a word longer than the synthesis character limit.",
    ErrorKind.WORKING_AREA_SETUP_FAILED: "Error preparing the working directory.",
    ErrorKind.SYNTHESIS_FAILED: "Error during text-to-speech conversion.",
    ErrorKind.CHUNK_WRITE_FAILED: "Error writing an audio chunk to disk.",
    ErrorKind.CONCATENATION_FAILED: "Error concatenating audio chunks.",
    ErrorKind.PUBLISH_FAILED: "Error writing the audio file to the bucket.",
    ErrorKind.CLEANUP_FAILED: "Error cleaning up the working directory.",
}


class PipelineError(RuntimeError):
    """Base class for every failure a pipeline stage can report."""

    kind: ErrorKind

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.kind.description)


class ChunkingImpossible(PipelineError, ValueError):
    kind = ErrorKind.CHUNKING_IMPOSSIBLE


class WorkingAreaSetupFailed(PipelineError):
    kind = ErrorKind.WORKING_AREA_SETUP_FAILED


class SynthesisFailed(PipelineError):
    kind = ErrorKind.SYNTHESIS_FAILED

    def __init__(self, message: str | None = None, *, chunk_index: int | None = None) -> None:
        super().__init__(message)
        self.chunk_index = chunk_index


class ChunkWriteFailed(PipelineError):
    kind = ErrorKind.CHUNK_WRITE_FAILED


class ConcatenationFailed(PipelineError):
    kind = ErrorKind.CONCATENATION_FAILED


class PublishFailed(PipelineError):
    kind = ErrorKind.PUBLISH_FAILED

