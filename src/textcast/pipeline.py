"""Content-to-audio synthesis pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Type, TypeVar

from textcast.audio.assembler import Assembler
from textcast.audio.workspace import WorkingAreaManager
from textcast.audio.writer import write_audio_chunks
from textcast.config import AppConfig
from textcast.errors import (
    ChunkWriteFailed,
    ConcatenationFailed,
    ErrorKind,
    PipelineError,
    PublishFailed,
    SynthesisFailed,
    WorkingAreaSetupFailed,
)
from textcast.models import ContentRecord, PublishedObject, WorkingArea
from textcast.publish.storage import ObjectStore, Publisher
from textcast.synthesis.backend import SynthesisBackend
from textcast.synthesis.coordinator import SynthesisCoordinator
from textcast.utils.files import source_hash
from textcast.utils.text import chunk_text, speakable_chunks

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineState(str, Enum):
    START = "start"
    AREA_READY = "area_ready"
    SYNTHESIZED = "synthesized"
    WRITTEN = "written"
    ASSEMBLED = "assembled"
    PUBLISHED = "published"
    FAILED = "failed"
    CLEANING_UP = "cleaning_up"
    DONE = "done"


@dataclass(slots=True)
class PipelineOutcome:
    """Result of one pipeline run: either a published object or a failure kind."""

    source_url: str
    published: PublishedObject | None = None
    error_kind: ErrorKind | None = None
    message: str = ""
    chunk_count: int = 0
    cleanup_ok: bool = True
    transitions: List[PipelineState] = field(default_factory=lambda: [PipelineState.START])

    @property
    def ok(self) -> bool:
        return self.error_kind is None and self.published is not None

    @property
    def state(self) -> PipelineState:
        return self.transitions[-1]

    def advance(self, state: PipelineState) -> None:
        self.transitions.append(state)

    def fail(self, error: PipelineError) -> None:
        self.error_kind = error.kind
        self.message = str(error)
        self.published = None
        self.advance(PipelineState.FAILED)


def _run_stage(error_cls: Type[PipelineError], func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call ``func`` and report anything unexpected as ``error_cls``."""
    try:
        return func(*args, **kwargs)
    except PipelineError:
        raise
    except Exception as exc:
        raise error_cls(f"{error_cls.kind.description} {exc}") from exc


class Pipeline:
    """Turns a content record into a published audio object.

    Stages run strictly in sequence and the first failure ends the run. The
    working area is released on every exit path and a failed release never
    changes the reported outcome.
    """

    def __init__(
        self,
        coordinator: SynthesisCoordinator,
        workspace: WorkingAreaManager,
        assembler: Assembler,
        publisher: Publisher,
        *,
        char_limit: int,
        extension: str = ".mp3",
    ) -> None:
        self.coordinator = coordinator
        self.workspace = workspace
        self.assembler = assembler
        self.publisher = publisher
        self.char_limit = char_limit
        self.extension = extension

    @classmethod
    def from_config(cls, config: AppConfig, backend: SynthesisBackend, store: ObjectStore) -> "Pipeline":
        return cls(
            SynthesisCoordinator(
                backend,
                max_concurrency=config.max_concurrency,
                timeout=config.synthesis_timeout,
            ),
            WorkingAreaManager(config.resolve_work_root()),
            Assembler(ffmpeg_path=config.ffmpeg_path, output_name="audio" + config.audio_extension),
            Publisher(store, extension=config.audio_extension, content_type=config.audio_content_type),
            char_limit=config.tts_char_limit,
            extension=config.audio_extension,
        )

    def run(self, record: ContentRecord) -> PipelineOutcome:
        outcome = PipelineOutcome(source_url=record.source_url)
        area: WorkingArea | None = None
        LOGGER.info("Converting %s to audio", record.source_url)

        try:
            chunks = speakable_chunks(chunk_text(record.text, self.char_limit))
            outcome.chunk_count = len(chunks)
            LOGGER.info("Split %d characters into %d chunks", len(record.text), len(chunks))

            # Working area setup does not depend on synthesis, so both run at once.
            with ThreadPoolExecutor(max_workers=1, thread_name_prefix="textcast-setup") as pool:
                setup = pool.submit(self.workspace.acquire, source_hash(record.source_url))
                try:
                    audio = _run_stage(SynthesisFailed, self.coordinator.synthesize, chunks)
                finally:
                    area = self._settle_setup(setup)
                if area is None:
                    raise self._setup_error(setup)
            outcome.advance(PipelineState.AREA_READY)
            outcome.advance(PipelineState.SYNTHESIZED)

            files = _run_stage(
                ChunkWriteFailed, write_audio_chunks, area, audio, extension=self.extension
            )
            outcome.advance(PipelineState.WRITTEN)

            artifact = _run_stage(ConcatenationFailed, self.assembler.assemble, files, area.path)
            outcome.advance(PipelineState.ASSEMBLED)

            outcome.published = _run_stage(PublishFailed, self.publisher.publish, artifact, record)
            outcome.advance(PipelineState.PUBLISHED)
        except PipelineError as exc:
            LOGGER.error("Pipeline failed for %s [%s]: %s", record.source_url, exc.kind.value, exc)
            outcome.fail(exc)
        finally:
            outcome.advance(PipelineState.CLEANING_UP)
            if area is not None:
                outcome.cleanup_ok = self.workspace.release(area)
            outcome.advance(PipelineState.DONE)

        return outcome

    @staticmethod
    def _settle_setup(setup: Future[WorkingArea]) -> WorkingArea | None:
        if setup.exception() is not None:
            return None
        return setup.result()

    @staticmethod
    def _setup_error(setup: Future[WorkingArea]) -> PipelineError:
        exc = setup.exception()
        if isinstance(exc, PipelineError):
            return exc
        error = WorkingAreaSetupFailed(f"{ErrorKind.WORKING_AREA_SETUP_FAILED.description} {exc}")
        error.__cause__ = exc
        return error
