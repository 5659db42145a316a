"""Lossless assembly of ordered audio chunks into one file.

Uses the ffmpeg concat demuxer with stream copy, so the audio payload of every
chunk is carried over without re-encoding.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence

from textcast.errors import ConcatenationFailed
from textcast.models import Artifact

LOGGER = logging.getLogger(__name__)

CONCAT_LIST_NAME = "concat.txt"


def _ffconcat_line(path: Path) -> str:
    escaped = path.resolve().as_posix().replace("'", "'\\''")
    return f"file '{escaped}'\n"


class Assembler:
    """Joins same-codec audio files in sequence order."""

    def __init__(
        self,
        *,
        ffmpeg_path: str = "ffmpeg",
        output_name: str = "audio.mp3",
        timeout: float | None = None,
    ) -> None:
        self.ffmpeg_path = ffmpeg_path
        self.output_name = output_name
        self.timeout = timeout

    def assemble(self, files: Sequence[Path], output_dir: Path | None = None) -> Artifact:
        """Return the single artifact made from ``files``.

        A single file is returned as-is without invoking ffmpeg. Otherwise the
        output is written next to the inputs (or into ``output_dir``).
        """
        if not files:
            raise ConcatenationFailed("No audio files to assemble")
        if len(files) == 1:
            return Artifact(path=Path(files[0]))

        inputs = [Path(item) for item in files]
        target_dir = Path(output_dir) if output_dir is not None else inputs[0].parent
        output_path = target_dir / self.output_name
        if output_path in inputs:
            raise ConcatenationFailed(f"Output {output_path} would overwrite one of its inputs")

        list_path = target_dir / CONCAT_LIST_NAME
        try:
            list_path.write_text("".join(_ffconcat_line(item) for item in inputs), encoding="utf-8")
        except OSError as exc:
            raise ConcatenationFailed(f"Could not write concat list {list_path}: {exc}") from exc

        self._run(self._build_command(list_path, output_path))

        if not output_path.exists():
            raise ConcatenationFailed(f"ffmpeg reported success but {output_path} is missing")
        LOGGER.info("Assembled %d audio chunks into %s", len(inputs), output_path)
        return Artifact(path=output_path)

    def _build_command(self, list_path: Path, output_path: Path) -> List[str]:
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "error",
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(list_path),
            "-map",
            "0:a",
            "-c",
            "copy",
            str(output_path),
        ]

    def _run(self, command: List[str]) -> None:
        LOGGER.debug("Running %s", " ".join(command))
        try:
            proc = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ConcatenationFailed(f"ffmpeg executable not found: {self.ffmpeg_path}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ConcatenationFailed(f"ffmpeg timed out after {self.timeout} seconds") from exc
        except OSError as exc:
            raise ConcatenationFailed(f"Could not run ffmpeg: {exc}") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()[-1000:]
            raise ConcatenationFailed(f"ffmpeg exited with status {proc.returncode}: {stderr}")
