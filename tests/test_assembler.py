"""Tests for the ffmpeg-backed Assembler."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from textcast.audio.assembler import CONCAT_LIST_NAME, Assembler
from textcast.errors import ConcatenationFailed, ErrorKind


def _chunk_files(directory: Path, count: int) -> list[Path]:
    paths = []
    for index in range(count):
        path = directory / f"{index:05d}.mp3"
        path.write_bytes(f"chunk-{index}".encode())
        paths.append(path)
    return paths


def _fake_ffmpeg(returncode: int = 0, stderr: str = "", create_output: bool = True):
    def run(command, **kwargs):
        if create_output and returncode == 0:
            Path(command[-1]).write_bytes(b"joined")
        return subprocess.CompletedProcess(command, returncode, stdout="", stderr=stderr)

    return MagicMock(side_effect=run)


class TestAssembleSingleFile:
    """Single chunk fast path."""

    @patch("textcast.audio.assembler.subprocess.run")
    def test_returns_same_file(self, mock_run: MagicMock, tmp_path: Path) -> None:
        (path,) = _chunk_files(tmp_path, 1)

        artifact = Assembler().assemble([path])

        assert artifact.path == path
        assert path.read_bytes() == b"chunk-0"
        mock_run.assert_not_called()
        assert not (tmp_path / "audio.mp3").exists()


class TestAssembleMultipleFiles:
    """Concatenation through ffmpeg."""

    def test_builds_stream_copy_command(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 3)
        fake = _fake_ffmpeg()

        with patch("textcast.audio.assembler.subprocess.run", fake):
            artifact = Assembler(ffmpeg_path="/opt/ffmpeg").assemble(paths)

        assert artifact.path == tmp_path / "audio.mp3"
        command = fake.call_args[0][0]
        assert command[0] == "/opt/ffmpeg"
        assert command[command.index("-f") + 1] == "concat"
        assert command[command.index("-c") + 1] == "copy"
        assert command[-1] == str(tmp_path / "audio.mp3")

    def test_concat_list_keeps_sequence_order(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 3)
        ordered = [paths[0], paths[1], paths[2]]

        with patch("textcast.audio.assembler.subprocess.run", _fake_ffmpeg()):
            Assembler().assemble(ordered)

        lines = (tmp_path / CONCAT_LIST_NAME).read_text().splitlines()
        assert lines == [f"file '{path.resolve().as_posix()}'" for path in ordered]

    def test_output_dir(self, tmp_path: Path) -> None:
        source = tmp_path / "chunks"
        source.mkdir()
        out = tmp_path / "out"
        out.mkdir()
        paths = _chunk_files(source, 2)

        with patch("textcast.audio.assembler.subprocess.run", _fake_ffmpeg()):
            artifact = Assembler().assemble(paths, out)

        assert artifact.path == out / "audio.mp3"

    def test_quotes_are_escaped(self, tmp_path: Path) -> None:
        odd = tmp_path / "it's here"
        odd.mkdir()
        paths = _chunk_files(odd, 2)

        with patch("textcast.audio.assembler.subprocess.run", _fake_ffmpeg()):
            Assembler().assemble(paths)

        assert "it'\\''s here" in (odd / CONCAT_LIST_NAME).read_text()


class TestAssembleFailures:
    """Every failure is reported as ConcatenationFailed."""

    def test_empty_list(self) -> None:
        with pytest.raises(ConcatenationFailed):
            Assembler().assemble([])

    def test_nonzero_exit(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 2)

        with patch("textcast.audio.assembler.subprocess.run", _fake_ffmpeg(1, "Invalid data found")):
            with pytest.raises(ConcatenationFailed, match="Invalid data found") as excinfo:
                Assembler().assemble(paths)

        assert excinfo.value.kind is ErrorKind.CONCATENATION_FAILED

    def test_missing_executable(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 2)

        with patch("textcast.audio.assembler.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ConcatenationFailed, match="not found"):
                Assembler(ffmpeg_path="missing-ffmpeg").assemble(paths)

    def test_timeout(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 2)
        error = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=1)

        with patch("textcast.audio.assembler.subprocess.run", side_effect=error):
            with pytest.raises(ConcatenationFailed, match="timed out"):
                Assembler(timeout=1).assemble(paths)

    def test_missing_output(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 2)

        with patch("textcast.audio.assembler.subprocess.run", _fake_ffmpeg(create_output=False)):
            with pytest.raises(ConcatenationFailed, match="missing"):
                Assembler().assemble(paths)

    def test_output_overwrites_input(self, tmp_path: Path) -> None:
        paths = _chunk_files(tmp_path, 1) + [tmp_path / "audio.mp3"]
        paths[1].write_bytes(b"x")

        with pytest.raises(ConcatenationFailed):
            Assembler().assemble(paths)
