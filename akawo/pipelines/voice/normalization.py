"""Audio normalization stage: any supported upload to mono 16 kHz PCM WAV."""

from __future__ import annotations

import io
import logging
import os
import subprocess
import tempfile
import wave
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

import numpy as np
from fastapi.concurrency import run_in_threadpool

from .errors import AudioNormalizationError

logger = logging.getLogger("akawo.pipeline")

TARGET_SAMPLE_RATE = 16_000


@dataclass(frozen=True)
class NormalizedAudio:
    """Decoded mono 16-bit WAV owned by one request."""

    wav_bytes: bytes
    sample_rate: int
    sample_count: int
    duration_seconds: float
    path: Path


class _ScopedTempFiles:
    """Input/output temp paths for one conversion, released exactly once."""

    def __init__(self, directory: str | None = None) -> None:
        in_fd, in_path = tempfile.mkstemp(prefix="akawo-upload-", suffix=".bin", dir=directory)
        out_fd, out_path = tempfile.mkstemp(prefix="akawo-normalized-", suffix=".wav", dir=directory)
        os.close(in_fd)
        os.close(out_fd)
        self.input_path = Path(in_path)
        self.output_path = Path(out_path)
        self.released = False

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        for path in (self.input_path, self.output_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove temporary audio file %s: %s", path, exc)


class AudioNormalizer:
    """Convert uploads with ffmpeg and expose the result as ``NormalizedAudio``."""

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        *,
        sample_rate: int = TARGET_SAMPLE_RATE,
        temp_dir: str | None = None,
    ) -> None:
        self._ffmpeg = ffmpeg_binary
        self._sample_rate = sample_rate
        self._temp_dir = temp_dir

    @asynccontextmanager
    async def normalize(
        self,
        raw_audio: bytes,
        content_type: str | None = None,
    ) -> AsyncIterator[NormalizedAudio]:
        """Yield normalized audio; temp files are removed on every exit path."""

        if not raw_audio:
            raise AudioNormalizationError("Uploaded audio file is empty")

        files = _ScopedTempFiles(self._temp_dir)
        try:
            audio = await run_in_threadpool(self._convert, raw_audio, content_type, files)
            yield audio
        finally:
            files.release()

    def _convert(
        self,
        raw_audio: bytes,
        content_type: str | None,
        files: _ScopedTempFiles,
    ) -> NormalizedAudio:
        files.input_path.write_bytes(raw_audio)
        command = [
            self._ffmpeg,
            "-y",
            "-hide_banner",
            "-loglevel", "error",
            "-i", str(files.input_path),
            "-ac", "1",
            "-ar", str(self._sample_rate),
            "-c:a", "pcm_s16le",
            "-f", "wav",
            str(files.output_path),
        ]
        try:
            subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except FileNotFoundError as exc:
            raise AudioNormalizationError(f"ffmpeg binary not found: {self._ffmpeg}") from exc
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed content_type=%s stderr=%s", content_type, error_msg)
            raise AudioNormalizationError("Could not decode the uploaded audio") from exc

        wav_bytes = files.output_path.read_bytes()
        if not wav_bytes:
            raise AudioNormalizationError("ffmpeg produced empty output")

        try:
            with wave.open(io.BytesIO(wav_bytes), "rb") as reader:
                channels = reader.getnchannels()
                sample_width = reader.getsampwidth()
                sample_rate = reader.getframerate()
                frames = reader.readframes(reader.getnframes())
        except (wave.Error, EOFError) as exc:
            raise AudioNormalizationError(f"ffmpeg produced an unreadable WAV: {exc}") from exc

        if channels != 1 or sample_width != 2:
            raise AudioNormalizationError(
                f"Unexpected WAV layout channels={channels} sample_width={sample_width}"
            )

        samples = np.frombuffer(frames, dtype="<i2")
        if samples.size == 0:
            raise AudioNormalizationError("Decoded audio contains no samples")

        duration = samples.size / float(sample_rate)
        peak = int(np.abs(samples.astype(np.int32)).max())
        logger.debug(
            "Normalized audio samples=%s duration=%.2fs peak=%s content_type=%s",
            samples.size,
            duration,
            peak,
            content_type,
        )
        return NormalizedAudio(
            wav_bytes=wav_bytes,
            sample_rate=sample_rate,
            sample_count=int(samples.size),
            duration_seconds=duration,
            path=files.output_path,
        )


__all__ = ["AudioNormalizer", "NormalizedAudio", "TARGET_SAMPLE_RATE"]
