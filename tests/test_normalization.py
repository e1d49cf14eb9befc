"""Audio normalization with a stubbed ffmpeg process."""

from __future__ import annotations

import subprocess
import wave
from pathlib import Path

import numpy as np
import pytest

from akawo.pipelines.voice.errors import AudioNormalizationError
from akawo.pipelines.voice.normalization import AudioNormalizer

TARGET = "akawo.pipelines.voice.normalization.subprocess.run"


def _write_wav(path: str, samples: np.ndarray, *, channels: int = 1, rate: int = 16000) -> None:
    with wave.open(path, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(2)
        writer.setframerate(rate)
        writer.writeframes(samples.astype("<i2").tobytes())


class FakeFfmpeg:
    """Record the command and write a WAV to the output argument."""

    def __init__(self, samples: np.ndarray | None = None, channels: int = 1, error: Exception | None = None):
        self.samples = samples if samples is not None else np.zeros(16000, dtype=np.int16)
        self.channels = channels
        self.error = error
        self.commands: list[list[str]] = []

    def __call__(self, command, **kwargs):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        _write_wav(command[-1], self.samples, channels=self.channels)
        return subprocess.CompletedProcess(command, 0, b"", b"")


@pytest.mark.anyio
async def test_normalize_yields_mono_16k_and_cleans_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    ffmpeg = FakeFfmpeg(samples=np.full(8000, 1200, dtype=np.int16))
    monkeypatch.setattr(TARGET, ffmpeg)
    normalizer = AudioNormalizer("ffmpeg", temp_dir=str(tmp_path))

    async with normalizer.normalize(b"fake-ogg", "audio/ogg") as audio:
        assert audio.sample_rate == 16000
        assert audio.sample_count == 8000
        assert audio.duration_seconds == pytest.approx(0.5)
        assert audio.wav_bytes.startswith(b"RIFF")
        assert audio.path.exists()

    command = ffmpeg.commands[0]
    assert command[0] == "ffmpeg"
    assert command[command.index("-ac") + 1] == "1"
    assert command[command.index("-ar") + 1] == "16000"
    assert command[command.index("-c:a") + 1] == "pcm_s16le"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.anyio
async def test_temp_files_removed_when_consumer_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(TARGET, FakeFfmpeg())
    normalizer = AudioNormalizer(temp_dir=str(tmp_path))

    with pytest.raises(RuntimeError, match="downstream"):
        async with normalizer.normalize(b"fake-mp3", "audio/mpeg"):
            raise RuntimeError("downstream failure")

    assert list(tmp_path.iterdir()) == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [
        subprocess.CalledProcessError(1, ["ffmpeg"], stderr=b"Invalid data found when processing input"),
        FileNotFoundError("ffmpeg"),
    ],
)
async def test_ffmpeg_failures_become_normalization_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, error: Exception
) -> None:
    monkeypatch.setattr(TARGET, FakeFfmpeg(error=error))
    normalizer = AudioNormalizer(temp_dir=str(tmp_path))

    with pytest.raises(AudioNormalizationError):
        async with normalizer.normalize(b"not audio", "audio/webm"):
            pass

    assert list(tmp_path.iterdir()) == []


@pytest.mark.anyio
async def test_stereo_output_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(TARGET, FakeFfmpeg(samples=np.zeros(3200, dtype=np.int16), channels=2))
    normalizer = AudioNormalizer(temp_dir=str(tmp_path))

    with pytest.raises(AudioNormalizationError, match="channels=2"):
        async with normalizer.normalize(b"fake", "audio/wav"):
            pass


@pytest.mark.anyio
async def test_silent_output_without_samples_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(TARGET, FakeFfmpeg(samples=np.zeros(0, dtype=np.int16)))
    normalizer = AudioNormalizer(temp_dir=str(tmp_path))

    with pytest.raises(AudioNormalizationError):
        async with normalizer.normalize(b"fake", "audio/wav"):
            pass


@pytest.mark.anyio
async def test_empty_upload_is_rejected_before_ffmpeg(monkeypatch: pytest.MonkeyPatch) -> None:
    ffmpeg = FakeFfmpeg()
    monkeypatch.setattr(TARGET, ffmpeg)

    with pytest.raises(AudioNormalizationError):
        async with AudioNormalizer().normalize(b"", "audio/wav"):
            pass

    assert ffmpeg.commands == []
