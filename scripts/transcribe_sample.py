import asyncio
import os
import sys
from pathlib import Path

# Add project root to path so we can import akawo
sys.path.append(os.getcwd())

from akawo.config.settings import settings
from akawo.dependencies import build_transcriber
from akawo.domain.models import Language
from akawo.pipelines.voice import AudioNormalizer, transcribe_audio
from akawo.pipelines.voice.errors import AudioNormalizationError, BackendUnavailableError


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/transcribe_sample.py path/to/audio [en|yo|ig|ha]")
        return

    file_path = Path(sys.argv[1])
    language = Language.resolve(sys.argv[2] if len(sys.argv) > 2 else "en")
    if not file_path.exists():
        print(f"File '{file_path}' not found.")
        return

    audio_bytes = file_path.read_bytes()
    service = build_transcriber(settings)
    normalizer = AudioNormalizer(settings.pipeline.ffmpeg_binary)

    print(f"Transcribing {len(audio_bytes)} bytes with {service.name} ({language.value})...")
    try:
        async with normalizer.normalize(audio_bytes) as audio:
            print(f"Normalized to {audio.duration_seconds:.2f}s at {audio.sample_rate} Hz")
            transcript = await transcribe_audio(service, audio, language)
    except AudioNormalizationError as e:
        print(f"\nCould not decode audio: {e}")
        return
    except BackendUnavailableError as e:
        print(f"\nBackend unavailable: {e}")
        return

    print("\n--- Transcript Result ---")
    print(transcript if transcript is not None else "(nothing heard)")
    print("-------------------------")


if __name__ == "__main__":
    asyncio.run(main())
