"""
Speech-to-text transcription into SRT captions.
"""

import logging
from pathlib import Path

from openai import OpenAI
from pydub import AudioSegment

from .config import Settings
from .models import TranscriptSegment
from .srt_utils import write_srt

logger = logging.getLogger("reelcut")


def _field(obj, name: str, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _audio_seconds(audio_path: str | Path) -> float:
    return len(AudioSegment.from_file(str(audio_path))) / 1000.0


def segments_from_response(resp) -> list[TranscriptSegment]:
    """Pull ``{start, end, text}`` segments out of a verbose_json response."""
    out: list[TranscriptSegment] = []
    for seg in _field(resp, "segments") or []:
        out.append(
            TranscriptSegment(
                start=float(_field(seg, "start", 0.0)),
                end=float(_field(seg, "end", 0.0)),
                text=str(_field(seg, "text", "")).strip(),
            )
        )
    return out


def transcribe_whisper_api(
    client: OpenAI, audio_path: str | Path, model: str = "whisper-1", language: str | None = None
) -> list[TranscriptSegment]:
    """Transcribe audio using OpenAI Whisper."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    logger.info("Transcribing %s with %s (language: %s)", Path(audio_path).name, model, language or "auto")
    kwargs = {
        "model": model,
        "response_format": "verbose_json",
        "timestamp_granularities": ["segment"],
    }
    if language:
        kwargs["language"] = language
    with open(audio_path, "rb") as f:
        resp = client.audio.transcriptions.create(file=f, **kwargs)

    segments = segments_from_response(resp)
    if segments:
        return segments

    # Text without timing: one caption spanning the whole file.
    text = str(_field(resp, "text", "") or "").strip()
    if text:
        logger.warning("No segments in transcription response; using a single caption")
        return [TranscriptSegment(start=0.0, end=_audio_seconds(audio_path), text=text)]
    raise RuntimeError("No segments in transcription response")


def transcribe_local_faster_whisper(
    audio_path: str | Path, local_model: str = "base", beam_size: int = 1, language: str | None = None
) -> list[TranscriptSegment]:
    """Transcribe audio using local faster-whisper."""
    try:
        from faster_whisper import WhisperModel
    except ImportError as e:
        raise RuntimeError(
            "faster-whisper is not installed. Install with: pip install 'reelcut[local]'"
        ) from e

    logger.info("Transcribing locally with faster-whisper (%s, language: %s)", local_model, language or "auto")
    model = WhisperModel(local_model, device="cpu", compute_type="int8")
    segments_iter, _info = model.transcribe(
        str(audio_path),
        language=language or None,
        vad_filter=True,
        beam_size=beam_size,
        word_timestamps=False,
    )
    out = [
        TranscriptSegment(start=float(s.start), end=float(s.end), text=str(s.text).strip())
        for s in segments_iter
    ]
    if not out:
        raise RuntimeError("Local transcription returned no segments")
    return out


def transcribe_to_srt(
    audio_path: str | Path, srt_path: str | Path, settings: Settings, client: OpenAI | None = None
) -> list[TranscriptSegment]:
    """Transcribe ``audio_path`` with the configured backend and write ``srt_path``."""
    if settings.stt_backend == "local":
        segments = transcribe_local_faster_whisper(
            audio_path, local_model=settings.local_model, language=settings.language
        )
    else:
        segments = transcribe_whisper_api(
            client, audio_path, model=settings.whisper_model, language=settings.language
        )

    write_srt(segments, srt_path)
    logger.info("Saved SRT -> %s (%d segments)", srt_path, len(segments))
    return segments
