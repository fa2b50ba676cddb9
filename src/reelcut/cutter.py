"""
Cutting highlight clips out of the source video.
"""

import json
import logging
from pathlib import Path

from .batch import run_sequential
from .io_ffmpeg import HDR_PROFILE, EncodeProfile, cut_segment, ensure_dir
from .models import CaptionSegment, Clip, ClipsMetadata, HighlightSet, format_duration
from .srt_utils import to_seconds

logger = logging.getLogger("reelcut")

HIGHLIGHTS_DIRNAME = "highlights"
METADATA_FILENAME = "highlights_metadata.json"


class InvalidClipRangeError(ValueError):
    """A highlight whose end does not come after its start."""


def clip_duration(start_time: str, end_time: str) -> float:
    """Seconds between two caption timestamps; must be positive."""
    duration = to_seconds(end_time) - to_seconds(start_time)
    if duration <= 0:
        raise InvalidClipRangeError(
            f"Non-positive clip duration {duration:.3f}s ({start_time} -> {end_time})"
        )
    return duration


def clip_filename(source_name: str, highlight_id: int) -> str:
    return f"{source_name}_highlight_{highlight_id:02d}.mp4"


def cut_clip(
    video_path: str | Path,
    highlight: CaptionSegment,
    output_dir: str | Path,
    source_name: str,
    profile: EncodeProfile = HDR_PROFILE,
) -> Clip:
    """Cut one highlight into ``output_dir`` and describe the result."""
    video_path = Path(video_path)
    if not video_path.is_file():
        raise FileNotFoundError(f"Source video not readable: {video_path}")

    duration = clip_duration(highlight.start_time, highlight.end_time)
    out_path = Path(output_dir) / clip_filename(source_name, highlight.id)
    cut_segment(video_path, to_seconds(highlight.start_time), duration, out_path, profile)
    return Clip(
        id=highlight.id,
        file=out_path.name,
        duration=format_duration(duration),
        text=highlight.text,
    )


def cut_highlights(
    video_path: str | Path,
    highlights: HighlightSet,
    output_dir: str | Path,
    profile: EncodeProfile = HDR_PROFILE,
) -> list[Clip]:
    """Cut every highlight into ``<output_dir>/highlights``.

    Clips are cut one at a time. A clip that fails is logged and left out;
    the metadata file is written regardless and lists only the clips that
    were produced.
    """
    highlights_dir = Path(output_dir) / HIGHLIGHTS_DIRNAME
    ensure_dir(highlights_dir)

    logger.info(
        "Cutting %d highlight(s) for %s (HEVC HDR, precise cut)",
        len(highlights.highlights),
        highlights.source_name,
    )
    outcomes = run_sequential(
        highlights.highlights,
        lambda h: cut_clip(video_path, h, highlights_dir, highlights.source_name, profile),
        desc="Cut highlight",
        label=lambda h: f"#{h.id}",
        progress=True,
    )
    clips = [o.value for o in outcomes if o.ok]
    for clip in clips:
        logger.info("Cut highlight #%d: %s (%s)", clip.id, clip.file, clip.duration)

    metadata = ClipsMetadata(source_name=highlights.source_name, clips=tuple(clips))
    save_clips_metadata(metadata, highlights_dir / METADATA_FILENAME)
    return clips


def save_clips_metadata(metadata: ClipsMetadata, path: str | Path) -> None:
    Path(path).write_text(
        json.dumps(metadata.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.info("Saved clip metadata -> %s", path)


def load_clips_metadata(folder: str | Path) -> ClipsMetadata | None:
    """Load ``<folder>/highlights/highlights_metadata.json`` if present."""
    path = Path(folder) / HIGHLIGHTS_DIRNAME / METADATA_FILENAME
    if not path.exists():
        return None
    return ClipsMetadata.from_dict(json.loads(path.read_text(encoding="utf-8")))
