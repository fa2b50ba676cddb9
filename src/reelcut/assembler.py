"""
Assembling the final video: approved clips, optional intro, then the original.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from .approval import approved_path
from .cutter import HIGHLIGHTS_DIRNAME
from .io_ffmpeg import HDR_PROFILE, EncodeProfile, concat_videos, ensure_dir, probe_duration
from .models import ApprovedSelection, AssemblyResult, file_timestamp, format_duration, utc_now_iso

logger = logging.getLogger("reelcut")

ORIGINAL_EXTENSIONS = (".mov", ".mp4", ".avi", ".mkv")
COMPLETE_DIRNAME = "complete"


class MissingClipError(FileNotFoundError):
    """An approved clip file is not on disk."""


def complete_metadata_path(output_dir: str | Path, source_name: str) -> Path:
    return Path(output_dir) / f"{source_name}_complete_metadata.json"


def find_approved(ready_dir: str | Path) -> list[Path]:
    """Project folders under ``ready_dir`` that hold an approval file.

    Approval files are not parsed here; each one is loaded with its own item.
    """
    ready_dir = Path(ready_dir)
    if not ready_dir.is_dir():
        return []
    return [entry for entry in sorted(ready_dir.iterdir()) if approved_path(entry).is_file()]


def find_original_video(directory: str | Path, source_name: str) -> Path | None:
    """The full-length video whose stem is ``source_name``."""
    directory = Path(directory)
    if not directory.is_dir():
        return None
    for path in sorted(directory.iterdir()):
        if path.suffix.lower() in ORIGINAL_EXTENSIONS and path.stem == source_name:
            return path
    return None


def find_intro(intro_dir: str | Path) -> Path | None:
    """First video file in the intro folder, if any."""
    intro_dir = Path(intro_dir)
    if not intro_dir.is_dir():
        return None
    for path in sorted(intro_dir.iterdir()):
        if path.suffix.lower() in ORIGINAL_EXTENSIONS:
            return path
    return None


def resolve_clip_paths(approved: ApprovedSelection) -> list[Path]:
    """Clip files in approved order; fails on the first one that is missing."""
    highlights_dir = Path(approved.source_folder) / HIGHLIGHTS_DIRNAME
    paths: list[Path] = []
    for clip in approved.clips:
        path = highlights_dir / clip.file
        if not path.is_file():
            raise MissingClipError(f"Missing clip file: {clip.file}")
        paths.append(path)
    return paths


def assemble_full_video(
    approved: ApprovedSelection,
    original_video: str | Path,
    output_dir: str | Path,
    intro: str | Path | None = None,
    profile: EncodeProfile = HDR_PROFILE,
    probe: Callable[[Path], float] = probe_duration,
) -> AssemblyResult:
    """Concatenate approved clips, the optional intro and the original video.

    Component durations come from probing each input, and the metadata file
    written next to the output records them per component.
    """
    clip_paths = resolve_clip_paths(approved)
    original_video = Path(original_video)
    intro_path = Path(intro) if intro else None
    ensure_dir(output_dir)

    inputs = [*clip_paths]
    if intro_path:
        inputs.append(intro_path)
    inputs.append(original_video)

    logger.info("Assembling full video for %s", approved.source_name)
    for i, clip in enumerate(approved.clips, 1):
        logger.info("  %d. %s (%s)", i, clip.file, clip.duration)
    if intro_path:
        logger.info("  Intro: %s", intro_path.name)
    logger.info("  Original: %s", original_video.name)

    clip_durations = [probe(p) for p in clip_paths]
    clips_total = sum(clip_durations)
    intro_duration = probe(intro_path) if intro_path else None
    original_duration = probe(original_video)
    total = clips_total + (intro_duration or 0.0) + original_duration

    output_path = Path(output_dir) / f"{approved.source_name}_complete_{file_timestamp()}.mp4"
    logger.info("Joining %d file(s) with filter_complex -> %s", len(inputs), output_path.name)
    concat_videos(inputs, output_path, profile)

    structure: dict = {
        "highlights": {
            "count": len(approved.clips),
            "duration": format_duration(clips_total),
            "clips": [
                {
                    "order": i,
                    "id": clip.id,
                    "file": clip.file,
                    "duration": format_duration(probed),
                    "text": clip.text,
                }
                for i, (clip, probed) in enumerate(zip(approved.clips, clip_durations, strict=True), 1)
            ],
        },
    }
    if intro_path:
        structure["intro"] = {"file": intro_path.name, "duration": format_duration(intro_duration)}
    structure["original"] = {"file": original_video.name, "duration": format_duration(original_duration)}

    metadata = {
        "sourceName": approved.source_name,
        "completeFile": output_path.name,
        "createdAt": utc_now_iso(),
        "structure": structure,
        "totalDuration": format_duration(total),
    }
    meta_path = complete_metadata_path(output_dir, approved.source_name)
    meta_path.write_text(json.dumps(metadata, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved assembly metadata -> %s", meta_path.name)

    return AssemblyResult(
        output_path=str(output_path),
        clips_count=len(approved.clips),
        clips_duration=format_duration(clips_total),
        intro_duration=format_duration(intro_duration) if intro_path else None,
        original_duration=format_duration(original_duration),
        total_duration=format_duration(total),
    )
