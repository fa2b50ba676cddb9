"""
Pipeline state derived from directory contents.

There is no state file: the stage a video has reached is read off the files
each stage leaves behind. A :class:`FileSnapshot` captures those files as
plain relative paths so the inference can run against an in-memory listing.
"""

import enum
import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .io_ffmpeg import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS
from .models import file_timestamp

logger = logging.getLogger("reelcut")

_TIMESTAMP_RE = r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}"


class Stage(enum.IntEnum):
    UPLOADED = 1
    AUDIO_EXTRACTED = 2
    TRANSCRIBED = 3
    ANALYZED = 4
    ORGANIZED = 5
    HIGHLIGHTS_SELECTED = 6
    CUT = 7
    APPROVED = 8
    ASSEMBLED = 9


class StepDecision(enum.Enum):
    RUN = "run"
    SKIP = "skip"
    OVERWRITE = "overwrite"


def _listing(root: Path | None) -> frozenset[str]:
    if root is None or not root.is_dir():
        return frozenset()
    return frozenset(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@dataclass(frozen=True)
class FileSnapshot:
    """Relative file paths present in each pipeline area."""

    upload: frozenset[str] = field(default_factory=frozenset)
    separated: frozenset[str] = field(default_factory=frozenset)
    ready: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_dirs(
        cls,
        upload_dir: str | Path | None,
        separated_dir: str | Path | None,
        ready_dir: str | Path | None,
    ) -> "FileSnapshot":
        return cls(
            upload=_listing(Path(upload_dir) if upload_dir else None),
            separated=_listing(Path(separated_dir) if separated_dir else None),
            ready=_listing(Path(ready_dir) if ready_dir else None),
        )

    @classmethod
    def from_mapping(cls, mapping: dict[str, Iterable[str]]) -> "FileSnapshot":
        return cls(**{area: frozenset(paths) for area, paths in mapping.items()})


def cut_folder_name(source_name: str) -> str:
    """Name of a fresh ready-video folder for one cut batch."""
    return f"{source_name}_{file_timestamp()}"


def is_cut_folder(folder: str, source_name: str) -> bool:
    return re.fullmatch(re.escape(source_name) + "_" + _TIMESTAMP_RE, folder) is not None


def _top_level_stems(paths: frozenset[str], extensions: tuple[str, ...]) -> set[str]:
    stems = set()
    for p in paths:
        pp = PurePosixPath(p)
        if len(pp.parts) == 1 and pp.suffix.lower() in extensions:
            stems.add(pp.stem)
    return stems


def _in_cut_folder(name: str, snapshot: FileSnapshot, *tail: str) -> bool:
    for p in snapshot.ready:
        parts = PurePosixPath(p).parts
        if len(parts) == len(tail) + 1 and parts[1:] == tail and is_cut_folder(parts[0], name):
            return True
    return False


def has_output(name: str, stage: Stage, snapshot: FileSnapshot) -> bool:
    """Whether the marker file(s) of ``stage`` exist for ``name``."""
    if stage is Stage.UPLOADED:
        return name in _top_level_stems(snapshot.upload, VIDEO_EXTENSIONS)
    if stage is Stage.AUDIO_EXTRACTED:
        return name in _top_level_stems(snapshot.separated, AUDIO_EXTENSIONS)
    if stage is Stage.TRANSCRIBED:
        return f"{name}.srt" in snapshot.separated
    if stage is Stage.ANALYZED:
        return f"{name}_analysis.json" in snapshot.separated
    if stage is Stage.ORGANIZED:
        return any(
            len(PurePosixPath(p).parts) == 2 and PurePosixPath(p).name == f"{name}.srt"
            for p in snapshot.ready
        )
    if stage is Stage.HIGHLIGHTS_SELECTED:
        return f"{name}_highlights.json" in snapshot.separated
    if stage is Stage.CUT:
        return _in_cut_folder(name, snapshot, "highlights", "highlights_metadata.json")
    if stage is Stage.APPROVED:
        return _in_cut_folder(name, snapshot, "highlights", "approved_highlights.json")
    if stage is Stage.ASSEMBLED:
        return _in_cut_folder(name, snapshot, "complete", f"{name}_complete_metadata.json")
    raise ValueError(f"Unknown stage: {stage}")


def infer_state(name: str, snapshot: FileSnapshot) -> Stage | None:
    """Furthest stage whose output exists for ``name``, or None."""
    for stage in sorted(Stage, reverse=True):
        if has_output(name, stage, snapshot):
            return stage
    return None


def known_names(snapshot: FileSnapshot) -> list[str]:
    """Logical video names visible in the upload and separated-audio areas."""
    names = _top_level_stems(snapshot.upload, VIDEO_EXTENSIONS)
    names |= _top_level_stems(snapshot.separated, VIDEO_EXTENSIONS + AUDIO_EXTENSIONS + (".srt",))
    return sorted(names)


def decide(output_exists: bool, confirm: Callable[[], bool] | None = None) -> StepDecision:
    """Skip-by-default, overwrite-by-confirmation.

    ``confirm`` is only called when the output already exists. Without it
    (non-interactive runs) existing outputs are always kept.
    """
    if not output_exists:
        return StepDecision.RUN
    if confirm is not None and confirm():
        return StepDecision.OVERWRITE
    return StepDecision.SKIP
