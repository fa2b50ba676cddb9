"""
Data models for the highlight pipeline.

Records are frozen once built. JSON files on disk use camelCase keys, so each
persisted record knows how to map itself to and from a plain dict.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

PLATFORMS = ("facebook", "linkedin", "tiktok", "youtube")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def file_timestamp() -> str:
    """UTC timestamp safe for file names, e.g. ``2025-01-31T12-00-00``."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")


def format_duration(seconds: float) -> str:
    """Format seconds as the one-decimal ``"5.0s"`` string used in metadata."""
    return f"{seconds:.1f}s"


def parse_duration(value: str) -> float:
    """Inverse of :func:`format_duration`."""
    return float(value.strip().rstrip("s"))


@dataclass(frozen=True)
class TranscriptSegment:
    """A speech-to-text segment with timing in seconds."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass(frozen=True)
class CaptionSegment:
    """One parsed caption block."""

    id: int
    start_time: str  # HH:MM:SS.mmm
    end_time: str  # HH:MM:SS.mmm
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CaptionSegment":
        return cls(
            id=int(data["id"]),
            start_time=data["startTime"],
            end_time=data["endTime"],
            text=data.get("text", ""),
        )


@dataclass(frozen=True)
class HighlightSet:
    """Caption segments an operator promoted to highlights, ascending by id."""

    source_name: str
    highlights: tuple[CaptionSegment, ...]
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceName": self.source_name,
            "highlights": [h.to_dict() for h in self.highlights],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HighlightSet":
        return cls(
            source_name=data["sourceName"],
            highlights=tuple(CaptionSegment.from_dict(h) for h in data.get("highlights", [])),
            created_at=data.get("createdAt", ""),
        )


@dataclass(frozen=True)
class Clip:
    """A rendered highlight clip."""

    id: int
    file: str  # basename inside the highlights folder
    duration: str  # "5.0s"
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "file": self.file, "duration": self.duration, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Clip":
        return cls(
            id=int(data["id"]),
            file=data["file"],
            duration=data.get("duration", "0.0s"),
            text=data.get("text", ""),
        )


@dataclass(frozen=True)
class ClipsMetadata:
    """Result of one cut batch. Failed clips are simply absent."""

    source_name: str
    clips: tuple[Clip, ...]
    created_at: str = field(default_factory=utc_now_iso)

    @property
    def total_clips(self) -> int:
        return len(self.clips)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceName": self.source_name,
            "createdAt": self.created_at,
            "totalClips": self.total_clips,
            "clips": [c.to_dict() for c in self.clips],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClipsMetadata":
        return cls(
            source_name=data["sourceName"],
            clips=tuple(Clip.from_dict(c) for c in data.get("clips", [])),
            created_at=data.get("createdAt", ""),
        )


@dataclass(frozen=True)
class ApprovedSelection:
    """Operator-ordered clips destined for assembly.

    ``order`` holds 1-based indices into the batch's ``ClipsMetadata.clips``;
    ``clips[i]`` is the clip at ``order[i]``. Repeats and omissions are allowed.
    """

    source_name: str
    source_folder: str
    clips: tuple[Clip, ...]
    order: tuple[int, ...]
    approved_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        if len(self.clips) != len(self.order):
            raise ValueError(
                f"clips/order length mismatch: {len(self.clips)} != {len(self.order)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceName": self.source_name,
            "sourceFolder": self.source_folder,
            "approvedAt": self.approved_at,
            "clips": [c.to_dict() for c in self.clips],
            "order": list(self.order),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ApprovedSelection":
        return cls(
            source_name=data["sourceName"],
            source_folder=data["sourceFolder"],
            clips=tuple(Clip.from_dict(c) for c in data.get("clips", [])),
            order=tuple(int(i) for i in data.get("order", [])),
            approved_at=data.get("approvedAt", ""),
        )


@dataclass(frozen=True)
class AssemblyResult:
    """Summary of one assembled deliverable."""

    output_path: str
    clips_count: int
    clips_duration: str
    original_duration: str
    total_duration: str
    intro_duration: str | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """Transcript summary produced by the text-generation service."""

    source_name: str
    summary: str
    key_points: tuple[str, ...]
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceName": self.source_name,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class PlatformContent:
    """Copy for a single social platform."""

    hashtags: str
    background: str
    title: str
    description: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlatformContent":
        return cls(
            hashtags=str(data.get("hashtags", "")),
            background=str(data.get("background", "")),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
        )
