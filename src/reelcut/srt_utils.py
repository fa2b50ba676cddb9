"""
SRT parsing, writing, and timestamp utilities.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .models import CaptionSegment, TranscriptSegment

logger = logging.getLogger("reelcut")

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_INDEX_RE = re.compile(r"\d+", re.ASCII)
_TIME_RANGE_RE = re.compile(r"(\d{2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*(\d{2}:\d{2}:\d{2}[,.]\d{3})", re.ASCII)


@dataclass(frozen=True)
class CaptionParseResult:
    """Parsed segments plus the number of blocks dropped as malformed."""

    segments: list[CaptionSegment]
    skipped_blocks: int = 0


def normalize_timestamp(ts: str) -> str:
    """Rewrite a comma millisecond separator to a period."""
    return ts.strip().replace(",", ".")


def to_seconds(ts: str) -> float:
    """Convert ``HH:MM:SS.mmm`` (or ``HH:MM:SS,mmm``) to absolute seconds."""
    parts = normalize_timestamp(ts).split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid timestamp: {ts!r}")
    try:
        h, m, s = int(parts[0]), int(parts[1]), float(parts[2])
    except ValueError:
        raise ValueError(f"Invalid timestamp: {ts!r}") from None
    return h * 3600 + m * 60 + s


def format_timestamp(seconds: float, sep: str = ",") -> str:
    """Format seconds as ``HH:MM:SS,mmm`` (or with ``sep`` before the millis)."""
    total_ms = int(round(max(0.0, seconds) * 1000))
    h, rem = divmod(total_ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02}:{m:02}:{s:02}{sep}{ms:03}"


def parse_captions(raw: str) -> CaptionParseResult:
    """Parse caption text into segments.

    Blocks are separated by blank lines and must carry an index line, a
    ``start --> end`` line with end after start and at least one text line.
    Anything else is skipped without error; the count of dropped blocks is
    reported so callers can tell an empty file from a file full of garbage.
    """
    text = raw.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff").strip()
    if not text:
        return CaptionParseResult(segments=[], skipped_blocks=0)

    out: list[CaptionSegment] = []
    skipped = 0
    last_id = 0
    for block in _BLOCK_SPLIT_RE.split(text):
        lines = [ln.strip() for ln in block.split("\n")]
        if len(lines) < 3:
            skipped += 1
            continue
        if not _INDEX_RE.fullmatch(lines[0]):
            skipped += 1
            continue
        seg_id = int(lines[0])
        m = _TIME_RANGE_RE.search(lines[1])
        if not m or seg_id <= last_id:
            skipped += 1
            continue
        start, end = normalize_timestamp(m.group(1)), normalize_timestamp(m.group(2))
        if to_seconds(end) <= to_seconds(start):
            skipped += 1
            continue
        out.append(
            CaptionSegment(
                id=seg_id,
                start_time=start,
                end_time=end,
                text=" ".join(ln for ln in lines[2:] if ln),
            )
        )
        last_id = seg_id

    if skipped:
        logger.debug("Skipped %d malformed caption block(s)", skipped)
    return CaptionParseResult(segments=out, skipped_blocks=skipped)


def read_captions(path: str | Path) -> CaptionParseResult:
    """Read and parse a caption file."""
    raw = Path(path).read_text(encoding="utf-8-sig")
    return parse_captions(raw)


def parse_srt(path: str | Path) -> list[CaptionSegment]:
    """Parse SRT file into segments."""
    return read_captions(path).segments


def write_srt(segments: list[TranscriptSegment], path: str | Path) -> None:
    """Write transcript segments to an SRT file, numbering them from 1."""
    with open(path, "w", encoding="utf-8") as f:
        for i, s in enumerate(segments, 1):
            f.write(f"{i}\n{format_timestamp(s.start)} --> {format_timestamp(s.end)}\n{s.text}\n\n")
