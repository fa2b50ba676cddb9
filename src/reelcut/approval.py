"""
Approving cut clips and fixing their order in the final video.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from .cutter import HIGHLIGHTS_DIRNAME, METADATA_FILENAME
from .models import ApprovedSelection, ClipsMetadata, format_duration, parse_duration
from .selection import is_skip, parse_order_selection

logger = logging.getLogger("reelcut")

Prompt = Callable[[str], str]

APPROVED_FILENAME = "approved_highlights.json"

INSTRUCTIONS = """\
Instructions:
  - Enter clip numbers in the order they should appear (e.g. 2,1,3)
  - Order matters: it is the order in the final video
  - A clip may be repeated or left out
  - Type "all" to keep every clip in its original order
  - Type "skip" to skip"""


def approved_path(folder: str | Path) -> Path:
    return Path(folder) / HIGHLIGHTS_DIRNAME / APPROVED_FILENAME


def find_highlight_folders(ready_dir: str | Path) -> list[Path]:
    """Project folders under ``ready_dir`` that hold a cut-batch metadata file."""
    ready_dir = Path(ready_dir)
    if not ready_dir.is_dir():
        return []
    return [
        entry
        for entry in sorted(ready_dir.iterdir())
        if (entry / HIGHLIGHTS_DIRNAME / METADATA_FILENAME).is_file()
    ]


def build_approved(folder: str | Path, metadata: ClipsMetadata, order: list[int]) -> ApprovedSelection:
    """Materialize an approved selection from 1-based indices into ``metadata.clips``."""
    return ApprovedSelection(
        source_name=metadata.source_name,
        source_folder=str(folder),
        clips=tuple(metadata.clips[i - 1] for i in order),
        order=tuple(order),
    )


def select_approved(folder: str | Path, metadata: ClipsMetadata, prompt: Prompt) -> ApprovedSelection | None:
    """Show the cut clips and ask for the approved, ordered subset."""
    lines = [f"\nApprove highlights for: {metadata.source_name}", "-" * 60, "Available clips:\n"]
    for i, clip in enumerate(metadata.clips, 1):
        text = clip.text[:70] + ("..." if len(clip.text) > 70 else "")
        lines.append(f"  {i:>2}. [ID: {clip.id}] {clip.duration}")
        lines.append(f'      "{text}"')
        lines.append(f"      File: {clip.file}\n")
    lines += ["-" * 60, INSTRUCTIONS, ""]
    print("\n".join(lines))

    answer = prompt("Your choice (in order): ")
    if is_skip(answer):
        logger.info("Skipped %s", metadata.source_name)
        return None

    order = parse_order_selection(answer, len(metadata.clips))
    if not order:
        logger.warning("No clips selected for %s", metadata.source_name)
        return None

    approved = build_approved(folder, metadata, order)
    total = sum(parse_duration(c.duration) for c in approved.clips)
    logger.info("Approved %d clip(s) for the final video (%s):", len(approved.clips), format_duration(total))
    for i, clip in enumerate(approved.clips, 1):
        logger.info("  %d. [ID: %d] %s", i, clip.id, clip.text[:50])
    return approved


def save_approved(result: ApprovedSelection, path: str | Path) -> None:
    Path(path).write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved approved highlights -> %s", Path(path).name)


def load_approved(path: str | Path) -> ApprovedSelection | None:
    path = Path(path)
    if not path.exists():
        return None
    return ApprovedSelection.from_dict(json.loads(path.read_text(encoding="utf-8")))
