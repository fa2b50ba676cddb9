"""
Interactive highlight selection over a caption file.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from .models import HighlightSet
from .selection import is_skip, parse_set_selection
from .srt_utils import parse_srt

logger = logging.getLogger("reelcut")

Prompt = Callable[[str], str]

HIGHLIGHTS_SUFFIX = "_highlights.json"

INSTRUCTIONS = """\
Instructions:
  - Enter segment numbers separated by commas (e.g. 1,3,5,8)
  - Use a hyphen for ranges (e.g. 1-5)
  - Both can be combined (e.g. 1-3,7,10-12)
  - Type "all" to select every segment
  - Type "skip" to skip this file"""


def _preview(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def highlights_path(separated_dir: str | Path, source_name: str) -> Path:
    return Path(separated_dir) / f"{source_name}{HIGHLIGHTS_SUFFIX}"


def select_highlights(srt_path: str | Path, prompt: Prompt) -> HighlightSet | None:
    """Show the caption segments and ask the operator which become highlights.

    Returns ``None`` when the file has no segments, the operator typed
    ``skip``, or the answer selected nothing.
    """
    srt_path = Path(srt_path)
    segments = parse_srt(srt_path)
    source_name = srt_path.stem

    if not segments:
        logger.info("No segments in %s", srt_path.name)
        return None

    lines = [f"\nSelect highlights for: {source_name}", "-" * 60, "Available segments:\n"]
    for seg in segments:
        lines.append(f"  {seg.id:>2}. [{seg.start_time} - {seg.end_time}]")
        lines.append(f'      "{_preview(seg.text, 80)}"\n')
    lines += ["-" * 60, INSTRUCTIONS, ""]
    print("\n".join(lines))

    answer = prompt("Your choice: ")
    if is_skip(answer):
        logger.info("Skipped %s", source_name)
        return None

    # Ids are source ids; the bound is the highest one present.
    selected = set(parse_set_selection(answer, segments[-1].id))
    chosen = tuple(seg for seg in segments if seg.id in selected)
    if not chosen:
        logger.warning("No segments selected for %s", source_name)
        return None

    logger.info("Selected %d highlight(s) for %s", len(chosen), source_name)
    return HighlightSet(source_name=source_name, highlights=chosen)


def save_highlights(result: HighlightSet, path: str | Path) -> None:
    Path(path).write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved highlights -> %s", Path(path).name)


def load_highlights(path: str | Path) -> HighlightSet | None:
    path = Path(path)
    if not path.exists():
        return None
    return HighlightSet.from_dict(json.loads(path.read_text(encoding="utf-8")))
