"""
Operator selection parsing.

Two grammars share one tokenizer: set-selection (``1,3,5-8``) picks which
caption segments become highlights, order-selection (``2,1,2``) lays out the
clip sequence for the final video. Neither ever raises; bad tokens vanish and
an empty result means "nothing selected".
"""

from collections.abc import Iterable

ALL_TOKEN = "all"
SKIP_TOKEN = "skip"
DEFAULT_AFFIRMATIVE = frozenset({"t", "tak", "y", "yes"})


def is_skip(answer: str | None) -> bool:
    """True when the operator declined with the ``skip`` sentinel."""
    return (answer or "").strip().lower() == SKIP_TOKEN


def is_affirmative(answer: str | None, tokens: Iterable[str] = DEFAULT_AFFIRMATIVE) -> bool:
    """Only literal affirmative tokens count as consent."""
    return (answer or "").strip().lower() in {t.lower() for t in tokens}


def _tokens(answer: str) -> list[str]:
    return [p.strip() for p in answer.split(",") if p.strip()]


def _to_int(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def _is_all(answer: str) -> bool:
    return answer.strip().lower() == ALL_TOKEN


def parse_set_selection(answer: str | None, max_id: int) -> list[int]:
    """Parse ``1,3,5-8`` into a sorted, deduplicated list of ids in ``[1, max_id]``."""
    if max_id < 1 or not answer:
        return []
    if _is_all(answer):
        return list(range(1, max_id + 1))

    ids: set[int] = set()
    for part in _tokens(answer):
        if "-" in part:
            left, right = part.split("-")[:2]
            start, end = _to_int(left.strip()), _to_int(right.strip())
            if start is None or end is None:
                continue
            # Endpoints are clamped; an inverted range yields nothing. Text after
            # a second hyphen is ignored.
            ids.update(range(max(1, start), min(max_id, end) + 1))
        else:
            num = _to_int(part)
            if num is not None and 1 <= num <= max_id:
                ids.add(num)
    return sorted(ids)


def parse_order_selection(answer: str | None, max_index: int) -> list[int]:
    """Parse ``2,1,2`` into 1-based indices, keeping order and duplicates."""
    if max_index < 1 or not answer:
        return []
    if _is_all(answer):
        return list(range(1, max_index + 1))

    indices: list[int] = []
    for part in _tokens(answer):
        num = _to_int(part)
        if num is not None and 1 <= num <= max_index:
            indices.append(num)
    return indices
