"""
Sequential batch processing and a fixed-bound retry policy.

Every unit of work in the pipeline is a heavy external process (ffmpeg, an
API call), so batches run one item at a time and one item's failure never
touches its siblings.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from tqdm import tqdm

logger = logging.getLogger("reelcut")

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[T, R]):
    """Result of one batch item: either ``value`` or ``error`` is set."""

    item: T
    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_sequential(
    items: Iterable[T],
    operation: Callable[[T], R],
    *,
    desc: str = "",
    label: Callable[[T], str] = str,
    progress: bool = False,
) -> list[Outcome[T, R]]:
    """Apply ``operation`` to each item in order, isolating failures per item."""
    seq = list(items)
    iterator = tqdm(seq, desc=desc) if progress and seq else seq
    outcomes: list[Outcome[T, R]] = []
    for item in iterator:
        try:
            value = operation(item)
        except Exception as e:
            logger.error("%s failed for %s: %s", desc or "Step", label(item), e)
            logger.debug("Failure details for %s", label(item), exc_info=True)
            outcomes.append(Outcome(item=item, error=e))
            continue
        outcomes.append(Outcome(item=item, value=value))
    return outcomes


def retry_call(operation: Callable[[], R], max_attempts: int = 3, *, desc: str = "operation") -> R:
    """Call ``operation`` until it succeeds or ``max_attempts`` is reached.

    No back-off between attempts. After the last failure the last exception is
    re-raised unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as e:
            if attempt >= max_attempts:
                logger.error("%s failed after %d attempts: %s", desc, max_attempts, e)
                raise
            logger.warning("Attempt %d/%d of %s failed: %s. Retrying...", attempt, max_attempts, desc, e)
        attempt += 1
