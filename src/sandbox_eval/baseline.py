# ABOUTME: Estimates how long a learner should need for a sandbox interaction.
# ABOUTME: Combines per-element handling time with reading time for instructions and hints.

from __future__ import annotations

import logging
from typing import Iterable, Optional

from src.common.schemas import SandboxInteraction, is_draggable

from .config import DEFAULT_CONFIG, BaselineConstants

logger = logging.getLogger(__name__)


def count_words(text: str) -> int:
    return len(text.split())


def total_reading_words(instructions: str, hints: Iterable[str]) -> int:
    # All hints count, whether or not the learner opens them.
    return count_words(instructions) + sum(count_words(hint) for hint in hints)


def estimate_baseline_ms(
    interaction: SandboxInteraction,
    constants: Optional[BaselineConstants] = None,
) -> float:
    """
    Expected completion time in milliseconds from structural complexity.

    Only draggable elements add handling time; labels, dropzones and other
    decorations do not.
    """

    constants = constants or DEFAULT_CONFIG.baseline
    element_count = sum(1 for element in interaction.elements if is_draggable(element))
    total_words = total_reading_words(interaction.instructions, interaction.hints)

    element_time = element_count * constants.element_time_ms
    reading_time = (total_words / constants.words_per_second) * 1000
    baseline_ms = float(element_time + reading_time)

    logger.debug(
        "[sandbox] baseline %s: elements=%d words=%d baseline_ms=%.1f",
        interaction.interaction_id,
        element_count,
        total_words,
        baseline_ms,
    )
    return baseline_ms
