# ABOUTME: Derives a 1-4 spaced-repetition rating from an evaluated sandbox attempt.
# ABOUTME: Implements the ordered Friction Formula over pass/fail, attempts, hints, and time.

from __future__ import annotations

import logging
import math
from typing import Optional

from src.common.schemas import FSRSRating, SandboxEvaluationResult

from .config import DEFAULT_CONFIG, FrictionThresholds

logger = logging.getLogger(__name__)


def time_ratio(time_to_complete_ms: float, baseline_ms: float) -> float:
    """
    Elapsed time relative to the baseline.

    A non-positive baseline gives `inf` for any positive elapsed time and
    `nan` for zero, so no time rule can fire on the latter.
    """

    if baseline_ms > 0:
        return time_to_complete_ms / baseline_ms
    if time_to_complete_ms > 0:
        return math.inf
    return math.nan


def derive_rating(
    result: SandboxEvaluationResult,
    baseline_ms: float,
    thresholds: Optional[FrictionThresholds] = None,
) -> FSRSRating:
    """
    Friction Formula. Rules are checked in this order and the first match wins:

    1. failed, or more than `max_attempts_again` attempts -> Again
    2. more than `max_hints_hard` hints, or ratio above `time_ratio_hard` -> Hard
    3. no hints and ratio below `time_ratio_easy` -> Easy
    4. no hints and ratio within the good band -> Good
    5. anything else -> Good

    Hints and mistakes are the main signal; time only separates the extremes.
    """

    thresholds = thresholds or DEFAULT_CONFIG.friction
    ratio = time_ratio(result.time_to_complete_ms, baseline_ms)

    if not result.passed or result.attempt_count > thresholds.max_attempts_again:
        rating = FSRSRating.AGAIN
    elif result.hints_used > thresholds.max_hints_hard or ratio > thresholds.time_ratio_hard:
        rating = FSRSRating.HARD
    elif result.hints_used == 0 and ratio < thresholds.time_ratio_easy:
        rating = FSRSRating.EASY
    elif result.hints_used == 0 and thresholds.time_ratio_good_min <= ratio <= thresholds.time_ratio_good_max:
        rating = FSRSRating.GOOD
    else:
        rating = FSRSRating.GOOD

    logger.debug(
        "[sandbox] rating %s for %s: passed=%s attempts=%d hints=%d time_ratio=%.2f",
        rating_label(rating),
        result.interaction_id,
        result.passed,
        result.attempt_count,
        result.hints_used,
        ratio,
    )
    return rating


def rating_label(rating: FSRSRating) -> str:
    return FSRSRating(rating).name.title()
