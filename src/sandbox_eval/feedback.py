# ABOUTME: Classifies evaluation outcomes into feedback bands and renders learner-facing copy.
# ABOUTME: Keeps band selection pure and the message templates in a separate lookup table.

from __future__ import annotations

from typing import Dict, Optional

from src.common.schemas import FeedbackBand

from .config import DEFAULT_CONFIG, FeedbackThresholds, FrictionThresholds


def classify_feedback(
    score: float,
    passed: bool,
    attempt_count: int,
    hints_used: int,
    thresholds: Optional[FeedbackThresholds] = None,
    friction: Optional[FrictionThresholds] = None,
) -> FeedbackBand:
    thresholds = thresholds or DEFAULT_CONFIG.feedback
    friction = friction or DEFAULT_CONFIG.friction

    if passed:
        if score == 1.0 and attempt_count == 1 and hints_used == 0:
            return FeedbackBand.PERFECT_FIRST_TRY
        if score == 1.0:
            return FeedbackBand.PERFECT
        if score >= thresholds.great_score:
            return FeedbackBand.GREAT
        return FeedbackBand.THRESHOLD_MET

    if attempt_count >= friction.max_attempts_again:
        return FeedbackBand.ATTEMPTS_EXCEEDED
    if score >= thresholds.close_score:
        return FeedbackBand.CLOSE
    return FeedbackBand.LOW_SCORE


FEEDBACK_TEMPLATES: Dict[FeedbackBand, str] = {
    FeedbackBand.PERFECT_FIRST_TRY: "Perfect! You got it right on the first try without any hints.",
    FeedbackBand.PERFECT: "Excellent! All elements are correctly placed.",
    FeedbackBand.GREAT: "Great job! You scored {percent}%. Just a few adjustments needed.",
    FeedbackBand.THRESHOLD_MET: "Good effort! You scored {percent}% which meets the threshold.",
    FeedbackBand.ATTEMPTS_EXCEEDED: "You've made {attempts} attempts. Try reviewing the concept first.",
    FeedbackBand.CLOSE: "You're getting close with {percent}%. Try again!",
    FeedbackBand.LOW_SCORE: "Score: {percent}%. Consider using a hint to help you.",
}


def format_feedback(band: FeedbackBand, score: float, attempt_count: int) -> str:
    return FEEDBACK_TEMPLATES[band].format(percent=round(score * 100), attempts=attempt_count)
