# ABOUTME: Evaluates a sandbox submission into a scored, feedback-bearing result record.
# ABOUTME: Also composes baseline estimation and rating derivation for a validated submission.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.common.schemas import FSRSRating, SandboxEvaluationResult, SandboxInteraction, UserState

from .baseline import estimate_baseline_ms
from .config import DEFAULT_CONFIG, EngineConfig
from .feedback import classify_feedback, format_feedback
from .rating import derive_rating
from .scoring import score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    result: SandboxEvaluationResult
    baseline_ms: float
    rating: FSRSRating


def evaluate(
    interaction: SandboxInteraction,
    user_state: UserState,
    attempt_count: int,
    hints_used: int,
    time_to_complete_ms: float,
    config: Optional[EngineConfig] = None,
) -> SandboxEvaluationResult:
    """
    Score a submission and assemble its result record.

    Telemetry is taken as already measured and is not validated here; use
    `evaluate_submission` at an untrusted boundary.
    """

    config = config or DEFAULT_CONFIG
    outcome = score(interaction.interaction_type, user_state, interaction.correct_state)
    passed = outcome.score >= interaction.correct_state.min_correct_percentage

    band = classify_feedback(
        outcome.score,
        passed,
        attempt_count,
        hints_used,
        thresholds=config.feedback,
        friction=config.friction,
    )

    result = SandboxEvaluationResult(
        interaction_id=interaction.interaction_id,
        concept_id=interaction.concept_id,
        score=outcome.score,
        passed=passed,
        attempt_count=attempt_count,
        hints_used=hints_used,
        time_to_complete_ms=time_to_complete_ms,
        feedback=format_feedback(band, outcome.score, attempt_count),
        feedback_band=band,
        element_results=outcome.element_results,
    )

    logger.debug(
        "[sandbox] evaluated %s: score=%.3f passed=%s attempt=%d",
        interaction.interaction_id,
        result.score,
        result.passed,
        result.attempt_count,
    )
    return result


def validate_telemetry(attempt_count: int, hints_used: int, time_to_complete_ms: float) -> None:
    if attempt_count < 0:
        raise ValueError(f"attempt_count must be non-negative, got {attempt_count}.")
    if hints_used < 0:
        raise ValueError(f"hints_used must be non-negative, got {hints_used}.")
    if time_to_complete_ms < 0:
        raise ValueError(f"time_to_complete_ms must be non-negative, got {time_to_complete_ms}.")


def evaluate_submission(
    interaction: SandboxInteraction,
    user_state: UserState,
    attempt_count: int,
    hints_used: int,
    time_to_complete_ms: float,
    config: Optional[EngineConfig] = None,
) -> SubmissionOutcome:
    """
    Validate telemetry, evaluate the submission, and derive its rating.

    Raises ValueError for negative attempt, hint, or time values.
    """

    config = config or DEFAULT_CONFIG
    validate_telemetry(attempt_count, hints_used, time_to_complete_ms)

    result = evaluate(interaction, user_state, attempt_count, hints_used, time_to_complete_ms, config=config)
    baseline_ms = estimate_baseline_ms(interaction, config.baseline)
    rating = derive_rating(result, baseline_ms, config.friction)
    return SubmissionOutcome(result=result, baseline_ms=baseline_ms, rating=rating)
