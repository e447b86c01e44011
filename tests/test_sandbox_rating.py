# ABOUTME: Tests the Friction Formula rating derivation.
# ABOUTME: Pins rule precedence and boundary ratios that depend on rule order.

import math

import pytest

from src.common.schemas import FeedbackBand, FSRSRating, SandboxEvaluationResult
from src.sandbox_eval.config import FrictionThresholds
from src.sandbox_eval.rating import derive_rating, rating_label, time_ratio


def _result(passed=True, attempt_count=1, hints_used=0, time_ms=1000.0):
    return SandboxEvaluationResult(
        interaction_id="int-1",
        concept_id="c-1",
        score=1.0 if passed else 0.0,
        passed=passed,
        attempt_count=attempt_count,
        hints_used=hints_used,
        time_to_complete_ms=time_ms,
        feedback="",
        feedback_band=FeedbackBand.PERFECT if passed else FeedbackBand.LOW_SCORE,
    )


def test_easy_when_fast_without_hints():
    assert derive_rating(_result(time_ms=500), baseline_ms=1000) == FSRSRating.EASY


def test_attempt_override_yields_again_even_when_passed():
    assert derive_rating(_result(attempt_count=4), baseline_ms=1000) == FSRSRating.AGAIN


def test_failure_dominates_easy_looking_telemetry():
    assert derive_rating(_result(passed=False, time_ms=0), baseline_ms=1000) == FSRSRating.AGAIN


def test_gap_ratio_falls_through_to_good():
    # 1.9 is above the good band yet not above the hard threshold.
    assert derive_rating(_result(time_ms=1900), baseline_ms=1000) == FSRSRating.GOOD


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"attempt_count": 3}, FSRSRating.GOOD),
        ({"hints_used": 2}, FSRSRating.HARD),
        ({"hints_used": 1}, FSRSRating.GOOD),
        ({"hints_used": 1, "time_ms": 100}, FSRSRating.GOOD),
        ({"time_ms": 2000}, FSRSRating.GOOD),
        ({"time_ms": 2001}, FSRSRating.HARD),
        ({"time_ms": 800}, FSRSRating.GOOD),
        ({"time_ms": 799}, FSRSRating.EASY),
        ({"time_ms": 1500}, FSRSRating.GOOD),
        ({"time_ms": 1600}, FSRSRating.GOOD),
    ],
)
def test_rule_boundaries(kwargs, expected):
    assert derive_rating(_result(**kwargs), baseline_ms=1000) == expected


def test_custom_thresholds_are_applied():
    strict = FrictionThresholds(max_attempts_again=1)
    assert derive_rating(_result(attempt_count=2), baseline_ms=1000, thresholds=strict) == FSRSRating.AGAIN


def test_zero_baseline_follows_ratio_semantics():
    assert time_ratio(10, 0) == math.inf
    assert math.isnan(time_ratio(0, 0))
    assert derive_rating(_result(time_ms=10), baseline_ms=0) == FSRSRating.HARD
    assert derive_rating(_result(time_ms=0), baseline_ms=0) == FSRSRating.GOOD


def test_rating_labels():
    assert [rating_label(r) for r in FSRSRating] == ["Again", "Hard", "Good", "Easy"]
    assert rating_label(3) == "Good"
