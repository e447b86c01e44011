# ABOUTME: Exposes the sandbox interaction evaluation engine entrypoints.
# ABOUTME: Groups baseline estimation, outcome scoring, evaluation, and rating derivation.

from .baseline import estimate_baseline_ms
from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from .evaluate import SubmissionOutcome, evaluate, evaluate_submission, validate_telemetry
from .rating import derive_rating, rating_label
from .scoring import ScoreOutcome, score

__all__ = [
    "estimate_baseline_ms",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "load_engine_config",
    "SubmissionOutcome",
    "evaluate",
    "evaluate_submission",
    "validate_telemetry",
    "derive_rating",
    "rating_label",
    "ScoreOutcome",
    "score",
]
