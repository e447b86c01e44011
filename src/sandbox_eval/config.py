# ABOUTME: Holds the tunable constants of the sandbox evaluation engine.
# ABOUTME: Loads baseline, friction, and feedback thresholds from YAML with built-in defaults.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class BaselineConstants:
    """baseline_ms = draggable_count * element_time_ms + words / words_per_second * 1000"""

    element_time_ms: float = 3500.0
    words_per_second: float = 3.0


@dataclass(frozen=True)
class FrictionThresholds:
    """Thresholds for the Friction Formula rating rules."""

    max_attempts_again: int = 3
    max_hints_hard: int = 1
    time_ratio_hard: float = 2.0
    time_ratio_easy: float = 0.8
    time_ratio_good_min: float = 0.8
    time_ratio_good_max: float = 1.5


@dataclass(frozen=True)
class FeedbackThresholds:
    close_score: float = 0.5
    great_score: float = 0.8


@dataclass(frozen=True)
class EngineConfig:
    baseline: BaselineConstants = field(default_factory=BaselineConstants)
    friction: FrictionThresholds = field(default_factory=FrictionThresholds)
    feedback: FeedbackThresholds = field(default_factory=FeedbackThresholds)


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(config_path: Path) -> EngineConfig:
    """
    Load engine constants from a YAML file.

    Missing sections or keys fall back to the built-in defaults, so an empty
    file yields `DEFAULT_CONFIG`.
    """

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config at {config_path} must be a mapping, got {type(cfg).__name__}.")
    return engine_config_from_dict(cfg)


def engine_config_from_dict(cfg: Dict[str, Any]) -> EngineConfig:
    baseline_cfg = cfg.get("baseline") or {}
    friction_cfg = cfg.get("friction") or {}
    feedback_cfg = cfg.get("feedback") or {}

    defaults = DEFAULT_CONFIG
    baseline = BaselineConstants(
        element_time_ms=float(baseline_cfg.get("element_time_ms", defaults.baseline.element_time_ms)),
        words_per_second=float(baseline_cfg.get("words_per_second", defaults.baseline.words_per_second)),
    )
    friction = FrictionThresholds(
        max_attempts_again=int(friction_cfg.get("max_attempts_again", defaults.friction.max_attempts_again)),
        max_hints_hard=int(friction_cfg.get("max_hints_hard", defaults.friction.max_hints_hard)),
        time_ratio_hard=float(friction_cfg.get("time_ratio_hard", defaults.friction.time_ratio_hard)),
        time_ratio_easy=float(friction_cfg.get("time_ratio_easy", defaults.friction.time_ratio_easy)),
        time_ratio_good_min=float(friction_cfg.get("time_ratio_good_min", defaults.friction.time_ratio_good_min)),
        time_ratio_good_max=float(friction_cfg.get("time_ratio_good_max", defaults.friction.time_ratio_good_max)),
    )
    feedback = FeedbackThresholds(
        close_score=float(feedback_cfg.get("close_score", defaults.feedback.close_score)),
        great_score=float(feedback_cfg.get("great_score", defaults.feedback.great_score)),
    )

    config = EngineConfig(baseline=baseline, friction=friction, feedback=feedback)
    _validate(config)
    return config


def _validate(config: EngineConfig) -> None:
    if config.baseline.element_time_ms < 0:
        raise ValueError(f"baseline.element_time_ms must be non-negative, got {config.baseline.element_time_ms}.")
    if config.baseline.words_per_second <= 0:
        raise ValueError(f"baseline.words_per_second must be positive, got {config.baseline.words_per_second}.")

    friction = config.friction
    if friction.max_attempts_again < 1:
        raise ValueError(f"friction.max_attempts_again must be at least 1, got {friction.max_attempts_again}.")
    if friction.max_hints_hard < 0:
        raise ValueError(f"friction.max_hints_hard must be non-negative, got {friction.max_hints_hard}.")
    if friction.time_ratio_good_min > friction.time_ratio_good_max:
        raise ValueError(
            "friction.time_ratio_good_min must not exceed friction.time_ratio_good_max "
            f"({friction.time_ratio_good_min} > {friction.time_ratio_good_max})."
        )

    feedback = config.feedback
    for name, value in (("close_score", feedback.close_score), ("great_score", feedback.great_score)):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"feedback.{name} must lie in [0, 1], got {value}.")
    if feedback.close_score > feedback.great_score:
        raise ValueError("feedback.close_score must not exceed feedback.great_score.")
