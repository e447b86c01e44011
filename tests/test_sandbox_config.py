# ABOUTME: Tests loading of sandbox engine constants from YAML configs.
# ABOUTME: Verifies defaults, partial overrides, the shipped config, and validation errors.

from pathlib import Path

import pytest

from src.sandbox_eval.config import DEFAULT_CONFIG, engine_config_from_dict, load_engine_config

REPO_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "sandbox_eval.yaml"


def test_shipped_config_matches_defaults():
    assert load_engine_config(REPO_CONFIG) == DEFAULT_CONFIG


def test_empty_file_yields_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_engine_config(path) == DEFAULT_CONFIG


def test_partial_override_keeps_other_defaults(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("friction:\n  time_ratio_hard: 3.0\nbaseline:\n  words_per_second: 4\n", encoding="utf-8")

    cfg = load_engine_config(path)

    assert cfg.friction.time_ratio_hard == 3.0
    assert cfg.friction.max_attempts_again == 3
    assert cfg.baseline.words_per_second == 4.0
    assert cfg.baseline.element_time_ms == 3500.0


@pytest.mark.parametrize(
    "cfg",
    [
        {"baseline": {"words_per_second": 0}},
        {"baseline": {"element_time_ms": -1}},
        {"friction": {"time_ratio_good_min": 2.0, "time_ratio_good_max": 1.0}},
        {"friction": {"max_attempts_again": 0}},
        {"feedback": {"close_score": 1.5}},
        {"feedback": {"close_score": 0.9, "great_score": 0.8}},
    ],
)
def test_invalid_values_raise(cfg):
    with pytest.raises(ValueError):
        engine_config_from_dict(cfg)


def test_non_mapping_config_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_engine_config(path)
