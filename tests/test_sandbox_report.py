# ABOUTME: Tests batch scoring of sandbox submissions into a rating report.
# ABOUTME: Ensures per-row ratings, missing user-state cells, and per-concept summaries are handled.

import pandas as pd
import pytest

from src.sandbox_eval.report import REPORT_COLUMNS, score_submissions, summarize_ratings
from src.sandbox_eval.serialization import interaction_from_dict


def _interactions():
    return [
        interaction_from_dict(
            {
                "interactionId": "seq-1",
                "conceptId": "mitosis",
                "interactionType": "sequencing",
                "elements": [
                    {"id": "a", "type": "draggable", "draggable": True},
                    {"id": "b", "type": "draggable", "draggable": True},
                ],
                "correctState": {"sequence": ["a", "b"], "minCorrectPercentage": 1.0},
            }
        ),
        interaction_from_dict(
            {
                "interactionId": "match-1",
                "conceptId": "cells",
                "interactionType": "matching",
                "elements": [{"id": "e1", "type": "draggable", "draggable": True}],
                "correctState": {"zoneContents": {"z1": ["e1"]}, "minCorrectPercentage": 1.0},
            }
        ),
    ]


def _submissions():
    # seq-1 baseline = 7000 ms, match-1 baseline = 3500 ms
    return pd.DataFrame(
        {
            "user_id": ["u1", "u2", "u3", "u1"],
            "interaction_id": ["seq-1", "seq-1", "seq-1", "match-1"],
            "user_state": [
                {"sequence": ["a", "b"]},
                {"sequence": ["b", "a"]},
                {"sequence": ["a", "b"]},
                {"zoneContents": {"z1": ["e1"]}},
            ],
            "attempt_count": [1, 1, 2, 1],
            "hints_used": [0, 0, 2, 0],
            "time_to_complete_ms": [3500, 7000, 7000, 3500],
        }
    )


def test_score_submissions_rates_each_row():
    report = score_submissions(_interactions(), _submissions())

    assert list(report.columns) == REPORT_COLUMNS
    assert report["rating"].tolist() == [4, 1, 2, 3]
    assert report["rating_label"].tolist() == ["Easy", "Again", "Hard", "Good"]
    assert report["passed"].tolist() == [True, False, True, True]
    assert report.loc[0, "baseline_ms"] == pytest.approx(7000.0)
    assert report.loc[0, "time_ratio"] == pytest.approx(0.5)
    assert report.loc[3, "concept_id"] == "cells"


def test_score_submissions_rejects_unknown_interaction():
    submissions = _submissions()
    submissions.loc[0, "interaction_id"] = "ghost"
    with pytest.raises(ValueError):
        score_submissions(_interactions(), submissions)


def test_score_submissions_rejects_missing_columns():
    with pytest.raises(ValueError):
        score_submissions(_interactions(), _submissions().drop(columns=["hints_used"]))


def test_empty_submissions_give_empty_report():
    report = score_submissions(_interactions(), pd.DataFrame())
    assert report.empty
    assert list(report.columns) == REPORT_COLUMNS


def test_summarize_ratings_per_concept():
    summary = summarize_ratings(score_submissions(_interactions(), _submissions()))

    mitosis = summary.set_index("concept_id").loc["mitosis"]
    assert mitosis["submissions"] == 3
    assert mitosis["pass_rate"] == pytest.approx(2 / 3)
    assert mitosis["mean_score"] == pytest.approx(2 / 3)
    assert (mitosis["Again"], mitosis["Hard"], mitosis["Good"], mitosis["Easy"]) == (1, 1, 0, 1)

    cells = summary.set_index("concept_id").loc["cells"]
    assert (cells["Again"], cells["Hard"], cells["Good"], cells["Easy"]) == (0, 0, 1, 0)


def test_summarize_empty_report():
    summary = summarize_ratings(pd.DataFrame(columns=REPORT_COLUMNS))
    assert summary.empty
    assert "Easy" in summary.columns


def test_missing_user_state_cell_scores_as_empty_submission():
    # Ragged JSONL rows leave NaN where a user_state key is absent.
    submissions = pd.DataFrame(
        [
            {
                "user_id": "u1",
                "interaction_id": "seq-1",
                "user_state": {"sequence": ["a", "b"]},
                "attempt_count": 1,
                "hints_used": 0,
                "time_to_complete_ms": 7000,
            },
            {
                "user_id": "u2",
                "interaction_id": "seq-1",
                "attempt_count": 1,
                "hints_used": 0,
                "time_to_complete_ms": 7000,
            },
        ]
    )

    report = score_submissions(_interactions(), submissions)

    assert report["score"].tolist() == [1.0, 0.0]
    assert report["rating_label"].tolist() == ["Good", "Again"]


def test_malformed_user_state_cell_raises():
    submissions = _submissions()
    submissions.at[0, "user_state"] = "a,b"
    with pytest.raises(ValueError):
        score_submissions(_interactions(), submissions)
