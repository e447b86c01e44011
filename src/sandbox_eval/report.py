# ABOUTME: Scores batches of sandbox submissions into a tabular rating report.
# ABOUTME: Summarizes pass rates, scores, and rating distributions per concept.

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from src.common.schemas import FSRSRating, SandboxInteraction

from .config import DEFAULT_CONFIG, EngineConfig
from .evaluate import evaluate_submission
from .rating import rating_label, time_ratio
from .serialization import user_state_from_dict

REPORT_COLUMNS = [
    "user_id",
    "interaction_id",
    "concept_id",
    "score",
    "passed",
    "feedback_band",
    "baseline_ms",
    "time_ratio",
    "rating",
    "rating_label",
]

REQUIRED_SUBMISSION_COLUMNS = {
    "user_id",
    "interaction_id",
    "user_state",
    "attempt_count",
    "hints_used",
    "time_to_complete_ms",
}


def _user_state_cell(value: Any) -> Optional[Mapping[str, Any]]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return value


def score_submissions(
    interactions: Iterable[SandboxInteraction],
    submissions_df: pd.DataFrame,
    config: Optional[EngineConfig] = None,
) -> pd.DataFrame:
    """
    Evaluate and rate every submission row.

    `user_state` cells hold the camelCase user-state record produced by the UI.
    A missing cell (NaN after `pd.read_json` on ragged lines) counts as an
    empty submission.
    Rows referencing an unknown interaction id raise ValueError.
    """

    config = config or DEFAULT_CONFIG
    if submissions_df is None or submissions_df.empty:
        return pd.DataFrame(columns=REPORT_COLUMNS)

    missing = REQUIRED_SUBMISSION_COLUMNS - set(submissions_df.columns)
    if missing:
        raise ValueError(f"Submissions are missing columns: {', '.join(sorted(missing))}.")

    by_id: Dict[str, SandboxInteraction] = {i.interaction_id: i for i in interactions}
    unknown = set(submissions_df["interaction_id"].astype(str)) - set(by_id)
    if unknown:
        raise ValueError(f"Unknown interaction ids in submissions: {', '.join(sorted(unknown))}.")

    rows: List[Dict] = []
    for _, row in submissions_df.iterrows():
        interaction = by_id[str(row["interaction_id"])]
        outcome = evaluate_submission(
            interaction,
            user_state_from_dict(_user_state_cell(row["user_state"])),
            int(row["attempt_count"]),
            int(row["hints_used"]),
            float(row["time_to_complete_ms"]),
            config=config,
        )
        result = outcome.result
        rows.append(
            {
                "user_id": str(row["user_id"]),
                "interaction_id": result.interaction_id,
                "concept_id": result.concept_id,
                "score": result.score,
                "passed": result.passed,
                "feedback_band": result.feedback_band.value,
                "baseline_ms": outcome.baseline_ms,
                "time_ratio": time_ratio(result.time_to_complete_ms, outcome.baseline_ms),
                "rating": int(outcome.rating),
                "rating_label": rating_label(outcome.rating),
            }
        )

    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def summarize_ratings(report_df: pd.DataFrame) -> pd.DataFrame:
    """Per-concept submission count, pass rate, mean score, and rating counts."""

    label_columns = [rating_label(r) for r in FSRSRating]
    columns = ["concept_id", "submissions", "pass_rate", "mean_score"] + label_columns
    if report_df is None or report_df.empty:
        return pd.DataFrame(columns=columns)

    summary = (
        report_df.groupby("concept_id")
        .agg(
            submissions=("score", "count"),
            pass_rate=("passed", "mean"),
            mean_score=("score", "mean"),
        )
        .reset_index()
    )

    counts = (
        report_df.groupby(["concept_id", "rating_label"])
        .size()
        .unstack(fill_value=0)
        .reindex(columns=label_columns, fill_value=0)
        .reset_index()
    )
    counts.columns.name = None

    summary = summary.merge(counts, on="concept_id", how="left")
    summary[label_columns] = summary[label_columns].fillna(0).astype(int)
    summary["pass_rate"] = summary["pass_rate"].astype(float)
    return summary[columns]
