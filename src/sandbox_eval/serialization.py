# ABOUTME: Converts upstream camelCase JSON records into sandbox schema objects and back.
# ABOUTME: Loads interaction definitions and user states from JSON or YAML files.

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import yaml

from src.common.schemas import (
    Connection,
    ConnectionSet,
    CorrectStateDefinition,
    ElementType,
    EvaluationMode,
    ExpectedState,
    InteractionType,
    SandboxElement,
    SandboxEvaluationResult,
    SandboxInteraction,
    ScaffoldLevel,
    SequenceOrder,
    UserState,
    ZoneContents,
)

from .evaluate import SubmissionOutcome
from .rating import rating_label

ZONE_INTERACTIONS = {
    InteractionType.MATCHING,
    InteractionType.FILL_IN_BLANK,
    InteractionType.DIAGRAM_BUILD,
}

_EnumT = TypeVar("_EnumT")


def _parse_enum(enum_cls: Type[_EnumT], value: Any, field_name: str) -> _EnumT:
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Unsupported {field_name} '{value}'. Expected one of: {allowed}.") from exc


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"Missing required field '{key}'.")
    return data[key]


def _string_list(value: Any, field_name: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Field '{field_name}' must be a list, got {type(value).__name__}.")
    return [str(v) for v in value]


def _zone_map(value: Any, field_name: str) -> Dict[str, List[str]]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Field '{field_name}' must be a mapping of zone id to element ids.")
    return {str(zone_id): _string_list(ids, f"{field_name}.{zone_id}") for zone_id, ids in value.items()}


def _connections(value: Any, field_name: str) -> List[Connection]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Field '{field_name}' must be a list of {{from, to}} pairs.")
    connections = []
    for raw in value:
        if not isinstance(raw, Mapping) or "from" not in raw or "to" not in raw:
            raise ValueError(f"Each entry of '{field_name}' needs 'from' and 'to', got {raw!r}.")
        connections.append(Connection(source=str(raw["from"]), target=str(raw["to"])))
    return connections


def element_from_dict(data: Mapping[str, Any]) -> SandboxElement:
    if not isinstance(data, Mapping):
        raise ValueError(f"Each element must be a mapping, got {data!r}.")
    content = data.get("content", "")
    if isinstance(content, Mapping):
        # Image source; keep its alt text or uri.
        content = content.get("alt") or content.get("uri") or ""
    capacity = data.get("capacity")
    return SandboxElement(
        id=str(_require(data, "id")),
        type=_parse_enum(ElementType, _require(data, "type"), "element type"),
        draggable=bool(data.get("draggable", False)),
        content=str(content),
        capacity=int(capacity) if capacity is not None else None,
        snap_targets=tuple(_string_list(data.get("snapTargets"), "snapTargets")),
        accessibility_label=data.get("accessibilityLabel"),
    )


def correct_state_from_dict(data: Mapping[str, Any], interaction_type: InteractionType) -> CorrectStateDefinition:
    """
    Pick the correct-state payload matching `interaction_type`.

    Payload fields meant for other types are ignored. A missing payload is
    kept as `None`, which the scorer treats as trivially satisfied.
    """

    expected: Optional[ExpectedState] = None
    if interaction_type in ZONE_INTERACTIONS:
        if data.get("zoneContents") is not None:
            zones = _zone_map(data["zoneContents"], "correctState.zoneContents")
            expected = ZoneContents(zones={zone_id: tuple(ids) for zone_id, ids in zones.items()})
    elif interaction_type == InteractionType.SEQUENCING:
        if data.get("sequence") is not None:
            expected = SequenceOrder(sequence=tuple(_string_list(data["sequence"], "correctState.sequence")))
    elif interaction_type == InteractionType.BRANCHING:
        if data.get("connections") is not None:
            expected = ConnectionSet(connections=tuple(_connections(data["connections"], "correctState.connections")))

    raw_min = data.get("minCorrectPercentage")
    min_correct = 1.0 if raw_min is None else float(raw_min)
    if not 0.0 <= min_correct <= 1.0:
        raise ValueError(f"minCorrectPercentage must lie in [0, 1], got {min_correct}.")
    return CorrectStateDefinition(expected=expected, min_correct_percentage=min_correct)


def interaction_from_dict(data: Mapping[str, Any]) -> SandboxInteraction:
    if not isinstance(data, Mapping):
        raise ValueError(f"An interaction record must be a mapping, got {type(data).__name__}.")
    interaction_type = _parse_enum(InteractionType, _require(data, "interactionType"), "interactionType")
    raw_elements = data.get("elements") or []
    if not isinstance(raw_elements, (list, tuple)):
        raise ValueError("Field 'elements' must be a list.")

    estimated = data.get("estimatedTimeSeconds")
    modifier = data.get("difficultyModifier")
    return SandboxInteraction(
        interaction_id=str(_require(data, "interactionId")),
        concept_id=str(_require(data, "conceptId")),
        interaction_type=interaction_type,
        elements=tuple(element_from_dict(raw) for raw in raw_elements),
        correct_state=correct_state_from_dict(data.get("correctState") or {}, interaction_type),
        hints=tuple(_string_list(data.get("hints"), "hints")),
        instructions=str(data.get("instructions") or ""),
        scaffold_level=_parse_enum(ScaffoldLevel, data.get("scaffoldLevel", "faded"), "scaffoldLevel"),
        evaluation_mode=_parse_enum(EvaluationMode, data.get("evaluationMode", "deterministic"), "evaluationMode"),
        estimated_time_seconds=float(estimated) if estimated is not None else None,
        difficulty_modifier=float(modifier) if modifier is not None else 1.0,
        cognitive_type=data.get("cognitiveType"),
        bloom_level=data.get("bloomLevel"),
    )


def user_state_from_dict(data: Optional[Mapping[str, Any]]) -> UserState:
    """Parse a user-state record; `None` stands for a learner who submitted nothing."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"A user-state record must be a mapping, got {type(data).__name__}.")
    path_taken = data.get("pathTaken")
    if path_taken is None:
        path_taken = {}
    if not isinstance(path_taken, Mapping):
        raise ValueError("Field 'pathTaken' must map decision ids to chosen branches.")
    return UserState(
        zone_contents=_zone_map(data.get("zoneContents"), "zoneContents"),
        sequence=_string_list(data.get("sequence"), "sequence"),
        connections=_connections(data.get("connections"), "connections"),
        path_taken={str(k): str(v) for k, v in path_taken.items()},
    )


def result_to_dict(result: SandboxEvaluationResult) -> Dict[str, Any]:
    element_results = []
    for element in result.element_results:
        row: Dict[str, Any] = {"elementId": element.element_id, "correct": element.correct}
        if element.expected_zone is not None:
            row["expectedZone"] = element.expected_zone
        if element.actual_zone is not None:
            row["actualZone"] = element.actual_zone
        element_results.append(row)

    payload: Dict[str, Any] = {
        "interactionId": result.interaction_id,
        "conceptId": result.concept_id,
        "score": result.score,
        "passed": result.passed,
        "attemptCount": result.attempt_count,
        "hintsUsed": result.hints_used,
        "timeToCompleteMs": result.time_to_complete_ms,
        "feedback": result.feedback,
        "feedbackBand": result.feedback_band.value,
        "elementResults": element_results,
    }
    if result.misconception_detected is not None:
        payload["misconceptionDetected"] = result.misconception_detected
    return payload


def outcome_to_dict(outcome: SubmissionOutcome) -> Dict[str, Any]:
    payload = result_to_dict(outcome.result)
    payload["baselineMs"] = outcome.baseline_ms
    payload["rating"] = int(outcome.rating)
    payload["ratingLabel"] = rating_label(outcome.rating)
    return payload


def read_records(path: Path) -> Any:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".json":
        return json.loads(text)
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    raise ValueError(f"Unsupported file type '{path.suffix}' for {path}. Expected .json, .yaml or .yml.")


def load_interactions(path: Path) -> List[SandboxInteraction]:
    records = read_records(path)
    if isinstance(records, Mapping):
        records = [records]
    if not isinstance(records, list):
        raise ValueError(f"{path} must hold an interaction record or a list of records.")
    return [interaction_from_dict(record) for record in records]


def load_user_state(path: Path) -> UserState:
    record = read_records(path)
    if record is not None and not isinstance(record, Mapping):
        raise ValueError(f"{path} must hold a single user-state mapping.")
    return user_state_from_dict(record)
