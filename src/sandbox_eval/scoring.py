# ABOUTME: Scores a learner's final canvas state against the interaction's correct state.
# ABOUTME: Dispatches by interaction type to zone, sequence, or connection matching.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from src.common.schemas import (
    Connection,
    ConnectionSet,
    CorrectStateDefinition,
    ElementResult,
    ExpectedState,
    InteractionType,
    SequenceOrder,
    UserState,
    ZoneContents,
)

from .alignment import levenshtein_distance, partial_credit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreOutcome:
    score: float
    element_results: Tuple[ElementResult, ...] = ()


AUTO_PASS = ScoreOutcome(score=1.0)


def score_zone_contents(user_zones: Mapping[str, Sequence[str]], expected: ZoneContents) -> ScoreOutcome:
    """
    Fraction of expected elements found in their expected zone.

    Element order inside a zone is not checked. Each expected element reports
    the user zone it was actually dropped in, if any.
    """

    results: List[ElementResult] = []
    correct_count = 0
    total_count = 0

    for zone_id, expected_elements in expected.zones.items():
        actual_elements = user_zones.get(zone_id) or []
        for element_id in expected_elements:
            total_count += 1
            is_correct = element_id in actual_elements
            if is_correct:
                correct_count += 1
            results.append(
                ElementResult(
                    element_id=element_id,
                    correct=is_correct,
                    expected_zone=zone_id,
                    actual_zone=_find_zone(user_zones, element_id),
                )
            )

    score = correct_count / total_count if total_count else 1.0
    logger.debug("[sandbox] zone match: correct=%d total=%d score=%.3f", correct_count, total_count, score)
    return ScoreOutcome(score=score, element_results=tuple(results))


def _find_zone(user_zones: Mapping[str, Sequence[str]], element_id: str) -> Optional[str]:
    for zone_id, elements in user_zones.items():
        if element_id in elements:
            return zone_id
    return None


def score_sequence(user_sequence: Sequence[str], expected: SequenceOrder) -> ScoreOutcome:
    """
    Partial credit from edit distance, with a position-wise element breakdown.

    The score rewards overall similarity while each element result only marks
    whether that entry sits at the same index as in the correct sequence.
    """

    correct_sequence = list(expected.sequence)
    distance = levenshtein_distance(user_sequence, correct_sequence)
    max_length = max(len(user_sequence), len(correct_sequence))
    score = partial_credit(distance, max_length)

    results = []
    for index, element_id in enumerate(user_sequence):
        expected_index = correct_sequence.index(element_id) if element_id in correct_sequence else None
        results.append(
            ElementResult(
                element_id=element_id,
                correct=index < len(correct_sequence) and correct_sequence[index] == element_id,
                expected_zone=f"position_{expected_index}" if expected_index is not None else None,
                actual_zone=f"position_{index}",
            )
        )

    logger.debug("[sandbox] sequence match: distance=%d max_len=%d score=%.3f", distance, max_length, score)
    return ScoreOutcome(score=score, element_results=tuple(results))


def score_connections(user_connections: Sequence[Connection], expected: ConnectionSet) -> ScoreOutcome:
    """Fraction of expected connections present in the user's connections."""

    drawn = set(user_connections)
    results = []
    matched = 0
    for connection in expected.connections:
        found = connection in drawn
        if found:
            matched += 1
        results.append(ElementResult(element_id=connection.key, correct=found))

    total = len(expected.connections)
    score = matched / total if total else 1.0
    logger.debug("[sandbox] connection match: matched=%d total=%d score=%.3f", matched, total, score)
    return ScoreOutcome(score=score, element_results=tuple(results))


def _zones(user_state: UserState, expected: ExpectedState) -> ScoreOutcome:
    return score_zone_contents(user_state.zone_contents, expected)


def _sequence(user_state: UserState, expected: ExpectedState) -> ScoreOutcome:
    return score_sequence(user_state.sequence, expected)


def _connections(user_state: UserState, expected: ExpectedState) -> ScoreOutcome:
    return score_connections(user_state.connections, expected)


Strategy = Tuple[Type, Callable[[UserState, ExpectedState], ScoreOutcome]]

STRATEGIES: Dict[InteractionType, Strategy] = {
    InteractionType.MATCHING: (ZoneContents, _zones),
    InteractionType.FILL_IN_BLANK: (ZoneContents, _zones),
    InteractionType.DIAGRAM_BUILD: (ZoneContents, _zones),
    InteractionType.SEQUENCING: (SequenceOrder, _sequence),
    InteractionType.BRANCHING: (ConnectionSet, _connections),
}


def score(
    interaction_type: InteractionType,
    user_state: UserState,
    correct_state: CorrectStateDefinition,
) -> ScoreOutcome:
    """
    Score a submission with the strategy registered for `interaction_type`.

    A correct state without the payload this type needs (absent, or authored
    for a different type) is treated as trivially satisfied.
    `interaction_type` may also be the plain string value of the enum.
    """

    interaction_type = InteractionType(interaction_type)
    payload_type, strategy = STRATEGIES[interaction_type]
    expected = correct_state.expected
    if not isinstance(expected, payload_type):
        logger.debug(
            "[sandbox] %s has no %s payload; auto-pass",
            interaction_type.value,
            payload_type.__name__,
        )
        return AUTO_PASS
    return strategy(user_state, expected)
