# ABOUTME: Defines canonical data structures for sandbox interactions and their evaluation.
# ABOUTME: Centralizes interaction, correct-state, user-state, and result schema definitions.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Mapping, Optional, Tuple, Union


class InteractionType(str, Enum):
    MATCHING = "matching"
    FILL_IN_BLANK = "fill_in_blank"
    SEQUENCING = "sequencing"
    DIAGRAM_BUILD = "diagram_build"
    BRANCHING = "branching"


class ElementType(str, Enum):
    DRAGGABLE = "draggable"
    DROPZONE = "dropzone"
    TEXT_INPUT = "text_input"
    CONNECTOR = "connector"
    LABEL = "label"
    IMAGE = "image"


class ScaffoldLevel(str, Enum):
    """Fading-scaffolding level; carried through, never evaluated."""

    WORKED = "worked"
    SCAFFOLD = "scaffold"
    FADED = "faded"


class EvaluationMode(str, Enum):
    DETERMINISTIC = "deterministic"
    AI_ASSISTED = "ai_assisted"


class FeedbackBand(str, Enum):
    """Outcome classification used to pick learner-facing feedback copy."""

    PERFECT_FIRST_TRY = "perfect_first_try"
    PERFECT = "perfect"
    GREAT = "great"
    THRESHOLD_MET = "threshold_met"
    ATTEMPTS_EXCEEDED = "attempts_exceeded"
    CLOSE = "close"
    LOW_SCORE = "low_score"


class FSRSRating(IntEnum):
    """Spaced-repetition rating handed to the external scheduler."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4


@dataclass(frozen=True)
class SandboxElement:
    id: str
    type: ElementType
    draggable: bool = False
    content: str = ""
    capacity: Optional[int] = None
    snap_targets: Tuple[str, ...] = ()
    accessibility_label: Optional[str] = None


def is_draggable(element: SandboxElement) -> bool:
    return element.draggable is True


def is_dropzone(element: SandboxElement) -> bool:
    return element.type == ElementType.DROPZONE


@dataclass(frozen=True)
class Connection:
    """Directed edge between two element ids."""

    source: str
    target: str

    @property
    def key(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass(frozen=True)
class ZoneContents:
    """Expected zone-id -> ordered element ids (matching, fill-in-blank, diagram build)."""

    zones: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceOrder:
    """Expected ordering of element ids (sequencing)."""

    sequence: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ConnectionSet:
    """Expected directed connections (branching)."""

    connections: Tuple[Connection, ...] = ()


ExpectedState = Union[ZoneContents, SequenceOrder, ConnectionSet]


@dataclass(frozen=True)
class CorrectStateDefinition:
    """
    Correct state of an interaction plus its pass threshold.

    `expected` holds exactly one payload variant; `None` marks content that was
    authored without one and is scored as trivially satisfied.
    """

    expected: Optional[ExpectedState] = None
    min_correct_percentage: float = 1.0


@dataclass(frozen=True)
class SandboxInteraction:
    interaction_id: str
    concept_id: str
    interaction_type: InteractionType
    elements: Tuple[SandboxElement, ...]
    correct_state: CorrectStateDefinition
    hints: Tuple[str, ...] = ()
    instructions: str = ""
    scaffold_level: ScaffoldLevel = ScaffoldLevel.FADED
    evaluation_mode: EvaluationMode = EvaluationMode.DETERMINISTIC
    estimated_time_seconds: Optional[float] = None
    difficulty_modifier: float = 1.0
    cognitive_type: Optional[str] = None
    bloom_level: Optional[str] = None


@dataclass(frozen=True)
class UserState:
    """Live canvas state captured by the UI at submission time."""

    zone_contents: Mapping[str, List[str]] = field(default_factory=dict)
    sequence: List[str] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    path_taken: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ElementResult:
    element_id: str
    correct: bool
    expected_zone: Optional[str] = None
    actual_zone: Optional[str] = None


@dataclass(frozen=True)
class SandboxEvaluationResult:
    interaction_id: str
    concept_id: str
    score: float
    passed: bool
    attempt_count: int
    hints_used: int
    time_to_complete_ms: float
    feedback: str
    feedback_band: FeedbackBand
    element_results: Tuple[ElementResult, ...] = ()
    misconception_detected: Optional[str] = None
