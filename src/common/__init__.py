# ABOUTME: Makes the shared common package importable across engines.
# ABOUTME: Re-exports the sandbox schema types for convenience.

from .schemas import (
    Connection,
    CorrectStateDefinition,
    ElementResult,
    FSRSRating,
    FeedbackBand,
    InteractionType,
    SandboxElement,
    SandboxEvaluationResult,
    SandboxInteraction,
    UserState,
)

__all__ = [
    "Connection",
    "CorrectStateDefinition",
    "ElementResult",
    "FSRSRating",
    "FeedbackBand",
    "InteractionType",
    "SandboxElement",
    "SandboxEvaluationResult",
    "SandboxInteraction",
    "UserState",
]
