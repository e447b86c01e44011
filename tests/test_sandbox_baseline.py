# ABOUTME: Tests baseline time estimation for sandbox interactions.
# ABOUTME: Verifies draggable-only element counting and reading time over all hints.

import pytest

from src.common.schemas import (
    CorrectStateDefinition,
    ElementType,
    InteractionType,
    SandboxElement,
    SandboxInteraction,
)
from src.sandbox_eval.baseline import count_words, estimate_baseline_ms
from src.sandbox_eval.config import BaselineConstants


def _interaction(elements, instructions="", hints=()):
    return SandboxInteraction(
        interaction_id="int-1",
        concept_id="c-1",
        interaction_type=InteractionType.MATCHING,
        elements=tuple(elements),
        correct_state=CorrectStateDefinition(),
        hints=tuple(hints),
        instructions=instructions,
    )


def test_baseline_counts_draggables_and_all_hint_words():
    elements = [
        SandboxElement(id="e1", type=ElementType.DRAGGABLE, draggable=True),
        SandboxElement(id="e2", type=ElementType.DRAGGABLE, draggable=True),
        SandboxElement(id="z1", type=ElementType.DROPZONE, capacity=1),
        SandboxElement(id="title", type=ElementType.LABEL),
    ]
    interaction = _interaction(
        elements,
        instructions="Match each term to its definition",
        hints=["Think about inputs", "Outputs come last"],
    )

    # 2 draggables * 3500 + 12 words / 3 wps * 1000
    assert estimate_baseline_ms(interaction) == pytest.approx(11000.0)


def test_baseline_is_zero_for_degenerate_interaction():
    assert estimate_baseline_ms(_interaction([])) == 0.0


def test_baseline_ignores_non_draggable_elements():
    elements = [SandboxElement(id="z1", type=ElementType.DROPZONE), SandboxElement(id="l", type=ElementType.LABEL)]
    assert estimate_baseline_ms(_interaction(elements, instructions="   ")) == 0.0


def test_baseline_honours_custom_constants():
    elements = [SandboxElement(id="e1", type=ElementType.DRAGGABLE, draggable=True)]
    interaction = _interaction(elements, instructions="one two")
    constants = BaselineConstants(element_time_ms=1000, words_per_second=2)

    assert estimate_baseline_ms(interaction, constants) == pytest.approx(2000.0)


def test_count_words_splits_on_any_whitespace():
    assert count_words("  drag\tthe\nsteps  into order ") == 5
    assert count_words("") == 0
