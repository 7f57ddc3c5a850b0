"""
The whole engine as one pure function.

    (questionnaire, constants, answers) -> FootprintSnapshot

No state is kept between calls. Calling it twice with equal inputs
produces equal snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

from footprint.calculator import footprint_breakdown
from footprint.conditions import visible_questions
from footprint.model import Question, Questionnaire, Scenario
from footprint.resolver import MissingChoicePolicy, resolve_assignments
from footprint.scenarios import generate_scenarios


@dataclass(frozen=True)
class FootprintSnapshot:
    """
    Everything the UI needs after an answer change.

    Read-only: mappings are MappingProxyType and sequences are tuples, so a
    memoized snapshot can be handed out repeatedly.

    Properties:
        assignments: Resolved assignment table (for debugging/display)
        visible_questions: Questions to show, in order
        footprint: Total over visible questions
        breakdown: question id -> contribution
        scenarios: Ranked scenarios (empty unless requested)
    """

    assignments: Mapping[str, str]
    visible_questions: Tuple[Question, ...]
    footprint: float
    breakdown: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    scenarios: Tuple[Scenario, ...] = ()

    @property
    def visible_question_ids(self) -> List[str]:
        return [q.id for q in self.visible_questions]


def compute_footprint(
    questionnaire: Questionnaire,
    constants: Mapping[str, float],
    answers: Mapping[str, str],
    include_scenarios: bool = False,
    on_missing_choice: MissingChoicePolicy = MissingChoicePolicy.FAIL,
) -> FootprintSnapshot:
    """
    Run resolution, visibility, calculation and (optionally) scenarios.

    Raises:
        MissingChoiceError: Under the default FAIL policy
    """
    assignments = resolve_assignments(answers, questionnaire, constants, on_missing_choice)
    visible = visible_questions(questionnaire, assignments)
    breakdown = footprint_breakdown(visible, assignments)

    total = sum(breakdown.values(), 0.0)

    scenarios: List[Scenario] = []
    if include_scenarios:
        scenarios = generate_scenarios(
            questionnaire, constants, answers,
            visible=visible, on_missing_choice=on_missing_choice,
        )

    return FootprintSnapshot(
        assignments=MappingProxyType(assignments),
        visible_questions=tuple(visible),
        footprint=total,
        breakdown=MappingProxyType(breakdown),
        scenarios=tuple(scenarios),
    )
