"""
What-if scenario generation.

For every visible question and every choice that is not currently chosen
anywhere in the answer set, recompute the footprint with just that one
answer substituted. Scenarios are ranked lowest candidate footprint first.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from footprint.calculator import total_footprint
from footprint.conditions import visible_questions
from footprint.model import Question, Questionnaire, Scenario
from footprint.resolver import MissingChoicePolicy, resolve_assignments

logger = logging.getLogger(__name__)


def footprint_for_answers(
    questionnaire: Questionnaire,
    constants: Mapping[str, float],
    answers: Mapping[str, str],
    on_missing_choice: MissingChoicePolicy = MissingChoicePolicy.FAIL,
) -> float:
    """Resolve, filter and sum for one answer set."""
    assignments = resolve_assignments(answers, questionnaire, constants, on_missing_choice)
    return total_footprint(visible_questions(questionnaire, assignments), assignments)


def generate_scenarios(
    questionnaire: Questionnaire,
    constants: Mapping[str, float],
    answers: Mapping[str, str],
    visible: Optional[Sequence[Question]] = None,
    on_missing_choice: MissingChoicePolicy = MissingChoicePolicy.FAIL,
) -> List[Scenario]:
    """
    Build the ranked scenario list for an answer set.

    Args:
        questionnaire: Question definitions
        constants: constant name -> value
        answers: Current answer set (not modified)
        visible: Currently visible questions; computed when omitted
        on_missing_choice: Passed through to resolution

    Returns:
        Scenarios sorted ascending by candidate footprint. Ties keep
        enumeration order (question order, then choice order).

    NOTE:
        A choice is skipped when its key equals the chosen key of ANY
        answer, not only the answer of its own question.
    """
    assignments = resolve_assignments(answers, questionnaire, constants, on_missing_choice)
    if visible is None:
        visible = visible_questions(questionnaire, assignments)
    current = total_footprint(visible, assignments)

    chosen_keys = set(answers.values())
    scenarios: List[Scenario] = []

    for question in visible:
        for choice in question.choices:
            if choice.key in chosen_keys:
                continue

            overridden = dict(answers)
            overridden[question.id] = choice.key
            candidate = footprint_for_answers(questionnaire, constants, overridden, on_missing_choice)

            scenarios.append(Scenario(
                question_id=question.id,
                current_choice_key=answers.get(question.id),
                candidate_choice_key=choice.key,
                current_footprint=current,
                candidate_footprint=candidate,
            ))

    logger.debug("Generated %d scenarios from baseline %s", len(scenarios), current)
    return sorted(scenarios, key=lambda s: s.candidate_footprint)
