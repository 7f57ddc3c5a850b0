"""
Variable resolution: answers + constants -> assignment table.

Resolution is bounded to two substitution passes:

    Pass 1: every answer-bound value is substituted with constants.
    Pass 2: every answer-bound value is substituted once more, using the
            pass-1 answer-bound values as the lookup table.

A value referencing a chain of more than one other answer-bound variable
therefore stays partially unresolved. This is intended behavior.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping

from footprint.formula import evaluate, format_number, substitute, EvaluationFailure
from footprint.model import Questionnaire

logger = logging.getLogger(__name__)


class MissingChoiceError(Exception):
    """Raised when an answer references a choice its question does not have."""

    def __init__(self, question_id: str, choice_key: str):
        super().__init__(f"Question '{question_id}' has no choice '{choice_key}'")
        self.question_id = question_id
        self.choice_key = choice_key


class MissingChoicePolicy(Enum):
    """What to do when answers and configuration have drifted apart."""
    FAIL = "fail"
    SKIP = "skip"


def constant_table(constants: Mapping[str, float]) -> Dict[str, str]:
    """Constants in assignment-table form (name -> number string)."""
    return {name: format_number(value) for name, value in constants.items()}


def _normalise(text: str) -> str:
    """Collapse a fully resolved expression to its number; keep anything else."""
    result = evaluate(text)
    if isinstance(result, EvaluationFailure):
        return text
    return format_number(result)


def resolve_assignments(
    answers: Mapping[str, str],
    questionnaire: Questionnaire,
    constants: Mapping[str, float],
    on_missing_choice: MissingChoicePolicy = MissingChoicePolicy.FAIL,
) -> Dict[str, str]:
    """
    Build the assignment table for an answer set.

    Args:
        answers: question id -> chosen choice key
        questionnaire: Question definitions
        constants: constant name -> value
        on_missing_choice: FAIL raises MissingChoiceError, SKIP ignores the answer

    Returns:
        variable name -> resolved value string. Constants first, answer-bound
        values override identically named constants.

    Raises:
        MissingChoiceError: An answer names an unknown choice (FAIL policy)
    """
    constant_values = constant_table(constants)
    questions_by_id = {q.id: q for q in questionnaire.questions}

    # Pass 1: substitute constants
    derived: Dict[str, str] = {}
    for question_id, choice_key in answers.items():
        question = questions_by_id.get(question_id)
        if question is None:
            logger.debug("Skipping answer for unknown question %s", question_id)
            continue

        choice = question.get_choice(choice_key)
        if choice is None:
            if on_missing_choice == MissingChoicePolicy.SKIP:
                logger.warning(
                    "Skipping answer %s=%s: choice not in questionnaire",
                    question_id, choice_key,
                )
                continue
            raise MissingChoiceError(question_id, choice_key)

        derived[question.variable_name] = _normalise(substitute(choice.value, constant_values))
        if question.related_variable_name and choice.related_value is not None:
            derived[question.related_variable_name] = _normalise(
                substitute(choice.related_value, constant_values)
            )

    # Pass 2: substitute answer-bound values into each other, once
    first_pass = dict(derived)
    for name, value in first_pass.items():
        derived[name] = _normalise(substitute(value, first_pass))

    table = dict(constant_values)
    table.update(derived)
    return table
