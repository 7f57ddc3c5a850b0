"""
Display-condition evaluation.

A question is visible when it is not disabled and every Condition in its
display_condition holds. Conditions fail closed: any evaluation problem
hides the question.
"""

from __future__ import annotations

import logging
from typing import List, Mapping

from footprint.formula import evaluate, substitute, EvaluationFailure
from footprint.model import Condition, Question, Questionnaire

logger = logging.getLogger(__name__)

# Strict equality collapses to loose equality before evaluation.
_OPERATOR_ALIASES = {
    "===": "==",
    "!==": "!=",
}


def normalize_operator(operator: str) -> str:
    op = (operator or "").strip()
    return _OPERATOR_ALIASES.get(op, op)


def condition_expression(condition: Condition) -> str:
    """Comparison text for a condition, e.g. 'COMMUTE == 1'."""
    return f"{condition.variable_name} {normalize_operator(condition.operator)} {condition.value}"


def condition_holds(condition: Condition, assignments: Mapping[str, str]) -> bool:
    expression = substitute(condition_expression(condition), assignments)
    result = evaluate(expression)

    if isinstance(result, EvaluationFailure):
        logger.debug("Condition %r failed: %s", expression, result.reason)
        return False
    # Only a real comparison result counts; a bare number is not a predicate.
    return result is True


def is_visible(question: Question, assignments: Mapping[str, str]) -> bool:
    """
    Decide whether a question's display condition is satisfied.

    Disabled questions are never visible. No condition means always visible.
    """
    if question.disabled:
        return False
    return all(condition_holds(c, assignments) for c in question.display_condition)


def visible_questions(questionnaire: Questionnaire, assignments: Mapping[str, str]) -> List[Question]:
    """Visible questions in display order."""
    return [q for q in questionnaire.ordered_questions() if is_visible(q, assignments)]
