"""
Footprint calculation over visible questions.

Each question contributes the value of its formula. A formula that fails to
evaluate contributes 0 and never affects the other questions.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping

from footprint.formula import evaluate, substitute, EvaluationFailure
from footprint.model import Question

logger = logging.getLogger(__name__)


def question_contribution(question: Question, assignments: Mapping[str, str]) -> float:
    expression = substitute(question.formula, assignments)
    result = evaluate(expression)

    if isinstance(result, EvaluationFailure):
        logger.debug("Formula for %s contributes 0: %s", question.id, result.reason)
        return 0.0
    if isinstance(result, bool):
        logger.debug("Formula for %s is a comparison, contributes 0", question.id)
        return 0.0
    return result


def footprint_breakdown(questions: Iterable[Question], assignments: Mapping[str, str]) -> Dict[str, float]:
    """Per-question contributions, keyed by question id, in the given order."""
    return {q.id: question_contribution(q, assignments) for q in questions}


def total_footprint(questions: Iterable[Question], assignments: Mapping[str, str]) -> float:
    """
    Sum the contributions of the given (visible) questions.

    Args:
        questions: Visible questions, in declared order
        assignments: Resolved assignment table

    Returns:
        Total footprint in the questionnaire's unit
    """
    return sum(footprint_breakdown(questions, assignments).values(), 0.0)
