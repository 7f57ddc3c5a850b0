"""
Session state: the answer set plus the Questionnaire/Planning mode.

State machine:

    QUESTIONNAIRE --start_planning()--> PLANNING
        only when every visible question has an answer
    PLANNING --return_to_questionnaire()--> QUESTIONNAIRE
        always

The session keeps no derived state beyond a memo of the last snapshot,
keyed by the answer-set value.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from footprint.model import Questionnaire, SessionMode
from footprint.pipeline import FootprintSnapshot, compute_footprint
from footprint.resolver import MissingChoicePolicy

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when a selection does not match the questionnaire."""
    pass


class ModeTransitionError(SessionError):
    """Raised when a mode transition is not permitted."""
    pass


class Session:
    """
    One user's answers and mode.

    Args:
        questionnaire: Question definitions (read-only)
        constants: Loaded constant mapping (read-only)
        on_missing_choice: Resolution policy passed to the pipeline
    """

    def __init__(
        self,
        questionnaire: Questionnaire,
        constants: Mapping[str, float],
        on_missing_choice: MissingChoicePolicy = MissingChoicePolicy.FAIL,
    ):
        self.questionnaire = questionnaire
        self.constants = constants
        self.on_missing_choice = on_missing_choice
        self.mode = SessionMode.QUESTIONNAIRE
        self._answers: Dict[str, str] = {}
        self._memo: Optional[Tuple[tuple, bool, FootprintSnapshot]] = None

    @property
    def answers(self) -> Dict[str, str]:
        return dict(self._answers)

    def select(self, question_id: str, choice_key: str) -> FootprintSnapshot:
        """
        Record an answer and return the recomputed snapshot.

        Raises:
            SessionError: Unknown question or choice
        """
        question = self.questionnaire.get_question(question_id)
        if question is None:
            raise SessionError(f"Unknown question: {question_id}")
        if question.get_choice(choice_key) is None:
            raise SessionError(f"Question '{question_id}' has no choice '{choice_key}'")

        self._answers[question_id] = choice_key
        logger.debug("Answer %s=%s", question_id, choice_key)
        return self.snapshot()

    def snapshot(self) -> FootprintSnapshot:
        """Current snapshot; scenarios are included only in Planning mode."""
        include_scenarios = self.mode == SessionMode.PLANNING
        key = tuple(self._answers.items())

        if self._memo is not None and self._memo[0] == key and self._memo[1] == include_scenarios:
            return self._memo[2]

        snapshot = compute_footprint(
            self.questionnaire,
            self.constants,
            self._answers,
            include_scenarios=include_scenarios,
            on_missing_choice=self.on_missing_choice,
        )
        self._memo = (key, include_scenarios, snapshot)
        return snapshot

    def unanswered_visible(self):
        """Ids of visible questions that still need an answer."""
        return [q for q in self.snapshot().visible_question_ids if q not in self._answers]

    def can_plan(self) -> bool:
        return not self.unanswered_visible()

    def start_planning(self) -> FootprintSnapshot:
        """
        Move to Planning mode.

        Raises:
            ModeTransitionError: Some visible question is unanswered
        """
        missing = self.unanswered_visible()
        if missing:
            raise ModeTransitionError(f"Unanswered questions: {', '.join(missing)}")
        self.mode = SessionMode.PLANNING
        return self.snapshot()

    def return_to_questionnaire(self) -> FootprintSnapshot:
        self.mode = SessionMode.QUESTIONNAIRE
        return self.snapshot()
