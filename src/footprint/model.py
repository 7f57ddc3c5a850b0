"""
Core Questionnaire Model Objects

Defines the data structures consumed by the footprint engine:
    - Choices (selectable answers carrying a value expression)
    - Conditions (declarative display predicates)
    - Questions (a variable binding plus a footprint formula)
    - Questionnaires (root container)
    - Scenarios (derived what-if results)

ARCHITECTURAL RULE:
    These objects:
        - Hold expressions as plain strings (parsed lazily by footprint.formula)
        - Are read-only once loaded
        - Represent configuration, not behavior
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Choice:
    """
    A selectable answer belonging to exactly one Question.

    Properties:
        key:
            Stable identifier, unique within its question
            Examples: "vegan", "car_petrol"

        text:
            Display text (opaque, never interpreted)

        value:
            Literal number or expression bound to the question's
            variable_name when this choice is selected
            Examples: "0", "1.5", "CAR_PETROL_KG_PER_KM"

        related_value:
            Optional second expression, bound to the question's
            related_variable_name (only if both are present)
    """

    key: str
    text: str = ""
    value: str = "0"
    related_value: Optional[str] = None


@dataclass(frozen=True)
class Condition:
    """
    One clause of a display condition.

    Example:
        Condition(variable_name="COMMUTE_MODE", operator="===", value="1")

    The operator is kept verbatim; strict forms (=== and !==) are
    normalised at evaluation time.
    """

    variable_name: str
    operator: str
    value: str


@dataclass
class Question:
    """
    A single questionnaire item.

    Properties:
        id:
            Unique identifier (answers are keyed by it)

        text:
            Human-readable question text

        variable_name:
            Variable bound to the chosen choice's value.
            Must be unique across the questionnaire. A collision is an
            authoring error: the later binding silently overwrites.

        formula:
            Expression contributing to the total footprint

        choices:
            Ordered list of Choice objects

        related_variable_name:
            Optional second variable, bound from choice.related_value

        display_condition:
            Ordered Conditions, all of which must hold (AND).
            Empty list: always visible.

        sort_key:
            Ordering key for display and summation

        disabled:
            Excluded unconditionally when True

        label:
            Optional short label for summaries
    """

    id: str
    text: str
    variable_name: str
    formula: str = ""
    choices: List[Choice] = field(default_factory=list)
    related_variable_name: Optional[str] = None
    display_condition: List[Condition] = field(default_factory=list)
    sort_key: str = ""
    disabled: bool = False
    label: Optional[str] = None

    def get_choice(self, key: str) -> Optional[Choice]:
        """
        Retrieve a choice by key.

        Returns:
            Choice object or None if not found
        """
        for choice in self.choices:
            if choice.key == key:
                return choice
        return None


@dataclass
class Questionnaire:
    """
    Root container for a questionnaire definition.

    This is THE input artifact of the engine. Together with the constant
    mapping it determines every footprint the engine can produce.

    Properties:
        name: Questionnaire identifier
        questions: All questions, in declared order
        metadata: Arbitrary key-value pairs (use sparingly)

    INVARIANTS:
        - Question ids are unique
        - variable_name is unique across questions (checked by the analyzer only)
        - Choice keys are unique within a question
    """

    name: str
    questions: List[Question] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_choice(self, question_id: str, choice_key: str) -> Optional[Choice]:
        question = self.get_question(question_id)
        if question is None:
            return None
        return question.get_choice(choice_key)

    def ordered_questions(self) -> List[Question]:
        """Questions sorted by sort_key; ties keep declared order."""
        return sorted(self.questions, key=lambda q: q.sort_key)

    def variable_names(self) -> List[str]:
        """Every variable a question can bind, including related ones."""
        names: List[str] = []
        for question in self.questions:
            for name in (question.variable_name, question.related_variable_name):
                if name and name not in names:
                    names.append(name)
        return names


class SessionMode(Enum):
    """Session-level modes consumed by the UI."""
    QUESTIONNAIRE = "questionnaire"
    PLANNING = "planning"


@dataclass(frozen=True)
class Scenario:
    """
    A single-choice substitution and its footprint impact.

    Properties:
        question_id: Question whose answer is substituted
        current_choice_key: Currently selected key (None if unanswered)
        candidate_choice_key: Alternative key being evaluated
        current_footprint: Baseline footprint
        candidate_footprint: Footprint with the substitution applied
    """

    question_id: str
    current_choice_key: Optional[str]
    candidate_choice_key: str
    current_footprint: float
    candidate_footprint: float

    @property
    def delta(self) -> float:
        return self.candidate_footprint - self.current_footprint

    @property
    def delta_percent(self) -> Optional[float]:
        """
        delta / current * 100, or None when the ratio is undefined.

        A zero baseline has no meaningful percentage. It is reported as
        None instead of inf or nan.
        """
        if self.current_footprint == 0:
            return None
        ratio = self.delta / self.current_footprint * 100
        if not math.isfinite(ratio):
            return None
        return ratio

    @property
    def ratio_defined(self) -> bool:
        return self.delta_percent is not None
