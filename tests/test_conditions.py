"""
Tests for display-condition evaluation.
"""

import pytest
from footprint.conditions import (
    condition_expression,
    condition_holds,
    is_visible,
    normalize_operator,
    visible_questions,
)
from footprint.model import Choice, Condition, Question, Questionnaire


def _gated(condition=None, disabled=False, qid="G", sort_key=""):
    return Question(
        id=qid,
        text="Gated",
        variable_name=f"{qid}_VAR",
        formula="1",
        choices=[Choice(key="x", value="1")],
        display_condition=[condition] if condition else [],
        disabled=disabled,
        sort_key=sort_key,
    )


class TestOperatorNormalization:
    """Strict operators collapse to loose ones."""

    @pytest.mark.parametrize("operator,expected", [
        ("===", "=="),
        ("!==", "!="),
        ("==", "=="),
        (" <= ", "<="),
        (">", ">"),
    ])
    def test_normalize(self, operator, expected):
        assert normalize_operator(operator) == expected

    def test_condition_expression(self):
        condition = Condition(variable_name="V", operator="===", value="1")
        assert condition_expression(condition) == "V == 1"


class TestVisibility:
    """Test visibility gating."""

    def test_no_condition_always_visible(self):
        assert is_visible(_gated(), {})

    def test_strict_equality_gate(self):
        """V === 1 hides the question for V=2 and shows it for V=1."""
        question = _gated(Condition(variable_name="V", operator="===", value="1"))
        assert not is_visible(question, {"V": "2"})
        assert is_visible(question, {"V": "1"})

    def test_disabled_never_visible(self):
        assert not is_visible(_gated(disabled=True), {})

    def test_and_semantics(self):
        """Every condition must hold."""
        question = _gated()
        question.display_condition = [
            Condition(variable_name="V", operator=">", value="1"),
            Condition(variable_name="W", operator="!==", value="0"),
        ]
        assert is_visible(question, {"V": "2", "W": "1"})
        assert not is_visible(question, {"V": "2", "W": "0"})
        assert not is_visible(question, {"V": "1", "W": "1"})

    def test_comparison_value_may_reference_variables(self):
        """The right-hand side is substituted as well."""
        condition = Condition(variable_name="V", operator=">=", value="LIMIT * 2")
        assert condition_holds(condition, {"V": "10", "LIMIT": "5"})
        assert not condition_holds(condition, {"V": "9", "LIMIT": "5"})

    def test_unresolved_variable_fails_closed(self):
        """An unanswered variable hides the question."""
        question = _gated(Condition(variable_name="V", operator="==", value="1"))
        assert not is_visible(question, {})

    def test_unknown_operator_fails_closed(self):
        question = _gated(Condition(variable_name="V", operator="=", value="1"))
        assert not is_visible(question, {"V": "1"})

    def test_non_boolean_result_fails_closed(self):
        """An arithmetic result is not a satisfied condition."""
        condition = Condition(variable_name="V", operator="+", value="1")
        assert not condition_holds(condition, {"V": "1"})

    def test_malformed_value_fails_closed(self):
        condition = Condition(variable_name="V", operator="==", value="'yes'")
        assert not condition_holds(condition, {"V": "1"})


class TestVisibleQuestions:
    """Test filtering over a questionnaire."""

    def test_filter_and_order(self):
        questionnaire = Questionnaire(name="Q", questions=[
            _gated(qid="b", sort_key="2"),
            _gated(Condition(variable_name="V", operator="==", value="1"), qid="hidden", sort_key="0"),
            _gated(qid="a", sort_key="1"),
            _gated(qid="off", disabled=True, sort_key="3"),
        ])
        result = visible_questions(questionnaire, {"V": "2"})
        assert [q.id for q in result] == ["a", "b"]
