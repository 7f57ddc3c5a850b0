"""
Tests for footprint calculation.
"""

import logging

import pytest
from footprint.calculator import footprint_breakdown, question_contribution, total_footprint
from footprint.model import Question


def _formula(qid, formula):
    return Question(id=qid, text=qid, variable_name=f"{qid.upper()}", formula=formula)


class TestTotal:
    """Test summation."""

    def test_single_formula(self):
        """V*2 with V=5 contributes 10."""
        assert total_footprint([_formula("q", "V*2")], {"V": "5"}) == 10

    def test_sum_over_questions(self):
        questions = [_formula("a", "A"), _formula("b", "B * 3")]
        assert total_footprint(questions, {"A": "1.5", "B": "2"}) == pytest.approx(7.5)

    def test_no_questions(self):
        assert total_footprint([], {}) == 0

    def test_breakdown_order(self):
        """Breakdown follows the given question order."""
        questions = [_formula("z", "1"), _formula("a", "2")]
        assert list(footprint_breakdown(questions, {})) == ["z", "a"]


class TestIsolation:
    """A bad formula contributes 0 and nothing else changes."""

    def test_unparseable_formula_isolated(self):
        good = [_formula("a", "A * 2"), _formula("b", "B + 1")]
        baseline = footprint_breakdown(good, {"A": "3", "B": "4"})

        broken = [_formula("a", "A * 2"), _formula("b", "B +* (")]
        degraded = footprint_breakdown(broken, {"A": "3", "B": "4"})

        assert degraded["a"] == baseline["a"]
        assert degraded["b"] == 0
        assert total_footprint(broken, {"A": "3", "B": "4"}) == total_footprint(good, {"A": "3", "B": "4"}) - baseline["b"]

    def test_unresolved_variable_contributes_zero(self):
        assert question_contribution(_formula("a", "MISSING * 2"), {}) == 0

    def test_division_by_zero_contributes_zero(self):
        assert question_contribution(_formula("a", "A / B"), {"A": "1", "B": "0"}) == 0

    def test_comparison_formula_contributes_zero(self):
        assert question_contribution(_formula("a", "A > 1"), {"A": "2"}) == 0

    def test_empty_formula_contributes_zero(self):
        assert question_contribution(_formula("a", ""), {}) == 0

    def test_deeply_nested_formula_isolated(self):
        """A formula too deep to parse contributes 0 and the rest still sums."""
        questions = [_formula("a", "5"), _formula("b", "-" * 5000 + "1")]
        assert total_footprint(questions, {}) == 5
        assert footprint_breakdown(questions, {}) == {"a": 5, "b": 0}

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="footprint.calculator"):
            question_contribution(_formula("broken", "1 +"), {})
        assert "broken" in caplog.text
