"""
Tests for the end-to-end pipeline function.
"""

import pytest
from footprint.examples import build_example_questionnaire, EXAMPLE_CONSTANTS
from footprint.model import Choice, Condition, Question, Questionnaire
from footprint.pipeline import compute_footprint
from footprint.resolver import MissingChoiceError, MissingChoicePolicy


def build_minimal():
    """Constants {A: 10}; Q binds V from choice lo = A/2; formula V*2."""
    return Questionnaire(name="minimal", questions=[
        Question(
            id="Q",
            text="Q",
            variable_name="V",
            formula="V*2",
            choices=[Choice(key="lo", value="A/2")],
        ),
    ])


FULL_ANSWERS = {
    "diet": "diet_omnivore",
    "commute_mode": "commute_car_petrol",
    "commute_distance": "distance_15",
    "flights": "flights_long",
    "household": "household_2",
    "heating": "heating_gas",
}


class TestMinimal:
    """The smallest meaningful questionnaire."""

    def test_assignment_and_footprint(self):
        snapshot = compute_footprint(build_minimal(), {"A": 10}, {"Q": "lo"})
        assert snapshot.assignments["V"] == "5"
        assert snapshot.footprint == 10
        assert snapshot.visible_question_ids == ["Q"]
        assert snapshot.breakdown == {"Q": 10}
        assert snapshot.scenarios == ()

    def test_no_answers(self):
        snapshot = compute_footprint(build_minimal(), {"A": 10}, {})
        assert snapshot.assignments == {"A": "10"}
        assert snapshot.footprint == 0


class TestPurity:
    """Same inputs, same outputs."""

    def test_idempotent(self):
        questionnaire = build_example_questionnaire()
        first = compute_footprint(questionnaire, EXAMPLE_CONSTANTS, FULL_ANSWERS, include_scenarios=True)
        second = compute_footprint(questionnaire, EXAMPLE_CONSTANTS, FULL_ANSWERS, include_scenarios=True)
        assert first == second
        assert list(first.assignments.items()) == list(second.assignments.items())
        assert first.visible_question_ids == second.visible_question_ids


class TestExampleQuestionnaire:
    """The bundled lifestyle questionnaire."""

    def test_full_answers(self):
        snapshot = compute_footprint(build_example_questionnaire(), EXAMPLE_CONSTANTS, FULL_ANSWERS)
        assert snapshot.assignments["COMMUTE_FACTOR"] == "0.17"
        assert snapshot.assignments["FLIGHTS_KG"] == "1500"
        assert snapshot.breakdown["diet"] == pytest.approx(5.6 * 365)
        assert snapshot.breakdown["commute_distance"] == pytest.approx(15 * 2 * 0.17 * 220)
        assert snapshot.breakdown["heating"] == pytest.approx(1250)
        assert snapshot.footprint == pytest.approx(2044 + 1122 + 1500 + 1250)

    def test_walking_hides_distance(self):
        answers = dict(FULL_ANSWERS, commute_mode="commute_walk")
        snapshot = compute_footprint(build_example_questionnaire(), EXAMPLE_CONSTANTS, answers)
        assert "commute_distance" not in snapshot.visible_question_ids
        assert "commute_distance" not in snapshot.breakdown
        assert "COMMUTE_FACTOR" in snapshot.assignments

    def test_scenario_count(self):
        snapshot = compute_footprint(
            build_example_questionnaire(), EXAMPLE_CONSTANTS, FULL_ANSWERS, include_scenarios=True,
        )
        # 20 choices across six visible questions, six of them chosen
        assert len(snapshot.scenarios) == 14
        footprints = [s.candidate_footprint for s in snapshot.scenarios]
        assert footprints == sorted(footprints)

    def test_heating_without_household_contributes_zero(self):
        answers = {"heating": "heating_gas"}
        snapshot = compute_footprint(build_example_questionnaire(), EXAMPLE_CONSTANTS, answers)
        assert snapshot.breakdown["heating"] == 0


class TestErrorHandling:
    """Faults in configuration and answers."""

    def test_isolation_of_broken_formula(self):
        questionnaire = build_example_questionnaire()
        before = compute_footprint(questionnaire, EXAMPLE_CONSTANTS, FULL_ANSWERS)

        questionnaire.get_question("flights").formula = "FLIGHTS_KG *"
        after = compute_footprint(questionnaire, EXAMPLE_CONSTANTS, FULL_ANSWERS)

        assert after.breakdown["flights"] == 0
        for question_id, value in before.breakdown.items():
            if question_id != "flights":
                assert after.breakdown[question_id] == value
        assert after.footprint == pytest.approx(before.footprint - before.breakdown["flights"])

    def test_missing_choice_fails(self):
        with pytest.raises(MissingChoiceError):
            compute_footprint(build_minimal(), {"A": 10}, {"Q": "gone"})

    def test_missing_choice_skip(self):
        snapshot = compute_footprint(
            build_minimal(), {"A": 10}, {"Q": "gone"},
            on_missing_choice=MissingChoicePolicy.SKIP,
        )
        assert snapshot.footprint == 0

    def test_broken_condition_hides_question(self):
        questionnaire = build_minimal()
        questionnaire.questions[0].display_condition = [
            Condition(variable_name="V", operator="~", value="1"),
        ]
        snapshot = compute_footprint(questionnaire, {"A": 10}, {"Q": "lo"})
        assert snapshot.visible_questions == ()
        assert snapshot.footprint == 0
