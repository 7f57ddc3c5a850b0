"""
Test the bundled lifestyle questionnaire.

Validates that the example builder creates the expected questions,
conditions and related variables, and that its constants load.
"""

from footprint.constants import ConstantStore
from footprint.examples import build_example_questionnaire, EXAMPLE_CONSTANTS


def test_example_questionnaire_structure():
    questionnaire = build_example_questionnaire()

    assert [q.id for q in questionnaire.ordered_questions()] == [
        "diet", "commute_mode", "commute_distance", "flights", "household", "heating",
    ]

    # Distance is only asked when not walking
    distance = questionnaire.get_question("commute_distance")
    assert len(distance.display_condition) == 1
    assert distance.display_condition[0].variable_name == "COMMUTE_MODE"

    # Commute mode binds the per-km factor
    mode = questionnaire.get_question("commute_mode")
    assert mode.related_variable_name == "COMMUTE_FACTOR"
    assert all(c.related_value is not None for c in mode.choices)


def test_example_constants_load():
    constants = ConstantStore(EXAMPLE_CONSTANTS).load()
    assert constants["DAYS_PER_YEAR"] == 365.0
    assert len(constants) == len(EXAMPLE_CONSTANTS)
