"""
Demo: Answer the example questionnaire, print the footprint and the
ranked what-if scenarios, and run the authoring analyzer.
"""

from footprint.analyzer import analyze_questionnaire
from footprint.constants import ConstantStore
from footprint.examples import build_example_questionnaire, EXAMPLE_CONSTANTS
from footprint.serialization import questionnaire_to_yaml
from footprint.session import Session


ANSWERS = {
    "diet": "diet_omnivore",
    "commute_mode": "commute_car_petrol",
    "commute_distance": "distance_15",
    "flights": "flights_long",
    "household": "household_2",
    "heating": "heating_gas",
}


def print_snapshot(session):
    snapshot = session.snapshot()
    unit = session.questionnaire.metadata.get("unit", "")

    print()
    print("=" * 70)
    print(f"FOOTPRINT: {session.questionnaire.name} ({session.mode.value})")
    print("=" * 70)
    print()

    for question in snapshot.visible_questions:
        print(f"  {question.label or question.id:<20} {snapshot.breakdown[question.id]:>10.1f}")
    print(f"  {'TOTAL':<20} {snapshot.footprint:>10.1f} {unit}")
    print()

    if snapshot.scenarios:
        print("WHAT IF...")
        for scenario in snapshot.scenarios:
            percent = scenario.delta_percent
            percent_text = f"{percent:+.1f}%" if percent is not None else "n/a"
            print(
                f"  {scenario.question_id:<18} {scenario.candidate_choice_key:<22}"
                f" {scenario.candidate_footprint:>10.1f} ({scenario.delta:+.1f}, {percent_text})"
            )
        print()


def print_report(report):
    print("AUTHORING CHECKS")
    print(f"  Questions:   {report.total_questions}")
    print(f"  Choices:     {report.total_choices}")
    print(f"  Constants:   {report.total_constants}")
    print(f"  Conditional: {report.questions_with_condition} ({report.condition_coverage_percent:.1f}%)")
    if report.warnings:
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("  No warnings")
    print()


if __name__ == "__main__":
    questionnaire = build_example_questionnaire()
    constants = ConstantStore(EXAMPLE_CONSTANTS).load()

    session = Session(questionnaire, constants)
    for question_id, choice_key in ANSWERS.items():
        session.select(question_id, choice_key)

    print_snapshot(session)
    session.start_planning()
    print_snapshot(session)

    print_report(analyze_questionnaire(questionnaire, constants))

    with open("example_questionnaire.yaml", "w") as f:
        f.write(questionnaire_to_yaml(questionnaire))
    print("Questionnaire exported to example_questionnaire.yaml")
