"""
Example lifestyle questionnaire.

Builds a small annual-footprint questionnaire (kg CO2e per year) covering
diet, commuting, flights and home heating. The commute distance question is
only shown when the respondent does not walk, and the commute mode binds a
related emission factor alongside its own value.
"""
from footprint.model import Questionnaire, Question, Choice, Condition


EXAMPLE_CONSTANTS = {
    "DAYS_PER_YEAR": 365,
    "WORKING_DAYS": 220,
    "DIET_VEGAN_KG_PER_DAY": 2.9,
    "DIET_VEGETARIAN_KG_PER_DAY": 3.8,
    "DIET_OMNIVORE_KG_PER_DAY": 5.6,
    "DIET_HEAVY_MEAT_KG_PER_DAY": 7.2,
    "BUS_KG_PER_KM": 0.1,
    "CAR_PETROL_KG_PER_KM": 0.17,
    "CAR_ELECTRIC_KG_PER_KM": 0.05,
    "FLIGHT_SHORT_KG": 250,
    "FLIGHT_LONG_KG": 1500,
    "HEATING_GAS_KG": 2500,
    "HEATING_OIL_KG": 3200,
    "HEATING_HEAT_PUMP_KG": 700,
}


def build_example_questionnaire() -> Questionnaire:
    questionnaire = Questionnaire(name="Lifestyle Footprint", metadata={"unit": "kg CO2e / year"})

    diet = Question(
        id="diet",
        text="Which best describes your diet?",
        label="Diet",
        variable_name="DIET",
        formula="DIET * DAYS_PER_YEAR",
        sort_key="01",
        choices=[
            Choice(key="diet_vegan", text="Vegan", value="DIET_VEGAN_KG_PER_DAY"),
            Choice(key="diet_vegetarian", text="Vegetarian", value="DIET_VEGETARIAN_KG_PER_DAY"),
            Choice(key="diet_omnivore", text="Some meat", value="DIET_OMNIVORE_KG_PER_DAY"),
            Choice(key="diet_heavy_meat", text="Meat every day", value="DIET_HEAVY_MEAT_KG_PER_DAY"),
        ],
    )

    # Mode carries no footprint itself; it binds the per-km factor.
    commute_mode = Question(
        id="commute_mode",
        text="How do you usually get to work?",
        label="Commute",
        variable_name="COMMUTE_MODE",
        related_variable_name="COMMUTE_FACTOR",
        formula="0",
        sort_key="02",
        choices=[
            Choice(key="commute_walk", text="Walk or cycle", value="0", related_value="0"),
            Choice(key="commute_bus", text="Bus", value="1", related_value="BUS_KG_PER_KM"),
            Choice(key="commute_car_petrol", text="Petrol car", value="2", related_value="CAR_PETROL_KG_PER_KM"),
            Choice(key="commute_car_electric", text="Electric car", value="3", related_value="CAR_ELECTRIC_KG_PER_KM"),
        ],
    )

    commute_distance = Question(
        id="commute_distance",
        text="How far is your commute, one way?",
        label="Commute distance",
        variable_name="COMMUTE_KM",
        formula="COMMUTE_KM * 2 * COMMUTE_FACTOR * WORKING_DAYS",
        display_condition=[Condition(variable_name="COMMUTE_MODE", operator="!==", value="0")],
        sort_key="03",
        choices=[
            Choice(key="distance_5", text="Under 10 km", value="5"),
            Choice(key="distance_15", text="10 to 25 km", value="15"),
            Choice(key="distance_40", text="More than 25 km", value="40"),
        ],
    )

    flights = Question(
        id="flights",
        text="How often do you fly each year?",
        label="Flights",
        variable_name="FLIGHTS_KG",
        formula="FLIGHTS_KG",
        sort_key="04",
        choices=[
            Choice(key="flights_none", text="Never", value="0"),
            Choice(key="flights_short", text="A couple of short trips", value="2 * FLIGHT_SHORT_KG"),
            Choice(key="flights_long", text="One long-haul trip", value="FLIGHT_LONG_KG"),
        ],
    )

    household = Question(
        id="household",
        text="How many people live in your home?",
        label="Household",
        variable_name="HOUSEHOLD_SIZE",
        formula="0",
        sort_key="05",
        choices=[
            Choice(key="household_1", text="Just me", value="1"),
            Choice(key="household_2", text="Two", value="2"),
            Choice(key="household_4", text="Four or more", value="4"),
        ],
    )

    heating = Question(
        id="heating",
        text="How is your home heated?",
        label="Heating",
        variable_name="HEATING_KG",
        formula="HEATING_KG / HOUSEHOLD_SIZE",
        sort_key="06",
        choices=[
            Choice(key="heating_gas", text="Gas boiler", value="HEATING_GAS_KG"),
            Choice(key="heating_oil", text="Oil boiler", value="HEATING_OIL_KG"),
            Choice(key="heating_heat_pump", text="Heat pump", value="HEATING_HEAT_PUMP_KG"),
        ],
    )

    questionnaire.questions = [diet, commute_mode, commute_distance, flights, household, heating]
    return questionnaire
