# Gotowe sterowniki przykładowe (opisy modeli, nie obiekty) + fabryki modeli.

from typing import Any, Dict

from .builder import build_model, rules_from_matrix
from .knowledge import FuzzyModel


def _tri(name, *p):
    return {"name": name, "shape": "trimf", "params": list(p)}


def _trap(name, *p):
    return {"name": name, "shape": "trapmf", "params": list(p)}


TEMPERATURE_VARIABLES = [
    {"name": "Temperature", "role": "input", "range": [15, 35], "terms": [
        _trap("Cold", 15, 15, 18, 22),
        _tri("Comfortable", 20, 25, 30),
        _trap("Hot", 28, 32, 35, 35),
    ]},
    {"name": "Humidity", "role": "input", "range": [30, 90], "terms": [
        _trap("Dry", 30, 30, 40, 50),
        _tri("Moderate", 45, 60, 75),
        _trap("Humid", 70, 80, 90, 90),
    ]},
    {"name": "Cooling_Power", "role": "output", "range": [0, 100], "terms": [
        _tri("Low", 0, 25, 50),
        _tri("Medium", 25, 50, 75),
        _tri("High", 50, 75, 100),
    ]},
]

# [Temperature, Humidity, Cooling_Power, weight, connective(1=AND)]
TEMPERATURE_RULE_MATRIX = [
    [1, 1, 1, 1, 1],
    [2, 2, 2, 1, 1],
    [3, 3, 3, 1, 1],
    [1, 3, 2, 1, 1],
    [3, 1, 3, 1, 1],
]


ASSISTIVE_VARIABLES = [
    {"name": "Temperature", "role": "input", "range": [0, 40], "terms": [
        _trap("Cold", 0, 0, 10, 15),
        _tri("Moderate", 10, 20, 25),
        _trap("Hot", 20, 30, 40, 40),
    ]},
    {"name": "Activity", "role": "input", "range": [0, 10], "terms": [
        _trap("Low", 0, 0, 2, 4),
        _tri("Medium", 3, 5, 7),
        _trap("High", 6, 8, 10, 10),
    ]},
    {"name": "HeaterPower", "role": "output", "range": [0, 100], "terms": [
        _trap("Low", 0, 0, 30, 50),
        _tri("Medium", 40, 60, 80),
        _trap("High", 70, 90, 100, 100),
    ]},
]

ASSISTIVE_RULES = [
    "Temperature==Cold & Activity==Low => HeaterPower=High (1)",
    "Temperature==Cold & Activity==Medium => HeaterPower=High (1)",
    "Temperature==Cold & Activity==High => HeaterPower=Medium (1)",
    "Temperature==Moderate & Activity==Low => HeaterPower=Medium (1)",
    "Temperature==Moderate & Activity==Medium => HeaterPower=Medium (1)",
    "Temperature==Moderate & Activity==High => HeaterPower=Low (1)",
    "Temperature==Hot & Activity==Low => HeaterPower=Low (1)",
    "Temperature==Hot & Activity==High => HeaterPower=Low (1)",
]


def temperature_controller(**settings: Any) -> FuzzyModel:
    return build_model(
        TEMPERATURE_VARIABLES,
        rules_from_matrix(TEMPERATURE_VARIABLES, TEMPERATURE_RULE_MATRIX),
        name="Temperature_Controller",
        settings=settings,
    )


def assistive_environment(**settings: Any) -> FuzzyModel:
    return build_model(ASSISTIVE_VARIABLES, ASSISTIVE_RULES,
                       name="AssistiveEnvironment_FLC", settings=settings)


PRESETS: Dict[str, Any] = {
    "temperature": temperature_controller,
    "assistive": assistive_environment,
}
