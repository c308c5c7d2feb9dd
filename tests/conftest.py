import pytest

from fuzzyctl.fuzzy.model.builder import ModelBuilder
from fuzzyctl.fuzzy.model.presets import temperature_controller


@pytest.fixture
def model():
    return temperature_controller()


@pytest.fixture
def builder():
    """Te same zmienne co sterownik temperatury, bez reguł."""
    return (ModelBuilder("test")
            .input("Temperature", 15, 35)
            .term("Temperature", "Cold", "trap", 15, 15, 18, 22)
            .term("Temperature", "Comfortable", "tri", 20, 25, 30)
            .term("Temperature", "Hot", "trap", 28, 32, 35, 35)
            .input("Humidity", 30, 90)
            .term("Humidity", "Dry", "trap", 30, 30, 40, 50)
            .term("Humidity", "Moderate", "tri", 45, 60, 75)
            .term("Humidity", "Humid", "trap", 70, 80, 90, 90)
            .output("Cooling_Power", 0, 100)
            .term("Cooling_Power", "Low", "tri", 0, 25, 50)
            .term("Cooling_Power", "Medium", "tri", 25, 50, 75)
            .term("Cooling_Power", "High", "tri", 50, 75, 100))


FZ_SOURCE = """\
# sterownik chłodzenia
name Temperature_Controller
var input Temperature 15 35
mf Temperature Cold trap 15 15 18 22
mf Temperature Comfortable tri 20 25 30
mf Temperature Hot trap 28 32 35 35
var input Humidity 30 90
mf Humidity Dry trap 30 30 40 50
mf Humidity Moderate tri 45 60 75
mf Humidity Humid trap 70 80 90 90
var output Cooling_Power 0 100
mf Cooling_Power Low tri 0 25 50
mf Cooling_Power Medium tri 25 50 75
mf Cooling_Power High tri 50 75 100
rule IF Temperature is Cold AND Humidity is Dry THEN Cooling_Power is Low
rule IF Temperature is Comfortable AND Humidity is Moderate THEN Cooling_Power is Medium
rule IF Temperature is Hot AND Humidity is Humid THEN Cooling_Power is High
rule IF Temperature is Cold AND Humidity is Humid THEN Cooling_Power is Medium
rule Temperature==Hot & Humidity==Dry => Cooling_Power=High (1)
defuzz centroid n 101
"""


@pytest.fixture
def fz_file(tmp_path):
    p = tmp_path / "cooling.fz"
    p.write_text(FZ_SOURCE, encoding="utf-8")
    return str(p)
