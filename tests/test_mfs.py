import pytest

from fuzzyctl.fuzzy.core.grid import linspace
from fuzzyctl.fuzzy.core.mfs import (
    Gaussian, Trapezoidal, Triangular, evaluate, make_mf, sample, shape_name,
)
from fuzzyctl.fuzzy.core.types import InvalidShape


def test_triangular_ramps_and_peak():
    mf = Triangular(20, 25, 30)
    assert evaluate(mf, 25) == 1.0
    assert evaluate(mf, 22.5) == pytest.approx(0.5)
    assert evaluate(mf, 27.5) == pytest.approx(0.5)


def test_triangular_zero_at_and_beyond_support():
    mf = Triangular(20, 25, 30)
    for x in (20, 30, 19.99, 30.01, -1e9, 1e9):
        assert evaluate(mf, x) == 0.0


def test_triangular_shoulders():
    left = Triangular(0, 0, 10)
    assert evaluate(left, 0) == 1.0
    assert evaluate(left, 5) == pytest.approx(0.5)
    assert evaluate(left, -0.1) == 0.0
    right = Triangular(0, 10, 10)
    assert evaluate(right, 10) == 1.0
    assert evaluate(right, 10.1) == 0.0


def test_triangular_point_indicator():
    mf = Triangular(5, 5, 5)
    assert evaluate(mf, 5) == 1.0
    assert evaluate(mf, 5.0001) == 0.0
    assert evaluate(mf, 4.9999) == 0.0


def test_trapezoidal_plateau_and_ramps():
    mf = Trapezoidal(28, 32, 35, 40)
    assert evaluate(mf, 33) == 1.0
    assert evaluate(mf, 30) == pytest.approx(0.5)
    assert evaluate(mf, 37.5) == pytest.approx(0.5)
    assert evaluate(mf, 28) == 0.0
    assert evaluate(mf, 40) == 0.0


def test_trapezoidal_shoulder_is_one_at_bound():
    cold = Trapezoidal(15, 15, 18, 22)
    assert evaluate(cold, 15) == 1.0
    assert evaluate(cold, 20) == pytest.approx(0.5)
    assert evaluate(cold, 22) == 0.0
    hot = Trapezoidal(28, 32, 35, 35)
    assert evaluate(hot, 35) == 1.0


@pytest.mark.parametrize("mf", [
    Triangular(20, 25, 30), Triangular(0, 0, 10), Trapezoidal(15, 15, 18, 22),
    Trapezoidal(1, 2, 3, 4), Gaussian(0.0, 2.0),
])
def test_degree_in_unit_interval(mf):
    for x in linspace(-50, 50, 1001):
        assert 0.0 <= evaluate(mf, x) <= 1.0


@pytest.mark.parametrize("ctor, params", [
    (Triangular, (3, 2, 1)),
    (Triangular, (0, float("nan"), 1)),
    (Trapezoidal, (0, 2, 1, 3)),
    (Gaussian, (0, 0)),
])
def test_invalid_shape(ctor, params):
    with pytest.raises(InvalidShape):
        ctor(*params)


def test_mf_is_immutable():
    mf = Triangular(0, 1, 2)
    with pytest.raises(AttributeError):
        mf.a = 5


def test_make_mf_factory():
    assert make_mf("trimf", [0, 1, 2]) == Triangular(0, 1, 2)
    assert make_mf("TRAP", ["0", "1", "2", "3"]) == Trapezoidal(0, 1, 2, 3)
    assert make_mf("gauss", [0, 1]) == Gaussian(0, 1)
    with pytest.raises(InvalidShape):
        make_mf("tri", [0, 1])
    with pytest.raises(InvalidShape):
        make_mf("bell", [0, 1, 2])


def test_evaluate_rejects_foreign_types():
    with pytest.raises(TypeError):
        evaluate(("tri", (0, 1, 2)), 1)


def test_sample_and_shape_name():
    pts = sample(Triangular(0, 5, 10), 0, 10, 3)
    assert pts == [(0.0, 0.0), (5.0, 1.0), (10.0, 0.0)]
    assert shape_name(Trapezoidal(0, 1, 2, 3)) == "trap"


@pytest.mark.parametrize("mf", [
    Triangular(0, 1, 1), Triangular(0, 0, 1), Trapezoidal(0, 0, 1, 1), Gaussian(0, 1),
])
def test_nan_degree_is_zero(mf):
    assert evaluate(mf, float("nan")) == 0.0
