import math
import pickle

import pytest

from fuzzyctl.fuzzy.core.types import DimensionMismatch, EvaluationError
from fuzzyctl.fuzzy.model.builder import ModelBuilder
from fuzzyctl.fuzzy.model.engine import MamdaniEngine, NoRuleFired, evaluate, mf_curve
from fuzzyctl.fuzzy.model.presets import temperature_controller


def test_mid_range_fires_comfortable_moderate_rule(model):
    res = evaluate(model, (25, 60))
    assert res.rule_strengths == (0.0, 1.0, 0.0, 0.0, 0.0)
    assert res.output == pytest.approx(50.0, abs=1.0)
    assert res.outputs == {"Cooling_Power": pytest.approx(50.0, abs=1e-9)}
    assert res.fired


def test_min_min_corner_fires_only_cold_dry(model):
    res = evaluate(model, [15, 30])
    assert res.rule_strengths[0] == 1.0
    assert res.rule_strengths[1:] == (0.0, 0.0, 0.0, 0.0)
    assert res.output == pytest.approx(25.0, abs=1e-9)


def test_max_max_corner_fires_hot_humid(model):
    res = evaluate(model, {"Temperature": 35, "Humidity": 90})
    assert res.rule_strengths == (0.0, 0.0, 1.0, 0.0, 0.0)
    assert res.output == pytest.approx(75.0, abs=1e-9)


def test_partial_strength_uses_min(model):
    # Cold(20) = 0.5, Dry(35) = 1
    res = evaluate(model, (20, 35))
    assert res.rule_strengths[0] == pytest.approx(0.5)
    assert res.output == pytest.approx(25.0, abs=1e-9)


def test_two_rules_pull_centroid_between_consequents(model):
    # Cold=.25, Comfortable=.2, Dry=.3, Moderate=.1333
    res = evaluate(model, (21, 47))
    assert res.rule_strengths[0] == pytest.approx(0.25)
    assert res.rule_strengths[1] == pytest.approx(2 / 15)
    assert 25.0 < res.output < 50.0


@pytest.mark.parametrize("outside, bound", [
    ((10, 20), (15, 30)),
    ((14.999, 29.5), (15, 30)),
    ((40, 1e6), (35, 90)),
    ((-math.inf, math.inf), (15, 90)),
])
def test_out_of_range_inputs_are_clamped(model, outside, bound):
    a = evaluate(model, outside)
    b = evaluate(model, bound)
    assert a.outputs == b.outputs
    assert a.rule_strengths == b.rule_strengths
    assert a.inputs == tuple(float(v) for v in bound)


def test_no_rule_fired_is_soft_condition(model):
    # Comfortable(25) = 1, ale Dry(30) = 1 -> brak reguły Comfortable AND Dry
    res = evaluate(model, (25, 30))
    assert not res.fired
    assert res.rule_strengths == (0.0,) * 5
    assert res.conditions == (NoRuleFired("Cooling_Power", 50.0),)
    assert res.output == 50.0


def test_deterministic(model):
    assert evaluate(model, (23.3, 71.1)) == evaluate(model, (23.3, 71.1))


def test_dimension_mismatch_and_model_stays_usable(model):
    with pytest.raises(DimensionMismatch) as exc:
        evaluate(model, [25])
    assert (exc.value.expected, exc.value.got) == (2, 1)
    with pytest.raises(DimensionMismatch):
        evaluate(model, {"Temperature": 25})
    with pytest.raises(DimensionMismatch):
        evaluate(model, {"Temperature": 25, "Humidity": 60, "Wind": 3})
    assert evaluate(model, (25, 60)).output == pytest.approx(50.0)


def test_invalid_values(model):
    with pytest.raises(EvaluationError):
        evaluate(model, (float("nan"), 60))
    with pytest.raises(EvaluationError):
        evaluate(model, ("warm", 60))


def test_weight_scales_strength(builder):
    model = builder.rule("IF Temperature is Comfortable AND Humidity is Moderate "
                         "THEN Cooling_Power is Medium weight 0.5").build()
    res = evaluate(model, (25, 60))
    assert res.rule_strengths == (0.5,)
    assert res.output == pytest.approx(50.0)


def test_zero_weight_and_disabled_rules_keep_their_slot(builder):
    model = (builder
             .rule("IF Temperature is Comfortable THEN Cooling_Power is Medium weight 0")
             .rule("IF Temperature is Comfortable THEN Cooling_Power is High inactive")
             .rule("IF Temperature is Comfortable THEN Cooling_Power is Low")
             .build())
    res = evaluate(model, (25, 60))
    assert res.rule_strengths == (0.0, 0.0, 1.0)
    assert res.output == pytest.approx(25.0)


def test_or_connective_uses_max(builder):
    model = (builder
             .rule("IF Temperature is Hot OR Humidity is Humid THEN Cooling_Power is High")
             .rule("IF Temperature is Hot AND Humidity is Humid THEN Cooling_Power is High")
             .build())
    res = evaluate(model, (25, 85))
    assert res.rule_strengths == (1.0, 0.0)


def test_strength_monotone_in_term_degree(builder):
    model = (builder
             .rule("IF Temperature is Cold AND Humidity is Dry THEN Cooling_Power is Low")
             .rule("IF Temperature is Cold OR Humidity is Humid THEN Cooling_Power is Low")
             .build())
    prev_and = prev_or = -1.0
    # Cold rośnie, gdy temperatura spada z 22 do 18; Dry=0.6 i Humid=0 stałe
    for t in (22, 21, 20, 19, 18):
        s_and, s_or = evaluate(model, (t, 44)).rule_strengths
        assert 0.0 <= s_and <= 1.0 and 0.0 <= s_or <= 1.0
        assert s_and >= prev_and and s_or >= prev_or
        assert s_and <= 0.6 + 1e-12
        prev_and, prev_or = s_and, s_or


def test_negated_term(builder):
    model = builder.rule("IF Temperature is not Cold THEN Cooling_Power is High").build()
    assert evaluate(model, (25, 60)).rule_strengths == (1.0,)
    assert evaluate(model, (15, 60)).rule_strengths == (0.0,)
    assert evaluate(model, (20, 60)).rule_strengths[0] == pytest.approx(0.5)


def test_alternative_operators():
    res = evaluate(temperature_controller(and_method="prod"), (21, 47))
    assert res.rule_strengths[0] == pytest.approx(0.25 * 0.3)
    res = evaluate(temperature_controller(defuzz="mom"), (25, 60))
    assert res.output == pytest.approx(50.0)
    res = evaluate(temperature_controller(implication="prod", aggregation="prob"), (20, 35))
    assert res.output == pytest.approx(25.0)


def test_resolution_changes_grid_only(model):
    coarse = evaluate(temperature_controller(resolution=11), (21, 47)).output
    fine = evaluate(temperature_controller(resolution=1001), (21, 47)).output
    assert coarse == pytest.approx(fine, abs=3.0)
    assert coarse != fine


def test_memberships_and_aggregates_snapshot(model):
    res = evaluate(model, (20, 35), memberships=True, aggregates=True)
    assert res.memberships["Temperature"] == {"Cold": 0.5, "Comfortable": 0.0, "Hot": 0.0}
    assert res.memberships["Humidity"]["Dry"] == 1.0
    samples = res.aggregates["Cooling_Power"]
    assert len(samples) == model.settings.resolution
    assert max(mu for _, mu in samples) == pytest.approx(0.5)
    assert evaluate(model, (20, 35)).memberships is None


def test_engine_object_reusable(model):
    engine = MamdaniEngine(model)
    a = engine.evaluate((25, 60))
    b = engine.evaluate((15, 30))
    assert engine.evaluate((25, 60)) == a
    assert a.output != b.output


def test_model_and_result_are_picklable(model):
    res = evaluate(model, (25, 60))
    assert pickle.loads(pickle.dumps(res)) == res
    clone = pickle.loads(pickle.dumps(model))
    assert evaluate(clone, (25, 60)) == res


def test_exceptions_survive_pickling():
    err = DimensionMismatch("zła liczba wejść", expected=2, got=1)
    back = pickle.loads(pickle.dumps(err))
    assert (str(back), back.expected, back.got) == (str(err), 2, 1)


def test_mf_curve(model):
    pts = mf_curve(model, "Temperature", "Comfortable", 5)
    assert pts == [(15.0, 0.0), (20.0, 0.0), (25.0, 1.0), (30.0, 0.0), (35.0, 0.0)]
    out = mf_curve(model, "Cooling_Power", "High", 3)
    assert [mu for _, mu in out] == [0.0, 0.0, 0.0]
    assert len(mf_curve(model, "Humidity", "Humid")) == 101


@pytest.mark.parametrize("bad", [0.5, 25, "25", b"25", None])
def test_scalar_and_string_inputs_rejected(bad):
    one = (ModelBuilder("one")
           .input("x", 0, 10).term("x", "lo", "tri", 0, 0, 10)
           .output("y", 0, 1).term("y", "small", "tri", 0, 0, 1)
           .rule("IF x is lo THEN y is small")
           .build())
    with pytest.raises(DimensionMismatch) as exc:
        evaluate(one, bad)
    assert exc.value.expected == 1
    assert evaluate(one, [5]).fired


def test_result_mappings_are_read_only(model):
    res = evaluate(model, (20, 35), memberships=True, aggregates=True)
    with pytest.raises(TypeError):
        res.outputs["Cooling_Power"] = 0.0
    with pytest.raises(TypeError):
        res.memberships["Temperature"]["Cold"] = 1.0
    with pytest.raises(TypeError):
        res.aggregates["Cooling_Power"] = ()
    back = pickle.loads(pickle.dumps(res))
    assert back == res
    assert dict(back.memberships["Temperature"]) == dict(res.memberships["Temperature"])
