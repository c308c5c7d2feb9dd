from concurrent.futures import ThreadPoolExecutor

import pytest

from fuzzyctl.fuzzy.core.types import DimensionMismatch
from fuzzyctl.fuzzy.model.batch import (
    critical_points, evaluate_many, grid_rows, simulate_trace, sweep_grid, sweep_line,
)
from fuzzyctl.fuzzy.model.engine import evaluate

ROWS = [(15, 30), (25, 60), (35, 90), (20, 35), (25, 30), (21, 47), (30, 45)]


def test_serial_matches_single_point(model):
    results = list(evaluate_many(model, ROWS))
    assert results == [evaluate(model, r) for r in ROWS]


def test_injected_executor_preserves_order(model):
    expected = [evaluate(model, r) for r in ROWS]
    with ThreadPoolExecutor(max_workers=4) as pool:
        got = list(evaluate_many(model, ROWS, executor=pool, chunk_size=1))
        assert got == expected
        # executor wstrzyknięty z zewnątrz nie jest zamykany
        assert pool.submit(lambda: 1).result() == 1


def test_process_workers_preserve_order(model):
    rows = ROWS * 3
    got = list(evaluate_many(model, rows, workers=2, chunk_size=2))
    assert [r.inputs for r in got] == [tuple(float(v) for v in r) for r in rows]
    assert got == [evaluate(model, r) for r in rows]


def test_batch_is_sized_and_restartable(model):
    batch = evaluate_many(model, iter(ROWS))
    assert len(batch) == len(ROWS)
    assert list(batch) == list(batch)
    assert list(evaluate_many(model, [])) == []


def test_cancel_stops_remaining_rows(model):
    batch = evaluate_many(model, ROWS)
    got = []
    for res in batch:
        got.append(res)
        if len(got) == 2:
            batch.cancel()
    assert len(got) == 2
    # kolejna iteracja zaczyna od nowa
    assert len(list(batch)) == len(ROWS)


def test_bad_row_raises_during_iteration(model):
    batch = evaluate_many(model, [(25, 60), (25,)])
    it = iter(batch)
    assert next(it).output == pytest.approx(50.0)
    with pytest.raises(DimensionMismatch):
        next(it)


def test_grid_rows_are_raster_order(model):
    rows = grid_rows(model, "Temperature", "Humidity", (15, 35), (30, 60, 90))
    assert rows == [(15, 30), (35, 30), (15, 60), (35, 60), (15, 90), (35, 90)]


def test_sweep_grid_layout(model):
    surf = sweep_grid(model, points=(3, 2))
    assert (surf.x_name, surf.y_name, surf.output) == ("Temperature", "Humidity", "Cooling_Power")
    assert surf.xs == (15.0, 25.0, 35.0)
    assert surf.ys == (30.0, 90.0)
    assert len(surf.z) == 2 and all(len(r) == 3 for r in surf.z)
    assert len(surf.strengths) == 6 == len(surf.fired)
    assert surf.z[0][0] == pytest.approx(evaluate(model, (15, 30)).output)
    assert surf.z[1][2] == pytest.approx(evaluate(model, (35, 90)).output)
    # (25, 30): żadna reguła -> środek zakresu
    assert surf.z[0][1] == 50.0 and not surf.fired[1]
    assert surf.column(0) == (surf.z[0][0], surf.z[1][0])
    assert list(surf.points())[4] == (25.0, 90.0, surf.z[1][1])


def test_sweep_grid_default_is_50_by_50(model):
    surf = sweep_grid(model, executor=None)
    assert len(surf.xs) == len(surf.ys) == 50
    assert surf.xs[0] == 15.0 and surf.xs[-1] == 35.0


def test_sweep_grid_errors(model):
    with pytest.raises(ValueError):
        sweep_grid(model, x="Temperature", y="Temperature")


def test_sweep_line_holds_other_inputs_at_midpoint(model):
    line = sweep_line(model, "Temperature", points=5)
    assert [x for x, _ in line] == [15.0, 20.0, 25.0, 30.0, 35.0]
    assert all(res.inputs[1] == 60.0 for _, res in line)
    fixed = sweep_line(model, "Temperature", points=2, fixed={"Humidity": 30})
    assert fixed[0][1] == evaluate(model, (15, 30))


def test_simulate_trace(model):
    times = [0.0, 0.5, 1.0]
    rows = [(15, 30), (25, 60), (35, 90)]
    tr = simulate_trace(model, times, rows)
    assert tr.times == (0.0, 0.5, 1.0)
    assert tr.outputs["Cooling_Power"] == pytest.approx((25.0, 50.0, 75.0))
    assert tr.rule_series(1) == (0.0, 1.0, 0.0)
    assert tr.fired == (True, True, True)


def test_simulate_trace_errors(model):
    with pytest.raises(ValueError):
        simulate_trace(model, [0, 1], [(15, 30)])
    with pytest.raises(ValueError):
        simulate_trace(model, [1, 0], [(15, 30), (25, 60)])


def test_critical_points(model):
    assert critical_points(model) == [(15, 30), (15, 90), (25.0, 60.0), (35, 30), (35, 90)]
    fired = [evaluate(model, p).rule_strengths for p in critical_points(model)]
    assert fired[0][0] == 1.0          # Min-Min: Cold & Dry
    assert fired[2][1] == 1.0          # Mid-Mid: Comfortable & Moderate
    assert fired[4][2] == 1.0          # Max-Max: Hot & Humid
    assert fired[1][3] == 1.0          # Min-Max: Cold & Humid
    assert fired[3][4] == 1.0          # Max-Min: Hot & Dry
