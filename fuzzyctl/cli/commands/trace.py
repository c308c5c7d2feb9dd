import csv

from ..context import csv_writer, fmt, model_from_args
from ...fuzzy.core.types import EvaluationError
from ...fuzzy.model.batch import simulate_trace


def _read_trace(path, model, time_col):
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        cols = reader.fieldnames or []
        missing = [c for c in (time_col,) + model.input_names if c not in cols]
        if missing:
            raise EvaluationError(f"Brak kolumn w {path}: {missing} (kolumny: {cols})")
        times, rows = [], []
        for lineno, rec in enumerate(reader, 2):
            try:
                times.append(float(rec[time_col]))
                rows.append(tuple(float(rec[n]) for n in model.input_names))
            except (TypeError, ValueError):
                raise EvaluationError(f"{path}:{lineno}: wartość nie jest liczbą") from None
    return times, rows


def cmd_trace(args):
    """Przebieg czasowy z CSV: czas, wejścia -> czas, wejścia, wyjścia, R1..Rn."""
    model = model_from_args(args)
    time_col = getattr(args, "time_col", "time")
    times, rows = _read_trace(args.csv, model, time_col)
    try:
        tr = simulate_trace(model, times, rows, workers=getattr(args, "workers", None))
    except ValueError as e:
        raise EvaluationError(str(e)) from e

    with csv_writer(getattr(args, "out", None)) as w:
        w.writerow([time_col, *model.input_names, *model.output_names,
                    *[f"R{i}" for i in range(1, len(model.rules) + 1)]])
        for k, t in enumerate(tr.times):
            w.writerow([fmt(t), *[fmt(v) for v in rows[k]],
                        *[fmt(tr.outputs[o][k]) for o in model.output_names],
                        *[fmt(a) for a in tr.activation[k]]])
