from ..context import csv_writer, fmt, model_from_args
from ...fuzzy.model.batch import critical_points, evaluate_many


def cmd_points(args):
    """Ewaluacja w narożnikach przestrzeni wejść i w jej środku (analiza aktywacji reguł)."""
    model = model_from_args(args)
    pts = critical_points(model)
    with csv_writer(getattr(args, "out", None)) as w:
        w.writerow([*model.input_names, *model.output_names, "fired",
                    *[f"R{i}" for i in range(1, len(model.rules) + 1)]])
        for p, res in zip(pts, evaluate_many(model, pts)):
            w.writerow([*[fmt(v) for v in p], *[fmt(v) for v in res.values()],
                        int(res.fired), *[fmt(a) for a in res.rule_strengths]])
