from ..context import csv_writer, fmt, model_from_args
from ...fuzzy.model.engine import mf_curve


def cmd_curve(args):
    """Próbki MF zmiennej: kolumny x, <etykieta>... (jedna etykieta lub wszystkie)."""
    model = model_from_args(args)
    var = model.registry.variable(args.var, getattr(args, "role", None))
    labels = [args.label] if getattr(args, "label", None) else list(var.labels)
    curves = [mf_curve(model, var.name, lbl, getattr(args, "samples", 101), role=var.role) for lbl in labels]

    with csv_writer(getattr(args, "out", None)) as w:
        w.writerow([var.name] + labels)
        for i, (x, _mu) in enumerate(curves[0]):
            w.writerow([fmt(x)] + [fmt(c[i][1]) for c in curves])
