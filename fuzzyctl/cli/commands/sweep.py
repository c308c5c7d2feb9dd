import logging

from ..context import csv_writer, fmt, model_from_args
from ...fuzzy.model.batch import sweep_grid

log = logging.getLogger(__name__)


def cmd_sweep(args):
    """Powierzchnia sterowania: wiersze x, y, wyjście [, R1..Rn] w kolejności rastrowej."""
    model = model_from_args(args)
    surf = sweep_grid(
        model, x=getattr(args, "x", None), y=getattr(args, "y", None),
        points=getattr(args, "points", 50), fixed=getattr(args, "fixed", None),
        output=getattr(args, "output", None), workers=getattr(args, "workers", None),
    )
    with_strengths = bool(getattr(args, "strengths", False))
    with csv_writer(getattr(args, "out", None)) as w:
        header = [surf.x_name, surf.y_name, surf.output]
        if with_strengths:
            header += [f"R{i}" for i in range(1, len(model.rules) + 1)]
        w.writerow(header)
        for k, (x, y, z) in enumerate(surf.points()):
            row = [fmt(x), fmt(y), fmt(z)]
            if with_strengths:
                row += [fmt(a) for a in surf.strengths[k]]
            w.writerow(row)
    unfired = surf.fired.count(False)
    if unfired:
        log.warning("%d z %d punktów siatki bez odpalonej reguły (wyjście = środek zakresu)",
                    unfired, len(surf.fired))
