"""
Defuzyfikacja na siatce próbek (ys, ws): ws[i] = μ_agg(ys[i]).

Każda metoda zwraca środek przedziału, gdy zbiór jest pusty (Σμ = 0);
o tym, czy to sytuacja „żadna reguła nie odpaliła”, decyduje silnik.
"""
from typing import Callable, Dict, List, Sequence
from .types import Float


def _mid(ys: Sequence[Float]) -> Float:
    return (ys[0] + ys[-1]) / 2.0


def is_empty(ws: Sequence[Float]) -> bool:
    return not any(w > 0.0 for w in ws)


def centroid(ys: Sequence[Float], ws: Sequence[Float]) -> Float:
    num = 0.0
    den = 0.0
    for y, w in zip(ys, ws):
        num += y * w
        den += w
    return num / den if den > 0.0 else _mid(ys)


def bisector(ys: Sequence[Float], ws: Sequence[Float]) -> Float:
    total = sum(ws)
    if total <= 0.0:
        return _mid(ys)
    half = total / 2.0
    acc = 0.0
    for y, w in zip(ys, ws):
        acc += w
        if acc >= half:
            return y
    return ys[-1]


def _tops(ys: Sequence[Float], ws: Sequence[Float]) -> List[Float]:
    m = max(ws) if ws else 0.0
    if m <= 0.0:
        return []
    # tolerancja numeryczna
    tol = max(1e-12, 1e-6 * m)
    return [y for y, w in zip(ys, ws) if abs(w - m) <= tol]


def mom(ys: Sequence[Float], ws: Sequence[Float]) -> Float:
    tops = _tops(ys, ws)
    return sum(tops) / len(tops) if tops else _mid(ys)


def som(ys: Sequence[Float], ws: Sequence[Float]) -> Float:
    tops = _tops(ys, ws)
    return tops[0] if tops else _mid(ys)


def lom(ys: Sequence[Float], ws: Sequence[Float]) -> Float:
    tops = _tops(ys, ws)
    return tops[-1] if tops else _mid(ys)


DEFUZZ: Dict[str, Callable[[Sequence[Float], Sequence[Float]], Float]] = {
    "centroid": centroid,
    "bisector": bisector,
    "mom": mom,
    "som": som,
    "lom": lom,
}
