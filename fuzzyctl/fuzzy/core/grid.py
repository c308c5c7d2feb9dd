from typing import List
from .types import Float


def linspace(lo: Float, hi: Float, n: int) -> List[Float]:
    """n równo rozłożonych punktów z [lo, hi], końce włącznie."""
    n = int(n)
    if n <= 1:
        return [(lo + hi) / 2.0]
    step = (hi - lo) / (n - 1)
    # ostatni punkt wprost, żeby nie zgubić hi przez błąd zaokrągleń
    return [lo + i * step for i in range(n - 1)] + [float(hi)]


def midpoint(lo: Float, hi: Float) -> Float:
    return (lo + hi) / 2.0
