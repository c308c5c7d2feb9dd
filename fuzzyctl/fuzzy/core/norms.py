from typing import Callable, Dict, Iterable
from .types import Float

# --- T-normy (AND) ---
def t_min(vals: Iterable[Float]) -> Float:
    it = iter(vals)
    try:
        m = float(next(it))
    except StopIteration:
        return 1.0
    for v in it:
        if v < m: m = float(v)
    return m

def t_prod(vals: Iterable[Float]) -> Float:
    p = 1.0
    for v in vals:
        p *= float(v)
    return p

# --- S-normy (OR / agregacja) ---
def s_max(vals: Iterable[Float]) -> Float:
    it = iter(vals)
    try:
        m = float(next(it))
    except StopIteration:
        return 0.0
    for v in it:
        if v > m: m = float(v)
    return m

def s_prob(vals: Iterable[Float]) -> Float:
    acc = 0.0
    for v in vals:
        v = float(v)
        acc = acc + v - acc * v  # probabilistic OR: a + b - ab
    return acc

def s_bsum(vals: Iterable[Float]) -> Float:
    s = 0.0
    for v in vals:
        s += float(v)
        if s >= 1.0:
            return 1.0
    return s  # min(1, sum)

# --- implikacja: (α, μ_B(y)) -> μ'(y) ---
def imp_min(alpha: Float, mu: Float) -> Float:
    return alpha if alpha < mu else mu

def imp_prod(alpha: Float, mu: Float) -> Float:
    return alpha * mu


TNORMS: Dict[str, Callable[[Iterable[Float]], Float]] = {
    "min": t_min,
    "prod": t_prod,
}
SNORMS: Dict[str, Callable[[Iterable[Float]], Float]] = {
    "max": s_max,
    "prob": s_prob,
}
AGGREGATIONS: Dict[str, Callable[[Iterable[Float]], Float]] = {
    "max": s_max,
    "sum": s_bsum,
    "prob": s_prob,
}
IMPLICATIONS: Dict[str, Callable[[Float, Float], Float]] = {
    "min": imp_min,
    "prod": imp_prod,
}
