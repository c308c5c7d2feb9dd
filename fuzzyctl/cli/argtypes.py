import argparse

from ..fuzzy.core import norms
from ..fuzzy.core.defuzz import DEFUZZ

AND_CHOICES = sorted(norms.TNORMS)
OR_CHOICES = sorted(norms.SNORMS)
IMPLICATION_CHOICES = sorted(norms.IMPLICATIONS)
AGGREGATION_CHOICES = sorted(norms.AGGREGATIONS)
DEFUZZ_CHOICES = list(DEFUZZ)
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_kv(s: str):
    """'Temperature=25' -> ('Temperature', 25.0)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"Niepoprawny element: '{s}' (oczekiwano 'var=wartość').")
    k, v = (t.strip() for t in s.split("=", 1))
    if not k:
        raise argparse.ArgumentTypeError(f"Pusty klucz w: '{s}'.")
    try:
        return k, float(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Wartość nie jest liczbą: '{s}'.") from None


def parse_kv_list(s: str):
    """'x=1,y=2' -> {'x': 1.0, 'y': 2.0}."""
    if not s:
        return {}
    out = {}
    for pair in s.split(","):
        pair = pair.strip()
        if pair:
            k, v = parse_kv(pair)
            out[k] = v
    return out


def positive_int(s: str) -> int:
    try:
        n = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Oczekiwano liczby całkowitej: '{s}'.") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"Wymagane >= 1, dostałem {n}.")
    return n


def grid_points(s: str):
    """'50' -> 50, '40x30' -> (40, 30)."""
    if "x" in s.lower():
        a, b = s.lower().split("x", 1)
        return positive_int(a), positive_int(b)
    return positive_int(s)
