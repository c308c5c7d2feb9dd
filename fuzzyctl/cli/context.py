# Wspólne dla komend: skąd wziąć model, jak czytać wejścia, gdzie pisać CSV.

import csv
import sys
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, List, Sequence

from ..fuzzy.core.types import EvaluationError
from ..fuzzy.io.loader import load_model
from ..fuzzy.model.knowledge import EngineSettings, FuzzyModel
from ..fuzzy.model.presets import PRESETS

_OVERRIDES = ("and_method", "or_method", "implication", "aggregation", "defuzz", "resolution")


def model_from_args(args) -> FuzzyModel:
    """--model PATH albo --preset NAME, plus ewentualne nadpisania operatorów silnika."""
    path = getattr(args, "model", None)
    preset = getattr(args, "preset", None)
    if path:
        model = load_model(path)
    elif preset:
        model = PRESETS[preset]()
    else:
        raise SystemExit("Podaj --model PATH albo --preset NAME")

    changes = {k: getattr(args, k) for k in _OVERRIDES if getattr(args, k, None) is not None}
    if changes:
        settings = EngineSettings.from_dict({**model.settings.to_dict(), **changes})
        model = replace(model, settings=settings)
    return model


def input_vector(model: FuzzyModel, items: Sequence[str]) -> List[float]:
    """
    Akceptuje same liczby (w kolejności wejść) albo pary var=wartość.
    Mieszanie obu form nie jest dozwolone.
    """
    if all("=" in it for it in items):
        data: Dict[str, float] = {}
        for it in items:
            k, v = it.split("=", 1)
            data[k.strip()] = _num(v)
        unknown = [k for k in data if k not in model.input_names]
        if unknown:
            raise EvaluationError(f"Nieznane wejścia: {unknown} (model: {list(model.input_names)})")
        missing = [n for n in model.input_names if n not in data]
        if missing:
            raise EvaluationError(f"Brak wartości dla: {missing}")
        return [data[n] for n in model.input_names]
    if any("=" in it for it in items):
        raise EvaluationError("Nie mieszaj 'var=wartość' z samymi liczbami")
    return [_num(it) for it in items]


def _num(s: str) -> float:
    try:
        return float(s)
    except ValueError:
        raise EvaluationError(f"Wartość nie jest liczbą: '{s}'") from None


@contextmanager
def csv_writer(path):
    """csv.writer do pliku albo na stdout (gdy brak --out)."""
    if path:
        with open(path, "w", newline="", encoding="utf-8") as f:
            yield csv.writer(f)
    else:
        yield csv.writer(sys.stdout)


def fmt(v: float) -> str:
    return f"{v:.6g}"
