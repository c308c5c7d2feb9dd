"""
Ewaluacja wsadowa: wiele wektorów wejściowych -> wyniki w kolejności wejścia.

Wiersze są niezależne (silnik bezstanowy), więc można je liczyć równolegle;
wyniki trafiają do bufora indeksowanego pozycją wiersza, a iteracja oddaje je
zawsze w kolejności wejścia (siatki i przebiegi czasowe zależą od pozycji).
"""
from __future__ import annotations
from concurrent.futures import Executor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from itertools import product
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import threading

from .engine import EvaluationResult, InputVector, MamdaniEngine
from .knowledge import FuzzyModel
from ..core.grid import linspace, midpoint
from ..core.types import Float

log = logging.getLogger(__name__)


def _evaluate_chunk(model: FuzzyModel, rows: Sequence[InputVector]) -> List[EvaluationResult]:
    engine = MamdaniEngine(model)
    return [engine.evaluate(row) for row in rows]


class BatchEvaluation:
    """
    Leniwa, skończona i wielokrotnie iterowalna sekwencja wyników.
    Każda iteracja liczy wszystko od nowa (bez cache'owania wyników).
    """

    def __init__(self, model: FuzzyModel, rows: Iterable[InputVector], *,
                 workers: Optional[int] = None, executor: Optional[Executor] = None,
                 chunk_size: Optional[int] = None) -> None:
        self.model = model
        self.rows: List[InputVector] = list(rows)
        self.workers = workers
        self.executor = executor
        self.chunk_size = chunk_size
        self._cancelled = threading.Event()

    def __len__(self) -> int:
        return len(self.rows)

    def cancel(self) -> None:
        """Przerwij pozostałe wiersze bieżącej iteracji."""
        self._cancelled.set()

    @property
    def parallel(self) -> bool:
        return self.executor is not None or (self.workers is not None and self.workers > 1)

    def __iter__(self) -> Iterator[EvaluationResult]:
        self._cancelled.clear()
        if self.parallel:
            return self._iter_parallel()
        return self._iter_serial()

    def _iter_serial(self) -> Iterator[EvaluationResult]:
        engine = MamdaniEngine(self.model)
        for row in self.rows:
            if self._cancelled.is_set():
                log.debug("Batch przerwany")
                return
            yield engine.evaluate(row)

    def _chunks(self, n_workers: int) -> List[Tuple[int, List[InputVector]]]:
        size = self.chunk_size or max(1, -(-len(self.rows) // (4 * n_workers)))
        return [(start, self.rows[start:start + size]) for start in range(0, len(self.rows), size)]

    def _iter_parallel(self) -> Iterator[EvaluationResult]:
        n = len(self.rows)
        if n == 0:
            return
        own = self.executor is None
        pool = self.executor or ProcessPoolExecutor(max_workers=self.workers)
        buffer: List[Optional[EvaluationResult]] = [None] * n
        ready = 0
        try:
            futures = {
                pool.submit(_evaluate_chunk, self.model, chunk): (start, len(chunk))
                for start, chunk in self._chunks(self.workers or 4)
            }
            log.debug("Batch: %d wierszy w %d paczkach", n, len(futures))
            for fut in as_completed(futures):
                start, length = futures[fut]
                buffer[start:start + length] = fut.result()
                # oddaj najdłuższy gotowy prefiks
                while ready < n and buffer[ready] is not None:
                    if self._cancelled.is_set():
                        for f in futures:
                            f.cancel()
                        log.debug("Batch przerwany po %d wierszach", ready)
                        return
                    yield buffer[ready]
                    ready += 1
        finally:
            if own:
                pool.shutdown(wait=True, cancel_futures=True)


def evaluate_many(model: FuzzyModel, input_rows: Iterable[InputVector], *,
                  workers: Optional[int] = None, executor: Optional[Executor] = None,
                  chunk_size: Optional[int] = None) -> BatchEvaluation:
    return BatchEvaluation(model, input_rows, workers=workers, executor=executor, chunk_size=chunk_size)


# ---------- siatki (powierzchnia sterowania) ----------

@dataclass(frozen=True)
class Surface:
    x_name: str
    y_name: str
    output: str
    xs: Tuple[Float, ...]
    ys: Tuple[Float, ...]
    z: Tuple[Tuple[Float, ...], ...]                 # z[i][j] = wyjście w (xs[j], ys[i])
    strengths: Tuple[Tuple[Float, ...], ...]         # siły reguł, wiersz po wierszu siatki
    fired: Tuple[bool, ...]

    def column(self, j: int) -> Tuple[Float, ...]:
        """Przekrój przy stałym x = xs[j]."""
        return tuple(r[j] for r in self.z)

    def points(self) -> Iterator[Tuple[Float, Float, Float]]:
        for i, y in enumerate(self.ys):
            for j, x in enumerate(self.xs):
                yield x, y, self.z[i][j]


def _axis(model: FuzzyModel, name: str, n: int) -> Tuple[Float, ...]:
    var = model.registry.input(name)
    return tuple(linspace(var.vmin, var.vmax, n))


def _base_point(model: FuzzyModel, fixed: Optional[Mapping[str, Float]]) -> Dict[str, Float]:
    fixed = dict(fixed or {})
    for k in fixed:
        model.registry.input(k)
    return {v.name: float(fixed.get(v.name, midpoint(v.vmin, v.vmax))) for v in model.registry.inputs}


def grid_rows(model: FuzzyModel, x: str, y: str, xs: Sequence[Float], ys: Sequence[Float],
              fixed: Optional[Mapping[str, Float]] = None) -> List[Tuple[Float, ...]]:
    """Wiersze siatki: y zewnętrznie, x wewnętrznie (kolejność rastrowa)."""
    base = _base_point(model, fixed)
    names = model.input_names
    rows = []
    for yv, xv in product(ys, xs):
        point = dict(base)
        point[x] = xv
        point[y] = yv
        rows.append(tuple(point[n] for n in names))
    return rows


def sweep_grid(model: FuzzyModel, x: Optional[str] = None, y: Optional[str] = None,
               points: Union[int, Tuple[int, int]] = 50,
               fixed: Optional[Mapping[str, Float]] = None,
               output: Optional[str] = None, **batch_kw) -> Surface:
    names = model.input_names
    if len(names) < 2:
        raise ValueError("sweep_grid wymaga co najmniej dwóch wejść; użyj sweep_line")
    x = x or names[0]
    y = y or next(n for n in names if n != x)
    if x == y:
        raise ValueError(f"Osie siatki muszą być różne (dostałem {x!r} dwa razy)")
    output = output or model.output_names[0]
    model.registry.output(output)
    nx, ny = (points, points) if isinstance(points, int) else points

    xs = _axis(model, x, nx)
    ys = _axis(model, y, ny)
    results = list(evaluate_many(model, grid_rows(model, x, y, xs, ys, fixed), **batch_kw))
    z = tuple(
        tuple(results[i * len(xs) + j].outputs[output] for j in range(len(xs)))
        for i in range(len(ys))
    )
    log.debug("sweep_grid %s x %s -> %s: %d punktów", x, y, output, len(results))
    return Surface(
        x_name=x, y_name=y, output=output, xs=xs, ys=ys, z=z,
        strengths=tuple(r.rule_strengths for r in results),
        fired=tuple(r.fired for r in results),
    )


def sweep_line(model: FuzzyModel, x: Optional[str] = None, points: int = 50,
               fixed: Optional[Mapping[str, Float]] = None,
               **batch_kw) -> List[Tuple[Float, EvaluationResult]]:
    """Odpowiedź wzdłuż jednej osi przy pozostałych wejściach ustalonych."""
    x = x or model.input_names[0]
    xs = _axis(model, x, points)
    base = _base_point(model, fixed)
    names = model.input_names
    rows = []
    for xv in xs:
        point = dict(base)
        point[x] = xv
        rows.append(tuple(point[n] for n in names))
    return list(zip(xs, evaluate_many(model, rows, **batch_kw)))


# ---------- przebiegi czasowe ----------

@dataclass(frozen=True)
class Trace:
    times: Tuple[Float, ...]
    outputs: Dict[str, Tuple[Float, ...]]
    activation: Tuple[Tuple[Float, ...], ...]       # [próbka][reguła]
    fired: Tuple[bool, ...]

    def rule_series(self, idx: int) -> Tuple[Float, ...]:
        return tuple(row[idx] for row in self.activation)


def simulate_trace(model: FuzzyModel, times: Sequence[Float], rows: Sequence[InputVector],
                   **batch_kw) -> Trace:
    times = tuple(float(t) for t in times)
    rows = list(rows)
    if len(times) != len(rows):
        raise ValueError(f"Liczba chwil ({len(times)}) != liczba wierszy ({len(rows)})")
    if any(b < a for a, b in zip(times, times[1:])):
        raise ValueError("Chwile czasu muszą być niemalejące")
    results = list(evaluate_many(model, rows, **batch_kw))
    return Trace(
        times=times,
        outputs={o: tuple(r.outputs[o] for r in results) for o in model.output_names},
        activation=tuple(r.rule_strengths for r in results),
        fired=tuple(r.fired for r in results),
    )


# ---------- punkty krytyczne ----------

def critical_points(model: FuzzyModel) -> List[Tuple[Float, ...]]:
    """
    Narożniki przestrzeni wejść (min/max każdej zmiennej, porządek leksykograficzny)
    ze środkiem wstawionym pośrodku; dla dwóch wejść:
    Min-Min, Min-Max, Mid-Mid, Max-Min, Max-Max.
    """
    inputs = model.registry.inputs
    corners = [tuple(c) for c in product(*[(v.vmin, v.vmax) for v in inputs])]
    mid = tuple(midpoint(v.vmin, v.vmax) for v in inputs)
    half = len(corners) // 2
    return corners[:half] + [mid] + corners[half:]
