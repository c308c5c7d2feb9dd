from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union
import math

from .grid import linspace
from .types import Float, InvalidShape


def _check_finite(kind: str, params: Sequence[Float]) -> None:
    for p in params:
        if not math.isfinite(p):
            raise InvalidShape(f"{kind}: parametry muszą być skończone, dostałem {tuple(params)}")


def _check_order(kind: str, params: Sequence[Float]) -> None:
    _check_finite(kind, params)
    if any(p > q for p, q in zip(params, params[1:])):
        raise InvalidShape(f"{kind}: wymagane niemalejące punkty kontrolne, dostałem {tuple(params)}")


@dataclass(frozen=True)
class Triangular:
    a: Float; b: Float; c: Float

    def __post_init__(self) -> None:
        _check_order("tri", (self.a, self.b, self.c))

    def mu(self, x: Float) -> Float:
        if x < self.a or x > self.c: return 0.0
        if x == self.b: return 1.0
        # x < b => b > a, x > b => c > b (brak dzielenia przez zero)
        if x < self.b: return (x - self.a) / (self.b - self.a)
        return (self.c - x) / (self.c - self.b)

    def params(self) -> Tuple[Float, ...]:
        return (self.a, self.b, self.c)


@dataclass(frozen=True)
class Trapezoidal:
    a: Float; b: Float; c: Float; d: Float

    def __post_init__(self) -> None:
        _check_order("trap", (self.a, self.b, self.c, self.d))

    def mu(self, x: Float) -> Float:
        if x < self.a or x > self.d: return 0.0
        if self.b <= x <= self.c: return 1.0
        if x < self.b: return (x - self.a) / (self.b - self.a)
        return (self.d - x) / (self.d - self.c)

    def params(self) -> Tuple[Float, ...]:
        return (self.a, self.b, self.c, self.d)


@dataclass(frozen=True)
class Gaussian:
    mean: Float; sigma: Float

    def __post_init__(self) -> None:
        _check_finite("gauss", (self.mean, self.sigma))
        if self.sigma <= 0:
            raise InvalidShape(f"gauss: sigma > 0 wymagane, dostałem {self.sigma}")

    def mu(self, x: Float) -> Float:
        z = (x - self.mean) / self.sigma
        return math.exp(-0.5 * z * z)

    def params(self) -> Tuple[Float, ...]:
        return (self.mean, self.sigma)


# zamknięty zbiór kształtów; nowy kształt = nowy wpis tutaj i w SHAPES
MembershipFunction = Union[Triangular, Trapezoidal, Gaussian]
_VARIANTS = (Triangular, Trapezoidal, Gaussian)

SHAPES: Dict[str, type] = {
    "tri": Triangular,
    "trimf": Triangular,
    "trap": Trapezoidal,
    "trapmf": Trapezoidal,
    "gauss": Gaussian,
}

_ARITY = {Triangular: 3, Trapezoidal: 4, Gaussian: 2}


def evaluate(mf: MembershipFunction, x: Float) -> Float:
    """μ(x) w [0, 1] dla dowolnego x rzeczywistego; NaN -> 0."""
    if not isinstance(mf, _VARIANTS):
        raise TypeError(f"Nieobsługiwany typ MF: {type(mf).__name__}")
    x = float(x)
    if math.isnan(x):
        return 0.0
    v = mf.mu(x)
    if v <= 0.0:
        return 0.0
    if v >= 1.0:
        return 1.0
    return v


def make_mf(shape: str, params: Sequence[Float]) -> MembershipFunction:
    kind = SHAPES.get(str(shape).lower())
    if kind is None:
        raise InvalidShape(f"Unknown MF shape: {shape}", name=str(shape))
    try:
        values = [float(p) for p in params]
    except (TypeError, ValueError) as e:
        raise InvalidShape(f"{shape}: parametry muszą być liczbami ({params!r})") from e
    if len(values) != _ARITY[kind]:
        raise InvalidShape(f"{shape}: oczekiwano {_ARITY[kind]} parametrów, dostałem {len(values)}")
    return kind(*values)


def shape_name(mf: MembershipFunction) -> str:
    if isinstance(mf, Triangular): return "tri"
    if isinstance(mf, Trapezoidal): return "trap"
    if isinstance(mf, Gaussian): return "gauss"
    raise TypeError(f"Nieobsługiwany typ MF: {type(mf).__name__}")


def sample(mf: MembershipFunction, lo: Float, hi: Float, n: int) -> List[Tuple[Float, Float]]:
    return [(x, evaluate(mf, x)) for x in linspace(lo, hi, n)]
