# Zmienne lingwistyczne: zakres + uporządkowane etykiety MF

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterator, Tuple
import math

from ..core.mfs import MembershipFunction, evaluate
from ..core.types import DuplicateName, Float, UnknownMF, ValidationError

INPUT = "input"
OUTPUT = "output"
ROLES = (INPUT, OUTPUT)


@dataclass(frozen=True)
class Variable:
    name: str
    vmin: Float
    vmax: Float
    terms: Tuple[Tuple[str, MembershipFunction], ...] = field(default_factory=tuple)
    role: str = INPUT

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValidationError(f"var: nieznana rola '{self.role}' (input|output)", name=self.name)
        if not (math.isfinite(self.vmin) and math.isfinite(self.vmax)) or self.vmin >= self.vmax:
            raise ValidationError(
                f"var {self.name}: vmin < vmax wymagane (dostałem {self.vmin} >= {self.vmax})",
                name=self.name,
            )
        seen = set()
        for label, _mf in self.terms:
            if label in seen:
                raise DuplicateName(f"Duplikat etykiety MF '{label}' w zmiennej '{self.name}'", name=label)
            seen.add(label)

    def with_term(self, label: str, mf: MembershipFunction) -> "Variable":
        if self.has_term(label):
            raise DuplicateName(f"Duplikat etykiety MF '{label}' w zmiennej '{self.name}'", name=label)
        return replace(self, terms=self.terms + ((label, mf),))

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(label for label, _ in self.terms)

    @property
    def range(self) -> Tuple[Float, Float]:
        return (self.vmin, self.vmax)

    def has_term(self, label: str) -> bool:
        return any(lbl == label for lbl, _ in self.terms)

    def term(self, label: str) -> MembershipFunction:
        for lbl, mf in self.terms:
            if lbl == label:
                return mf
        raise UnknownMF(f"Nieznana etykieta '{self.name}.{label}'", name=label)

    def degree(self, label: str, x: Float) -> Float:
        return evaluate(self.term(label), x)

    def clamp(self, x: Float) -> Float:
        return max(self.vmin, min(self.vmax, x))

    def __iter__(self) -> Iterator[Tuple[str, MembershipFunction]]:
        return iter(self.terms)
