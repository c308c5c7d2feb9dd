from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .variable import Variable, INPUT, OUTPUT
from ..core import norms
from ..core.defuzz import DEFUZZ
from ..core.mfs import MembershipFunction, evaluate
from ..core.rule import Rule
from ..core.types import (
    DuplicateName, Float, FrozenModel, UnknownReference,
    UnknownVariable, ValidationError,
)


@dataclass(frozen=True)
class EngineSettings:
    """Operatory silnika Mamdaniego; domyślnie: AND=min, OR=max, clip, max, centroid."""
    and_method: str = "min"
    or_method: str = "max"
    implication: str = "min"
    aggregation: str = "max"
    defuzz: str = "centroid"
    resolution: int = 101

    def __post_init__(self) -> None:
        checks = (
            ("and_method", self.and_method, norms.TNORMS),
            ("or_method", self.or_method, norms.SNORMS),
            ("implication", self.implication, norms.IMPLICATIONS),
            ("aggregation", self.aggregation, norms.AGGREGATIONS),
            ("defuzz", self.defuzz, DEFUZZ),
        )
        for key, value, table in checks:
            if value not in table:
                raise ValidationError(
                    f"{key}: nieobsługiwane '{value}' (dozwolone: {'|'.join(table)})", name=key
                )
        if int(self.resolution) < 2:
            raise ValidationError(f"resolution: wymagane >= 2, dostałem {self.resolution}", name="resolution")

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "EngineSettings":
        d = dict(d or {})
        unknown = set(d) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValidationError(f"settings: nieznane klucze {sorted(unknown)}", name=sorted(unknown)[0])
        if "resolution" in d:
            try:
                d["resolution"] = int(d["resolution"])
            except (TypeError, ValueError):
                raise ValidationError(
                    f"resolution: oczekiwano liczby całkowitej, dostałem {d['resolution']!r}", name="resolution"
                ) from None
        for k in ("and_method", "or_method", "implication", "aggregation", "defuzz"):
            if k in d:
                d[k] = str(d[k]).lower()
        return cls(**d)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class VariableRegistry:
    """
    Zmienne wejściowe/wyjściowe modelu. Nazwy unikalne w obrębie roli.
    Każdy model ma własny rejestr; po `freeze()` rejestr jest tylko do odczytu.
    """

    def __init__(self) -> None:
        self._inputs: Dict[str, Variable] = {}
        self._outputs: Dict[str, Variable] = {}
        self._frozen = False

    # ---------- budowa ----------

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenModel("Rejestr zmiennych jest zamrożony (model już zbudowany)")

    def _table(self, role: str) -> Dict[str, Variable]:
        return self._inputs if role == INPUT else self._outputs

    def add(self, var: Variable) -> Variable:
        self._check_mutable()
        table = self._table(var.role)
        if var.name in table:
            raise DuplicateName(f"Duplikat zmiennej ({var.role}): {var.name}", name=var.name)
        table[var.name] = var
        return var

    def add_input(self, name: str, vmin: Float, vmax: Float, terms=()) -> Variable:
        return self.add(Variable(name, float(vmin), float(vmax), tuple(terms), role=INPUT))

    def add_output(self, name: str, vmin: Float, vmax: Float, terms=()) -> Variable:
        return self.add(Variable(name, float(vmin), float(vmax), tuple(terms), role=OUTPUT))

    def add_term(self, var_name: str, label: str, mf: MembershipFunction, role: Optional[str] = None) -> Variable:
        self._check_mutable()
        var = self.variable(var_name, role)
        updated = var.with_term(label, mf)
        self._table(var.role)[var_name] = updated
        return updated

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ---------- odczyt ----------

    @property
    def inputs(self) -> Tuple[Variable, ...]:
        return tuple(self._inputs.values())

    @property
    def outputs(self) -> Tuple[Variable, ...]:
        return tuple(self._outputs.values())

    def input(self, name: str) -> Variable:
        try:
            return self._inputs[name]
        except KeyError:
            raise UnknownVariable(f"Nieznana zmienna wejściowa: {name}", name=name) from None

    def output(self, name: str) -> Variable:
        try:
            return self._outputs[name]
        except KeyError:
            raise UnknownVariable(f"Nieznana zmienna wyjściowa: {name}", name=name) from None

    def variable(self, name: str, role: Optional[str] = None) -> Variable:
        """Szuka w podanej roli; bez roli najpierw wejścia, potem wyjścia."""
        if role == INPUT:
            return self.input(name)
        if role == OUTPUT:
            return self.output(name)
        var = self._inputs.get(name) or self._outputs.get(name)
        if var is None:
            raise UnknownVariable(f"Nieznana zmienna: {name}", name=name)
        return var

    def range(self, name: str, role: Optional[str] = None) -> Tuple[Float, Float]:
        return self.variable(name, role).range

    def mf(self, var_name: str, label: str, role: Optional[str] = None) -> MembershipFunction:
        return self.variable(var_name, role).term(label)

    def mf_degree(self, var_name: str, label: str, x: Float, role: Optional[str] = None) -> Float:
        return evaluate(self.mf(var_name, label, role), x)


class RuleBase:
    """Uporządkowana lista reguł; referencje (zmienna, etykieta) walidowane przy dopisaniu."""

    def __init__(self, registry: VariableRegistry) -> None:
        self._registry = registry
        self._rules: List[Rule] = []
        self._frozen = False

    def _check_refs(self, rule: Rule) -> None:
        reg = self._registry
        for term in rule.antecedent:
            try:
                var = reg.input(term.variable)
            except UnknownVariable:
                raise UnknownReference(
                    f"Rule: nieznana zmienna wejściowa '{term.variable}' w: {rule}", name=term.variable
                ) from None
            if not var.has_term(term.label):
                raise UnknownReference(
                    f"Rule: nieznana etykieta '{term.variable}.{term.label}' w: {rule}", name=term.label
                )
        oname, olabel = rule.consequent
        try:
            ovar = reg.output(oname)
        except UnknownVariable:
            raise UnknownReference(f"Rule: nieznana zmienna wyjściowa '{oname}' w: {rule}", name=oname) from None
        if not ovar.has_term(olabel):
            raise UnknownReference(f"Rule: nieznana etykieta wyjścia '{oname}.{olabel}' w: {rule}", name=olabel)

    def append(self, rule: Rule) -> int:
        if self._frozen:
            raise FrozenModel("Baza reguł jest zamrożona (model już zbudowany)")
        self._check_refs(rule)
        self._rules.append(rule)
        return len(self._rules) - 1

    def freeze(self) -> None:
        self._frozen = True

    def for_output(self, name: str) -> List[Tuple[int, Rule]]:
        return [(i, r) for i, r in enumerate(self._rules) if r.consequent[0] == name]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __getitem__(self, idx: int) -> Rule:
        return self._rules[idx]


@dataclass(frozen=True)
class FuzzyModel:
    name: str
    registry: VariableRegistry
    rules: RuleBase
    settings: EngineSettings = field(default_factory=EngineSettings)

    @property
    def inputs(self) -> Tuple[Variable, ...]:
        return self.registry.inputs

    @property
    def outputs(self) -> Tuple[Variable, ...]:
        return self.registry.outputs

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.registry.inputs)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.registry.outputs)
