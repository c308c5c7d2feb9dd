from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import math

from ..core import norms
from ..core.defuzz import DEFUZZ, is_empty
from ..core.grid import linspace, midpoint
from ..core.mfs import evaluate as mf_evaluate, sample
from ..core.rule import AND, Rule
from ..core.types import DimensionMismatch, EvaluationError, Float
from .knowledge import FuzzyModel

log = logging.getLogger(__name__)

InputVector = Union[Sequence[Float], Mapping[str, Float]]


@dataclass(frozen=True)
class NoRuleFired:
    """Żadna reguła nie dała niezerowego zbioru dla wyjścia; `value` = środek zakresu."""
    output: str
    value: Float


@dataclass(frozen=True)
class EvaluationResult:
    """Wynik jednej ewaluacji; słowniki są tylko do odczytu (MappingProxyType)."""
    inputs: Tuple[Float, ...]
    outputs: Mapping[str, Float]
    rule_strengths: Tuple[Float, ...]
    conditions: Tuple[NoRuleFired, ...] = ()
    memberships: Optional[Mapping[str, Mapping[str, Float]]] = None
    aggregates: Optional[Mapping[str, Tuple[Tuple[Float, Float], ...]]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "outputs", MappingProxyType(dict(self.outputs)))
        if self.memberships is not None:
            object.__setattr__(self, "memberships", MappingProxyType(
                {k: MappingProxyType(dict(v)) for k, v in self.memberships.items()}
            ))
        if self.aggregates is not None:
            object.__setattr__(self, "aggregates", MappingProxyType(dict(self.aggregates)))

    def __reduce__(self):
        # mappingproxy nie jest picklowalny; odtwarzamy ze zwykłych słowników
        memberships = None if self.memberships is None else {k: dict(v) for k, v in self.memberships.items()}
        aggregates = None if self.aggregates is None else dict(self.aggregates)
        return (type(self), (self.inputs, dict(self.outputs), self.rule_strengths,
                             self.conditions, memberships, aggregates))

    @property
    def output(self) -> Float:
        """Wartość pierwszego wyjścia (typowy przypadek MISO)."""
        return next(iter(self.outputs.values()))

    @property
    def fired(self) -> bool:
        return not self.conditions

    def values(self) -> Tuple[Float, ...]:
        return tuple(self.outputs.values())


class MamdaniEngine:
    """
    Mamdani: α = T(μ_i) (AND) albo S(μ_i) (OR), razy waga reguły;
    implikacja min(α, μ_B(y)); agregacja S-normą po regułach; defuzyfikacja na siatce.
    Silnik nie trzyma stanu między wywołaniami.
    """

    def __init__(self, model: FuzzyModel) -> None:
        self.model = model
        s = model.settings
        self.and_fn = norms.TNORMS[s.and_method]
        self.or_fn = norms.SNORMS[s.or_method]
        self.imp_fn = norms.IMPLICATIONS[s.implication]
        self.agg_fn = norms.AGGREGATIONS[s.aggregation]
        self.defuzz_fn = DEFUZZ[s.defuzz]
        self._inputs = model.registry.inputs
        self._rules: Tuple[Rule, ...] = tuple(model.rules)
        # indeksy reguł per wyjście, w kolejności bazy
        self._rules_by_output: Dict[str, List[int]] = {
            o.name: [i for i, _ in model.rules.for_output(o.name)] for o in model.registry.outputs
        }
        # siatki wyjść są stałe dla modelu
        self._grids: Dict[str, List[Float]] = {
            o.name: linspace(o.vmin, o.vmax, s.resolution) for o in model.registry.outputs
        }

    # ---------- helpers ----------

    def _crisp(self, inputs: InputVector) -> Tuple[Float, ...]:
        names = [v.name for v in self._inputs]
        if isinstance(inputs, Mapping):
            missing = [n for n in names if n not in inputs]
            extra = [k for k in inputs if k not in names]
            if missing or extra:
                raise DimensionMismatch(
                    f"Wejścia nie pasują do modelu: brak={missing}, nadmiarowe={extra}",
                    expected=len(names), got=len(inputs),
                )
            raw = [inputs[n] for n in names]
        elif isinstance(inputs, (str, bytes)) or not isinstance(inputs, Iterable):
            raise DimensionMismatch(
                f"Oczekiwano wektora {len(names)} wartości wejściowych, dostałem {inputs!r}",
                expected=len(names), got=1,
            )
        else:
            raw = list(inputs)
            if len(raw) != len(names):
                raise DimensionMismatch(
                    f"Oczekiwano {len(names)} wartości wejściowych ({', '.join(names)}), dostałem {len(raw)}",
                    expected=len(names), got=len(raw),
                )
        xs: List[Float] = []
        for var, v in zip(self._inputs, raw):
            try:
                x = float(v)
            except (TypeError, ValueError):
                raise EvaluationError(f"{var.name}: wartość nieliczbowa {v!r}") from None
            if math.isnan(x):
                raise EvaluationError(f"{var.name}: wartość NaN")
            # poza zakresem -> przycięcie do granicy, nie błąd
            xs.append(var.clamp(x))
        return tuple(xs)

    def _strengths(self, xs: Tuple[Float, ...]) -> List[Float]:
        index = {v.name: i for i, v in enumerate(self._inputs)}
        cache: Dict[Tuple[str, str], Float] = {}

        def degree(vname: str, label: str) -> Float:
            key = (vname, label)
            if key not in cache:
                i = index[vname]
                cache[key] = mf_evaluate(self._inputs[i].term(label), xs[i])
            return cache[key]

        out: List[Float] = []
        for rule in self._rules:
            if not rule.enabled or rule.weight == 0.0:
                out.append(0.0)
                continue
            mus = []
            for t in rule.antecedent:
                mu = degree(t.variable, t.label)
                mus.append(1.0 - mu if t.negated else mu)
            base = self.and_fn(mus) if rule.connective == AND else self.or_fn(mus)
            out.append(float(base) * rule.weight)
        return out

    def _aggregate(self, oname: str, strengths: Sequence[Float]) -> List[Float]:
        ovar = self.model.registry.output(oname)
        active = [(strengths[i], ovar.term(self._rules[i].consequent[1]))
                  for i in self._rules_by_output[oname] if strengths[i] > 0.0]
        if not active:
            return [0.0] * len(self._grids[oname])
        ws: List[Float] = []
        for y in self._grids[oname]:
            ws.append(self.agg_fn(self.imp_fn(a, mf_evaluate(mf, y)) for a, mf in active))
        return ws

    # ---------- API ----------

    def evaluate(self, inputs: InputVector, *, memberships: bool = False,
                 aggregates: bool = False) -> EvaluationResult:
        xs = self._crisp(inputs)
        strengths = self._strengths(xs)

        outputs: Dict[str, Float] = {}
        conditions: List[NoRuleFired] = []
        agg_samples: Dict[str, Tuple[Tuple[Float, Float], ...]] = {}
        for ovar in self.model.registry.outputs:
            ys = self._grids[ovar.name]
            ws = self._aggregate(ovar.name, strengths)
            if is_empty(ws):
                value = midpoint(ovar.vmin, ovar.vmax)
                conditions.append(NoRuleFired(ovar.name, value))
                log.debug("Żadna reguła nie odpaliła dla '%s' przy %s; zwracam %g", ovar.name, xs, value)
            else:
                value = float(self.defuzz_fn(ys, ws))
            outputs[ovar.name] = value
            if aggregates:
                agg_samples[ovar.name] = tuple(zip(ys, ws))

        snapshot = None
        if memberships:
            snapshot = {
                var.name: {label: mf_evaluate(mf, x) for label, mf in var.terms}
                for var, x in zip(self._inputs, xs)
            }
        log.debug("evaluate %s -> %s", xs, outputs)
        return EvaluationResult(
            inputs=xs,
            outputs=outputs,
            rule_strengths=tuple(strengths),
            conditions=tuple(conditions),
            memberships=snapshot,
            aggregates=agg_samples if aggregates else None,
        )


def evaluate(model: FuzzyModel, inputs: InputVector, *, memberships: bool = False,
             aggregates: bool = False) -> EvaluationResult:
    return MamdaniEngine(model).evaluate(inputs, memberships=memberships, aggregates=aggregates)


def mf_curve(model: FuzzyModel, variable: str, mf_name: str, sample_count: int = 101,
             role: Optional[str] = None) -> List[Tuple[Float, Float]]:
    """Próbki (x, μ(x)) etykiety na całym zakresie zmiennej (do wykresów MF)."""
    var = model.registry.variable(variable, role)
    return sample(var.term(mf_name), var.vmin, var.vmax, sample_count)
