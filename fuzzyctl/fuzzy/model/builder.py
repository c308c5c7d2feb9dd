"""
Budowa modelu: specyfikacje zmiennych i reguł (zwykłe dict/list) -> `build_model`
-> niemutowalny `FuzzyModel`. Błąd na dowolnym etapie przerywa budowę w całości.

Specyfikacja zmiennej:
    {"name": "Temperature", "role": "input", "range": [15, 35],
     "terms": [{"name": "Cold", "shape": "trap", "params": [15, 15, 18, 22]}, ...]}

Specyfikacja reguły (dict albo tekst, patrz io/rule_text.py):
    {"if": [["Temperature", "Cold"], ["Humidity", "Dry"]], "connective": "and",
     "then": ["Cooling_Power", "Low"], "weight": 1.0, "enabled": True}
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
import logging

from .knowledge import EngineSettings, FuzzyModel, RuleBase, VariableRegistry
from .variable import Variable, INPUT, OUTPUT, ROLES
from ..core.mfs import make_mf
from ..core.rule import AND, OR, Rule, Term
from ..core.types import ValidationError
from ..io.rule_text import parse_rule_text

log = logging.getLogger(__name__)

VariableSpec = Union[Mapping[str, Any], Variable]
RuleSpec = Union[Mapping[str, Any], str, Rule]


# ---------- zmienne ----------

def _term_items(terms: Any) -> Iterable[tuple]:
    """Etykiety jako lista dictów albo mapa label -> {shape, params} / [shape, *params]."""
    if isinstance(terms, Mapping):
        for label, t in terms.items():
            if isinstance(t, Mapping):
                yield label, t.get("shape"), t.get("params", ())
            else:
                yield label, t[0], t[1:]
        return
    for t in terms or ():
        if not isinstance(t, Mapping):
            raise ValidationError(f"MF: oczekiwano mapy {{name, shape, params}}, dostałem {t!r}")
        label = t.get("name", t.get("label"))
        if label is None:
            raise ValidationError(f"MF: brak nazwy etykiety w {dict(t)!r}")
        yield label, t.get("shape"), t.get("params", ())


def variable_from_spec(spec: VariableSpec) -> Variable:
    if isinstance(spec, Variable):
        return spec
    try:
        name = spec["name"]
    except KeyError:
        raise ValidationError(f"var: brak pola 'name' w {dict(spec)!r}") from None
    role = str(spec.get("role", INPUT)).lower()
    if role not in ROLES:
        raise ValidationError(f"var {name}: nieznana rola '{role}' (input|output)", name=name)
    if "range" in spec:
        rng = spec["range"]
        if len(rng) != 2:
            raise ValidationError(f"var {name}: range wymaga [vmin, vmax]", name=name)
        vmin, vmax = rng
    else:
        vmin, vmax = spec.get("vmin"), spec.get("vmax")
    try:
        vmin, vmax = float(vmin), float(vmax)
    except (TypeError, ValueError):
        raise ValidationError(f"var {name}: zakres musi być liczbowy ({vmin!r}, {vmax!r})", name=name) from None

    var = Variable(name, vmin, vmax, role=role)
    for label, shape, params in _term_items(spec.get("terms", ())):
        var = var.with_term(label, make_mf(shape, params))
    return var


# ---------- reguły ----------

def _term_from_spec(t: Any) -> Term:
    if isinstance(t, Term):
        return t
    if isinstance(t, Mapping):
        var = t.get("variable", t.get("var"))
        label = t.get("label", t.get("is"))
        negated = bool(t.get("not", False))
    elif isinstance(t, (list, tuple)) and len(t) in (2, 3):
        var, label = t[0], t[1]
        negated = bool(t[2]) if len(t) == 3 else False
    else:
        raise ValidationError(f"Rule: niepoprawny warunek {t!r} (oczekiwano [var, label])")
    if var is None or label is None:
        raise ValidationError(f"Rule: niepoprawny warunek {t!r}")
    return Term(str(var), str(label), negated)


def rule_from_spec(spec: RuleSpec) -> Rule:
    if isinstance(spec, Rule):
        return spec
    if isinstance(spec, str):
        spec = parse_rule_text(spec)
    ante = spec.get("if", spec.get("antecedent"))
    cons = spec.get("then", spec.get("consequent"))
    if not ante or cons is None:
        raise ValidationError(f"Rule: wymagane pola 'if' i 'then' w {dict(spec)!r}")
    if len(cons) != 2:
        raise ValidationError(f"Rule: consequent wymaga [ovar, label], dostałem {cons!r}")
    try:
        weight = float(spec.get("weight", 1.0))
    except (TypeError, ValueError):
        raise ValidationError(f"Rule: niepoprawna waga {spec.get('weight')!r}") from None
    return Rule(
        antecedent=tuple(_term_from_spec(t) for t in ante),
        consequent=(str(cons[0]), str(cons[1])),
        connective=str(spec.get("connective", AND)).lower(),
        weight=weight,
        enabled=bool(spec.get("enabled", spec.get("active", True))),
    )


# ---------- API ----------

def build_model(variable_specs: Iterable[VariableSpec],
                rule_specs: Iterable[RuleSpec],
                *,
                name: str = "fis",
                settings: Union[EngineSettings, Mapping[str, Any], None] = None) -> FuzzyModel:
    registry = VariableRegistry()
    for spec in variable_specs:
        registry.add(variable_from_spec(spec))
    if not registry.inputs:
        raise ValidationError("Brak zmiennych wejściowych (role: input)")
    if not registry.outputs:
        raise ValidationError("Brak zmiennych wyjściowych (role: output)")

    rules = RuleBase(registry)
    for idx, spec in enumerate(rule_specs, 1):
        try:
            rules.append(rule_from_spec(spec))
        except ValidationError as e:
            log.debug("Reguła R%d odrzucona: %s", idx, e)
            raise

    if not isinstance(settings, EngineSettings):
        settings = EngineSettings.from_dict(settings)

    registry.freeze()
    rules.freeze()
    log.info("Model '%s': inputs=%d, outputs=%d, rules=%d",
             name, len(registry.inputs), len(registry.outputs), len(rules))
    return FuzzyModel(name=name, registry=registry, rules=rules, settings=settings)


class ModelBuilder:
    """
    Akumuluje specyfikacje, a dopiero `build()` tworzy (i waliduje) model:

        model = (ModelBuilder("Temperature_Controller")
                 .input("Temperature", 15, 35)
                 .term("Temperature", "Cold", "trap", 15, 15, 18, 22)
                 ...
                 .rule("IF Temperature is Cold AND Humidity is Dry THEN Cooling_Power is Low")
                 .build())
    """

    def __init__(self, name: str = "fis") -> None:
        self.name = name
        self.variables: List[Dict[str, Any]] = []
        self.rules: List[RuleSpec] = []
        self.settings: Dict[str, Any] = {}

    def _spec(self, var: str, role: Optional[str] = None) -> Dict[str, Any]:
        # ostatnio dodana zmienna o tej nazwie (w danej roli)
        for spec in reversed(self.variables):
            if spec["name"] == var and (role is None or spec["role"] == role):
                return spec
        raise ValidationError(f"MF dla nieznanej zmiennej: {var}", name=var)

    def input(self, name: str, vmin: float, vmax: float) -> "ModelBuilder":
        self.variables.append({"name": name, "role": INPUT, "range": [vmin, vmax], "terms": []})
        return self

    def output(self, name: str, vmin: float, vmax: float) -> "ModelBuilder":
        self.variables.append({"name": name, "role": OUTPUT, "range": [vmin, vmax], "terms": []})
        return self

    def term(self, var: str, label: str, shape: str, *params: float, role: Optional[str] = None) -> "ModelBuilder":
        self._spec(var, role)["terms"].append({"name": label, "shape": shape, "params": list(params)})
        return self

    def rule(self, spec: RuleSpec) -> "ModelBuilder":
        self.rules.append(spec)
        return self

    def configure(self, **settings: Any) -> "ModelBuilder":
        self.settings.update(settings)
        return self

    def build(self) -> FuzzyModel:
        return build_model(self.variables, self.rules, name=self.name, settings=self.settings)


def rules_from_matrix(variable_specs: Iterable[VariableSpec],
                      rows: Iterable[Sequence[float]]) -> List[Dict[str, Any]]:
    """
    Lista reguł w formacie macierzowym: [in_1..in_n, out_1..out_m, weight, connective].
    Indeksy MF liczone od 1, 0 = zmienna nieużyta, ujemny = negacja;
    connective 1 = AND, 2 = OR. Każdy wiersz musi wskazywać dokładnie jedno wyjście.
    """
    variables = [variable_from_spec(s) for s in variable_specs]
    ins = [v for v in variables if v.role == INPUT]
    outs = [v for v in variables if v.role == OUTPUT]
    width = len(ins) + len(outs) + 2

    specs: List[Dict[str, Any]] = []
    for rno, row in enumerate(rows, 1):
        row = list(row)
        if len(row) != width:
            raise ValidationError(f"Wiersz reguły {rno}: oczekiwano {width} kolumn, dostałem {len(row)}")
        ante = []
        for var, idx in zip(ins, row[:len(ins)]):
            idx = int(idx)
            if idx == 0:
                continue
            ante.append([var.name, _label_at(var, abs(idx), rno), idx < 0])
        targets = [(var, int(idx)) for var, idx in zip(outs, row[len(ins):len(ins) + len(outs)]) if int(idx) != 0]
        if len(targets) != 1 or targets[0][1] < 0:
            raise ValidationError(f"Wiersz reguły {rno}: wymagane dokładnie jedno (niezanegowane) wyjście")
        ovar, oidx = targets[0]
        weight, conn = row[-2], int(row[-1])
        if conn not in (1, 2):
            raise ValidationError(f"Wiersz reguły {rno}: connective 1 (AND) albo 2 (OR), dostałem {conn}")
        specs.append({
            "if": ante,
            "connective": AND if conn == 1 else OR,
            "then": [ovar.name, _label_at(ovar, oidx, rno)],
            "weight": float(weight),
        })
    return specs


def _label_at(var: Variable, idx: int, rno: int) -> str:
    if idx > len(var.terms):
        raise ValidationError(f"Wiersz reguły {rno}: '{var.name}' nie ma MF nr {idx}", name=var.name)
    return var.terms[idx - 1][0]
