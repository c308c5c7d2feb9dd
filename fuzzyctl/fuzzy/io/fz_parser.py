"""
Gramatyka (skrót):
  name <model_name>
  var (input|output) <name> <vmin> <vmax>
  mf  <var> <label> (tri a b c | trap a b c d | gauss mean sigma)
  rule IF <v> is [not] <L> ((AND|OR) <v> is [not] <L>)* THEN <ovar> is <OL> [weight w] [inactive]
  rule <v>==<L> & <v>==<L> => <ovar>=<OL> (w)       # styl MATLAB-a
  and <min|prod>            (alias: tnorm)
  or  <max|prob>            (alias: snorm)
  implication <min|prod>
  aggregation <max|sum|prob>
  defuzz <centroid|bisector|mom|som|lom> [n N]

Uwagi:
- Słowa kluczowe bezwzględnie case-insensitive; nazwy zmiennych i etykiet MF – case-sensitive.
- `mf` odnosi się do ostatnio zadeklarowanej zmiennej o tej nazwie.
- Reguły walidowane PO wczytaniu całego pliku (sprawdzamy istnienie zmiennych i etykiet).
"""

from __future__ import annotations
from typing import Any, Dict, List, Tuple
import logging

from .rule_text import RuleSyntaxError, lex, parse_rule_text, parse_rule_tokens
from ..core import norms
from ..core.defuzz import DEFUZZ
from ..core.mfs import make_mf
from ..core.rule import Rule
from ..core.types import ValidationError
from ..model.builder import build_model, rule_from_spec, variable_from_spec
from ..model.knowledge import FuzzyModel, RuleBase, VariableRegistry

log = logging.getLogger(__name__)


class FZParseError(ValidationError):
    def __init__(self, msg: str, line: int, content: str, name=None):
        super().__init__(f"[.fz:{line}] {msg}\n  >> {content}", name=name)
        self.msg = msg
        self.line = line
        self.content = content

    def __reduce__(self):
        return (type(self), (self.msg, self.line, self.content, self.name))


# dyrektywa -> (klucz EngineSettings, dozwolone wartości)
_ENGINE_DIRECTIVES = {
    "and": ("and_method", norms.TNORMS),
    "tnorm": ("and_method", norms.TNORMS),
    "or": ("or_method", norms.SNORMS),
    "snorm": ("or_method", norms.SNORMS),
    "implication": ("implication", norms.IMPLICATIONS),
    "aggregation": ("aggregation", norms.AGGREGATIONS),
}


def parse_fz(path: str) -> FuzzyModel:
    with open(path, "r", encoding="utf-8") as f:
        src = f.read()
    return parse_fz_string(src)


def parse_fz_string(source: str) -> FuzzyModel:
    lines = source.splitlines()
    name = "fis"
    variables: List[Dict[str, Any]] = []
    pending_rules: List[Tuple[int, str, Rule]] = []
    settings: Dict[str, Any] = {}

    for lineno, raw in enumerate(lines, 1):
        try:
            tokens = lex(raw)
        except RuleSyntaxError as e:
            raise FZParseError(str(e), lineno, raw) from e
        if not tokens:
            continue
        head = tokens[0].lower()

        try:
            if head == "name":
                if len(tokens) < 2:
                    raise FZParseError("name: oczekiwano: name <nazwa>", lineno, raw)
                name = tokens[1]

            elif head == "var":
                # var input|output name vmin vmax
                if len(tokens) < 5:
                    raise FZParseError("var: oczekiwano: var (input|output) <name> <vmin> <vmax>", lineno, raw)
                kind = tokens[1].lower()
                if kind not in ("input", "output"):
                    raise FZParseError(f"Unknown var kind: {kind}", lineno, raw)
                if any(v["name"] == tokens[2] and v["role"] == kind for v in variables):
                    raise FZParseError(f"Duplikat zmiennej ({kind}): {tokens[2]}", lineno, raw, name=tokens[2])
                variables.append({
                    "name": tokens[2], "role": kind,
                    "range": [float(tokens[3]), float(tokens[4])], "terms": [],
                })
                # zakres sprawdzany od razu, żeby błąd wskazał właściwą linię
                variable_from_spec(variables[-1])

            elif head == "mf":
                # mf vname label shape ...
                if len(tokens) < 5:
                    raise FZParseError("mf: oczekiwano: mf <var> <label> <shape> [params...]", lineno, raw)
                vname, label, shape = tokens[1], tokens[2], tokens[3]
                target = next((v for v in reversed(variables) if v["name"] == vname), None)
                if target is None:
                    raise FZParseError(f"MF dla nieznanej zmiennej: {vname}", lineno, raw, name=vname)
                if any(t["name"] == label for t in target["terms"]):
                    raise FZParseError(f"Duplikat etykiety MF '{label}' w zmiennej '{vname}'", lineno, raw, name=label)
                make_mf(shape, tokens[4:])
                target["terms"].append({"name": label, "shape": shape, "params": [float(p) for p in tokens[4:]]})

            elif head == "rule":
                body = tokens[1:]
                if "=>" in raw:
                    spec = parse_rule_text(raw.split(None, 1)[1])
                else:
                    spec = parse_rule_tokens(body)
                pending_rules.append((lineno, raw, rule_from_spec(spec)))

            elif head in _ENGINE_DIRECTIVES:
                key, table = _ENGINE_DIRECTIVES[head]
                if len(tokens) < 2:
                    raise FZParseError(f"{head}: podaj nazwę ({'|'.join(table)})", lineno, raw)
                value = tokens[1].lower()
                if value not in table:
                    raise FZParseError(f"{head}: nieobsługiwane '{value}'", lineno, raw)
                settings[key] = value

            elif head == "defuzz":
                if len(tokens) < 2:
                    raise FZParseError(f"defuzz: podaj metodę ({'|'.join(DEFUZZ)})", lineno, raw)
                method = tokens[1].lower()
                if method not in DEFUZZ:
                    raise FZParseError(f"Supported defuzz: {' | '.join(DEFUZZ)}", lineno, raw)
                settings["defuzz"] = method
                if len(tokens) >= 3:
                    if tokens[2].lower() != "n" or len(tokens) < 4:
                        raise FZParseError("defuzz: oczekiwano '<metoda> n N'", lineno, raw)
                    n = int(tokens[3])
                    if n < 2:
                        raise FZParseError("defuzz n: N>1 wymagane", lineno, raw)
                    settings["resolution"] = n

            else:
                raise FZParseError(f"Unknown directive: {tokens[0]}", lineno, raw)

        except FZParseError:
            raise
        except ValidationError as e:
            raise FZParseError(str(e), lineno, raw, name=e.name) from e
        except (ValueError, IndexError) as e:
            # opakuj błąd w FZParseError z kontekstem
            raise FZParseError(str(e), lineno, raw) from e

    # Walidacja reguł (z numerem linii) przed złożeniem modelu
    registry = VariableRegistry()
    for spec in variables:
        try:
            registry.add(variable_from_spec(spec))
        except ValidationError as e:
            raise FZParseError(str(e), len(lines), "<eof>", name=e.name) from e
    if not registry.outputs:
        raise FZParseError("Brak zmiennych wyjściowych (var output ...)", len(lines), "<eof>")
    check = RuleBase(registry)
    for rlineno, rraw, rule in pending_rules:
        try:
            check.append(rule)
        except ValidationError as e:
            raise FZParseError(str(e), rlineno, rraw, name=e.name) from e

    model = build_model(variables, [r for _, _, r in pending_rules], name=name, settings=settings)
    log.debug("Wczytano .fz '%s' (%d linii)", name, len(lines))
    return model
