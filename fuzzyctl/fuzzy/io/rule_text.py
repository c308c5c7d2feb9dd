"""
Reguły zapisane tekstem. Dwie składnie:

  IF <v> is [not] <L> ((AND|OR) <v> is [not] <L>)* THEN <ovar> is <OL> [weight w] [inactive]
  <v>==<L> (& | |) <v>~=<L> ... => <ovar>=<OL> (w)          # styl MATLAB-a

Wynik to słownik (rule spec) rozumiany przez `build_model`.
Mieszanie AND i OR w jednej regule nie jest wspierane.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import re
import shlex

from ..core.rule import AND, OR
from ..core.types import ValidationError


class RuleSyntaxError(ValidationError):
    pass


_MATLAB_WEIGHT = re.compile(r"\(\s*([^()]*?)\s*\)\s*$")


def lex(raw: str) -> List[str]:
    """Tokenizuj linię: wspiera komentarze '#' i cudzysłowy."""
    lx = shlex.shlex(raw, posix=True)
    lx.whitespace_split = True
    lx.commenters = "#"
    try:
        return list(lx)
    except ValueError as e:
        raise RuleSyntaxError(f"Niepoprawny cudzysłów: {e}") from e


def parse_rule_text(text: str) -> Dict[str, Any]:
    if "=>" in text:
        return _parse_matlab(text)
    return parse_rule_tokens(lex(text))


def parse_rule_tokens(words: List[str]) -> Dict[str, Any]:
    if not words or words[0].lower() != "if":
        raise RuleSyntaxError("Rule must start with IF")
    try:
        then_idx = next(i for i, t in enumerate(words) if t.lower() == "then")
    except StopIteration:
        raise RuleSyntaxError("Rule missing THEN") from None

    cond = words[1:then_idx]
    cons = words[then_idx + 1:]

    # antecedent: v is [not] L [(AND|OR) v is [not] L]*
    ante: List[List[Any]] = []
    connective: Optional[str] = None
    i = 0
    while i < len(cond):
        if i + 2 >= len(cond) or cond[i + 1].lower() != "is":
            raise RuleSyntaxError("Antecedent: oczekiwano '<var> is <label>'")
        vname = cond[i]
        negated = cond[i + 2].lower() == "not"
        if negated:
            if i + 3 >= len(cond):
                raise RuleSyntaxError("Antecedent: oczekiwano etykiety po 'is not'")
            label = cond[i + 3]
            i += 4
        else:
            label = cond[i + 2]
            i += 3
        ante.append([vname, label, negated])
        if i < len(cond):
            op = cond[i].lower()
            if op not in (AND, OR):
                raise RuleSyntaxError("Antecedent: spodziewano 'AND'/'OR' lub koniec")
            if connective is not None and op != connective:
                raise RuleSyntaxError("Antecedent: mieszanie AND i OR w jednej regule nie jest wspierane")
            connective = op
            i += 1
            if i >= len(cond):
                raise RuleSyntaxError(f"Antecedent: brak warunku po '{cond[i - 1]}'")
    if not ante:
        raise RuleSyntaxError("Antecedent: pusty warunek")

    # consequent: <ovar> is <olabel> [weight w] [inactive]
    if len(cons) < 3 or cons[1].lower() != "is":
        raise RuleSyntaxError("Consequent: oczekiwano '<ovar> is <label>'")
    weight = 1.0
    enabled = True
    i = 3
    while i < len(cons):
        tok = cons[i].lower()
        if tok == "weight":
            if i + 1 >= len(cons):
                raise RuleSyntaxError("Consequent: oczekiwano 'weight <w>'")
            weight = _weight(cons[i + 1]); i += 2
        elif tok == "inactive":
            enabled = False; i += 1
        else:
            raise RuleSyntaxError(f"Consequent: nieznana opcja '{cons[i]}'")

    return {
        "if": ante,
        "connective": connective or AND,
        "then": [cons[0], cons[2]],
        "weight": weight,
        "enabled": enabled,
    }


def _weight(tok: str) -> float:
    try:
        return float(tok)
    except ValueError:
        raise RuleSyntaxError(f"Niepoprawna waga: '{tok}'") from None


def _parse_matlab(text: str) -> Dict[str, Any]:
    lhs, rhs = text.split("=>", 1)
    rhs = rhs.strip()
    weight = 1.0
    m = _MATLAB_WEIGHT.search(rhs)
    if m:
        weight = _weight(m.group(1))
        rhs = rhs[:m.start()].strip()

    if "==" in rhs:
        oname, olabel = rhs.split("==", 1)
    elif "=" in rhs:
        oname, olabel = rhs.split("=", 1)
    else:
        raise RuleSyntaxError(f"Consequent: oczekiwano '<ovar>=<label>', dostałem '{rhs}'")
    oname, olabel = oname.strip(), olabel.strip()
    if not oname or not olabel:
        raise RuleSyntaxError(f"Consequent: pusta nazwa w '{rhs}'")

    has_and = "&" in lhs
    has_or = "|" in lhs
    if has_and and has_or:
        raise RuleSyntaxError("Antecedent: mieszanie '&' i '|' w jednej regule nie jest wspierane")
    connective = OR if has_or else AND
    parts = lhs.split("|" if has_or else "&")

    ante: List[List[Any]] = []
    for part in parts:
        part = part.strip()
        if "~=" in part:
            vname, label = part.split("~=", 1)
            negated = True
        elif "==" in part:
            vname, label = part.split("==", 1)
            negated = False
        else:
            raise RuleSyntaxError(f"Antecedent: oczekiwano '<var>==<label>', dostałem '{part}'")
        vname, label = vname.strip(), label.strip()
        if not vname or not label:
            raise RuleSyntaxError(f"Antecedent: pusta nazwa w '{part}'")
        ante.append([vname, label, negated])

    return {
        "if": ante,
        "connective": connective,
        "then": [oname, olabel],
        "weight": weight,
        "enabled": True,
    }
