"""
Opisy modeli w JSON/YAML oraz wybór formatu po rozszerzeniu pliku.

    name: Temperature_Controller
    settings: {defuzz: centroid, resolution: 101}
    variables:
      - {name: Temperature, role: input, range: [15, 35], terms: [...]}
    rules:
      - "IF Temperature is Cold AND Humidity is Dry THEN Cooling_Power is Low"
      - {if: [[Temperature, Hot]], then: [Cooling_Power, High], weight: 0.5}
    rule_matrix:            # opcjonalnie, zamiast/obok 'rules'
      - [1, 1, 1, 1, 1]
"""
from __future__ import annotations
from typing import Any, Dict, Mapping
import json
import logging

import yaml

from .fz_parser import parse_fz
from ..core.types import ValidationError
from ..model.builder import build_model, rules_from_matrix
from ..model.knowledge import FuzzyModel

log = logging.getLogger(__name__)

_YAML_EXT = (".yml", ".yaml")


def load_config(path: str) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        if path.lower().endswith(_YAML_EXT):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: oczekiwano mapy na najwyższym poziomie")
    return data


def model_from_dict(d: Mapping[str, Any]) -> FuzzyModel:
    variables = d.get("variables")
    if not variables:
        raise ValidationError("Opis modelu: brak sekcji 'variables'")
    rules = list(d.get("rules") or [])
    if d.get("rule_matrix"):
        rules.extend(rules_from_matrix(variables, d["rule_matrix"]))
    return build_model(variables, rules, name=str(d.get("name", "fis")), settings=d.get("settings"))


def load_model(path: str) -> FuzzyModel:
    """.fz -> parser tekstowy; .json/.yaml/.yml -> opis słownikowy."""
    low = path.lower()
    if low.endswith(".fz"):
        model = parse_fz(path)
    elif low.endswith(_YAML_EXT + (".json",)):
        model = model_from_dict(load_config(path))
    else:
        raise ValidationError(f"Nieznany format modelu: {path} (obsługiwane: .fz, .json, .yaml, .yml)")
    log.info("Wczytano model '%s' z %s", model.name, path)
    return model
