from dataclasses import dataclass
from typing import Tuple
from .types import Float, ValidationError

AND = "and"
OR = "or"
CONNECTIVES = (AND, OR)


@dataclass(frozen=True)
class Term:
    variable: str
    label: str
    negated: bool = False

    def __str__(self) -> str:
        return f"{self.variable} is {'not ' if self.negated else ''}{self.label}"


@dataclass(frozen=True)
class Rule:
    antecedent: Tuple[Term, ...]
    consequent: Tuple[str, str]  # (output_var, label)
    connective: str = AND
    weight: Float = 1.0
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.antecedent:
            raise ValidationError("Rule: pusty antecedent", name=self.consequent[0])
        if self.connective not in CONNECTIVES:
            raise ValidationError(f"Rule: nieznany spójnik '{self.connective}' (dozwolone: and|or)")
        if not (0.0 <= self.weight <= 1.0):
            raise ValidationError(f"Rule: waga poza [0,1]: {self.weight}")

    def __str__(self) -> str:
        joiner = f" {self.connective.upper()} "
        ants = joiner.join(str(t) for t in self.antecedent)
        return f"IF {ants} THEN {self.consequent[0]} is {self.consequent[1]}"
