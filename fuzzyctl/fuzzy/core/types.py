from typing import Optional

Float = float


class FuzzyError(Exception):
    """Domain error for fuzzy framework."""


# ---------- błędy budowy modelu ----------

class ValidationError(FuzzyError):
    """Model nie przeszedł walidacji; `name` wskazuje winowajcę (o ile jest znany)."""

    def __init__(self, msg: str, name: Optional[str] = None):
        super().__init__(msg)
        self.name = name

    def __reduce__(self):
        return (type(self), (str(self), self.name))


class InvalidShape(ValidationError):
    pass


class DuplicateName(ValidationError):
    pass


class UnknownVariable(ValidationError):
    pass


class UnknownMF(ValidationError):
    pass


class UnknownReference(ValidationError):
    pass


class FrozenModel(ValidationError):
    pass


# ---------- błędy ewaluacji ----------

class EvaluationError(FuzzyError):
    pass


class DimensionMismatch(EvaluationError):
    def __init__(self, msg: str, expected: int, got: int):
        super().__init__(msg)
        self.expected = expected
        self.got = got

    def __reduce__(self):
        # wyjątek przechodzi przez granicę procesu (batch z workers)
        return (type(self), (str(self), self.expected, self.got))
