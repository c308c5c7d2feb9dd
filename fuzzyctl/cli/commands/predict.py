from ..context import fmt, input_vector, model_from_args
from ...fuzzy.model.engine import evaluate


def cmd_predict(args):
    model = model_from_args(args)
    res = evaluate(model, input_vector(model, args.values))
    for oname, val in res.outputs.items():
        print(f"{oname}: {fmt(val)}")
    for cond in res.conditions:
        print(f"  (NoRuleFired: {cond.output} -> środek zakresu {fmt(cond.value)})")
