import json

from ..context import input_vector, model_from_args
from ...fuzzy.model.engine import evaluate


def explain_dict(model, res, threshold: float = 0.0):
    rules = []
    for i, (rule, alpha) in enumerate(zip(model.rules, res.rule_strengths), 1):
        if alpha < threshold:
            continue
        rules.append({
            "rule_index": i,
            "antecedent": [
                {"var": t.variable, "label": t.label, "not": t.negated,
                 "mu": res.memberships[t.variable][t.label]}
                for t in rule.antecedent
            ],
            "connective": rule.connective,
            "consequent": {"var": rule.consequent[0], "label": rule.consequent[1]},
            "weight": rule.weight,
            "enabled": rule.enabled,
            "alpha": alpha,
        })
    return {
        "inputs": dict(zip(model.input_names, res.inputs)),
        "outputs": dict(res.outputs),
        "fired": res.fired,
        "no_rule_fired": [c.output for c in res.conditions],
        "rules": rules,
    }


def cmd_explain(args):
    model = model_from_args(args)
    res = evaluate(model, input_vector(model, args.values), memberships=True)
    data = explain_dict(model, res, threshold=getattr(args, "threshold", 0.0))
    if getattr(args, "json", False):
        print(json.dumps(data, indent=2))
        return
    for oname, val in data["outputs"].items():
        flag = "" if oname not in data["no_rule_fired"] else "  [NoRuleFired]"
        print(f"Output: {oname} = {val:.6g}{flag}")
    for r in data["rules"]:
        joiner = f" {r['connective'].upper()} "
        ants = joiner.join(
            f"{a['var']} is {'not ' if a['not'] else ''}{a['label']} (μ={a['mu']:.3f})" for a in r["antecedent"]
        )
        print(f"  R{r['rule_index']}: IF {ants} THEN {r['consequent']['var']} is {r['consequent']['label']}"
              f"  alpha={r['alpha']:.4f} weight={r['weight']}")
