from ..context import model_from_args


def cmd_validate(args):
    model = model_from_args(args)
    s = model.settings
    print(f"OK: {model.name}: inputs={len(model.inputs)}, outputs={len(model.outputs)}, rules={len(model.rules)}")
    print(f"and={s.and_method}, or={s.or_method}, implication={s.implication}, "
          f"aggregation={s.aggregation}, defuzz={s.defuzz}, resolution={s.resolution}")
