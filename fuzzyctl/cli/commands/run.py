from argparse import ArgumentTypeError, Namespace
import logging

from .curve import cmd_curve
from .explain import cmd_explain
from .points import cmd_points
from .predict import cmd_predict
from .show import cmd_show
from .sweep import cmd_sweep
from .trace import cmd_trace
from .validate import cmd_validate
from ...fuzzy.core.types import ValidationError
from ...fuzzy.io.loader import load_config
from ..argtypes import grid_points, parse_kv_list, positive_int

log = logging.getLogger(__name__)

# kolejność wykonania sekcji pipeline'u
STEPS = (
    ("validate", cmd_validate),
    ("show", cmd_show),
    ("predict", cmd_predict),
    ("explain", cmd_explain),
    ("curve", cmd_curve),
    ("points", cmd_points),
    ("sweep", cmd_sweep),
    ("trace", cmd_trace),
)


# klucz sekcji -> typ argumentu z parsera
_CONVERTERS = {
    "points": grid_points,
    "fixed": parse_kv_list,
    "samples": positive_int,
    "workers": positive_int,
}


def _ns(defaults: dict, section) -> Namespace:
    d = dict(defaults)
    d.update(section or {})
    # tekstowe wartości przechodzą przez te same konwertery co w CLI
    for key, conv in _CONVERTERS.items():
        if isinstance(d.get(key), str):
            try:
                d[key] = conv(d[key])
            except ArgumentTypeError as e:
                raise ValidationError(f"{key}: {e}", name=key) from None
    # wartości wejść mogą przyjść jako liczby (YAML/JSON)
    if "values" in d:
        d["values"] = [str(v) for v in d["values"]]
    if "at" in d and d["at"] is not None:
        d["at"] = [str(v) for v in d["at"]]
    return Namespace(**d)


def cmd_run(args):
    cfg = load_config(args.config)

    project = cfg.get("project") or {}
    defaults = {
        "model": cfg.get("model", project.get("model")),
        "preset": cfg.get("preset", project.get("preset")),
    }
    # silnik jako wspólne nadpisanie dla wszystkich sekcji
    defaults.update((project.get("engine") or cfg.get("engine") or {}))
    if not defaults["model"] and not defaults["preset"]:
        raise ValidationError(f"{args.config}: podaj 'model' albo 'preset'")

    unknown = set(cfg) - {name for name, _ in STEPS} - {"model", "preset", "project", "engine"}
    if unknown:
        raise ValidationError(f"{args.config}: nieznane sekcje {sorted(unknown)}")

    for name, fn in STEPS:
        if name in cfg:
            print(f"[run] {name}")
            log.info("run: %s", name)
            fn(_ns(defaults, cfg[name]))
