import sys
from typing import Dict, List

from ..context import input_vector, model_from_args
from ...fuzzy.core.mfs import shape_name
from ...fuzzy.model.engine import evaluate


# ========= utils: ANSI / pretty =========

_RESET = "\x1b[0m"

def _use_ansi() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False

def _ansi_color(mu: float) -> str:
    """
    Kolor wg przynależności (μ):
      ≥ 0.50 → zielony
      ≥ 0.20 → żółty
      < 0.20 → szary
    """
    if not _use_ansi():
        return ""
    if mu >= 0.50:
        return "\x1b[32m"  # green
    if mu >= 0.20:
        return "\x1b[33m"  # yellow
    return "\x1b[90m"      # grey

def _mf_text(label: str, mf) -> str:
    params = " ".join(f"{p:g}" for p in mf.params())
    return f"{label}={shape_name(mf)}({params})"


# ========= main =========

def cmd_show(args) -> None:
    """
    Flagi:
      --model PATH / --preset NAME : model
      --at v=x ... / --at x y ...  : punkt do policzenia μ/α (opcjonalnie)
      --include-inactive           : pokaż również reguły wyłączone
      --fired-only                 : pokaż tylko reguły, które się „odpaliły” dla --at
      --min-alpha FLOAT            : próg α dla --fired-only (domyślnie 0.0)
    """
    model = model_from_args(args)

    at = getattr(args, "at", None)
    res = evaluate(model, input_vector(model, at), memberships=True) if at else None
    include_inactive = bool(getattr(args, "include_inactive", False))
    fired_only = bool(getattr(args, "fired_only", False))
    min_alpha = float(getattr(args, "min_alpha", 0.0))

    print(f"Model: {model.name}")

    # --- Inputs ---
    print("Inputs:")
    for var in model.inputs:
        if res is not None:
            mus: Dict[str, float] = res.memberships[var.name]
            parts: List[str] = []
            for lbl in var.labels:
                color = _ansi_color(mus[lbl])
                reset = _RESET if color else ""
                parts.append(f"{color}{lbl}({mus[lbl]:.2f}){reset}")
            print(f"  {var.name} [{var.vmin:g},{var.vmax:g}] -> " + ", ".join(parts))
        else:
            print(f"  {var.name} [{var.vmin:g},{var.vmax:g}] -> " + ", ".join(_mf_text(l, mf) for l, mf in var.terms))

    # --- Outputs ---
    print("Outputs:")
    for var in model.outputs:
        value = f" = {res.outputs[var.name]:.6g}" if res is not None else ""
        print(f"  {var.name} [{var.vmin:g},{var.vmax:g}]{value} -> " + ", ".join(_mf_text(l, mf) for l, mf in var.terms))

    # --- Rules ---
    s = model.settings
    print(f"Engine: and={s.and_method}, or={s.or_method}, implication={s.implication}, "
          f"aggregation={s.aggregation}, defuzz={s.defuzz}, resolution={s.resolution}")
    print("Rules:")

    shown = 0
    for i, r in enumerate(model.rules, 1):
        # filtr aktywności
        if not include_inactive and not r.enabled:
            continue

        # filtr fired-only (wymaga --at; jeśli brak --at, nie filtrujemy po α)
        alpha_val = res.rule_strengths[i - 1] if res is not None else None
        if fired_only and alpha_val is not None and (alpha_val <= 0.0 or alpha_val < min_alpha):
            continue

        suffix = ""
        if not r.enabled:
            suffix += " [inactive]"
        if alpha_val is not None:
            suffix += f"  α={alpha_val:.4f}"

        print(f"  R{i}: {r} (w={r.weight:g}){suffix}")
        shown += 1

    if shown == 0:
        print("  (brak reguł do wyświetlenia z tymi filtrami)")
