import argparse
from ..argtypes import (
    parse_kv_list, positive_int, grid_points,
    AND_CHOICES, OR_CHOICES, IMPLICATION_CHOICES, AGGREGATION_CHOICES,
    DEFUZZ_CHOICES, LOG_LEVELS,
)
# importy komend:
from .validate import cmd_validate
from .show import cmd_show
from .predict import cmd_predict
from .explain import cmd_explain
from .curve import cmd_curve
from .sweep import cmd_sweep
from .trace import cmd_trace
from .points import cmd_points
from .run import cmd_run
from ...fuzzy.model.presets import PRESETS


def _model_args(sp, engine: bool = True):
    g = sp.add_argument_group("Model")
    src = g.add_mutually_exclusive_group(required=True)
    src.add_argument("--model", help="plik modelu (.fz | .json | .yaml)")
    src.add_argument("--preset", choices=sorted(PRESETS), help="wbudowany sterownik przykładowy")
    if not engine:
        return
    e = sp.add_argument_group("Silnik (nadpisuje ustawienia modelu)")
    e.add_argument("--and", dest="and_method", choices=AND_CHOICES)
    e.add_argument("--or", dest="or_method", choices=OR_CHOICES)
    e.add_argument("--implication", choices=IMPLICATION_CHOICES)
    e.add_argument("--aggregation", choices=AGGREGATION_CHOICES)
    e.add_argument("--defuzz", choices=DEFUZZ_CHOICES)
    e.add_argument("--resolution", type=positive_int, help="liczba próbek dziedziny wyjścia")


def build_parser():
    fmt = argparse.ArgumentDefaultsHelpFormatter
    ap = argparse.ArgumentParser(
        prog="mamdani",
        description="Mamdani fuzzy CLI – ewaluacja sterownika rozmytego (punkt, siatka, przebieg czasowy)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Przykłady:\n"
            "  mamdani validate --model cooling.fz\n"
            "  mamdani show --preset temperature --at Temperature=25 Humidity=60 --fired-only\n"
            "  mamdani predict --model cooling.fz 25 60\n"
            "  mamdani explain --model cooling.yaml Temperature=15 Humidity=30 --json\n"
            "  mamdani curve --preset temperature --var Humidity --samples 201\n"
            "  mamdani sweep --preset temperature --points 50 --strengths --out surface.csv\n"
            "  mamdani trace --model cooling.fz --csv profile.csv --out response.csv\n"
            "  mamdani run --config pipeline.yaml\n"
        ),
    )
    ap.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v = INFO, -vv = DEBUG")

    sub = ap.add_subparsers(dest="cmd", required=True)

    # validate
    sp_v = sub.add_parser("validate", help="Walidacja spójności modelu", formatter_class=fmt)
    _model_args(sp_v)
    sp_v.set_defaults(func=cmd_validate)

    # show
    sp_s = sub.add_parser("show", help="Pokaż model/MF/reguły; opcj. wartości w punkcie", formatter_class=fmt)
    _model_args(sp_s)
    sp_s.add_argument("--at", nargs="*", help="punkt: liczby w kolejności wejść albo var=wartość")
    sp_s.add_argument("--include-inactive", action="store_true", help="Pokaż również reguły inactive")
    sp_s.add_argument("--fired-only", action="store_true", help="Pokaż tylko reguły, które się odpaliły dla --at")
    sp_s.add_argument("--min-alpha", type=float, default=0.0, help="Próg α dla --fired-only")
    sp_s.set_defaults(func=cmd_show)

    # predict
    sp_p = sub.add_parser("predict", help="Wyjście sterownika dla pojedynczego punktu", formatter_class=fmt)
    _model_args(sp_p)
    sp_p.add_argument("values", nargs="+", help="liczby w kolejności wejść albo var=wartość")
    sp_p.set_defaults(func=cmd_predict)

    # explain
    sp_e = sub.add_parser("explain", help="Siły odpalenia reguł dla punktu", formatter_class=fmt)
    _model_args(sp_e)
    sp_e.add_argument("values", nargs="+")
    sp_e.add_argument("--json", action="store_true")
    sp_e.add_argument("--threshold", type=float, default=0.0, help="pomiń reguły z α poniżej progu")
    sp_e.set_defaults(func=cmd_explain)

    # curve
    sp_c = sub.add_parser("curve", help="Próbki funkcji przynależności zmiennej (CSV)", formatter_class=fmt)
    _model_args(sp_c, engine=False)
    sp_c.add_argument("--var", required=True)
    sp_c.add_argument("--label", help="jedna etykieta (domyślnie wszystkie)")
    sp_c.add_argument("--role", choices=["input", "output"], help="gdy nazwa występuje w obu rolach")
    sp_c.add_argument("--samples", type=positive_int, default=101)
    sp_c.add_argument("--out", help="plik wyjściowy CSV (jeśli brak -> stdout)")
    sp_c.set_defaults(func=cmd_curve)

    # sweep
    sp_w = sub.add_parser("sweep", help="Powierzchnia sterowania na siatce dwóch wejść (CSV)", formatter_class=fmt)
    _model_args(sp_w)
    sp_w.add_argument("--x", help="wejście na osi x (domyślnie pierwsze)")
    sp_w.add_argument("--y", help="wejście na osi y (domyślnie drugie)")
    sp_w.add_argument("--points", type=grid_points, default=50, help="N albo NXxNY")
    sp_w.add_argument("--fixed", type=parse_kv_list, help="wartości pozostałych wejść, np. 'a=1,b=2'")
    sp_w.add_argument("--output", help="zmienna wyjściowa (domyślnie pierwsza)")
    sp_w.add_argument("--strengths", action="store_true", help="dopisz siły reguł R1..Rn")
    sp_w.add_argument("--workers", type=positive_int, help="liczba procesów roboczych")
    sp_w.add_argument("--out", help="plik wyjściowy CSV (jeśli brak -> stdout)")
    sp_w.set_defaults(func=cmd_sweep)

    # trace
    sp_t = sub.add_parser("trace", help="Odpowiedź na przebieg czasowy wejść z CSV", formatter_class=fmt)
    _model_args(sp_t)
    sp_t.add_argument("--csv", required=True, help="CSV z kolumną czasu i kolumnami wejść modelu")
    sp_t.add_argument("--time-col", default="time")
    sp_t.add_argument("--workers", type=positive_int, help="liczba procesów roboczych")
    sp_t.add_argument("--out", help="plik wyjściowy CSV (jeśli brak -> stdout)")
    sp_t.set_defaults(func=cmd_trace)

    # points
    sp_k = sub.add_parser("points", help="Aktywacja reguł w punktach krytycznych (CSV)", formatter_class=fmt)
    _model_args(sp_k)
    sp_k.add_argument("--out", help="plik wyjściowy CSV (jeśli brak -> stdout)")
    sp_k.set_defaults(func=cmd_points)

    # run
    sp_run = sub.add_parser("run", help="Uruchom pipeline z pliku konfiguracyjnego")
    sp_run.add_argument("--config", required=True, help="Ścieżka do pliku config (.json | .yaml)")
    sp_run.set_defaults(func=cmd_run)

    return ap
