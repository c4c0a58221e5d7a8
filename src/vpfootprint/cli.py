# src/vpfootprint/cli.py
from __future__ import annotations

"""
CLI sobre un snapshot de escena en YAML.

Comandos:
  - footprint: contorno en espacio mundo (JSON).
  - bounds: caja envolvente del contorno (JSON, o texto con --text).
  - contains: prueba punto(s) en el contorno del viewport.
  - diagnose: reporte de texto de las matrices y una esquina de muestra.

Ejemplos rápidos:
  python -m vpfootprint.cli --scene ./scene.yaml footprint --viewport 2 --layout C-101
  python -m vpfootprint.cli --scene ./scene.yaml contains --viewport 2 -p 512.5,310 -p 0,0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .adapters.yaml_scene import Scene, load_scene_yaml
from .composition.di import build_services, load_settings_from_yaml
from .config import Settings, get_settings
from .contracts.errors import TransformFailureError, UnsupportedGeometryError
from .contracts.geometry import Point3
from .logging_config import setup_logging
from .services.bounds_service import pretty_box

logger = logging.getLogger(__name__)

# ----------------------
# Utilidades locales
# ----------------------

def _parse_point(text: str) -> Point3:
    parts = [p.strip() for p in text.split(",") if p.strip()]
    if len(parts) not in (2, 3):
        raise ValueError(f"Punto inválido: '{text}'. Usa x,y o x,y,z")
    vals = [float(p) for p in parts]
    return Point3(*vals)


def _points_json(points: Sequence[Point3]) -> List[List[float]]:
    return [[p.x, p.y, p.z] for p in points]


def _load(args: argparse.Namespace) -> tuple[Settings, Scene]:
    s = load_settings_from_yaml(Path(args.config)) if args.config else get_settings()
    if args.verbose:
        s = s.model_copy(update={"log_level": "DEBUG"})
    setup_logging(s.log_level_int(), s.log_file)
    return s, load_scene_yaml(args.scene)


# ----------------------
# Comandos
# ----------------------

def cmd_footprint(args: argparse.Namespace) -> int:
    s, scene = _load(args)
    svc = build_services(scene.store, s)
    vp = scene.find(args.viewport, args.layout)
    fp = svc.extractor.extract_footprint(vp)
    print(json.dumps({"viewport": vp.label(), "footprint": _points_json(fp)}, indent=2))
    return 0


def cmd_bounds(args: argparse.Namespace) -> int:
    s, scene = _load(args)
    svc = build_services(scene.store, s)
    vp = scene.find(args.viewport, args.layout)
    box = svc.extractor.viewport_bounds(vp)
    if args.text:
        print(f"{vp.label()}\t{'sin contorno' if box is None else pretty_box(box, s.matrix_precision)}")
        return 0
    out = None if box is None else {"min": list(box.min), "max": list(box.max)}
    print(json.dumps({"viewport": vp.label(), "bounds": out}, indent=2))
    return 0


def cmd_contains(args: argparse.Namespace) -> int:
    s, scene = _load(args)
    svc = build_services(scene.store, s)
    vp = scene.find(args.viewport, args.layout)
    points = [_parse_point(p) for p in args.point]
    if not points:
        raise ValueError("Debes especificar al menos un punto con -p x,y")
    # una sola extracción para todos los puntos
    hits = svc.extractor.filter_in_viewport(
        vp, list(enumerate(points)), lambda it: it[1],
        tolerance=s.containment_tolerance if args.tolerance is None else args.tolerance,
    )
    inside = {i for i, _ in hits}
    for i, p in enumerate(points):
        print(f"{p.x},{p.y},{p.z}\t{'inside' if i in inside else 'outside'}")
    return 0


def cmd_diagnose(args: argparse.Namespace) -> int:
    s, scene = _load(args)
    svc = build_services(scene.store, s)
    vp = scene.find(args.viewport, args.layout)
    print(svc.diagnostics.transformation_diagnostics(vp))
    return 0


# ----------------------
# Parser
# ----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vpfootprint", description="Contornos de viewport en espacio mundo")
    p.add_argument("--scene", required=True, help="snapshot de escena YAML (viewports + records)")
    p.add_argument("--config", help="settings YAML (si no, entorno VPF_*)")
    p.add_argument("-v", "--verbose", action="store_true", help="logging DEBUG")
    sub = p.add_subparsers(dest="cmd", required=True)

    def _vp_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--viewport", required=True, help="viewport_id")
        sp.add_argument("--layout", help="layout_name (si hay ids repetidos)")

    pf = sub.add_parser("footprint", help="contorno del viewport (JSON)")
    _vp_args(pf)
    pf.set_defaults(func=cmd_footprint)

    pb = sub.add_parser("bounds", help="caja envolvente del contorno (JSON)")
    _vp_args(pb)
    pb.add_argument("--text", action="store_true", help="salida de texto en vez de JSON")
    pb.set_defaults(func=cmd_bounds)

    pc = sub.add_parser("contains", help="prueba punto(s) en el viewport")
    _vp_args(pc)
    pc.add_argument("-p", "--point", action="append", default=[], help="x,y[,z] en espacio mundo")
    pc.add_argument("--tolerance", type=float, default=None, help="tolerancia (si no, Settings.containment_tolerance)")
    pc.set_defaults(func=cmd_contains)

    pd = sub.add_parser("diagnose", help="reporte de transformación")
    _vp_args(pd)
    pd.set_defaults(func=cmd_diagnose)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return int(bool(args.func(args)))  # 0 si todo bien
    except KeyboardInterrupt:
        return 130
    except UnsupportedGeometryError as ex:
        logger.warning("Viewport omitido: %s", ex)
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1
    except TransformFailureError as ex:
        logger.error("Fallo de transformación: %s", ex, exc_info=True)
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1
    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
