from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from tsline import ChartDataError, ChartLayoutError, ChartOptionsError, HostElement, load_options, mount


DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 540


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tsline")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a CSV file as an SVG line chart.")
    render.add_argument("csv_path", type=Path)
    render.add_argument("--options", type=Path, required=True, help="Chart options file (.toml or .json).")
    render.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    render.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    render.add_argument(
        "--output",
        type=Path,
        default=None,
        help="SVG output path. Default: the CSV path with an .svg suffix.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.width <= 0 or args.height <= 0:
        parser.error("--width/--height must be > 0")
    output = args.output or args.csv_path.with_suffix(".svg")
    try:
        options = load_options(args.options)
        text = args.csv_path.read_text(encoding="utf-8")
        chart = mount(HostElement(width=args.width, height=args.height), options)
        surface = chart.draw(text)
    except (ChartDataError, ChartLayoutError, ChartOptionsError) as exc:
        print(f"tsline: {exc}", file=sys.stderr)
        return 2
    target = surface.write(output)
    print(f"wrote {target} ({len(chart.last_categories())} categories)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
