"""Command line entry point: read datapoints, write a heatmap SVG."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from latheat.core.config import HeatmapConfig, read_config
from latheat.core.errors import HeatmapError
from latheat.core.figure import write_svg
from latheat.plt import heatmap
from latheat.sources.readers import AUTO, FORMATS, RANDOM, read_datapoints

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="latheat",
        description="Render (timestamp, latency) measurements as an SVG heatmap.",
    )
    p.add_argument("--input", default="-", help="input file, or - for stdin (default: -)")
    p.add_argument(
        "--input-format",
        default=AUTO,
        choices=[AUTO] + FORMATS,
        help="input format (default: auto-detect)",
    )
    p.add_argument("--output", default="-", help="output SVG file, or - for stdout (default: -)")
    p.add_argument("--config", type=Path, help="sectioned config CSV (section,key,value)")
    p.add_argument("--time-buckets", type=int, help="target number of time buckets")
    p.add_argument("--latency-buckets", type=int, help="target number of latency buckets")
    p.add_argument("--width", type=float, help="canvas width")
    p.add_argument("--height", type=float, help="canvas height")
    p.add_argument("--title", help="heading drawn above the plot")
    p.add_argument(
        "--no-xml-header",
        action="store_true",
        help="omit the XML prologue and doctype (for embedding)",
    )
    p.add_argument("--seed", type=int, help="seed for --input-format random")
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log to stderr: -v for progress, -vv for pipeline details",
    )
    return p


def log_level(verbosity: int) -> int:
    """Map the number of -v flags to a logging level."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def _load_config(args: argparse.Namespace) -> HeatmapConfig:
    cfg = read_config(args.config) if args.config else HeatmapConfig()
    return cfg.replace(
        time_buckets=args.time_buckets,
        latency_buckets=args.latency_buckets,
        width=args.width,
        height=args.height,
        title=args.title,
        xml_header=False if args.no_xml_header else None,
    )


def run(args: argparse.Namespace) -> None:
    if args.output == "":
        raise ValueError("output destination cannot be empty ''")
    if args.input == "" and args.input_format != RANDOM:
        raise ValueError("source cannot be empty ''")

    cfg = _load_config(args)
    points = read_datapoints(args.input, args.input_format, seed=args.seed)
    scene = heatmap(points, cfg)

    if args.output == "-":
        write_svg(scene, sys.stdout, xml_header=cfg.xml_header)
    else:
        write_svg(scene, args.output, xml_header=cfg.xml_header)
        logger.info("Wrote heatmap: %s", Path(args.output).resolve())


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=log_level(args.verbose),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    try:
        run(args)
    except (HeatmapError, ValueError, OSError) as e:
        logger.debug("Render failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
