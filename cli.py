import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from config import CONFIG
from seocheck.config_loader import CONFIG_FILENAMES, find_config_file, write_default_config
from seocheck.errors import CategorizedError
from seocheck.logging_setup import setup_logging
from seocheck.output import render_text, write_report
from seocheck.presets import preset_names
from seocheck.runner import SEOChecker


def parse_viewport(value: str) -> Tuple[int, int]:
    try:
        w, h = value.lower().split("x", 1)
        width, height = int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid viewport {value!r}; expected WIDTHxHEIGHT, e.g. 1920x1080")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Invalid viewport {value!r}; sizes must be positive")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seocheck", description="Audit a web page for SEO issues.")
    parser.add_argument("target", nargs="?", default="", help="URL to audit")
    parser.add_argument("-u", "--url", default="", help="URL to audit (alternative to the positional argument)")
    parser.add_argument("-o", "--output", default="", help="Write the JSON report to this file")
    parser.add_argument("--json", action="store_true", help="Print the JSON report instead of text")
    parser.add_argument("-c", "--config", default="", help="Config file (.json, .yaml, .yml)")
    parser.add_argument(
        "-p", "--preset", default="", choices=[""] + preset_names(),
        help=f"Rule preset (default: {CONFIG.DEFAULT_PRESET} when no config file is found)",
    )
    parser.add_argument("--init-config", action="store_true", help=f"Write a starter {CONFIG_FILENAMES[0]} and exit")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--viewport", type=parse_viewport, default=CONFIG.VIEWPORT, help="Viewport as WIDTHxHEIGHT")
    parser.add_argument("--timeout", type=int, default=CONFIG.NAVIGATION_TIMEOUT_MS, help="Navigation timeout in ms")
    parser.add_argument("--log-level", default=CONFIG.LOG_LEVEL, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.init_config:
        path = write_default_config(Path.cwd() / CONFIG_FILENAMES[0], preset=args.preset or CONFIG.DEFAULT_PRESET)
        print(f"Created {path}")
        return 0

    url = args.url or args.target
    if not url:
        print("❌ Error: a URL is required", file=sys.stderr)
        return 1

    config_file = args.config or find_config_file(Path.cwd())
    raw = {}
    if args.preset:
        raw["preset"] = args.preset
    elif not config_file:
        raw["preset"] = CONFIG.DEFAULT_PRESET

    try:
        checker = SEOChecker(
            url,
            headless=not args.headed,
            timeout_ms=args.timeout,
            viewport=args.viewport,
            config=raw,
            config_file=config_file or None,
        )
        report = asyncio.run(checker.check())
    except CategorizedError as e:
        print(f"❌ Error: {e.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_text(report))

    if args.output:
        path = write_report(report, args.output)
        print(f"Report saved to {path}", file=sys.stderr)

    return 0 if report.summary.failed == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("seocheck", args.log_level, CONFIG.LOG_FILE or None)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
