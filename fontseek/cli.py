#!/usr/bin/env python3
"""
fontseek - find the font and color a browser really renders.

    fontseek inspect https://example.com --point 320,240
    fontseek census https://example.com --output fonts.json
    fontseek pick https://example.com
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError

from fontseek.browser import open_page
from fontseek.color import hsl_string
from fontseek.config import InspectorConfig
from fontseek.engine import PlaywrightEngine
from fontseek.errors import EngineError, FontseekError
from fontseek.models import FontCensusEntry, Inspection, ScreenPoint
from fontseek.session import InspectionSession
from fontseek.util import parse_point, parse_viewport, write_json

logger = logging.getLogger('fontseek.cli')

PICK_POLL_MS = 250


def inspection_payload(result: Inspection) -> Dict[str, Any]:
    payload = result.to_dict()
    payload["color"]["rgb"] = result.color.rgb
    payload["color"]["hsl"] = hsl_string(result.color)
    return payload


def census_payload(entries: List[FontCensusEntry]) -> Dict[str, Any]:
    return {"count": len(entries), "items": [e.to_dict() for e in entries]}


def emit(data: Any, output: Optional[str]) -> None:
    if output:
        path = Path(output)
        write_json(path, data)
        print(f"✅ Wrote {path}")
    else:
        print(json.dumps(data, ensure_ascii=False, indent=2))


def cmd_inspect(args: argparse.Namespace, config: InspectorConfig) -> int:
    raw_point = parse_point(args.point)
    if raw_point is None:
        print(f"❌ Invalid --point {args.point!r}; expected X,Y")
        return 2
    point = ScreenPoint(raw_point["x"], raw_point["y"])
    with open_page(args.url, parse_viewport(args.viewport), headless=not args.headed) as page:
        engine = PlaywrightEngine(page)
        session = InspectionSession(engine, config)
        try:
            initial = engine.element_at(point)
        except EngineError as exc:
            logger.warning(f"hit-test failed at {args.point}: {exc}")
            initial = None
        result = session.resolve_at(point, initial)
        emit(inspection_payload(result), args.output)
    return 0


def cmd_census(args: argparse.Namespace, config: InspectorConfig) -> int:
    with open_page(args.url, parse_viewport(args.viewport), headless=not args.headed) as page:
        session = InspectionSession(PlaywrightEngine(page), config)
        entries = session.scan_document_fonts()
        emit(census_payload(entries), args.output)
    return 0


def cmd_pick(args: argparse.Namespace, config: InspectorConfig) -> int:
    with open_page(args.url, parse_viewport(args.viewport), headless=False) as page:
        session = InspectionSession(PlaywrightEngine(page), config)

        def on_result(result: Inspection) -> None:
            print(json.dumps(inspection_payload(result), ensure_ascii=False), flush=True)

        session.begin(on_result=on_result)
        print("🚀 Click any text in the browser window; press Escape there to stop.")
        try:
            while session.active and not page.is_closed():
                page.wait_for_timeout(PICK_POLL_MS)
        except PlaywrightError:
            logger.debug("page closed while picking")
        except KeyboardInterrupt:
            pass
        finally:
            try:
                session.end()
            except PlaywrightError:
                pass
    print("\n✅ Pick session ended")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the font family and color a page really renders")
    parser.add_argument("--config", help="Path to a JSON file overriding inspector settings")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def page_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("url", help="Page to open")
        p.add_argument("--viewport", help="Viewport size, e.g. 1440x900")
        p.add_argument("--headed", action="store_true", help="Show the browser window")

    inspect = sub.add_parser("inspect", help="Resolve the font and color at a point")
    page_args(inspect)
    inspect.add_argument("--point", required=True, help="Viewport point as X,Y")
    inspect.add_argument("--output", "-o", help="Write the result JSON to this file")

    census = sub.add_parser("census", help="List every font family the page uses")
    page_args(census)
    census.add_argument("--output", "-o", help="Write the census JSON to this file")

    pick = sub.add_parser("pick", help="Click elements in a live browser window")
    pick.add_argument("url", help="Page to open")
    pick.add_argument("--viewport", help="Viewport size, e.g. 1440x900")
    return parser


COMMANDS = {
    "inspect": cmd_inspect,
    "census": cmd_census,
    "pick": cmd_pick,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = InspectorConfig.from_json(args.config)
        return COMMANDS[args.command](args, config)
    except FontseekError as exc:
        print(f"❌ {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
