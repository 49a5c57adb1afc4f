from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from shipment_optimizer.config import load_settings
from shipment_optimizer.errors import ItemValidationError, PackingError, RateProviderError
from shipment_optimizer.optimizer import optimize_shipment
from shipment_optimizer.rates.base import Destination
from shipment_optimizer.rates.service import get_rate_provider, quote_plan

logger = logging.getLogger(__name__)


def load_input(path: Path) -> dict[str, Any]:
    """Read the request JSON. Raises OSError or ValueError on bad files."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("input must be a JSON object")
    return data


def write_plan(plan: dict[str, Any], path: str, pretty: bool = False) -> None:
    """Write the plan JSON, creating parent folders if needed."""
    output_path = Path(path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(dump_plan(plan, pretty))
        f.write("\n")
    logger.info(f"Plan written to {output_path}")


def dump_plan(plan: dict[str, Any], pretty: bool = False) -> str:
    if pretty:
        return json.dumps(plan, indent=2)
    return json.dumps(plan, separators=(",", ":"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shipment-optimizer",
        description="Pick shipping boxes for an order and lay out every item inside them",
    )
    parser.add_argument("--input", required=True, help="Request JSON file (boxes, products, options)")
    parser.add_argument("--output", help="Write the plan here instead of stdout")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument(
        "--destination",
        metavar="COUNTRY",
        help="Destination country code; adds carrier quotes from the configured rate provider",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = load_input(Path(args.input))
    except (OSError, ValueError) as e:
        print(f"shipment-optimizer: error: cannot read input {args.input}: {e}", file=sys.stderr)
        return 2

    try:
        plan = optimize_shipment(payload)
    except ItemValidationError as e:
        print(f"shipment-optimizer: invalid input: {e}", file=sys.stderr)
        return 1
    except PackingError as e:
        print(f"shipment-optimizer: packing failed: {e}", file=sys.stderr)
        return 1

    if args.destination:
        provider = get_rate_provider(settings)
        try:
            quotes = asyncio.run(quote_plan(plan, Destination(country=args.destination), provider))
        except RateProviderError as e:
            print(f"shipment-optimizer: rate quote failed: {e}", file=sys.stderr)
            return 1
        plan["quotes"] = [q.model_dump() for q in quotes]

    if args.output:
        write_plan(plan, args.output, pretty=args.pretty)
    else:
        print(dump_plan(plan, args.pretty))
    return 0


if __name__ == "__main__":
    sys.exit(main())
