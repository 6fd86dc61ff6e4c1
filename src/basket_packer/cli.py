from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from basket_packer.config import Settings, configure_logging, load_settings, resolve_strategies
from basket_packer.io.schemas import PackingRequest
from basket_packer.service import calculate_packing, packing_stats

logger = logging.getLogger(__name__)


def load_input(path: Path) -> PackingRequest:
    data = json.loads(path.read_text(encoding="utf-8"))
    return PackingRequest.model_validate(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Basket Packer CLI")
    parser.add_argument("--input", required=True, help="Input request JSON file (basket + packages)")
    parser.add_argument("--output", required=True, help="Output result JSON file")
    parser.add_argument("--workers", type=int, help="Run strategies on N threads (default: sequential)")
    parser.add_argument("--strategies", help="JSON file with the ordered strategy list")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Include pre-packing statistics of the package list in the output",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        overrides = {}
        if args.workers is not None:
            overrides["max_workers"] = args.workers
        if args.strategies:
            overrides["strategies_file"] = args.strategies
        if args.log_level:
            overrides["log_level"] = args.log_level
        if overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
        strategies = resolve_strategies(settings)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        request = load_input(Path(args.input))
    except ValidationError as e:
        print(f"Invalid input:\n{e}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read input {args.input}: {e}", file=sys.stderr)
        return 2

    calculation = calculate_packing(request, strategies=strategies, max_workers=settings.max_workers)

    out = calculation.model_dump(mode="json")
    if args.stats:
        out["stats"] = packing_stats(request.packages).model_dump(mode="json")

    Path(args.output).write_text(json.dumps(out, indent=2), encoding="utf-8")

    print(f"✅ Wrote plan to {args.output}")
    print(
        f"Fitted: {calculation.fitted_items}/{calculation.total_items} "
        f"({calculation.strategy_used or 'no strategy'}), utilization: {calculation.utilization}%"
    )
    return 0 if calculation.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
