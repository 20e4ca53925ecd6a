#!/usr/bin/env python3
"""
CLI: Generate pixel-art item icons. One PNG per item (plus a JSON description with --json).
Usage:
  python scripts/generate.py axe
  python scripts/generate.py potion --sub-type round_flask --seed 42
  python scripts/generate.py staff --count 5 --output out/ --json
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import logging

from itemforge.api import FAMILIES, generate_item
from itemforge.config import get_output_dir, load_config
from itemforge.graphics import save_image
from itemforge.workflow_utils import log_structured, setup_logging

logger = logging.getLogger("generate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate procedural pixel-art item icons (local, no image assets)."
    )
    parser.add_argument(
        "family",
        type=str,
        choices=FAMILIES,
        help="Item family to generate.",
    )
    parser.add_argument(
        "--sub-type",
        type=str,
        default=None,
        help="Archetype within the family (e.g. hand_axe, knee_high, wizard_hat, round_flask, wand).",
    )
    parser.add_argument(
        "--material",
        type=str,
        default=None,
        help="Main material palette key (e.g. STEEL, LEATHER, GOLD).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (with --count, seeds run seed, seed+1, ...).",
    )
    parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=1,
        help="Number of items to generate (default: 1).",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: output.dir from config).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: config/default.yaml).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Also write the item description, anchors and silhouettes next to each PNG.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: logging.level from config).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or config.get("logging", {}).get("level", "INFO"))
    out_dir = args.output or get_output_dir(config)
    out_dir.mkdir(parents=True, exist_ok=True)
    prefix = config.get("output", {}).get("filename_prefix", "item")

    failures = 0
    for i in range(max(1, args.count)):
        seed = args.seed + i if args.seed is not None else None
        item = generate_item(
            args.family,
            {"sub_type": args.sub_type, "material": args.material, "seed": seed},
            config=config,
        )
        path = save_image(item.image, out_dir / f"{prefix}_{args.family}_{item.seed}.png")
        if item.is_placeholder:
            failures += 1
            log_structured("error", event="item_failed", family=args.family, seed=item.seed, path=path)
        else:
            logger.info("%s (seed %s) -> %s", item.name, item.seed, path)
        if args.json:
            json_path = path.with_suffix(".json")
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(item.to_dict(include_geometry=True), f, indent=2)
    print(f"Done. {max(1, args.count) - failures} item(s) in {out_dir}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
