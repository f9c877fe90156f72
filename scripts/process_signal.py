#!/usr/bin/env python3
"""
Run the outreach pipeline from the command line.

Usage:
    python scripts/process_signal.py --signal-file signal.json
    python scripts/process_signal.py --signal-id sig_123
    python scripts/process_signal.py --webhook-file webhook.json
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from outreach_planner.core.orchestrator import build_orchestrator
from outreach_planner.core.signal import PipelineInput
from outreach_planner.models.base import init_db


def build_input(args) -> PipelineInput:
    """Turn CLI arguments into a pipeline input"""

    if args.signal_file:
        body = json.loads(Path(args.signal_file).read_text())
        # Accept either a bare signal or {"signal": ..., "entities": [...]}
        if "signal" not in body:
            body = {"signal": body}
        return PipelineInput.model_validate(body)

    if args.webhook_file:
        return PipelineInput(webhook=json.loads(Path(args.webhook_file).read_text()))

    # A single Linkt signal ID goes through the same enrichment path as a webhook
    return PipelineInput(
        webhook={
            "event_type": "cli",
            "data": {"run_id": "cli", "resources": {"signals_created": args.signal_id}},
        }
    )


async def main():
    parser = argparse.ArgumentParser(description="Generate outreach for business signals")
    parser.add_argument(
        "--signal-file",
        type=str,
        help="JSON file with an already-normalized signal"
    )
    parser.add_argument(
        "--signal-id",
        type=str,
        nargs="+",
        help="Linkt signal IDs to enrich and process"
    )
    parser.add_argument(
        "--webhook-file",
        type=str,
        help="JSON file with a Linkt webhook body"
    )

    args = parser.parse_args()

    # Validate input
    if sum(bool(x) for x in (args.signal_file, args.signal_id, args.webhook_file)) != 1:
        parser.error("Specify exactly one of --signal-file, --signal-id or --webhook-file")

    init_db()
    orchestrator = build_orchestrator()

    logger.info("=" * 60)
    logger.info("Outreach Planner")
    logger.info("=" * 60)

    result = await orchestrator.run(build_input(args))

    if result.success:
        logger.info(f"\n✓ {result.message}")
    else:
        logger.warning(f"\n✗ {result.message}")

    logger.info("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
