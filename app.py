#!/usr/bin/env python3
"""
Decidere - Console Entry Point.

============================================================
USAGE
============================================================
    python app.py Pizza Tacos Sushi
    python app.py --delay-ms 0 --seed 7 "Stay in" "Go out"
    decidere --config decidere.yaml Pizza Tacos

Environment-based configuration (also read from .env):
    DECIDERE_DECISION_DELAY_MS=500 decidere Pizza Tacos

Exit codes:
    0  a decision was settled
    1  the decision was abandoned
    2  fewer than two choices were given

============================================================
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from core.exceptions import ConfigurationError
from core.logging_config import configure_logging
from decision_engine import (
    ChangeKind,
    ChoiceList,
    ChoiceListChange,
    DecisionEngine,
    DecisionEngineConfig,
    DecisionTransition,
    ShrinkPolicy,
)


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_ABANDONED = 1
EXIT_INSUFFICIENT = 2


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="decidere",
        description="Pick one of your choices at random, after a moment of thought",
    )

    parser.add_argument(
        "choices",
        nargs="*",
        metavar="CHOICE",
        help="Options to choose from (blank ones are ignored)",
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="YAML configuration file (default: environment / .env)",
    )

    parser.add_argument(
        "--delay-ms",
        type=int,
        metavar="MS",
        help="Thinking delay in milliseconds (default: 1000)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible picks",
    )

    parser.add_argument(
        "--policy",
        type=str,
        choices=[p.value for p in ShrinkPolicy],
        help="What to do if choices shrink while deciding",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL env or INFO)",
    )

    return parser


def build_config(args: argparse.Namespace) -> DecisionEngineConfig:
    """Merge file/environment configuration with CLI overrides."""
    if args.config:
        config = DecisionEngineConfig.from_yaml(args.config)
    else:
        config = DecisionEngineConfig.from_env()

    overrides = config.to_dict()
    if args.delay_ms is not None:
        overrides["decision_delay_ms"] = args.delay_ms
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if args.policy is not None:
        overrides["shrink_policy"] = args.policy

    return DecisionEngineConfig.from_mapping(overrides)


# ============================================================
# RUN
# ============================================================

async def run_decision(
    choices: ChoiceList,
    engine: DecisionEngine,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Decide over choices and wait for the reveal."""
    if out is None:
        out = sys.stdout
    if err is None:
        err = sys.stderr
    done = asyncio.Event()

    def on_transition(transition: DecisionTransition) -> None:
        state = transition.to_state
        if state.is_deciding:
            print("Deciding...", file=out)
        elif state.is_settled:
            print(f"Your decision: {state.result}", file=out)
            done.set()
        elif transition.error is not None:
            print(transition.error.message, file=err)
            done.set()

    engine.register_listener(on_transition)
    try:
        outcome = engine.decide(choices)
        if not outcome.accepted:
            print(outcome.error.message, file=err)
            return EXIT_INSUFFICIENT

        await done.wait()
    finally:
        engine.unregister_listener(on_transition)

    return EXIT_OK if engine.state.is_settled else EXIT_ABANDONED


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(e.to_log_format())
        parser.error(e.message)
    except OSError as e:
        parser.error(f"cannot read config: {e}")

    choices = ChoiceList()

    def on_change(change: ChoiceListChange) -> None:
        if change.kind == ChangeKind.ADDED:
            print(f"  {change.index + 1}. {change.option}")

    choices.register_listener(on_change)
    for text in args.choices:
        choices.add(text)

    engine = DecisionEngine(config=config)
    return asyncio.run(run_decision(choices, engine))


if __name__ == "__main__":
    sys.exit(main())
