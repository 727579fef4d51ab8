"""Command line front end: simulate a scenario file and print a text Gantt chart."""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rtsim.analysis import count_misses, execution_indicator, status_at
from rtsim.config import HYPERPERIOD, load_scenario
from rtsim.models import EXE, IDLE, MISS, WAIT, Policy, SimulationResult

logger = logging.getLogger(__name__)

SYMBOLS = {EXE: "#", WAIT: "-", IDLE: ".", MISS: "X"}


def render_gantt(result: SimulationResult) -> str:
    """Render one row per task: ``#`` exe, ``-`` wait, ``.`` idle, ``X`` miss.

    Each row ends with the status of the task at the last simulated unit.
    """
    misses = count_misses(result.timelines)
    lines = []
    for index, (task, timeline) in enumerate(result):
        row = "".join(SYMBOLS[state] for state in timeline)
        label = f"T{task.id}"
        lines.append(f"{label:>6} |{row}| C={task.C} T={task.T} D={task.D} offset={task.offset}"
                     + (f" misses={misses[index]}" if misses[index] else "")
                     + f" [{status_at(timeline, result.horizon - 1)}]")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtsim",
        description="Simulate periodic real-time tasks under RM or EDF scheduling",
    )
    parser.add_argument("scenario", help="YAML scenario file")
    parser.add_argument("--policy", choices=[p.value for p in Policy],
                        help="override the scenario policy")
    horizon = parser.add_mutually_exclusive_group()
    horizon.add_argument("--horizon", type=int, help="override the scenario horizon")
    horizon.add_argument("--hyperperiod", action="store_true",
                         help="simulate the largest offset plus one hyperperiod")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        scenario = load_scenario(args.scenario)
    except (OSError, ValueError) as e:
        logger.error("cannot load scenario: %s", e)
        return 2

    if args.policy:
        scenario.policy = Policy.parse(args.policy)
    if args.horizon is not None:
        scenario.horizon = args.horizon
    elif args.hyperperiod:
        scenario.horizon = HYPERPERIOD

    result = scenario.run()

    out: List[str] = [
        f"{result.policy.value.upper()} simulation (time 0 -> {result.horizon})",
        render_gantt(result),
        f"Execution indicator: {execution_indicator(result.timelines, result.horizon):.1f}%",
        "Schedulable" if result.schedulable else "NOT schedulable: deadline miss",
    ]
    print("\n".join(out))
    return 0 if result.schedulable else 1


if __name__ == "__main__":
    sys.exit(main())
