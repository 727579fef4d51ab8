"""Schedulability verdict and indicators computed from finished timelines.

Everything here reads timelines produced by the scheduler and never mutates
them. The verdict is the only piece the simulation pipeline depends on; the
other helpers feed reports and the command line front end.
"""

import math
from functools import reduce
from typing import Dict, Iterable, Sequence

from rtsim.models import EXE, IDLE, MISS, WAIT, TaskSpec


_STATUS = {
    EXE: "Running",
    WAIT: "Ready",
    MISS: "Deadline Miss",
    IDLE: "Idle",
}


def is_schedulable(timelines: Iterable[Sequence[str]]) -> bool:
    """Return True iff no timeline contains a deadline miss."""
    return not any(MISS in timeline for timeline in timelines)


def count_misses(timelines: Iterable[Sequence[str]]) -> Dict[int, int]:
    """Return the number of miss units per timeline index."""
    return {i: sum(1 for state in timeline if state == MISS) for i, timeline in enumerate(timelines)}


def execution_indicator(timelines: Iterable[Sequence[str]], until: int) -> float:
    """Percentage of units in ``[0, until)`` spent executing.

    A unit counts as executing when it is labelled ``exe`` or ``miss``; the
    average runs over every task, so it is a quick activity indicator rather
    than the processor utilization.
    """
    executing = 0
    total = 0
    for timeline in timelines:
        for state in timeline[:max(until, 0)]:
            total += 1
            if state in (EXE, MISS):
                executing += 1
    if total == 0:
        return 0.0
    return executing / total * 100


def status_at(timeline: Sequence[str], t: int) -> str:
    """Human readable status of one task at unit ``t``."""
    if t < 0:
        return ""
    if t >= len(timeline):
        return "Finished"
    return _STATUS.get(timeline[t], "")


def hyperperiod(tasks: Iterable[TaskSpec]) -> int:
    """Least common multiple of the task periods (1 for no tasks)."""
    return reduce(lambda acc, task: acc * task.T // math.gcd(acc, task.T), tasks, 1)
