"""Discrete-event simulation of preemptive RM and EDF scheduling.

The simulator works on a single processor and advances time from event to
event instead of unit by unit. An event is either a job release or the
completion of the running job; between two events the running job does not
change, so the whole interval can be labelled in one pass.

Each iteration of the main loop:
    1. Releases every job whose task is due at the current instant.
    2. Selects the highest priority ready job (fully preemptive).
    3. Computes the next event: the earliest future release, the completion
       of the running job or the horizon, whichever comes first.
    4. Labels every task for each unit up to that event.
    5. Charges the elapsed time to the running job and retires it when done.

Labels per task and unit:
    - ``idle`` before the first release of the task, or with no ready job,
    - ``exe`` while the task owns the processor,
    - ``wait`` while the task has a ready job that is not running,
    - ``miss`` whenever an unfinished job of the task is at or past its
      absolute deadline. This overrides the other labels, so a late job
      keeps being flagged while it runs and while it sits in the backlog.

A job that completes exactly at its deadline is on time.
"""

import logging
import math
from typing import Any, Iterable, List, Optional, Sequence, Union

from rtsim.analysis import is_schedulable
from rtsim.models import EXE, IDLE, MISS, WAIT, Job, Policy, SimulationResult, TaskSpec
from rtsim.normalizer import normalize_tasks
from rtsim.ordering import period_table, pick_job

logger = logging.getLogger(__name__)


def _fill(
    timelines: List[List[str]],
    tasks: Sequence[TaskSpec],
    start: int,
    end: int,
    running: Optional[Job],
    ready: Sequence[Job],
) -> None:
    """Label every task for the units in ``[start, end)``."""
    for index, task in enumerate(tasks):
        own_jobs = [job for job in ready if job.task_id == task.id and job.remaining > 0]
        earliest_deadline = min((job.deadline_abs for job in own_jobs), default=math.inf)
        if running is not None and running.task_id == task.id:
            state = EXE
        elif own_jobs:
            state = WAIT
        else:
            state = IDLE

        timeline = timelines[index]
        for t in range(start, end):
            if earliest_deadline <= t:
                timeline[t] = MISS
            elif t < task.offset:
                timeline[t] = IDLE
            else:
                timeline[t] = state


def simulate(tasks: Sequence[TaskSpec], horizon: int, policy: Union[Policy, str]) -> List[List[str]]:
    """Simulate ``tasks`` over ``[0, horizon)`` under ``policy``.

    Args:
        tasks: Normalized tasks.
        horizon: Number of time units to simulate.
        policy: ``Policy.RM``, ``Policy.EDF`` or their string names.

    Returns:
        One timeline per task, aligned with ``tasks``. Each timeline holds
        ``horizon`` labels drawn from ``idle``, ``wait``, ``exe`` and ``miss``.

    Raises:
        ValueError: If ``policy`` is not a known policy.
    """
    policy = Policy.parse(policy)
    periods = period_table(tasks)
    timelines = [[IDLE] * horizon for _ in tasks]
    next_release = [task.offset for task in tasks]
    ready: List[Job] = []
    running: Optional[Job] = None
    time = 0
    events = 0

    while time < horizon:
        events += 1

        for index, task in enumerate(tasks):
            if next_release[index] == time:
                ready.append(Job(task_id=task.id, remaining=task.C, release=time, deadline_abs=time + task.D))
                next_release[index] = time + task.T

        running = pick_job(ready, policy, periods)

        next_rel = min((r for r in next_release if r > time), default=math.inf)
        finish = time + running.remaining if running is not None else math.inf
        t_next = min(next_rel, finish, horizon)

        if running is None and not ready:
            # Nothing to run until the next release; labels are already idle.
            time = min(next_rel, horizon)
            continue

        _fill(timelines, tasks, time, t_next, running, ready)

        if running is not None:
            running.remaining -= t_next - time
            if running.remaining <= 0:
                ready.remove(running)
                running = None

        time = t_next

    logger.debug("simulated %d task(s) over %d unit(s) with %s in %d event(s)",
                 len(tasks), horizon, policy.value, events)
    return timelines


def run_simulation(raw_tasks: Optional[Iterable[Any]], horizon: Any = 50,
                   policy: Union[Policy, str] = Policy.RM) -> SimulationResult:
    """Normalize raw task descriptors, simulate them and evaluate the verdict.

    This is the entry point for front ends: it accepts unvalidated input and
    always returns a result for a known policy.
    """
    policy = Policy.parse(policy)
    tasks, horizon = normalize_tasks(raw_tasks, horizon)
    timelines = simulate(tasks, horizon, policy)
    schedulable = is_schedulable(timelines)
    logger.info("%s over %d unit(s): %s", policy.value.upper(), horizon,
                "schedulable" if schedulable else "deadline miss")
    return SimulationResult(
        tasks=tasks,
        horizon=horizon,
        policy=policy,
        timelines=tuple(tuple(timeline) for timeline in timelines),
        schedulable=schedulable,
    )
