"""Priority ordering of ready jobs under RM and EDF.

Both policies break ties the same way: earlier release first, then the
smaller task id. With distinct task ids this is a strict total order, so the
selected job never depends on the order of the ready set.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple

from rtsim.models import Job, Policy, TaskSpec


def period_table(tasks: Iterable[TaskSpec]) -> Dict[int, int]:
    """Map task id to period. With duplicate ids the last task wins."""
    return {task.id: task.T for task in tasks}


def priority_key(job: Job, policy: Policy, periods: Mapping[int, int]) -> Tuple[int, int, int]:
    """Return the sort key of ``job``; smaller keys run first."""
    if policy is Policy.RM:
        return (periods[job.task_id], job.release, job.task_id)
    return (job.deadline_abs, job.release, job.task_id)


def pick_job(ready: Iterable[Job], policy: Policy, periods: Mapping[int, int]) -> Optional[Job]:
    """Return the highest priority job of ``ready``, or None if it is empty."""
    best = None
    best_key = None
    for job in ready:
        key = priority_key(job, policy, periods)
        if best is None or key < best_key:
            best, best_key = job, key
    return best
