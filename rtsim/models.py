"""Data models for tasks, jobs and simulation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union


MAX_VALUE = 10_000

IDLE = "idle"
WAIT = "wait"
EXE = "exe"
MISS = "miss"
STATES = (IDLE, WAIT, EXE, MISS)


class Policy(str, Enum):
    """Scheduling policy used to pick the running job."""

    RM = "rm"
    EDF = "edf"

    @classmethod
    def parse(cls, value: Union["Policy", str]) -> "Policy":
        """Return the policy named by ``value`` (case-insensitive).

        Raises:
            ValueError: If ``value`` names no known policy.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown scheduling policy: {value!r} (expected 'rm' or 'edf')")


@dataclass(frozen=True)
class TaskSpec:
    """A periodic task after normalization.

    Attributes:
        id: Task identifier (used for tie-breaking).
        offset: Instant of the first release.
        C: Execution time of every job.
        T: Period between consecutive releases.
        D: Relative deadline (always positive once normalized).
    """
    id: int
    offset: int
    C: int
    T: int
    D: int

    @property
    def utilization(self) -> float:
        """Return the utilization of this task (C/T)."""
        return self.C / self.T

    def __str__(self) -> str:
        return f"Task({self.id}: C={self.C}, T={self.T}, D={self.D}, offset={self.offset})"


@dataclass(eq=False)
class Job:
    """One released instance of a task.

    Jobs compare by identity so the running slot can point into the ready set.
    """
    task_id: int
    remaining: int
    release: int
    deadline_abs: int


@dataclass(frozen=True)
class SimulationResult:
    """Finalized output of one simulation run.

    Attributes:
        tasks: Normalized tasks, in input order.
        horizon: Number of simulated time units.
        policy: Policy the run used.
        timelines: One tuple of labels per task, aligned with ``tasks``.
        schedulable: True if no timeline contains a miss.
    """
    tasks: List[TaskSpec]
    horizon: int
    policy: Policy
    timelines: Tuple[Tuple[str, ...], ...] = field(default_factory=tuple)
    schedulable: bool = True

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(zip(self.tasks, self.timelines))
