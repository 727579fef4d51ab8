"""rtsim: discrete-event simulation of preemptive RM and EDF scheduling.

This package simulates a set of periodic tasks on a single processor and
produces a per-unit execution timeline for each task plus a schedulability
verdict for the simulated horizon.
"""

from rtsim.models import Job, Policy, SimulationResult, TaskSpec
from rtsim.normalizer import normalize_tasks
from rtsim.scheduler import simulate, run_simulation
from rtsim.analysis import is_schedulable, hyperperiod

__version__ = "0.1.0"
__all__ = [
    "TaskSpec",
    "Job",
    "Policy",
    "SimulationResult",
    "normalize_tasks",
    "simulate",
    "run_simulation",
    "is_schedulable",
    "hyperperiod",
]
