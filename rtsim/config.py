"""Scenario files: a task set, a policy and a horizon stored as YAML.

Example::

    policy: edf
    horizon: 20          # or "hyperperiod"
    tasks:
      - {id: 1, chegada: 0, tempo: 2, periodo: 5, deadline: 0}
      - {id: 2, chegada: 0, tempo: 2, periodo: 4}

Only the structure is checked here. Numeric fields are handed to the
normalizer untouched, which clamps them instead of rejecting them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

import yaml  # pip install pyyaml

from rtsim.analysis import hyperperiod
from rtsim.models import Policy, SimulationResult
from rtsim.normalizer import normalize_tasks
from rtsim.scheduler import run_simulation

logger = logging.getLogger(__name__)

DEFAULT_POLICY = Policy.RM
DEFAULT_HORIZON = 50
HYPERPERIOD = "hyperperiod"


@dataclass
class Scenario:
    """A simulation request read from a scenario file.

    Attributes:
        policy: Scheduling policy.
        horizon: Requested horizon, or ``"hyperperiod"``.
        tasks: Raw task descriptors.
    """
    policy: Policy = DEFAULT_POLICY
    horizon: Union[int, float, str] = DEFAULT_HORIZON
    tasks: List[Dict[str, Any]] = field(default_factory=list)

    def resolve_horizon(self) -> Any:
        """Return the horizon to simulate, expanding ``"hyperperiod"``."""
        if self.horizon == HYPERPERIOD:
            tasks, _ = normalize_tasks(self.tasks, 1)
            return max((t.offset for t in tasks), default=0) + hyperperiod(tasks)
        return self.horizon

    def run(self) -> SimulationResult:
        return run_simulation(self.tasks, self.resolve_horizon(), self.policy)


def parse_scenario(data: Any, source: str = "<scenario>") -> Scenario:
    """Build a Scenario from already loaded YAML data.

    Raises:
        ValueError: If the data does not have the scenario structure.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{source}: top level must be a mapping")

    try:
        policy = Policy.parse(data.get("policy", DEFAULT_POLICY))
    except ValueError as e:
        raise ValueError(f"{source}: {e}") from e

    tasks = data.get("tasks", [])
    if tasks is None:
        tasks = []
    if not isinstance(tasks, list):
        raise ValueError(f"{source}: 'tasks' must be a list")
    for i, task in enumerate(tasks):
        if not isinstance(task, dict):
            raise ValueError(f"{source}: task #{i + 1} must be a mapping")

    horizon = data.get("horizon", DEFAULT_HORIZON)
    if isinstance(horizon, str) and horizon.strip().lower() == HYPERPERIOD:
        horizon = HYPERPERIOD

    return Scenario(policy=policy, horizon=horizon, tasks=tasks)


def load_scenario(path: str) -> Scenario:
    """Load a scenario from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: invalid YAML: {e}") from e
    scenario = parse_scenario(data, source=path)
    logger.debug("loaded %d task(s) from %s", len(scenario.tasks), path)
    return scenario
