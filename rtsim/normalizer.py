"""Normalization of raw task descriptors into TaskSpec records.

Raw descriptors come from a configuration form or file and may miss fields
or carry out-of-range values. Nothing here rejects input: every numeric field
is floored, defaulted to its minimum when it is not a finite number, and then
clamped into its valid range.

Field names follow the configuration form (``chegada``, ``tempo``,
``periodo``, ``deadline``); English aliases are accepted as well.
"""

import math
from numbers import Real
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from rtsim.models import MAX_VALUE, TaskSpec


# (canonical name, aliases)
_FIELDS = {
    "offset": ("chegada", "offset"),
    "C": ("tempo", "C", "wcet"),
    "T": ("periodo", "T", "period"),
    "D": ("deadline", "D"),
}


def clamp_int(value: Any, lo: int, hi: int) -> int:
    """Floor ``value`` and clamp it to ``[lo, hi]``.

    Anything that is not a finite real number (None, NaN, infinities,
    strings, booleans) is replaced by ``lo``.
    """
    if isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value):
        n = math.floor(value)
    else:
        n = lo
    return max(lo, min(hi, n))


def normalize_horizon(value: Any) -> int:
    """Clamp a requested horizon to 1..MAX_VALUE."""
    return clamp_int(value, 1, MAX_VALUE)


def _lookup(raw: Mapping[str, Any], name: str) -> Optional[Any]:
    for key in _FIELDS[name]:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize_task(raw: Any, position: int) -> TaskSpec:
    """Build a TaskSpec from one raw descriptor.

    Args:
        raw: Mapping of field names to values, or an existing TaskSpec.
            Anything else is treated as an empty mapping.
        position: Zero-based index of the descriptor in its input sequence,
            used to derive a missing or non-integer identifier.

    Returns:
        The normalized task. A deadline of 0 is replaced by the period.
    """
    if isinstance(raw, TaskSpec):
        raw = {"id": raw.id, "offset": raw.offset, "C": raw.C, "T": raw.T, "D": raw.D}
    if not isinstance(raw, Mapping):
        raw = {}

    T = clamp_int(_lookup(raw, "T"), 1, MAX_VALUE)
    C = clamp_int(_lookup(raw, "C"), 1, MAX_VALUE)
    offset = clamp_int(_lookup(raw, "offset"), 0, MAX_VALUE)
    D = clamp_int(_lookup(raw, "D"), 0, MAX_VALUE)
    if D == 0:
        D = T

    task_id = raw.get("id")
    if not isinstance(task_id, int) or isinstance(task_id, bool):
        task_id = position + 1

    return TaskSpec(id=task_id, offset=offset, C=C, T=T, D=D)


def normalize_tasks(raw_tasks: Optional[Iterable[Any]], horizon: Any) -> Tuple[List[TaskSpec], int]:
    """Normalize a sequence of raw descriptors and the requested horizon.

    Duplicate identifiers are passed through unchanged.
    """
    tasks = [normalize_task(raw, i) for i, raw in enumerate(raw_tasks or [])]
    return tasks, normalize_horizon(horizon)
