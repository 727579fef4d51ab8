"""Random task set generators for tests and experiments."""

import random
from typing import List, Optional, Sequence

from rtsim.models import MAX_VALUE, TaskSpec


DEFAULT_PERIODS = (4, 5, 8, 10, 16, 20, 25, 40, 50, 80, 100)


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Generate task utilizations using the UUniFast algorithm.

    UUniFast generates uniformly distributed task utilizations that sum to
    the target total utilization.

    Reference:
    Bini, E., & Buttazzo, G. C. (2005). Measuring the performance of schedulability tests.
    Real-Time Systems, 30(1-2), 129-154.

    Args:
        n: Number of tasks.
        u_total: Target total utilization.
        seed: Optional random seed for reproducibility.

    Returns:
        List of n utilization values that sum to approximately u_total.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError("Number of tasks must be positive")
    if u_total < 0:
        raise ValueError("Target utilization must be non-negative")

    rng = random.Random(seed)

    utilizations = []
    sum_u = u_total
    for i in range(1, n):
        next_sum_u = sum_u * (rng.random() ** (1.0 / (n - i)))
        utilizations.append(sum_u - next_sum_u)
        sum_u = next_sum_u

    # Last utilization is whatever remains
    utilizations.append(sum_u)

    return utilizations


def generate_tasks(
    n: int,
    target_utilization: float,
    periods: Sequence[int] = DEFAULT_PERIODS,
    max_offset: int = 0,
    deadline_factor_min: float = 1.0,
    deadline_factor_max: float = 1.0,
    seed: Optional[int] = None
) -> List[TaskSpec]:
    """Generate n integer periodic tasks with UUniFast utilizations.

    Periods are drawn from ``periods`` so the hyperperiod stays small enough
    to simulate. Execution times are rounded to the nearest integer and
    never drop below 1, so the achieved utilization only approximates the
    target for short periods.

    Args:
        n: Number of tasks to generate.
        target_utilization: Target total utilization.
        periods: Candidate periods.
        max_offset: Largest first-release offset (offsets are uniform in
            ``[0, max_offset]``).
        deadline_factor_min: Minimum ratio D/T.
        deadline_factor_max: Maximum ratio D/T.
        seed: Random seed for reproducibility.

    Returns:
        Tasks with ids 1..n in generation order.

    Raises:
        ValueError: If parameters are invalid.
    """
    if not periods or any(p <= 0 or p > MAX_VALUE for p in periods):
        raise ValueError("Invalid period range")
    if max_offset < 0 or max_offset > MAX_VALUE:
        raise ValueError("Invalid offset range")
    if deadline_factor_min <= 0 or deadline_factor_max < deadline_factor_min:
        raise ValueError("Invalid deadline factor range")
    if deadline_factor_max > 1.0:
        raise ValueError("Deadline factor cannot exceed 1.0 (D must be <= T)")

    rng = random.Random(seed)
    utilizations = uunifast(n, target_utilization, seed=seed)

    tasks = []
    for i, u in enumerate(utilizations):
        T = rng.choice(list(periods))
        C = min(max(1, round(u * T)), MAX_VALUE)

        if deadline_factor_min == deadline_factor_max:
            deadline_factor = deadline_factor_min
        else:
            deadline_factor = rng.uniform(deadline_factor_min, deadline_factor_max)
        D = max(1, round(T * deadline_factor))

        # Ensure C <= D (might not hold due to rounding)
        if C > D:
            D = min(C, T)

        offset = rng.randint(0, max_offset) if max_offset else 0
        tasks.append(TaskSpec(id=i + 1, offset=offset, C=C, T=T, D=D))

    return tasks
