"""Schedulability vs Utilisation Experiment.

Generates random integer task sets at various utilisation levels using
UUniFast, simulates each one under RM and EDF over one hyperperiod, and plots
the fraction of task sets without a deadline miss as a function of utilisation.
"""

from pathlib import Path

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from rtsim.analysis import hyperperiod, is_schedulable
from rtsim.generators import DEFAULT_PERIODS, generate_tasks
from rtsim.models import Policy
from rtsim.normalizer import normalize_horizon
from rtsim.scheduler import simulate


def run_schedulability_experiment(
    utilisation_points: list,
    num_task_sets_per_point: int = 100,
    num_tasks: int = 5,
    periods: tuple = DEFAULT_PERIODS,
    seed: int = 42,
) -> dict:
    """Run schedulability experiment across utilisation levels.

    Args:
        utilisation_points: List of utilisation values to test (e.g. [0.1, 0.2, ..., 0.9]).
        num_task_sets_per_point: Number of random task sets to generate per utilisation.
        num_tasks: Number of tasks per task set.
        periods: Candidate task periods.
        seed: Base random seed (will be varied per task set).

    Returns:
        Dictionary mapping policy name -> {utilisation -> schedulability ratio}.
    """
    results = {policy.value: {} for policy in Policy}

    for u_total in utilisation_points:
        schedulable_count = {policy.value: 0 for policy in Policy}

        for i in range(num_task_sets_per_point):
            # Use different seed for each task set
            task_set_seed = seed + int(u_total * 1000) + i

            tasks = generate_tasks(
                n=num_tasks,
                target_utilization=u_total,
                periods=periods,
                seed=task_set_seed,
            )
            horizon = normalize_horizon(hyperperiod(tasks))

            for policy in Policy:
                if is_schedulable(simulate(tasks, horizon, policy)):
                    schedulable_count[policy.value] += 1

        for name, count in schedulable_count.items():
            results[name][u_total] = count / num_task_sets_per_point

    return results


def plot_schedulability_vs_utilisation(
    results: dict,
    output_path: str = "results/schedulability_vs_utilisation.png",
) -> None:
    """Plot schedulability ratio vs utilisation, one line per policy.

    Args:
        results: Dictionary mapping policy name -> {utilisation -> ratio}.
        output_path: Path to save the plot.
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib is required for plotting")

    output_dir = Path(output_path).parent
    output_dir.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(10, 6))
    for (name, ratios), style in zip(sorted(results.items()), ('bo-', 'rs--')):
        utilisations = sorted(ratios.keys())
        plt.plot(utilisations, [ratios[u] for u in utilisations], style,
                 linewidth=2, markersize=8, label=name.upper())
    plt.xlabel('Total Utilisation', fontsize=12)
    plt.ylabel('Schedulability Ratio', fontsize=12)
    plt.title('Schedulability vs Utilisation (simulated)', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.xlim(0, 1.2)
    plt.ylim(0, 1.05)

    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"Plot saved to {output_path}")


def main():
    """Run the full schedulability vs utilisation experiment."""
    print("Running schedulability vs utilisation experiment...")

    utilisation_points = [u / 10.0 for u in range(1, 13)]  # 0.1, 0.2, ..., 1.2

    results = run_schedulability_experiment(
        utilisation_points=utilisation_points,
        num_task_sets_per_point=150,
        num_tasks=5,
        seed=42,
    )

    print("\nResults:")
    for u in utilisation_points:
        row = "  ".join(f"{name.upper()}={ratios[u]:.3f}" for name, ratios in sorted(results.items()))
        print(f"  U = {u:.1f}: {row}")

    plot_schedulability_vs_utilisation(results)

    print("\nExperiment complete!")


if __name__ == "__main__":
    main()
