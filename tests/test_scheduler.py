"""Hand-crafted unit tests for the event-driven scheduler."""

import unittest
from rtsim.models import EXE, IDLE, MISS, WAIT, STATES, Job, Policy, TaskSpec
from rtsim.ordering import period_table, pick_job, priority_key
from rtsim.scheduler import simulate, run_simulation


def task(id, C, T, D=None, offset=0):
    return TaskSpec(id=id, offset=offset, C=C, T=T, D=T if D is None else D)


class TestOrdering(unittest.TestCase):
    """Test the RM and EDF tie-break chains."""

    def setUp(self):
        self.periods = {1: 10, 2: 5, 3: 5}

    def test_rm_prefers_shorter_period(self):
        """Test that RM ranks by task period first."""
        a = Job(task_id=1, remaining=1, release=0, deadline_abs=3)
        b = Job(task_id=2, remaining=1, release=4, deadline_abs=9)
        self.assertIs(pick_job([a, b], Policy.RM, self.periods), b)

    def test_edf_prefers_earlier_deadline(self):
        """Test that EDF ranks by absolute deadline first."""
        a = Job(task_id=1, remaining=1, release=0, deadline_abs=3)
        b = Job(task_id=2, remaining=1, release=4, deadline_abs=9)
        self.assertIs(pick_job([a, b], Policy.EDF, self.periods), a)

    def test_tie_break_on_release_then_id(self):
        """Test that ties fall back to release time, then task id."""
        late = Job(task_id=2, remaining=1, release=5, deadline_abs=10)
        early = Job(task_id=3, remaining=1, release=0, deadline_abs=10)
        self.assertIs(pick_job([late, early], Policy.RM, self.periods), early)
        self.assertIs(pick_job([late, early], Policy.EDF, self.periods), early)

        low = Job(task_id=2, remaining=1, release=0, deadline_abs=10)
        high = Job(task_id=3, remaining=1, release=0, deadline_abs=10)
        self.assertIs(pick_job([high, low], Policy.RM, self.periods), low)
        self.assertIs(pick_job([high, low], Policy.EDF, self.periods), low)

    def test_empty_ready_set(self):
        """Test that nothing is picked from an empty ready set."""
        self.assertIsNone(pick_job([], Policy.EDF, self.periods))

    def test_priority_key(self):
        """Test the key tuples of both policies."""
        job = Job(task_id=3, remaining=2, release=4, deadline_abs=9)
        self.assertEqual(priority_key(job, Policy.RM, self.periods), (5, 4, 3))
        self.assertEqual(priority_key(job, Policy.EDF, self.periods), (9, 4, 3))

    def test_period_table_last_duplicate_wins(self):
        """Test that duplicate ids map to the period of the last task."""
        table = period_table([task(1, 1, 4), task(1, 1, 7)])
        self.assertEqual(table, {1: 7})


class TestScenarios(unittest.TestCase):
    """Test reference scenarios end to end."""

    def test_single_task(self):
        """Scenario A: one light task under RM."""
        result = run_simulation([{"tempo": 1, "periodo": 4, "chegada": 0, "deadline": 0}], 8, "rm")
        self.assertEqual(
            list(result.timelines[0]),
            [EXE, IDLE, IDLE, IDLE, EXE, IDLE, IDLE, IDLE],
        )
        self.assertTrue(result.schedulable)

    def test_edf_feasible_pair(self):
        """Scenario B: EDF with utilization 0.9 meets every deadline."""
        tasks = [task(1, C=2, T=5), task(2, C=2, T=4)]
        timelines = simulate(tasks, 10, Policy.EDF)

        # Task 2 has the tighter deadline and takes the processor at t=0
        self.assertEqual(timelines[1][0], EXE)
        self.assertEqual(timelines[0][0], WAIT)
        self.assertEqual(timelines[0], [WAIT, WAIT, EXE, EXE, IDLE, WAIT, EXE, EXE, IDLE, IDLE])
        self.assertEqual(timelines[1], [EXE, EXE, IDLE, IDLE, EXE, EXE, IDLE, IDLE, EXE, EXE])
        for timeline in timelines:
            self.assertNotIn(MISS, timeline)

    def test_overloaded_pair(self):
        """Scenario C: utilization 1.5 misses under both policies."""
        tasks = [task(1, C=3, T=4), task(2, C=3, T=4)]
        for policy in Policy:
            result = run_simulation(tasks, 8, policy)
            self.assertFalse(result.schedulable)
            self.assertEqual(result.timelines[0], (EXE, EXE, EXE, IDLE, WAIT, WAIT, EXE, EXE))
            self.assertEqual(result.timelines[1], (WAIT, WAIT, WAIT, EXE, MISS, MISS, WAIT, WAIT))

    def test_release_after_horizon(self):
        """Scenario D: a task released after the horizon stays idle."""
        result = run_simulation([{"chegada": 3, "tempo": 1, "periodo": 5}], 3, "edf")
        self.assertEqual(result.timelines[0], (IDLE, IDLE, IDLE))
        self.assertTrue(result.schedulable)


class TestSchedulerBehaviour(unittest.TestCase):
    """Test preemption, deadline misses and labelling rules."""

    def test_rm_preemption_at_release(self):
        """Test that a shorter-period release preempts a running job."""
        tasks = [task(1, C=4, T=10), task(2, C=1, T=3, offset=2)]
        timelines = simulate(tasks, 6, Policy.RM)
        self.assertEqual(timelines[0], [EXE, EXE, WAIT, EXE, EXE, IDLE])
        self.assertEqual(timelines[1], [IDLE, IDLE, EXE, IDLE, IDLE, EXE])

    def test_rm_and_edf_differ(self):
        """Test a set where the longer period has the earlier deadline."""
        tasks = [task(1, C=2, T=4), task(2, C=2, T=6, D=3)]
        rm = simulate(tasks, 4, Policy.RM)
        edf = simulate(tasks, 4, Policy.EDF)

        self.assertEqual(rm[0][:2], [EXE, EXE])
        self.assertEqual(rm[1], [WAIT, WAIT, EXE, MISS])
        self.assertEqual(edf[1][:2], [EXE, EXE])
        self.assertEqual(edf[0], [WAIT, WAIT, EXE, EXE])
        self.assertNotIn(MISS, edf[1])

    def test_rm_equal_periods_earlier_release_first(self):
        """Test that with equal periods the earlier release runs first."""
        tasks = [task(1, C=2, T=8, offset=1), task(2, C=2, T=8, offset=0)]
        timelines = simulate(tasks, 4, Policy.RM)
        self.assertEqual(timelines[1], [EXE, EXE, IDLE, IDLE])
        self.assertEqual(timelines[0], [IDLE, WAIT, EXE, EXE])

    def test_rm_equal_periods_lower_id_first(self):
        """Test that with equal periods and releases the lower id runs first."""
        tasks = [task(7, C=1, T=5), task(3, C=1, T=5)]
        timelines = simulate(tasks, 2, Policy.RM)
        self.assertEqual(timelines[1], [EXE, IDLE])
        self.assertEqual(timelines[0], [WAIT, EXE])

    def test_finishing_at_deadline_is_on_time(self):
        """Test that completing exactly at the deadline is not a miss."""
        timelines = simulate([task(1, C=2, T=4, D=2)], 4, Policy.EDF)
        self.assertEqual(timelines[0], [EXE, EXE, IDLE, IDLE])

    def test_miss_while_executing(self):
        """Test that a late job is flagged as a miss while it still runs."""
        timelines = simulate([task(1, C=3, T=5, D=2)], 5, Policy.RM)
        self.assertEqual(timelines[0], [EXE, EXE, MISS, IDLE, IDLE])

    def test_miss_while_waiting(self):
        """Test that a job never selected is flagged until the horizon."""
        tasks = [task(1, C=6, T=6), task(2, C=1, T=8, D=2)]
        timelines = simulate(tasks, 6, Policy.RM)
        self.assertEqual(timelines[0], [EXE] * 6)
        self.assertEqual(timelines[1], [WAIT, WAIT, MISS, MISS, MISS, MISS])

    def test_backlog_of_same_task(self):
        """Test that an overdue backlog job keeps the task flagged."""
        timelines = simulate([task(1, C=3, T=2)], 6, Policy.RM)
        self.assertEqual(timelines[0], [EXE, EXE, MISS, EXE, MISS, MISS])

    def test_event_count_independent_of_horizon(self):
        """Test that time advances by events, not unit by unit."""
        with self.assertLogs("rtsim.scheduler", "DEBUG") as logs:
            timelines = simulate([task(1, C=1, T=10_000)], 10_000, Policy.RM)
        self.assertEqual(timelines[0][:2], [EXE, IDLE])
        self.assertIn("in 2 event(s)", logs.output[-1])

    def test_event_count_tracks_releases_and_completions(self):
        """Test that each release and completion costs at most one iteration."""
        with self.assertLogs("rtsim.scheduler", "DEBUG") as logs:
            simulate([task(1, C=2, T=1000), task(2, C=3, T=2500)], 5000, Policy.EDF)
        # 6 release instants plus 7 completions
        self.assertIn("in 13 event(s)", logs.output[-1])

    def test_text_ids_are_renumbered(self):
        """Test that raw descriptors with non-integer ids still simulate."""
        result = run_simulation([{"id": "a", "tempo": 1, "periodo": 4}, {"id": 2, "tempo": 1, "periodo": 4}], 8, "rm")
        self.assertEqual([t.id for t in result.tasks], [1, 2])
        self.assertEqual(result.timelines[0], (EXE, IDLE, IDLE, IDLE, EXE, IDLE, IDLE, IDLE))
        self.assertEqual(result.timelines[1], (WAIT, EXE, IDLE, IDLE, WAIT, EXE, IDLE, IDLE))
        self.assertTrue(result.schedulable)

    def test_non_mapping_descriptor_simulates(self):
        """Test that an entry which is not a mapping becomes a minimal task."""
        result = run_simulation([3], 4, "edf")
        self.assertEqual(result.timelines[0], (EXE, EXE, EXE, EXE))

    def test_idle_gap_between_releases(self):
        """Test that idle stretches between releases stay idle."""
        timelines = simulate([task(1, C=1, T=100, offset=2)], 10, Policy.EDF)
        self.assertEqual(timelines[0], [IDLE, IDLE, EXE] + [IDLE] * 7)

    def test_empty_task_list(self):
        """Test that an empty task set yields no timelines."""
        self.assertEqual(simulate([], 10, Policy.RM), [])
        result = run_simulation([], 10, "edf")
        self.assertEqual(result.timelines, ())
        self.assertTrue(result.schedulable)

    def test_duplicate_ids_do_not_crash(self):
        """Test that duplicate ids still produce full timelines."""
        tasks = [task(1, C=1, T=2), task(1, C=1, T=3)]
        timelines = simulate(tasks, 6, Policy.EDF)
        self.assertEqual(len(timelines), 2)
        self.assertTrue(all(len(t) == 6 for t in timelines))

    def test_unknown_policy(self):
        """Test that an unknown policy name raises ValueError."""
        with self.assertRaises(ValueError):
            simulate([task(1, C=1, T=2)], 4, "fifo")

    def test_policy_strings_accepted(self):
        """Test that policy names are case-insensitive."""
        tasks = [task(1, C=1, T=2)]
        self.assertEqual(simulate(tasks, 4, "EDF"), simulate(tasks, 4, Policy.EDF))


class TestSchedulerProperties(unittest.TestCase):
    """Test properties that hold for every run."""

    TASKS = [
        task(1, C=2, T=5, offset=1),
        task(2, C=3, T=7, D=5),
        task(3, C=1, T=3, offset=2),
        task(4, C=4, T=11),
    ]

    def test_deterministic(self):
        """Test that repeated runs return identical timelines."""
        for policy in Policy:
            first = simulate(self.TASKS, 60, policy)
            second = simulate(self.TASKS, 60, policy)
            self.assertEqual(first, second)

    def test_coverage_and_single_processor(self):
        """Test that every unit is labelled and at most one task executes."""
        for policy in Policy:
            timelines = simulate(self.TASKS, 60, policy)
            for timeline in timelines:
                self.assertEqual(len(timeline), 60)
                for state in timeline:
                    self.assertIn(state, STATES)
            for t in range(60):
                running = sum(1 for timeline in timelines if timeline[t] == EXE)
                self.assertLessEqual(running, 1)

    def test_input_not_mutated(self):
        """Test that simulation leaves its inputs untouched."""
        tasks = list(self.TASKS)
        simulate(tasks, 30, Policy.EDF)
        self.assertEqual(tasks, self.TASKS)


if __name__ == "__main__":
    unittest.main()
