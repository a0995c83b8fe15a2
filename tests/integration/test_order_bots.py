"""Integration test for the order bot dispatch simulation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from dispatchsim import JobStatus, Priority, jobs_to_dataframe
from examples.order_bots import OrderBotConfig, plot_results, run_order_bot_simulation


@pytest.fixture(scope="module")
def result():
    return run_order_bot_simulation(OrderBotConfig(duration_s=600.0, seed=42))


class TestOrderBotSimulation:

    def test_runs_to_completion(self, result):
        """Every submitted order is eventually completed once arrivals stop."""
        stats = result.engine.stats

        assert result.summary.total_events_processed > 0
        assert stats.jobs_submitted > 0
        assert stats.jobs_completed == stats.jobs_submitted
        assert result.engine.pending_count == 0
        assert result.engine.processing_count == 0

    def test_worker_pool_changes(self, result):
        """One bot joins during the rush and the newest one is retired."""
        config = result.config
        stats = result.engine.stats

        assert stats.workers_added == config.initial_bots + 1
        assert stats.workers_removed == 1
        assert [w.id for w in result.engine.workers] == list(range(1, config.initial_bots + 1))

    def test_every_order_done_once(self, result):
        jobs = result.engine.jobs
        assert [j.id for j in sorted(jobs, key=lambda j: j.id)] == list(range(1, len(jobs) + 1))
        assert all(j.status is JobStatus.DONE for j in jobs)
        assert all(j.completed_at is not None and j.completed_at >= j.created_at for j in jobs)

    def test_turnaround_at_least_processing_time(self, result):
        frame = jobs_to_dataframe(result.engine)
        assert (frame["turnaround_s"] >= result.config.processing_time - 1e-9).all()

    def test_vip_orders_wait_less(self):
        """Under heavy load, HIGH orders overtake NORMAL ones in the queue."""
        config = OrderBotConfig(duration_s=900.0, arrival_rate_per_min=14.0, vip_pct=0.3, seed=7)
        frame = jobs_to_dataframe(run_order_bot_simulation(config).engine)

        means = frame.groupby("priority")["turnaround_s"].mean()
        assert means[Priority.HIGH.value] < means[Priority.NORMAL.value]

    def test_busy_bots_never_exceed_pool(self, result):
        max_pool = result.config.initial_bots + 1
        assert result.processing.max() <= max_pool
        assert result.pending.count() > 0

    def test_deterministic_for_seed(self, result):
        again = run_order_bot_simulation(replace(result.config))
        assert again.engine.stats == result.engine.stats
        assert again.pending.raw_values() == result.pending.raw_values()

    def test_plot(self, result, test_output_dir):
        path = test_output_dir / "order_bots.png"
        plot_results(result, path)
        assert path.exists()
        assert path.stat().st_size > 0
