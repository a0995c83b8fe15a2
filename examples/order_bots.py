"""Order-bot kitchen: VIP and normal orders dispatched to a pool of bots.

Orders arrive as a Poisson stream; a fraction of them are VIP (HIGH
priority). A fixed number of bots start at t=0, one more joins during the
lunch rush, and the newest bot is switched off later, handing its order
back to the queue. Queue depth and busy bots are sampled every second.

## Architecture Diagram

```
+---------------------------------------------------------------+
|                     ORDER BOT SIMULATION                        |
+---------------------------------------------------------------+

  SubmitJob events          +------------------+        +-------+
  (Poisson, VIP mix) -----> |  DispatchEngine  | -----> | bot 1 |
                            |  HIGH | NORMAL   | -----> | bot 2 |
  AddWorker/RemoveWorker -> |  queue           | -----> |  ...  |
                            +------------------+        +-------+
                                     ^
                                     | probes: pending_count, processing_count
```
"""

from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from pathlib import Path

from dispatchsim import (
    Data,
    DispatchEngine,
    Event,
    Instant,
    Priority,
    Probe,
    Simulation,
    SimulationSummary,
    jobs_to_dataframe,
)
from dispatchsim.components.dispatch import (
    ADD_WORKER_EVENT,
    REMOVE_WORKER_EVENT,
    SUBMIT_JOB_EVENT,
)

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class OrderBotConfig:
    """Configuration for the order bot simulation."""

    duration_s: float = 600.0
    arrival_rate_per_min: float = 9.0
    vip_pct: float = 0.25
    initial_bots: int = 2
    rush_bot_at_s: float = 120.0
    retire_bot_at_s: float = 420.0
    processing_time: float = 10.0
    seed: int = 42


# =============================================================================
# Result
# =============================================================================


@dataclass
class OrderBotResult:
    """Results from the order bot simulation."""

    engine: DispatchEngine
    pending: Data
    processing: Data
    config: OrderBotConfig
    summary: SimulationSummary


# =============================================================================
# Simulation Runner
# =============================================================================


def _arrivals(engine: DispatchEngine, config: OrderBotConfig) -> list[Event]:
    events = []
    t = 0.0
    rate_per_s = config.arrival_rate_per_min / 60.0
    while True:
        t += random.expovariate(rate_per_s)
        if t > config.duration_s:
            return events
        priority = Priority.HIGH if random.random() < config.vip_pct else Priority.NORMAL
        events.append(
            Event(
                time=Instant.from_seconds(t),
                event_type=SUBMIT_JOB_EVENT,
                target=engine,
                context={"metadata": {"priority": priority}},
            )
        )


def run_order_bot_simulation(config: OrderBotConfig | None = None) -> OrderBotResult:
    """Run the order bot simulation."""
    if config is None:
        config = OrderBotConfig()

    random.seed(config.seed)

    engine = DispatchEngine("Kitchen", processing_time=config.processing_time)
    probes, series = Probe.on_many(engine, ["pending_count", "processing_count"], interval=1.0)

    sim = Simulation(
        start_time=Instant.Epoch,
        end_time=Instant.from_seconds(config.duration_s * 2),
        entities=[engine],
        probes=probes,
    )

    for _ in range(config.initial_bots):
        engine.add_worker()

    sim.schedule(_arrivals(engine, config))
    sim.schedule(
        [
            Event(time=Instant.from_seconds(config.rush_bot_at_s), event_type=ADD_WORKER_EVENT, target=engine),
            Event(time=Instant.from_seconds(config.retire_bot_at_s), event_type=REMOVE_WORKER_EVENT, target=engine),
        ]
    )

    summary = sim.run()

    return OrderBotResult(
        engine=engine,
        pending=series["pending_count"],
        processing=series["processing_count"],
        config=config,
        summary=summary,
    )


# =============================================================================
# Summary
# =============================================================================


def print_summary(result: OrderBotResult) -> None:
    """Print a formatted summary of the order bot simulation results."""
    config = result.config
    stats = result.engine.stats
    frame = jobs_to_dataframe(result.engine)
    done = frame.dropna(subset=["turnaround_s"])

    print("\n" + "=" * 65)
    print("ORDER BOT SIMULATION RESULTS")
    print("=" * 65)

    print("\nConfiguration:")
    print(f"  Arrival window:      {config.duration_s:.0f}s")
    print(f"  Arrival rate:        {config.arrival_rate_per_min:.1f}/min ({config.vip_pct:.0%} VIP)")
    print(f"  Bots:                {config.initial_bots} (+1 at {config.rush_bot_at_s:.0f}s, -1 at {config.retire_bot_at_s:.0f}s)")

    print("\nOrders:")
    print(f"  Submitted:           {stats.jobs_submitted}")
    print(f"  Completed:           {stats.jobs_completed}")
    print(f"  Requeued:            {stats.jobs_requeued}")
    print(f"  Peak queue depth:    {result.pending.max():.0f}")

    if not done.empty:
        print("\nTurnaround by priority:")
        for priority, group in done.groupby("priority"):
            print(f"  {priority:8s} mean {group['turnaround_s'].mean():6.1f}s   max {group['turnaround_s'].max():6.1f}s")

    print(f"\n{result.summary}")
    print("=" * 65)


def plot_results(result: OrderBotResult, path: Path) -> None:
    """Save queue depth and busy bots over time to `path`."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.step(result.pending.times(), result.pending.raw_values(), where="post", label="pending orders")
    ax.step(result.processing.times(), result.processing.raw_values(), where="post", label="busy bots")
    ax.axvline(result.config.rush_bot_at_s, color="gray", linestyle="--", linewidth=0.8)
    ax.axvline(result.config.retire_bot_at_s, color="gray", linestyle=":", linewidth=0.8)
    ax.set_xlabel("time (s)")
    ax.set_ylabel("count")
    ax.set_title("Order bot dispatch")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order bot dispatch simulation")
    parser.add_argument("--duration", type=float, default=600.0, help="Arrival window in seconds")
    parser.add_argument("--rate", type=float, default=9.0, help="Orders per minute")
    parser.add_argument("--vip", type=float, default=0.25, help="Fraction of VIP orders")
    parser.add_argument("--bots", type=int, default=2, help="Bots at t=0")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--plot", type=Path, default=None, help="Write a PNG chart here")
    args = parser.parse_args()

    cfg = OrderBotConfig(
        duration_s=args.duration,
        arrival_rate_per_min=args.rate,
        vip_pct=args.vip,
        initial_bots=args.bots,
        seed=args.seed if args.seed != -1 else random.randint(0, 2**31),
    )

    print("Running order bot simulation...")
    result = run_order_bot_simulation(cfg)
    print_summary(result)
    if args.plot is not None:
        plot_results(result, args.plot)
        print(f"Chart written to {args.plot}")
