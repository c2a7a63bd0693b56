from __future__ import annotations

import math
import pathlib
import sys
import threading
from typing import List

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduler import FrameScheduler
from spectrum_link_sim import (
    LinkConfig,
    LockState,
    Regime,
    SimulationParameters,
    TickSnapshot,
    build_link_simulation,
)


def ir_params(carrier_hz: float = 38e3) -> SimulationParameters:
    return SimulationParameters(
        carrier_frequency_hz=carrier_hz,
        duty_cycle_percent=33.0,
        propagation_frequency_hz=400e12,
    )


def test_ir_link_locks_then_unlocks_when_detuned() -> None:
    sim = build_link_simulation(
        model="infrared",
        seed=1,
        link_config=LinkConfig(IR_NOISE_LEVEL=10.0),
        params=ir_params(),
    )
    snap = sim.tick()
    assert math.isclose(snap.metric.value, 10 * math.log10(33.0), rel_tol=1e-9)
    assert snap.lock_state is LockState.LOCKED
    assert snap.indicator == "0xAF32_77_E9"
    assert snap.regime is Regime.INFRARED_OPTICAL

    sim.configure(ir_params(76e3))
    snap = sim.tick()
    assert snap.lock_state is LockState.UNLOCKED
    assert snap.indicator is None


def test_default_ir_noise_stays_below_lock_threshold() -> None:
    sim = build_link_simulation(model="infrared", params=ir_params())
    snap = sim.tick()
    assert snap.metric.value < 12.0
    assert snap.lock_state is LockState.UNLOCKED


def test_regime_follows_carrier_without_propagation_override() -> None:
    sim = build_link_simulation(model="friis", params=SimulationParameters(carrier_frequency_hz=15e9))
    assert sim.tick().regime is Regime.TERRESTRIAL_MICROWAVE
    sim.configure(SimulationParameters(carrier_frequency_hz=100e9))
    assert sim.tick().regime is Regime.SATELLITE_MICROWAVE


def test_configure_moves_obstacle() -> None:
    sim = build_link_simulation(model="friis")
    sim.configure(SimulationParameters(carrier_frequency_hz=15e9, obstacle_position=(300.0, 50.0)))
    bounds = sim.tick().obstacle
    assert (bounds.x, bounds.y) == (300.0, 50.0)


def test_reset_clears_packets_and_lock() -> None:
    sim = build_link_simulation(
        model="infrared",
        link_config=LinkConfig(IR_NOISE_LEVEL=10.0),
        params=ir_params(),
    )
    sim.emit()
    sim.emit()
    assert sim.tick().lock_state is LockState.LOCKED
    sim.reset()
    assert sim.propagation.packets == []
    assert sim.lock.state is LockState.UNLOCKED
    assert sim.tick_count == 0


def test_seeded_instances_are_independent_and_deterministic() -> None:
    params = SimulationParameters(carrier_frequency_hz=10e9)
    a = build_link_simulation(model="friis", seed=5, params=params)
    b = build_link_simulation(model="friis", seed=5, params=params)
    b.propagation.move_obstacle(0.0, 0.0)
    assert a.propagation.obstacle is not b.propagation.obstacle
    assert a.propagation.obstacle_bounds().x == 450.0

    for _ in range(30):
        a.emit()
        b.emit()
        a.tick()
        b.tick()
    # The obstacles only differ far ahead of the packets, so trajectories match.
    assert [p.y for p in a.propagation.packets] == [p.y for p in b.propagation.packets]


def test_scheduler_runs_headless_at_nominal_rate() -> None:
    sim = build_link_simulation(model="friis", params=SimulationParameters(carrier_frequency_hz=100e9))
    frames: List[TickSnapshot] = []
    scheduler = FrameScheduler(simulation=sim, on_frame=frames.append)
    snapshots = scheduler.run(1.0)
    assert len(snapshots) == 60
    assert frames == snapshots
    assert scheduler.emitted == 10
    first = snapshots[-1].packets[0]
    assert math.isclose(first.x, 100.0 + 7.0 * 60, abs_tol=1e-6)
    assert snapshots[-1].tick == 60


def test_emission_density_independent_of_frame_rate() -> None:
    counts = []
    for fps in (30.0, 120.0):
        sim = build_link_simulation(model="friis", params=SimulationParameters(carrier_frequency_hz=100e9))
        scheduler = FrameScheduler(simulation=sim)
        scheduler.run(1.0, fps=fps)
        counts.append(scheduler.emitted)
    assert counts == [10, 10]


def test_emission_density_holds_below_one_frame_per_second() -> None:
    counts = []
    for frame_times in (
        [i / 60.0 for i in range(304)],
        [0.0, 1.55, 3.05, 5.05],
    ):
        sim = build_link_simulation(model="friis", params=SimulationParameters(carrier_frequency_hz=100e9))
        scheduler = FrameScheduler(simulation=sim)
        scheduler.run_frames(frame_times)
        counts.append(scheduler.emitted)
    # Both runs end at t=5.05 s: boundaries 0.0, 0.1, ..., 5.0.
    assert counts == [51, 51]


def test_tick_snapshot_matches_its_step_under_concurrent_obstacle_move() -> None:
    sim = build_link_simulation(model="friis", params=SimulationParameters(carrier_frequency_hz=10e9))
    prop = sim.propagation
    before = prop.obstacle_bounds()
    real_step = prop.step
    movers: List[threading.Thread] = []

    def step_then_move_from_another_thread(regime: Regime, dt: float = 1.0):
        removed = real_step(regime, dt)
        mover = threading.Thread(target=prop.move_obstacle, args=(0.0, 0.0))
        mover.start()
        mover.join(timeout=0.1)
        movers.append(mover)
        return removed

    prop.step = step_then_move_from_another_thread  # type: ignore[assignment]
    snap = sim.tick()
    movers[0].join(timeout=5.0)

    assert snap.obstacle == before
    assert not movers[0].is_alive()
    assert (prop.obstacle_bounds().x, prop.obstacle_bounds().y) == (0.0, 0.0)


def test_scheduler_reset() -> None:
    sim = build_link_simulation(model="friis")
    scheduler = FrameScheduler(simulation=sim)
    scheduler.run(0.5)
    scheduler.reset()
    assert scheduler.frames == 0
    assert scheduler.emitted == 0
    assert sim.propagation.packets == []
