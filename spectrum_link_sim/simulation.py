from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging
import random

from .config import FieldConfig, LinkConfig
from .entities import (
    LinkMetric,
    LockState,
    ObstacleBounds,
    Packet,
    Regime,
    SimulationParameters,
)
from .lock import LockStateMachine
from .physics import LinkBudgetModel, build_link_model
from .propagation import PacketPropagationSimulator
from .regime import PACKET_INTERACTION_BANDS, BandTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickSnapshot:
    """Read-only view of the core handed to the renderer after each tick."""
    tick: int
    metric: LinkMetric
    lock_state: LockState
    indicator: Optional[str]
    regime: Regime
    packets: Tuple[Packet, ...]
    obstacle: ObstacleBounds
    received_count: int
    removed: Tuple[Packet, ...]


@dataclass
class LinkSimulation:
    """
    One independent link view: link budget, lock, regime and packet field.

    The host calls configure(...) whenever its inputs change, emit_due(...)
    on wall-clock time and tick(...) once per frame. Nothing here schedules
    itself; see scheduler.FrameScheduler for a headless driver.
    """
    link_model: LinkBudgetModel
    lock: LockStateMachine
    propagation: PacketPropagationSimulator
    band_table: BandTable = PACKET_INTERACTION_BANDS
    parameters: SimulationParameters = field(default_factory=SimulationParameters)
    tick_count: int = 0

    def configure(self, params: SimulationParameters) -> None:
        self.parameters = params
        if params.obstacle_position is not None:
            x, y = params.obstacle_position
            self.propagation.move_obstacle(x, y)

    def evaluate(self) -> LinkMetric:
        return self.link_model.evaluate(self.parameters)

    def regime(self) -> Regime:
        params = self.parameters
        freq = params.propagation_frequency_hz
        if freq is None:
            freq = params.carrier_frequency_hz
        return self.band_table.classify(freq)

    def tick(self, dt: float = 1.0) -> TickSnapshot:
        """
        Metric -> lock -> regime -> packet step, in that order. The lock is
        re-evaluated on every tick, not only when parameters change.
        """
        metric = self.evaluate()
        state = self.lock.update(metric.value)
        regime = self.regime()
        prop = self.propagation
        # The step and every snapshot read share one hold of the field lock.
        with prop.lock:
            removed = prop.step(regime, dt)
            self.tick_count += 1
            return TickSnapshot(
                tick=self.tick_count,
                metric=metric,
                lock_state=state,
                indicator=self.lock.indicator,
                regime=regime,
                packets=tuple(prop.packets),
                obstacle=prop.obstacle_bounds(),
                received_count=prop.received_count(),
                removed=tuple(removed),
            )

    def emit(self, now_s: float = 0.0) -> Packet:
        return self.propagation.emit(now_s)

    def emit_due(self, now_s: float) -> List[Packet]:
        return self.propagation.emit_due(now_s)

    def reset(self) -> None:
        """Clear every packet and force the lock back to Unlocked."""
        self.propagation.reset()
        self.lock.reset()
        self.tick_count = 0
        logger.debug("Simulation reset")


def build_link_simulation(
    model: str = "infrared",
    seed: Optional[int] = None,
    link_config: Optional[LinkConfig] = None,
    field_config: Optional[FieldConfig] = None,
    band_table: BandTable = PACKET_INTERACTION_BANDS,
    params: Optional[SimulationParameters] = None,
    **lock_kwargs,
) -> LinkSimulation:
    """
    Convenience constructor wiring a link model, lock and packet field
    around one seeded random source.
    """
    link_config = link_config or LinkConfig()
    field_config = field_config or FieldConfig()
    sim = LinkSimulation(
        link_model=build_link_model(model, link_config),
        lock=LockStateMachine.from_config(link_config, **lock_kwargs),
        propagation=PacketPropagationSimulator(
            field_config=field_config,
            rng=random.Random(seed),
        ),
        band_table=band_table,
    )
    if params is not None:
        sim.configure(params)
    return sim
