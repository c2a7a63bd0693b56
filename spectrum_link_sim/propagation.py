from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, cast
import logging
import random
import threading

from .config import FieldConfig
from .entities import Obstacle, ObstacleBounds, Packet, Regime, clamp_unit

logger = logging.getLogger(__name__)


@dataclass
class Emitter:
    """
    Fixed-cadence packet clock, independent of the render frame rate.

    Emission boundaries sit at start_s + k * period_s, where start_s is the
    time of the first call. due(now_s) reports how many boundaries fell due
    since the previous call, so a slow host still gets every emission it
    missed. max_backlog optionally caps that count after a stall, in which
    case the remaining stale boundaries are dropped.
    """
    period_s: float = 0.1
    max_backlog: Optional[int] = None
    start_s: Optional[float] = None
    emitted: int = 0

    def __post_init__(self) -> None:
        if self.period_s <= 0:
            raise ValueError(f"Emitter period must be positive, got {self.period_s}")
        if self.max_backlog is not None and self.max_backlog < 1:
            raise ValueError(f"Emitter backlog cap must be at least 1, got {self.max_backlog}")

    def due(self, now_s: float) -> int:
        if self.start_s is None:
            self.start_s = now_s
            self.emitted = 0
        start = self.start_s

        count = 0
        while start + self.emitted * self.period_s <= now_s:
            self.emitted += 1
            count += 1
            if self.max_backlog is not None and count >= self.max_backlog:
                skipped = 0
                while start + self.emitted * self.period_s <= now_s:
                    self.emitted += 1
                    skipped += 1
                if skipped:
                    logger.debug("Emitter skipped %d stale emissions", skipped)
                break
        return count

    def reset(self) -> None:
        self.start_s = None
        self.emitted = 0


@dataclass
class PacketPropagationSimulator:
    """
    Owns the live packet set and applies one physics step per tick.

    Obstacle interaction depends on the regime:
    - infrared / optical: opaque, packet power drops to zero
    - satellite microwave: slow decay every tick spent inside
    - terrestrial microwave: one attenuation + scatter kick per entry

    Obstacle mutation and stepping share a single re-entrant lock, and
    each step reads one bounds snapshot. Hosts that need several reads to
    agree with one step can hold `lock` around them.

    obstacle and emitter default to the ones described by field_config.
    """
    field_config: FieldConfig = field(default_factory=FieldConfig)
    obstacle: Obstacle = cast(Obstacle, None)
    rng: random.Random = field(default_factory=random.Random)
    emitter: Emitter = cast(Emitter, None)
    packets: List[Packet] = field(default_factory=list)
    _next_id: int = field(default=0, init=False, repr=False, compare=False)
    lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        cfg = self.field_config
        if self.obstacle is None:
            self.obstacle = Obstacle(
                x=cfg.OBSTACLE_X,
                y=cfg.OBSTACLE_Y,
                width=cfg.OBSTACLE_WIDTH,
                height=cfg.OBSTACLE_HEIGHT,
                attenuation_factor=cfg.OBSTACLE_ATTENUATION,
            )
        if self.emitter is None:
            self.emitter = Emitter(period_s=cfg.EMIT_PERIOD_S)

    ### Emission ###

    def emit(self, now_s: float = 0.0) -> Packet:
        """Spawn one packet at the transmitter."""
        cfg = self.field_config
        with self.lock:
            packet = Packet(
                id=self._next_id,
                x=cfg.TX_X,
                y=cfg.TX_Y,
                power=1.0,
                vertical_drift=(self.rng.random() - 0.5) * cfg.DRIFT_SPREAD,
                created_at=now_s,
            )
            self._next_id += 1
            self.packets.append(packet)
            return packet

    def emit_due(self, now_s: float) -> List[Packet]:
        """Spawn every packet the emitter cadence says is due at now_s."""
        with self.lock:
            return [self.emit(now_s) for _ in range(self.emitter.due(now_s))]

    ### Physics ###

    def step(self, regime: Regime, dt: float = 1.0) -> List[Packet]:
        """
        Advance every live packet by one tick under `regime`.

        Returns the packets removed during this tick (blocked, faded out
        or past the right edge of the field).
        """
        cfg = self.field_config
        with self.lock:
            bounds = self.obstacle.bounds()
            attenuation = clamp_unit(self.obstacle.attenuation_factor)
            decay = clamp_unit(cfg.SATELLITE_DECAY_PER_TICK)

            for packet in self.packets:
                packet.x += cfg.PACKET_SPEED * dt
                if regime is Regime.TERRESTRIAL_MICROWAVE:
                    packet.y += packet.vertical_drift * dt

                hit = bounds.contains(packet.x, packet.y)
                if hit:
                    self._interact(
                        packet, regime, attenuation, decay, entering=not packet.inside_obstacle
                    )
                packet.inside_obstacle = hit

            survivors: List[Packet] = []
            removed: List[Packet] = []
            for packet in self.packets:
                if packet.power > 0.0 and packet.x < cfg.FIELD_WIDTH:
                    survivors.append(packet)
                else:
                    removed.append(packet)
            self.packets = survivors
            return removed

    def _interact(
        self,
        packet: Packet,
        regime: Regime,
        attenuation: float,
        decay: float,
        entering: bool,
    ) -> None:
        if regime is Regime.INFRARED_OPTICAL:
            packet.power = 0.0
        elif regime is Regime.SATELLITE_MICROWAVE:
            packet.power *= decay
        elif entering:
            packet.power *= attenuation
            packet.y += (self.rng.random() - 0.5) * self.field_config.SCATTER_SPREAD

    ### Receiver ###

    def received_packets(self) -> List[Packet]:
        """Live packets currently within the receiver's capture window."""
        cfg = self.field_config
        with self.lock:
            return [
                p for p in self.packets
                if abs(p.x - cfg.RX_X) < cfg.RECEIVE_TOLERANCE
            ]

    def received_count(self) -> int:
        return len(self.received_packets())

    ### Obstacle control ###

    def obstacle_bounds(self) -> ObstacleBounds:
        with self.lock:
            return self.obstacle.bounds()

    def move_obstacle(self, x: float, y: float) -> None:
        with self.lock:
            self.obstacle.x = x
            self.obstacle.y = y
        logger.debug("Obstacle moved to (%.1f, %.1f)", x, y)

    def move_obstacle_centered(self, cx: float, cy: float) -> None:
        """Drag semantics: centre the obstacle on the pointer position."""
        with self.lock:
            self.move_obstacle(cx - self.obstacle.width / 2, cy - self.obstacle.height / 2)

    def set_obstacle(self, obstacle: Obstacle) -> None:
        with self.lock:
            self.obstacle = obstacle

    ### Lifecycle ###

    def reset(self) -> None:
        with self.lock:
            self.packets = []
            self.emitter.reset()
        logger.debug("Packet field cleared")
