from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple


class Regime(Enum):
    """Propagation regime selected from the carrier frequency."""
    TERRESTRIAL_MICROWAVE = auto()
    SATELLITE_MICROWAVE = auto()
    INFRARED_OPTICAL = auto()

    @property
    def label(self) -> str:
        return _REGIME_LABELS[self]


_REGIME_LABELS: Dict[Regime, str] = {
    Regime.TERRESTRIAL_MICROWAVE: "MICROWAVE (TERRESTRIAL)",
    Regime.SATELLITE_MICROWAVE: "MICROWAVE (SATELLITE)",
    Regime.INFRARED_OPTICAL: "INFRARED / OPTICAL",
}


def clamp_unit(value: float) -> float:
    """Clamp a power multiplier into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


class LockState(Enum):
    UNLOCKED = auto()
    LOCKED = auto()


@dataclass
class Packet:
    """
    A discrete unit of signal energy travelling from the transmitter
    towards the receiver.
    """
    id: int
    x: float
    y: float
    power: float = 1.0
    vertical_drift: float = 0.0
    created_at: float = 0.0
    inside_obstacle: bool = False


@dataclass(frozen=True)
class ObstacleBounds:
    """Immutable snapshot of an obstacle rectangle."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        # Strict inequalities: the border itself does not intersect.
        return (
            self.x < px < self.x + self.width
            and self.y < py < self.y + self.height
        )


@dataclass
class Obstacle:
    """
    Axis-aligned rectangular obstacle that can be moved between ticks.

    attenuation_factor is the power multiplier applied once each time a
    terrestrial-microwave packet enters the rectangle, clamped to [0, 1].
    """
    x: float
    y: float
    width: float
    height: float
    attenuation_factor: float = 0.6

    def __post_init__(self) -> None:
        self.width = max(0.0, float(self.width))
        self.height = max(0.0, float(self.height))
        self.attenuation_factor = clamp_unit(self.attenuation_factor)

    def bounds(self) -> ObstacleBounds:
        return ObstacleBounds(self.x, self.y, self.width, self.height)

    def contains(self, px: float, py: float) -> bool:
        return self.bounds().contains(px, py)

    def resize(self, width: float, height: float) -> None:
        self.width = max(0.0, float(width))
        self.height = max(0.0, float(height))


@dataclass
class SimulationParameters:
    """
    Externally supplied parameters, read once per tick.

    duty_cycle_percent is only used by the infrared model; tx_power_dbm,
    tx_gain_dbi, distance_km and atmospheric_coefficient only by the Friis
    model. None for distance/coefficient means "use the config default".
    """
    carrier_frequency_hz: float = 38e3
    duty_cycle_percent: float = 33.0
    tx_power_dbm: float = 30.0
    tx_gain_dbi: float = 30.0
    distance_km: Optional[float] = None
    atmospheric_coefficient: Optional[float] = None
    obstacle_position: Optional[Tuple[float, float]] = None
    # Frequency used for regime classification; None means the carrier.
    # The IR view modulates a 38 kHz carrier onto an optical beam.
    propagation_frequency_hz: Optional[float] = None


@dataclass(frozen=True)
class LinkMetric:
    """
    Scalar link-quality figure: SNR in dB (infrared) or received power in
    dBm (Friis). breakdown carries the intermediate terms for display.
    """
    value: float
    unit: str
    model: str
    breakdown: Dict[str, float] = field(default_factory=dict)
