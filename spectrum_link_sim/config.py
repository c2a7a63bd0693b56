from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LinkConfig:
    """
    Configurable constants for the link-budget models and the lock logic.

    Units:
    - IR carrier: kHz, duty cycle: fraction
    - RF frequency: GHz, distance: km
    - Power: dBm, gains: dBi, losses: dB
    """

    # IR receivers expect a ~38 kHz carrier at roughly 33% duty.
    IR_TARGET_CARRIER_KHZ: float = 38.0
    IR_TARGET_DUTY: float = 0.33
    IR_DUTY_SPAN: float = 0.67
    IR_PEAK_SIGNAL_POWER: float = 1000.0
    IR_NOISE_LEVEL: float = 65.0

    # Friis link (fixed receive antenna, 150 km hop).
    FSPL_CONSTANT_DB: float = 32.44
    RX_GAIN_DBI: float = 10.0
    DISTANCE_KM: float = 150.0
    ATMOSPHERIC_COEFFICIENT: float = 0.5
    ATMOSPHERIC_DISTANCE_DIVISOR: float = 4.0

    # Floor applied to every logarithm argument.
    LOG_FLOOR: float = 0.1

    # Fallback for non-numeric or non-positive frequencies.
    FREQUENCY_FLOOR: float = 1.0

    # Shared numeric threshold for SNR (dB) and received power (dBm).
    LOCK_THRESHOLD: float = 12.0
    UNLOCK_THRESHOLD: float = 12.0
    # Lock level of the microwave view's received-power readout.
    RF_LEGACY_LOCK_THRESHOLD_DBM: float = -75.0

    SUCCESS_PAYLOAD: str = "0xAF32_77_E9"


@dataclass(frozen=True)
class FieldConfig:
    """
    Geometry and timing of the packet field (pixels, ticks, seconds).

    One tick is one render frame; speeds are pixels per tick at dt=1.
    """

    FIELD_WIDTH: float = 900.0
    FIELD_HEIGHT: float = 500.0

    TX_X: float = 100.0
    TX_Y: float = 250.0
    RX_X: float = 800.0
    RX_Y: float = 250.0
    RECEIVE_TOLERANCE: float = 10.0

    PACKET_SPEED: float = 7.0
    EMIT_PERIOD_S: float = 0.1
    NOMINAL_FPS: float = 60.0

    # Spawn drift is uniform in [-DRIFT_SPREAD/2, DRIFT_SPREAD/2].
    DRIFT_SPREAD: float = 0.6
    # Scatter kick on entering an obstacle, same convention.
    SCATTER_SPREAD: float = 15.0

    SATELLITE_DECAY_PER_TICK: float = 0.95

    OBSTACLE_X: float = 450.0
    OBSTACLE_Y: float = 180.0
    OBSTACLE_WIDTH: float = 60.0
    OBSTACLE_HEIGHT: float = 140.0
    OBSTACLE_ATTENUATION: float = 0.6
