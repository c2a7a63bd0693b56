from __future__ import annotations

from typing import List, Tuple
import math
import random

from .config import LinkConfig

Point = Tuple[float, float]


def data_bit(t: float) -> int:
    """Pseudo-random looking but deterministic bit pattern used for the scope."""
    return 1 if math.sin(t) + math.cos(t * 0.3) + math.sin(t * 0.7) > 0 else 0


def bitstream_trace(
    width: float,
    height: float,
    t_base: float,
    snr_db: float,
    rng: random.Random,
    config: LinkConfig = LinkConfig(),
    step_px: int = 2,
) -> List[Point]:
    """
    Sample the IR oscilloscope bitstream across `width` pixels.

    Jitter amplitude is the noise level divided by 8 while the link is
    above the lock threshold and by 1.5 otherwise, so a poor link draws
    a visibly ragged trace. All randomness comes from `rng`.
    """
    clean = snr_db > config.LOCK_THRESHOLD
    jitter_scale = config.IR_NOISE_LEVEL / (8.0 if clean else 1.5)
    points: List[Point] = []
    for x in range(0, int(width), step_px):
        bit = data_bit(t_base + x * 0.04)
        jitter = (rng.random() - 0.5) * jitter_scale
        y = height / 2 - bit * 120 + jitter + 60
        points.append((float(x), y))
    return points


def subcarrier_trace(
    width: float,
    height: float,
    t_base: float,
    carrier_phase: float,
    snr_db: float,
    min_snr_db: float = 8.0,
    step_px: int = 4,
) -> List[Point]:
    """
    38 kHz sub-carrier overlay, drawn only over high bits and only once the
    SNR clears min_snr_db. carrier_phase is the animation phase
    (wall-clock ms * 0.2 in the browser view).
    """
    if snr_db <= min_snr_db:
        return []
    points: List[Point] = []
    for x in range(0, int(width), step_px):
        if data_bit(t_base + x * 0.04):
            carrier = math.sin(x * 1.2 + carrier_phase) * 20
            points.append((float(x), height / 2 - 60 + carrier))
    return points
