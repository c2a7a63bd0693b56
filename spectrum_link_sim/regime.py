from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .entities import Regime
from .physics import coerce_positive


@dataclass(frozen=True)
class BandTable:
    """
    Frequency band edges (Hz) separating the three regimes.

    Below low_edge_hz is terrestrial microwave, [low, high) is satellite
    microwave, and high_edge_hz and above is infrared / optical.
    """
    name: str
    low_edge_hz: float
    high_edge_hz: float

    def __post_init__(self) -> None:
        if self.low_edge_hz > self.high_edge_hz:
            low, high = self.high_edge_hz, self.low_edge_hz
            object.__setattr__(self, "low_edge_hz", low)
            object.__setattr__(self, "high_edge_hz", high)

    def classify(self, frequency_hz: float) -> Regime:
        f = coerce_positive(frequency_hz, default=1.0)
        if f < self.low_edge_hz:
            return Regime.TERRESTRIAL_MICROWAVE
        if f < self.high_edge_hz:
            return Regime.SATELLITE_MICROWAVE
        return Regime.INFRARED_OPTICAL


# Drives obstacle interaction in the packet simulator.
PACKET_INTERACTION_BANDS = BandTable("packet-interaction", 30e9, 300e9)

# Used by HUD narration views.
HUD_NARRATION_BANDS = BandTable("hud-narration", 300e9, 3e12)

BAND_TABLES: Dict[str, BandTable] = {
    PACKET_INTERACTION_BANDS.name: PACKET_INTERACTION_BANDS,
    HUD_NARRATION_BANDS.name: HUD_NARRATION_BANDS,
}


def get_band_table(name: str) -> BandTable:
    try:
        return BAND_TABLES[name]
    except KeyError:
        known = ", ".join(sorted(BAND_TABLES))
        raise KeyError(f"Unknown band table {name!r}; known tables: {known}") from None


def classify_regime(
    frequency_hz: float,
    table: BandTable = PACKET_INTERACTION_BANDS,
) -> Regime:
    """Map a carrier frequency in Hz to its propagation regime."""
    return table.classify(frequency_hz)
