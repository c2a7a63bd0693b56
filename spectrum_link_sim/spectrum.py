from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
import math

from .entities import Regime, SimulationParameters
from .physics import coerce_positive
from .regime import HUD_NARRATION_BANDS, BandTable

# Speed of light (m/s) and Planck constant (eV*s).
SPEED_OF_LIGHT_M_S: float = 299_792_458.0
PLANCK_EV_S: float = 4.135667696e-15

PRESET_FREQUENCIES_HZ: Dict[str, float] = {
    "terrestrial": 10e9,
    "satellite": 100e9,
    "infrared": 400e12,
}


def wavelength_m(frequency_hz: float) -> float:
    return SPEED_OF_LIGHT_M_S / coerce_positive(frequency_hz, 1.0)


def photon_energy_ev(frequency_hz: float) -> float:
    return PLANCK_EV_S * coerce_positive(frequency_hz, 1.0)


def preset_frequency_hz(mode: str) -> float:
    try:
        return PRESET_FREQUENCIES_HZ[mode.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown link mode {mode!r}; expected one of {sorted(PRESET_FREQUENCIES_HZ)}"
        ) from None


def preset_slider_position(mode: str) -> float:
    """Log10 position of a preset on a logarithmic frequency slider."""
    return math.log10(preset_frequency_hz(mode))


def default_infrared_parameters() -> SimulationParameters:
    """Parameters restored by the IR view's reset: 38 kHz, 33% duty."""
    return SimulationParameters(carrier_frequency_hz=38e3, duty_cycle_percent=33.0)


def default_microwave_parameters() -> SimulationParameters:
    """Parameters restored by the microwave view's reset: 15 GHz."""
    return SimulationParameters(carrier_frequency_hz=15e9)


@dataclass(frozen=True)
class Narration:
    title: str
    physics_log: str
    insight: str
    concept_formula: str


NARRATIONS: Dict[Regime, Narration] = {
    Regime.TERRESTRIAL_MICROWAVE: Narration(
        title="Terrestrial Microwave Communication",
        physics_log=(
            "Low-frequency microwaves diffract around obstacles and "
            "partially penetrate buildings."
        ),
        insight=(
            "Because wavelength is comparable to buildings, waves bend "
            "(diffraction) and scatter."
        ),
        concept_formula="λ = c / f",
    ),
    Regime.SATELLITE_MICROWAVE: Narration(
        title="Satellite Microwave Communication",
        physics_log=(
            "Higher microwave frequencies travel mostly in straight lines "
            "and require line-of-sight."
        ),
        insight="Less diffraction, more directional. Small obstacles are ignored but big ones block.",
        concept_formula="Free Space Path Loss ∝ f²",
    ),
    Regime.INFRARED_OPTICAL: Narration(
        title="Infrared / Optical Communication",
        physics_log="Infrared behaves like light: strict line-of-sight. Any obstacle fully blocks it.",
        insight="Very small wavelength, no diffraction. Works like laser or optical fiber.",
        concept_formula="E = h f",
    ),
}


def narration(regime: Regime) -> Narration:
    return NARRATIONS[regime]


def narrate_frequency(
    frequency_hz: float,
    table: BandTable = HUD_NARRATION_BANDS,
) -> Narration:
    """Narration for a frequency, classified with the HUD band table by default."""
    return NARRATIONS[table.classify(frequency_hz)]
