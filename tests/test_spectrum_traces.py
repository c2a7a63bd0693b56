from __future__ import annotations

import math
import pathlib
import random
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spectrum_link_sim.entities import Regime
from spectrum_link_sim.regime import PACKET_INTERACTION_BANDS
from spectrum_link_sim.spectrum import (
    default_infrared_parameters,
    default_microwave_parameters,
    narrate_frequency,
    narration,
    photon_energy_ev,
    preset_frequency_hz,
    preset_slider_position,
    wavelength_m,
)
from spectrum_link_sim.traces import bitstream_trace, data_bit, subcarrier_trace


def test_wavelength_and_photon_energy() -> None:
    assert math.isclose(wavelength_m(1e9), 0.299792458, rel_tol=1e-12)
    assert math.isclose(photon_energy_ev(400e12), 1.654267, rel_tol=1e-6)
    # Invalid frequencies fall back to 1 Hz instead of dividing by zero.
    assert wavelength_m(0.0) == wavelength_m(1.0)


def test_presets() -> None:
    assert preset_frequency_hz("Satellite") == 100e9
    assert math.isclose(preset_slider_position("terrestrial"), 10.0)
    assert PACKET_INTERACTION_BANDS.classify(preset_frequency_hz("infrared")) is Regime.INFRARED_OPTICAL
    with pytest.raises(KeyError):
        preset_frequency_hz("ultraviolet")


def test_reset_parameter_defaults() -> None:
    ir = default_infrared_parameters()
    assert (ir.carrier_frequency_hz, ir.duty_cycle_percent) == (38e3, 33.0)
    assert default_microwave_parameters().carrier_frequency_hz == 15e9


def test_narration_uses_hud_table_by_default() -> None:
    assert narrate_frequency(100e9) == narration(Regime.TERRESTRIAL_MICROWAVE)
    assert narrate_frequency(100e9, PACKET_INTERACTION_BANDS) == narration(Regime.SATELLITE_MICROWAVE)
    assert narration(Regime.INFRARED_OPTICAL).concept_formula == "E = h f"


def test_bitstream_trace_is_deterministic_for_a_seed() -> None:
    a = bitstream_trace(400, 450, 1.5, 3.0, random.Random(9))
    b = bitstream_trace(400, 450, 1.5, 3.0, random.Random(9))
    c = bitstream_trace(400, 450, 1.5, 3.0, random.Random(10))
    assert a == b
    assert a != c
    assert len(a) == 200


def test_bitstream_jitter_shrinks_on_clean_link() -> None:
    height = 450
    for snr, bound in ((15.0, 65.0 / 8 / 2), (3.0, 65.0 / 1.5 / 2)):
        points = bitstream_trace(400, height, 0.0, snr, random.Random(1))
        for x, y in points:
            ideal = height / 2 - data_bit(x * 0.04) * 120 + 60
            assert abs(y - ideal) <= bound


def test_subcarrier_only_above_minimum_snr() -> None:
    assert subcarrier_trace(400, 450, 0.0, 0.0, snr_db=8.0) == []
    points = subcarrier_trace(400, 450, 0.0, 0.0, snr_db=9.0)
    assert points
    assert all(data_bit(x * 0.04) == 1 for x, _ in points)
