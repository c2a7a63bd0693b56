from __future__ import annotations

import math
import os
import sys

import pytest

# Ensure project root (containing spectrum_link_sim/) is on sys.path for direct runs.
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from spectrum_link_sim.config import LinkConfig
from spectrum_link_sim.entities import SimulationParameters
from spectrum_link_sim.physics import (
    FriisLinkBudget,
    InfraredLinkBudget,
    build_link_model,
    coerce_positive,
)


def test_ir_target_operating_point_is_perfect_match() -> None:
    ir = InfraredLinkBudget()
    assert ir.frequency_match(38.0) == 1.0
    assert ir.duty_match(0.33) == 1.0
    expected = 10 * math.log10(1000 * 0.33 / 65)
    assert math.isclose(ir.snr_db(38.0, 33.0), expected, rel_tol=1e-9)


def test_ir_snr_peaks_at_38_khz_carrier() -> None:
    ir = InfraredLinkBudget()
    best = ir.snr_db(38.0, 33.0)
    for carrier in (10.0, 30.0, 37.0, 39.0, 45.0, 70.0):
        assert ir.snr_db(carrier, 33.0) < best


def test_ir_double_carrier_hits_log_floor() -> None:
    ir = InfraredLinkBudget()
    assert ir.frequency_match(76.0) == 0.0
    assert ir.signal_power(76.0, 33.0) == 0.0
    # signalPower / noise is floored at 0.1 before the logarithm.
    assert ir.snr_db(76.0, 33.0) == 10 * math.log10(0.1)


def test_ir_negative_match_is_clamped_not_inverted() -> None:
    ir = InfraredLinkBudget()
    assert ir.frequency_match(100.0) < 0
    assert ir.signal_power(100.0, 33.0) == 0.0
    assert math.isfinite(ir.snr_db(100.0, 33.0))


def test_ir_duty_cycle_is_clamped_to_percent_range() -> None:
    ir = InfraredLinkBudget()
    assert ir.duty_fraction(150.0) == 1.0
    assert ir.duty_fraction(-5.0) == 0.0
    assert ir.snr_db(38.0, 150.0) == ir.snr_db(38.0, 100.0)


def test_ir_bad_carrier_defaults_to_floor() -> None:
    ir = InfraredLinkBudget()
    floor = ir.snr_db(1.0, 33.0)
    assert ir.snr_db("not-a-number", 33.0) == floor  # type: ignore[arg-type]
    assert ir.snr_db(0.0, 33.0) == floor
    assert ir.snr_db(-12.0, 33.0) == floor


def test_ir_evaluate_reads_hz_parameters() -> None:
    ir = InfraredLinkBudget()
    metric = ir.evaluate(SimulationParameters(carrier_frequency_hz=38e3, duty_cycle_percent=33.0))
    assert metric.unit == "dB"
    assert metric.model == "infrared"
    assert math.isclose(metric.value, ir.snr_db(38.0, 33.0), rel_tol=1e-9)
    assert math.isclose(metric.breakdown["frequency_match"], 1.0)


def test_friis_matches_closed_form() -> None:
    friis = FriisLinkBudget()
    pr = friis.received_power_dbm(15.0, tx_power_dbm=30.0, tx_gain_dbi=30.0)
    fspl = 32.44 + 20 * math.log10(150.0) + 20 * math.log10(15.0 * 1000)
    atmos = 0.5 * (150.0 / 4)
    assert math.isclose(pr, 30.0 + 30.0 + 10.0 - fspl - atmos, rel_tol=1e-9)


def test_friis_strictly_decreasing_with_distance() -> None:
    friis = FriisLinkBudget()
    distances = [0.5, 1.0, 10.0, 50.0, 150.0, 300.0, 1000.0]
    powers = [
        friis.received_power_dbm(15.0, 30.0, 30.0, distance_km=d) for d in distances
    ]
    for near, far in zip(powers, powers[1:]):
        assert far < near


def test_friis_strictly_increasing_with_tx_power_and_gain() -> None:
    friis = FriisLinkBudget()
    base = friis.received_power_dbm(15.0, 30.0, 30.0)
    assert friis.received_power_dbm(15.0, 31.0, 30.0) > base
    assert friis.received_power_dbm(15.0, 30.0, 31.0) > base


def test_friis_higher_frequency_means_more_path_loss() -> None:
    friis = FriisLinkBudget()
    assert friis.free_space_path_loss_db(150.0, 100.0) > friis.free_space_path_loss_db(150.0, 10.0)


def test_friis_invalid_frequency_defaults_to_one_ghz() -> None:
    friis = FriisLinkBudget()
    one_ghz = friis.received_power_dbm(1.0, 30.0, 30.0)
    assert friis.received_power_dbm(0.0, 30.0, 30.0) == one_ghz
    assert friis.received_power_dbm(-3.0, 30.0, 30.0) == one_ghz
    assert friis.received_power_dbm("", 30.0, 30.0) == one_ghz
    assert friis.received_power_dbm(None, 30.0, 30.0) == one_ghz


def test_friis_evaluate_uses_parameter_overrides() -> None:
    friis = FriisLinkBudget()
    near = friis.evaluate(SimulationParameters(carrier_frequency_hz=15e9, distance_km=10.0))
    default = friis.evaluate(SimulationParameters(carrier_frequency_hz=15e9))
    assert near.unit == "dBm"
    assert near.value > default.value
    assert math.isclose(default.breakdown["frequency_ghz"], 15.0)


def test_coerce_positive_rejects_non_finite() -> None:
    assert coerce_positive(float("nan"), 1.0) == 1.0
    assert coerce_positive(float("inf"), 1.0) == 1.0
    assert coerce_positive("2.5", 1.0) == 2.5


def test_build_link_model_by_name() -> None:
    config = LinkConfig(IR_NOISE_LEVEL=10.0)
    model = build_link_model("IR", config)
    assert isinstance(model, InfraredLinkBudget)
    assert model.config is config
    assert isinstance(build_link_model("friis"), FriisLinkBudget)
    with pytest.raises(ValueError):
        build_link_model("laser")
