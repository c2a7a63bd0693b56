from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Tuple

from scheduler import FrameScheduler
from spectrum_link_sim import (
    LinkConfig,
    LinkSimulation,
    SimulationParameters,
    TickSnapshot,
    build_link_simulation,
)
from spectrum_link_sim.spectrum import PRESET_FREQUENCIES_HZ, narration


def build_preset_simulations(seed: int) -> Dict[str, LinkSimulation]:
    """
    One simulation per link mode:
        - infrared: 38 kHz / 33% IR model on an optical beam
        - terrestrial / satellite: Friis model at the preset carrier
    """
    sims: Dict[str, LinkSimulation] = {}
    # The microwave view judges received power against its own dBm level.
    rf_threshold = LinkConfig().RF_LEGACY_LOCK_THRESHOLD_DBM

    sims["infrared"] = build_link_simulation(
        model="infrared",
        seed=seed,
        params=SimulationParameters(
            carrier_frequency_hz=38e3,
            duty_cycle_percent=33.0,
            propagation_frequency_hz=PRESET_FREQUENCIES_HZ["infrared"],
        ),
    )
    for mode in ("terrestrial", "satellite"):
        sims[mode] = build_link_simulation(
            model="friis",
            seed=seed,
            params=SimulationParameters(
                carrier_frequency_hz=PRESET_FREQUENCIES_HZ[mode],
                tx_power_dbm=60.0,
                tx_gain_dbi=45.0,
                distance_km=20.0,
            ),
            lock_threshold=rf_threshold,
            unlock_threshold=rf_threshold,
        )
    return sims


def summarize_run(snapshots: List[TickSnapshot]) -> Tuple[int, int, int]:
    """
    Returns:
        (delivered, blocked, peak_received) where delivered counts packets
        that left the field with power remaining.
    """
    delivered = 0
    blocked = 0
    peak_received = 0
    for snap in snapshots:
        for p in snap.removed:
            if p.power > 0.0:
                delivered += 1
            else:
                blocked += 1
        peak_received = max(peak_received, snap.received_count)
    return delivered, blocked, peak_received


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the three link presets headlessly and print a summary."
    )
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--seconds", type=float, default=5.0)
    parser.add_argument("--fps", type=float, default=60.0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    for mode, sim in build_preset_simulations(args.seed).items():
        scheduler = FrameScheduler(simulation=sim, nominal_fps=args.fps)
        snapshots = scheduler.run(args.seconds)
        if not snapshots:
            print(f"[{mode}] No frames simulated.")
            continue

        last = snapshots[-1]
        delivered, blocked, peak = summarize_run(snapshots)
        print(f"\n[{mode}] {last.regime.label}")
        print(f"  {narration(last.regime).physics_log}")
        print(f"  Link metric:      {last.metric.value:.2f} {last.metric.unit}")
        print(f"  Lock:             {last.lock_state.name} {last.indicator or ''}")
        print(f"  Packets emitted:  {scheduler.emitted}")
        print(f"  Delivered:        {delivered}")
        print(f"  Blocked:          {blocked}")
        print(f"  Peak at receiver: {peak}")


if __name__ == "__main__":
    main()
