# scripts/eval_regime_delivery.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import argparse
import csv
import os
import statistics

from scheduler import FrameScheduler
from spectrum_link_sim import SimulationParameters, build_link_simulation
from spectrum_link_sim.spectrum import PRESET_FREQUENCIES_HZ


@dataclass
class DeliveryMetrics:
    emitted: int
    delivered: int
    blocked: int
    delivery_rate: float
    avg_delivered_power: float


def run_single_simulation(
    mode: str,
    seed: int,
    seconds: float,
    obstacle_y: float,
) -> DeliveryMetrics:
    sim = build_link_simulation(
        model="friis",
        seed=seed,
        params=SimulationParameters(
            carrier_frequency_hz=PRESET_FREQUENCIES_HZ[mode],
            obstacle_position=(450.0, obstacle_y),
        ),
    )
    scheduler = FrameScheduler(simulation=sim)
    snapshots = scheduler.run(seconds)

    delivered_powers: List[float] = []
    blocked = 0
    for snap in snapshots:
        for p in snap.removed:
            if p.power > 0.0:
                delivered_powers.append(p.power)
            else:
                blocked += 1

    emitted = scheduler.emitted
    delivered = len(delivered_powers)
    return DeliveryMetrics(
        emitted=emitted,
        delivered=delivered,
        blocked=blocked,
        delivery_rate=delivered / emitted if emitted else 0.0,
        avg_delivered_power=statistics.mean(delivered_powers) if delivered_powers else 0.0,
    )


def summarize(label: str, metrics_list: List[DeliveryMetrics]) -> None:
    rates = [m.delivery_rate for m in metrics_list]
    powers = [m.avg_delivered_power for m in metrics_list]
    rate_m = statistics.mean(rates) if rates else 0.0
    power_m = statistics.mean(powers) if powers else 0.0

    print(f"\n[{label}]")
    print(f"  Delivery rate:        {rate_m * 100:.2f}%")
    print(f"  Avg delivered power:  {power_m:.3f}")


def write_csv(csv_path: str, rows: List[dict]) -> None:
    os.makedirs(os.path.dirname(csv_path) or ".", exist_ok=True)

    with open(csv_path, "w", newline="") as f:
        writer = csv.DictWriter(
            f,
            fieldnames=[
                "mode",
                "seed",
                "obstacle_y",
                "emitted",
                "delivered",
                "blocked",
                "delivery_rate",
                "avg_delivered_power",
            ],
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Measure packet delivery per regime with an obstacle in the beam."
    )
    parser.add_argument("--num-seeds", type=int, default=5)
    parser.add_argument("--seconds", type=float, default=10.0)
    parser.add_argument("--obstacle-y", type=float, default=180.0)
    parser.add_argument("--csv-path", type=str, default="results/regime_delivery.csv")
    args = parser.parse_args()

    rows: List[dict] = []
    for mode in ("terrestrial", "satellite", "infrared"):
        metrics_list: List[DeliveryMetrics] = []
        for seed in range(args.num_seeds):
            m = run_single_simulation(mode, seed, args.seconds, args.obstacle_y)
            metrics_list.append(m)
            rows.append(
                {
                    "mode": mode,
                    "seed": seed,
                    "obstacle_y": args.obstacle_y,
                    "emitted": m.emitted,
                    "delivered": m.delivered,
                    "blocked": m.blocked,
                    "delivery_rate": m.delivery_rate,
                    "avg_delivered_power": m.avg_delivered_power,
                }
            )
        summarize(mode, metrics_list)

    write_csv(args.csv_path, rows)
    print(f"\n[INFO] Wrote CSV to {args.csv_path}")


if __name__ == "__main__":
    main()
