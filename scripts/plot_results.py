# scripts/plot_results.py
from __future__ import annotations

import argparse
import csv
import os
import random
from typing import Dict, List

import matplotlib.pyplot as plt

from spectrum_link_sim import FriisLinkBudget, InfraredLinkBudget, LinkConfig
from spectrum_link_sim.traces import bitstream_trace


def load_delivery_csv(csv_path: str) -> Dict[str, List[Dict[str, float]]]:
    """
    Load regime_delivery.csv and group rows by mode.
    """
    groups: Dict[str, List[Dict[str, float]]] = {}

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            groups.setdefault(row["mode"], []).append(
                {
                    "seed": float(row["seed"]),
                    "delivery_rate": float(row["delivery_rate"]),
                    "avg_delivered_power": float(row["avg_delivered_power"]),
                }
            )
    return groups


def plot_delivery_results(groups: Dict[str, List[Dict[str, float]]], out_dir: str) -> None:
    os.makedirs(out_dir, exist_ok=True)

    modes = sorted(groups)
    if not modes:
        print("[WARN] No rows in delivery CSV; skipping delivery plots.")
        return

    mean_rates = [
        100 * sum(r["delivery_rate"] for r in groups[m]) / len(groups[m]) for m in modes
    ]
    mean_power = [
        sum(r["avg_delivered_power"] for r in groups[m]) / len(groups[m]) for m in modes
    ]

    plt.figure()
    plt.bar(modes, mean_rates)
    plt.ylabel("Delivery rate (%)")
    plt.title("Packets delivered past the obstacle")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "delivery_rate_by_regime.png"))

    plt.figure()
    plt.bar(modes, mean_power)
    plt.ylabel("Mean delivered power")
    plt.title("Residual packet power at the field edge")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "delivered_power_by_regime.png"))

    print("\n[Delivery diagnostic]")
    for mode, rate in zip(modes, mean_rates):
        print(f"  {mode:12s} delivery = {rate:.2f}%")
    if "infrared" in groups and any(r["delivery_rate"] > 0 for r in groups["infrared"]):
        print("  [INFO] Some IR packets passed; the obstacle is not fully in the beam.")


def plot_link_budgets(out_dir: str, config: LinkConfig) -> None:
    os.makedirs(out_dir, exist_ok=True)
    ir = InfraredLinkBudget(config=config)
    friis = FriisLinkBudget(config=config)

    # IR SNR vs carrier for a few duty cycles
    carriers = [c * 0.5 for c in range(2, 201)]
    plt.figure()
    for duty in (20.0, 33.0, 50.0, 70.0):
        plt.plot(carriers, [ir.snr_db(c, duty) for c in carriers], label=f"{duty:.0f}% duty")
    plt.axhline(config.LOCK_THRESHOLD, linestyle="--")
    plt.xlabel("Carrier (kHz)")
    plt.ylabel("SNR (dB)")
    plt.title("IR receiver SNR")
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "ir_snr_vs_carrier.png"))

    # Friis received power vs distance for the preset carriers
    distances = [float(d) for d in range(1, 301)]
    plt.figure()
    for freq_ghz in (10.0, 15.0, 100.0):
        plt.plot(
            distances,
            [friis.received_power_dbm(freq_ghz, 30.0, 30.0, distance_km=d) for d in distances],
            label=f"{freq_ghz:g} GHz",
        )
    plt.axhline(config.RF_LEGACY_LOCK_THRESHOLD_DBM, linestyle=":")
    plt.xlabel("Distance (km)")
    plt.ylabel("Received power (dBm)")
    plt.title("Friis received power")
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "friis_power_vs_distance.png"))


def plot_bitstream(out_dir: str, config: LinkConfig, seed: int) -> None:
    os.makedirs(out_dir, exist_ok=True)
    plt.figure()
    for snr, label in ((15.0, "locked"), (2.0, "noisy")):
        points = bitstream_trace(800, 450, 0.0, snr, random.Random(seed), config=config)
        plt.plot([p[0] for p in points], [p[1] for p in points], label=label)
    plt.gca().invert_yaxis()
    plt.xlabel("x (px)")
    plt.ylabel("y (px)")
    plt.title("IR bitstream trace")
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "ir_bitstream_trace.png"))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Plot link-budget curves and regime delivery results."
    )
    parser.add_argument(
        "--delivery-csv",
        type=str,
        default="results/regime_delivery.csv",
        help="Path to regime_delivery.csv produced by eval_regime_delivery.py",
    )
    parser.add_argument(
        "--out-dir",
        type=str,
        default="figures",
        help="Directory to save generated plots.",
    )
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    config = LinkConfig()
    plot_link_budgets(args.out_dir, config)
    plot_bitstream(args.out_dir, config, args.seed)

    if os.path.exists(args.delivery_csv):
        plot_delivery_results(load_delivery_csv(args.delivery_csv), args.out_dir)
    else:
        print(f"[INFO] Delivery CSV not found at {args.delivery_csv}; skipping delivery plots.")


if __name__ == "__main__":
    main()
