#!/usr/bin/env python3
"""
TFT DPS Simulator - Entry Point
═══════════════════════════════════════════════════════════════════════════

Porównuje buildy itemów jednej jednostki na manekinie "Frontline Tank"
(50000 HP, 100 armor, 50 MR). Każdy build dostaje ten sam seed,
więc różnice wynikają tylko z itemów.

Użycie:
    python main.py                        # Yunara 2★, losowy seed
    python main.py --seed 12345           # Konkretny seed
    python main.py --unit Lux --star 3    # Inna jednostka
    python main.py --verbose              # Każde zdarzenie na stdout

Wynik:
    - Tabela porównawcza buildów (DPS, obrażenia, crit, podział typów)
"""

import argparse
import sys

from dpssim.core.config_loader import ConfigLoader
from dpssim.core.registry import ContentLibrary
from dpssim.units.target import Target
from dpssim.simulation import SimulationConfig, compare_builds


FRONTLINE_TANK = {"name": "Frontline Tank", "hp": 50000, "armor": 100, "magic_resist": 50}

BUILDS = [
    ("RB Kraken IE", ["Guinsoos", "Krakens", "IE"]),
    ("RB Titans IE", ["Guinsoos", "Titans", "IE"]),
    ("2 Krakens IE", ["Krakens", "Krakens", "IE"]),
    ("5 Deathblades", ["Deathblade"] * 5),
]


def print_comparison(unit_name: str, results) -> None:
    print()
    print("=" * 60)
    print(f"PORÓWNANIE BUILDÓW - {unit_name}")
    print("=" * 60)

    for index, (label, result) in enumerate(results, start=1):
        print(f"\nBuild {index}: {label}")
        print(f"  Items: {', '.join(result.items)}")
        print(f"  Total Damage: {result.total_damage:.1f}")
        print(f"  DPS: {result.dps:.1f}")
        print(f"  Crit Ratio: {result.crit_rate * 100:.1f}%")
        print(f"  Attacks / Casts: {result.attack_count} / {result.ability_count}")
        print("  Damage Breakdown:")
        percentages = result.damage_type_percentages()
        for damage_type, amount in result.damage_by_type.items():
            share = percentages.get(damage_type.value, 0.0)
            print(f"    {damage_type.value.title()}: {amount:.1f} ({share:.1f}%)")

    best_label, best = max(results, key=lambda entry: entry[1].dps)
    print()
    print("-" * 60)
    print(f"Najlepszy build: {best_label} ({best.dps:.1f} DPS)")


def main():
    """Główna funkcja."""
    parser = argparse.ArgumentParser(
        description="TFT DPS Simulator - porównanie buildów",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--unit", default="Yunara", help="Jednostka (domyślnie: Yunara)")
    parser.add_argument("--star", type=int, default=2, choices=[1, 2, 3], help="Poziom gwiazd")
    parser.add_argument("--seed", type=int, default=None, help="Ziarno losowości (domyślnie: losowe)")
    parser.add_argument("--duration", type=int, default=None, help="Czas symulacji w ms")
    parser.add_argument("--verbose", "-v", action="store_true", help="Wypisuj każde zdarzenie")
    parser.add_argument("--data", default="data/", help="Folder z plikami YAML")

    args = parser.parse_args()

    loader = ConfigLoader(args.data)
    library = ContentLibrary.from_loader(loader)

    config = SimulationConfig.from_dict(loader.get_simulation_config())
    if args.duration is not None:
        config = SimulationConfig(args.duration, config.tick_interval_ms)
    config.verbose = args.verbose

    print("=" * 60)
    print("TFT DPS SIMULATOR")
    print("=" * 60)
    print(f"Unit: {args.unit} {args.star}★")
    print(f"Seed: {args.seed if args.seed is not None else 'random'}")

    try:
        results = compare_builds(
            library, args.unit, args.star, BUILDS,
            Target.from_dict(FRONTLINE_TANK), config, seed=args.seed,
        )
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1

    print_comparison(args.unit, results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
