#!/usr/bin/env python3
"""
Spellcraft - Entry Point
═══════════════════════════════════════════════════════════════════════════

Demo silnika spelli i walidacja plików danych.

Użycie:
    python main.py demo                       # Losowy zestaw, fala 1
    python main.py demo --wave 5 --seed 42    # Konkretna fala i seed
    python main.py demo --level Easy          # Wrogowie z enemies.yaml
    python main.py demo --relic golden_mask   # Relikt z relics.yaml (można powtarzać)
    python main.py demo --verbose             # Statystyki zdarzeń
    python main.py validate                   # Sprawdź formuły w data/

Wynik (demo):
    - Wypisuje zestaw spelli i przebieg starcia na konsolę
    - Zapisuje pełny log do output/encounter_{seed}.json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Dodaj katalog projektu do path
sys.path.insert(0, str(Path(__file__).parent))

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.core.validation import validate_all
from spellcraft.events.event_logger import EventType
from spellcraft.simulation.encounter import Encounter, EncounterConfig
from spellcraft.spells.builder import describe_spell


def run_demo(args: argparse.Namespace) -> int:
    print("=" * 60)
    print("SPELLCRAFT DEMO")
    print("=" * 60)
    print(f"Seed: {args.seed}   Wave: {args.wave}   Class: {args.player_class}")
    print()

    encounter = Encounter(
        ConfigLoader(args.data),
        seed=args.seed,
        config=EncounterConfig(
            wave=args.wave,
            player_class=args.player_class,
            level=args.level,
            max_rounds=args.rounds,
            relics=args.relic,
        ),
    )
    encounter.setup()
    kit = encounter.equip_random_kit()

    caster = encounter.caster
    print(f"Caster: hp={caster.body.hp} mana={caster.mana}/{caster.max_mana} power={caster.spell_power}")
    for relic in encounter.relics.owned:
        print(f"Relikt: {relic.name} - {relic.description}")
    print()
    print("Spelle:")
    for slot, spell in enumerate(kit):
        print(f"  [{slot}] {spell.display_name}")
        print(f"      damage={spell.damage:.1f} mana={spell.mana:.1f} "
              f"cooldown={spell.cooldown:.2f} speed={spell.speed:.1f}")
        for line in describe_spell(spell).splitlines():
            print(f"      {line}")

    enemies = encounter.arena.get_enemies_of(caster.team)
    print()
    print(f"Przeciwnicy: {len(enemies)}")
    print()
    print("-" * 60)
    print("ROZPOCZYNAM STARCIE...")
    print("-" * 60)

    result = asyncio.run(encounter.run())

    print()
    print("=" * 60)
    print("WYNIKI")
    print("=" * 60)
    print(f"Rundy: {result['rounds']}   Pociski: {result['projectiles']}")
    print(f"Żywi przeciwnicy: {result['enemies_alive']}/{len(result['enemies'])}")
    for enemy in result["enemies"]:
        print(f"  - {enemy['id']}: {enemy['hp']}/{enemy['max_hp']} HP")

    if not args.no_save:
        output_path = f"output/encounter_{args.seed}.json"
        encounter.save_log(output_path)
        print()
        print(f"Log zapisany: {output_path}")

    if args.verbose:
        print()
        print("-" * 60)
        print("STATYSTYKI ZDARZEŃ")
        print("-" * 60)
        for event_type in EventType:
            count = len(encounter.event_logger.get_events_by_type(event_type))
            if count > 0:
                print(f"  {event_type.name}: {count}")

    return 0


def run_validate(args: argparse.Namespace) -> int:
    issues = validate_all(ConfigLoader(args.data))
    if not issues:
        print("Wszystkie formuły poprawne.")
        return 0

    print(f"Błędne formuły: {len(issues)}")
    for issue in issues:
        print(f"  {issue}")
    return 1


def main() -> int:
    """Główna funkcja."""
    parser = argparse.ArgumentParser(
        description="Spellcraft - data-driven spell engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data",
        default="data/",
        help="Folder z plikami YAML (domyślnie: data/)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowy output"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Losowy zestaw spelli kontra fala wrogów")
    demo.add_argument("--seed", type=int, default=12345, help="Ziarno losowości (domyślnie: 12345)")
    demo.add_argument("--wave", type=int, default=1, help="Numer fali (domyślnie: 1)")
    demo.add_argument("--class", dest="player_class", default="mage", help="Klasa gracza")
    demo.add_argument("--level", default=None, help="Poziom z enemies.yaml (domyślnie: manekiny)")
    demo.add_argument("--rounds", type=int, default=10, help="Limit rund castowania")
    demo.add_argument("--relic", action="append", default=[], help="Relikt z relics.yaml (można powtarzać)")
    demo.add_argument("--no-save", action="store_true", help="Nie zapisuj logu do pliku")
    demo.set_defaults(handler=run_demo)

    validate = subparsers.add_parser("validate", help="Sprawdź formuły w plikach danych")
    validate.set_defaults(handler=run_validate)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
