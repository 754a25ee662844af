"""
Encounter - jedno starcie castera z przeciwnikami.

Skleja wszystkie podsystemy w scenariusz używany przez CLI (demo)
i API (cast w arenie testowej):

    ConfigLoader ──> SpellCatalog ──> SpellBuilder ──> spelle w slotach
         │                                                   │
         ├──> PlayerClass.stats_for_wave ──> SpellCaster ────┘
         │                                       │
         └──> plan_wave (levels) ──> Hittable ──> Arena

PRZEBIEG RUNDY:
═══════════════════════════════════════════════════════════════════

    1. Dla każdego zajętego slotu:
         - cel = najbliższy wróg (brak -> punkt przed casterem)
         - await caster.cast_slot(slot, cel)
         - arena.resolve_pending()  (trafienia, odłamki, odbicia)
    2. Zegar gry += round_interval, regeneracja many
    3. Koniec gdy wszyscy wrogowie martwi lub limit rund

DETERMINIZM:
═══════════════════════════════════════════════════════════════════

    Zegar castera jest symulowany (nie monotonic), a losowość idzie
    przez GameRNG z seeda - ten sam seed daje te same spelle,
    pozycje wrogów i rozrzuty. Opóźnienie Doublera to prawdziwe
    asyncio.sleep.

Przykład użycia:
    >>> encounter = Encounter(ConfigLoader("data/"), seed=7, config=EncounterConfig(wave=3))
    >>> encounter.setup()
    >>> encounter.equip_random_kit()
    >>> result = asyncio.run(encounter.run())
    >>> result["wave"]
    3
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from ..combat.arena import Arena
from ..combat.damage import Hittable, Team
from ..core.config_loader import ConfigLoader
from ..core.rng import GameRNG
from ..core.vector import Vec2
from ..events.event_logger import EventLogger
from ..relics.relic_manager import RelicManager
from ..spells.builder import SpellBuilder
from ..spells.spell import Spell
from ..units.enemy_scaling import load_enemy_definitions, plan_wave
from ..units.player_class import PlayerClassLoader
from ..units.spell_caster import SPELL_SLOTS, SpellCaster

logger = logging.getLogger(__name__)


@dataclass
class EncounterConfig:
    """
    Konfiguracja starcia.

    Attributes:
        wave (int): Numer fali (zmienna `wave`)
        player_class (str): Klasa gracza z classes.yaml
        level (Optional[str]): Poziom z enemies.yaml (None = manekiny)
        dummy_count (int): Liczba manekinów, gdy brak poziomu
        dummy_hp (int): HP manekina
        spread (float): Promień rozrzutu wrogów
        distance (float): Odległość środka grupy wrogów od castera
        max_rounds (int): Limit rund castowania
        round_interval (float): Czas gry na rundę (sekundy)
        relics (List[str]): Relikty wybrane przed starciem (klucze relics.yaml)
    """
    wave: int = 1
    player_class: str = "mage"
    level: Optional[str] = None
    dummy_count: int = 3
    dummy_hp: int = 100
    spread: float = 4.0
    distance: float = 12.0
    max_rounds: int = 10
    round_interval: float = 1.0
    relics: List[str] = field(default_factory=list)


class Encounter:
    """
    Starcie jednego castera z falą przeciwników.

    Attributes:
        config_loader (ConfigLoader): Źródło danych
        config (EncounterConfig): Parametry starcia
        rng (GameRNG): Losowość buildera
        event_logger (EventLogger): Log zdarzeń (replay)
        arena (Arena): Świat starcia
        caster (SpellCaster): Gracz
        builder (SpellBuilder): Składanie spelli
        relics (RelicManager): Relikty gracza
        time (float): Symulowany zegar gry
    """

    def __init__(
        self,
        config_loader: Optional[ConfigLoader] = None,
        seed: Optional[int] = None,
        config: Optional[EncounterConfig] = None,
    ):
        self.config_loader = config_loader or ConfigLoader()
        self.config = config or EncounterConfig()
        self.seed = seed
        self.rng = GameRNG(seed)
        self.time = 0.0
        self.event_logger = EventLogger(seed=seed, clock=self.now)

        self.arena = Arena(wave=self.config.wave, event_logger=self.event_logger)
        self.caster = SpellCaster(
            arena=self.arena,
            rng=self.rng.fork(),
            clock=self.now,
        )
        self.builder = SpellBuilder(
            self.config_loader.load_spell_catalog(),
            rng=self.rng,
            event_logger=self.event_logger,
        )
        self.relics = RelicManager(GameRNG(seed))
        self.relics.load_relics(self.config_loader.load_relic_definitions())
        self.rounds = 0

    def now(self) -> float:
        return self.time

    # ─────────────────────────────────────────────────────────────────────────
    # SETUP
    # ─────────────────────────────────────────────────────────────────────────

    def setup(self) -> None:
        """Skaluje castera klasą, wystawia przeciwników i podpina relikty."""
        classes = PlayerClassLoader(self.config_loader)
        player_class = classes.get_class(self.config.player_class)
        self.caster.scale_for_wave(player_class.stats_for_wave(self.config.wave), self.config.wave)
        self.arena.add(self.caster.body)
        self.arena.add_all(self.spawn_enemies())
        for relic_id in self.config.relics:
            self.relics.pick(relic_id, self.caster)

    def spawn_enemies(self) -> List[Hittable]:
        """Wrogowie z planu fali poziomu albo manekiny."""
        center = self.caster.position + Vec2(self.config.distance, 0)
        spawn_rng = self.rng.fork()

        if self.config.level is None:
            return [
                Hittable(
                    f"dummy_{i + 1}",
                    Team.MONSTERS,
                    hp=self.config.dummy_hp,
                    position=center + Vec2(
                        spawn_rng.uniform(-self.config.spread, self.config.spread),
                        spawn_rng.uniform(-self.config.spread, self.config.spread),
                    ),
                )
                for i in range(self.config.dummy_count)
            ]

        level = self.config_loader.load_levels().get(self.config.level)
        if level is None:
            logger.warning("Unknown level '%s', no enemies spawned", self.config.level)
            return []
        enemies = load_enemy_definitions(self.config_loader.load_enemy_definitions())
        units: List[Hittable] = []
        for plan in plan_wave(level, enemies, self.config.wave):
            units.extend(plan.create_units(spawn_rng, center=center, spread=self.config.spread))
        logger.info("Level %s wave %d: %d enemies", self.config.level, self.config.wave, len(units))
        return units

    def equip(self, slot: int, spell: Spell) -> None:
        self.caster.equip(slot, spell)

    def equip_random_kit(self, slots: int = SPELL_SLOTS) -> List[Spell]:
        """Wypełnia sloty losowymi spellami dla bieżącej fali."""
        context = self.caster.build_context(self.config.wave)
        kit = []
        for slot in range(min(slots, SPELL_SLOTS)):
            spell = self.builder.build(self.caster, context)
            self.caster.equip(slot, spell)
            kit.append(spell)
        return kit

    # ─────────────────────────────────────────────────────────────────────────
    # PRZEBIEG
    # ─────────────────────────────────────────────────────────────────────────

    def aim_point(self) -> Vec2:
        enemy = self.arena.closest_enemy(self.caster.position, self.caster.team)
        if enemy is None:
            return self.caster.position + Vec2(1, 0)
        return enemy.position

    async def cast(self, slot: int, target: Optional[Vec2] = None) -> bool:
        """Rzuca jeden slot i rozstrzyga wszystkie pociski."""
        cast = await self.caster.cast_slot(slot, target if target is not None else self.aim_point())
        if cast:
            self.arena.resolve_pending(self.caster.team)
        return cast

    async def run_round(self) -> int:
        """Jedna runda: każdy zajęty slot po kolei. Zwraca liczbę castów."""
        casts = 0
        for slot, spell in enumerate(self.caster.spells):
            if spell is None or not self.arena.get_enemies_of(self.caster.team):
                continue
            if await self.cast(slot):
                casts += 1
        self.rounds += 1
        self.time += self.config.round_interval
        self.caster.regenerate_mana()
        return casts

    async def run(self) -> Dict[str, Any]:
        """
        Castuje do śmierci wszystkich wrogów albo limitu rund.

        Returns:
            Dict: Podsumowanie starcia (patrz summary())
        """
        for _ in range(self.config.max_rounds):
            if not self.arena.get_enemies_of(self.caster.team):
                break
            await self.run_round()
        return self.summary()

    # ─────────────────────────────────────────────────────────────────────────
    # WYNIK
    # ─────────────────────────────────────────────────────────────────────────

    def summary(self) -> Dict[str, Any]:
        enemies = [u for u in self.arena.units if u.team != self.caster.team]
        return {
            "seed": self.seed,
            "wave": self.config.wave,
            "rounds": self.rounds,
            "caster": self.caster.to_dict(),
            "enemies": [u.to_dict() for u in enemies],
            "enemies_alive": sum(1 for u in enemies if u.is_alive()),
            "projectiles": len(self.arena.projectiles.projectiles),
            "relics": [relic.to_dict() for relic in self.relics.owned],
            "total_events": self.event_logger.get_event_count(),
        }

    def save_log(self, filepath: str) -> None:
        self.event_logger.save(filepath)
