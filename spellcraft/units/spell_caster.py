"""
SpellCaster - jednostka rzucająca spelle (gracz).

Caster trzyma:
- manę (max_mana, mana, mana_reg)
- spell power (zmienna `power` w formułach)
- 4 sloty na spelle
- ciało (Hittable) z HP, drużyną i pozycją
- referencję do Areny (ujście pocisków, targeting)

CAST ZE SLOTU:
═══════════════════════════════════════════════════════════════════

    cast_slot(slot, target):
        1. pusty slot / zły indeks          → odrzucenie
        2. spell nie jest IDLE              → odrzucenie
        3. mana < koszt                     → odrzucenie
        4. mana -= round(koszt)
        5. await spell.activate(...)        (stempluje last_cast)
        6. callbacki on_cast(caster, spell) po zakończeniu aktywacji

    Odrzucenie to NIE błąd - cast_slot zwraca False, a powód
    trafia do EventLoggera (SPELL_REJECTED).

SKALOWANIE FALĄ:
═══════════════════════════════════════════════════════════════════

    scale_for_wave(stats) przyjmuje wynik PlayerClass.stats_for_wave:
        health → max HP (z zachowaniem % HP)
        mana → max mana (i pełna mana)
        mana_regeneration, spellpower, speed → zaokrąglone
"""

from __future__ import annotations
import logging
import time
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..combat.damage import Hittable, Team
from ..core.rng import GameRNG
from ..core.vector import Vec2
from ..spells.builder import BuildContext
from ..spells.spell import Spell, SpellState, formula_vars

if TYPE_CHECKING:
    from ..combat.arena import Arena

logger = logging.getLogger(__name__)

SPELL_SLOTS = 4


class SpellCaster:
    """
    Jednostka z maną i slotami spelli.

    Attributes:
        id (str): Identyfikator (do logów)
        body (Hittable): HP, drużyna, pozycja
        arena (Optional[Arena]): Świat, w którym caster rzuca spelle
        rng (GameRNG): Losowość spelli (rozrzut Splittera, odbicia)
        max_mana (int): Maksymalna mana
        mana (int): Aktualna mana
        mana_reg (int): Regeneracja many na tick regeneracji
        spell_power (int): Spell power
        speed (int): Prędkość ruchu (dla zewnętrznego silnika)
        spells (List[Optional[Spell]]): Sloty
        on_cast (List[Callable]): Wołane po każdym udanym caście (relikty)
    """

    def __init__(
        self,
        id: str = "player",
        team: Team = Team.PLAYER,
        position: Optional[Vec2] = None,
        arena: Optional["Arena"] = None,
        rng: Optional[GameRNG] = None,
        max_mana: int = 90,
        mana_reg: int = 10,
        spell_power: int = 0,
        hp: int = 95,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.id = id
        self.body = Hittable(id, team, hp=hp, position=position or Vec2())
        self.arena = arena
        self.rng = rng or GameRNG()
        self.max_mana = max_mana
        self.mana = max_mana
        self.mana_reg = mana_reg
        self.spell_power = spell_power
        self.speed = 5
        self.spells: List[Optional[Spell]] = [None] * SPELL_SLOTS
        self.clock = clock
        self.on_cast: List[Callable[["SpellCaster", Spell], None]] = []

    # ─────────────────────────────────────────────────────────────────────────
    # CIAŁO
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def team(self) -> Team:
        return self.body.team

    @property
    def position(self) -> Vec2:
        return self.body.position

    @position.setter
    def position(self, value: Vec2) -> None:
        self.body.position = value

    # ─────────────────────────────────────────────────────────────────────────
    # SLOTY
    # ─────────────────────────────────────────────────────────────────────────

    def equip(self, slot: int, spell: Optional[Spell]) -> Optional[Spell]:
        """
        Wkłada spell do slotu.

        Poprzedni spell jest zwracany; jego aktywacje w locie
        dobiegają końca normalnie.

        Raises:
            IndexError: Zły numer slotu
        """
        if not 0 <= slot < SPELL_SLOTS:
            raise IndexError(f"Spell slot {slot} out of range 0..{SPELL_SLOTS - 1}")
        previous = self.spells[slot]
        if spell is not None:
            spell.bind_owner(self)
        self.spells[slot] = spell
        return previous

    def learn(self, spell: Spell) -> Optional[int]:
        """Wkłada spell do pierwszego wolnego slotu (None = brak miejsca)."""
        for slot, current in enumerate(self.spells):
            if current is None:
                self.equip(slot, spell)
                return slot
        return None

    def get_spell(self, slot: int) -> Optional[Spell]:
        if not 0 <= slot < SPELL_SLOTS:
            return None
        return self.spells[slot]

    # ─────────────────────────────────────────────────────────────────────────
    # CAST
    # ─────────────────────────────────────────────────────────────────────────

    def now(self) -> float:
        return self.clock()

    async def cast_slot(self, slot: int, target: Vec2, origin: Optional[Vec2] = None) -> bool:
        """
        Rzuca spell ze slotu.

        Args:
            slot: Numer slotu (0-3)
            target: Punkt celowania
            origin: Punkt startu (domyślnie pozycja castera)

        Returns:
            bool: True jeśli spell został rzucony
        """
        spell = self.get_spell(slot)
        if spell is None:
            return self._reject(slot, "empty slot")

        now = self.now()
        state = spell.state(now)
        if state is not SpellState.IDLE:
            return self._reject(slot, state.name.lower())

        cost = spell.mana
        if self.mana < cost:
            return self._reject(slot, "not enough mana")

        self.mana -= round(cost)
        logger.info("%s casts %s (mana %d/%d)", self.id, spell.display_name, self.mana, self.max_mana)
        event_logger = self.arena.event_logger if self.arena else None
        if event_logger:
            event_logger.log_spell_cast(self.id, slot, spell.display_name, cost, spell.damage)

        start = origin if origin is not None else self.position
        cast = await spell.activate(start, target, now)
        if cast:
            for listener in list(self.on_cast):
                listener(self, spell)
        return cast

    def _reject(self, slot: int, reason: str) -> bool:
        logger.debug("%s slot %d rejected: %s", self.id, slot, reason)
        if self.arena and self.arena.event_logger:
            self.arena.event_logger.log_spell_rejected(self.id, slot, reason)
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # MANA / SKALOWANIE
    # ─────────────────────────────────────────────────────────────────────────

    def regenerate_mana(self) -> int:
        """Jeden tick regeneracji (zwykle co sekundę). Zwraca nową manę."""
        self.mana = min(self.max_mana, self.mana + self.mana_reg)
        return self.mana

    def gain_mana(self, amount: int) -> int:
        """Dodaje manę (max do max_mana). Zwraca nową manę."""
        self.mana = min(self.max_mana, max(0, self.mana + amount))
        return self.mana

    def add_spell_power(self, amount: int) -> int:
        """
        Zmienia spell power i przelicza formuły spelli w slotach.

        Args:
            amount: Przyrost (ujemny = zdjęcie bonusu)

        Returns:
            int: Nowy spell power
        """
        self.spell_power += amount
        variables = self.formula_vars(self.arena.wave if self.arena else 1)
        for spell in self.spells:
            if spell is not None:
                spell.refresh(variables)
        logger.debug("%s spell power %+d -> %d", self.id, amount, self.spell_power)
        return self.spell_power

    def formula_vars(self, wave: int) -> Dict[str, float]:
        return formula_vars(self.spell_power, wave)

    def build_context(self, wave: int) -> BuildContext:
        return BuildContext(power=self.spell_power, wave=wave)

    def scale_for_wave(self, stats: Dict[str, float], wave: int) -> None:
        """
        Aplikuje statystyki klasy dla nowej fali.

        Args:
            stats: Wynik PlayerClass.stats_for_wave(wave)
            wave: Numer fali (do logu)
        """
        self.body.set_max_hp(round(stats.get("health", self.body.max_hp)), preserve_percentage=True)
        self.max_mana = round(stats.get("mana", self.max_mana))
        self.mana = self.max_mana
        self.mana_reg = round(stats.get("mana_regeneration", self.mana_reg))
        self.spell_power = round(stats.get("spellpower", self.spell_power))
        self.speed = round(stats.get("speed", self.speed))

        logger.info(
            "%s scaled for wave %d: hp=%d/%d mana=%d power=%d",
            self.id, wave, self.body.hp, self.body.max_hp, self.max_mana, self.spell_power,
        )
        if self.arena and self.arena.event_logger:
            self.arena.event_logger.log_wave_scaled(self.id, wave, self.stats_dict())

    def stats_dict(self) -> Dict[str, float]:
        return {
            "hp": self.body.hp,
            "max_hp": self.body.max_hp,
            "mana": self.mana,
            "max_mana": self.max_mana,
            "mana_reg": self.mana_reg,
            "spell_power": self.spell_power,
            "speed": self.speed,
        }

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "team": self.team.name,
            "stats": self.stats_dict(),
            "spells": [s.to_dict() if s else None for s in self.spells],
        }
