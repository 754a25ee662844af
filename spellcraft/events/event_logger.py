"""
System logowania zdarzeń spelli do formatu JSON (replay / debug).

Każde zdarzenie (zbudowanie spella, cast, pocisk, trafienie, śmierć)
jest zapisywane z pełnym kontekstem. Log może być później użyty do
odtworzenia przebiegu castów w wizualizacji albo zwrócony przez API.

Logger zdarzeń NIE zastępuje modułu `logging` - ten służy do
diagnostyki (ostrzeżenia o formułach, brakach w katalogu), a
EventLogger do strukturalnego zapisu rozgrywki.

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    SPELL_BUILT
    ─────────────────────────────────────────────────────────────
    SpellBuilder złożył spell.
    Data: name, base, modifiers, wave, power

    SPELL_CAST
    ─────────────────────────────────────────────────────────────
    Caster rzucił spell ze slotu.
    Data: slot, spell, mana_cost, damage

    SPELL_REJECTED
    ─────────────────────────────────────────────────────────────
    Próba castu odrzucona (cooldown, brak many, pusty slot).
    Data: slot, reason

    PROJECTILE_SPAWN / PROJECTILE_HIT
    ─────────────────────────────────────────────────────────────
    Pocisk wystrzelony / trafił cel.
    Data: projectile_id, trajectory, speed / impact

    UNIT_DAMAGE / UNIT_DEATH
    ─────────────────────────────────────────────────────────────
    Cel otrzymał obrażenia / zginął.

    KNOCKBACK / BOUNCE
    ─────────────────────────────────────────────────────────────
    Efekty uboczne trafienia dodane przez modyfikatory.

    WAVE_SCALED
    ─────────────────────────────────────────────────────────────
    Statystyki castera przeliczone dla nowej fali.

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {"version": "1.0", "seed": 12345, "timestamp": "..."},
    "events": [
        {"time": 0.0, "type": "SPELL_BUILT", "data": {...}},
        {"time": 0.1, "type": "SPELL_CAST", "unit_id": "player", "data": {...}},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
import json
from pathlib import Path
import time
from typing import Any, Callable, Dict, List, Optional


class EventType(Enum):
    """Typ zdarzenia."""

    # Spelle
    SPELL_BUILT = auto()
    SPELL_CAST = auto()
    SPELL_REJECTED = auto()

    # Pociski
    PROJECTILE_SPAWN = auto()
    PROJECTILE_HIT = auto()

    # Cele
    UNIT_DAMAGE = auto()
    UNIT_DEATH = auto()

    # Efekty modyfikatorów
    KNOCKBACK = auto()
    BOUNCE = auto()

    # Fale
    WAVE_SCALED = auto()

    # Relikty
    RELIC_PICKED = auto()
    RELIC_FIRED = auto()


@dataclass
class GameEvent:
    """
    Pojedyncze zdarzenie.

    Attributes:
        time (float): Sekundy od utworzenia loggera
        event_type (EventType): Typ zdarzenia
        unit_id (Optional[str]): ID jednostki (jeśli dotyczy)
        target_id (Optional[str]): ID celu (jeśli dotyczy)
        data (Dict): Dane specyficzne dla typu zdarzenia
    """
    time: float
    event_type: EventType
    unit_id: Optional[str] = None
    target_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje zdarzenie do słownika."""
        result = {
            "time": round(self.time, 3),
            "type": self.event_type.name,
        }

        if self.unit_id:
            result["unit_id"] = self.unit_id
        if self.target_id:
            result["target_id"] = self.target_id
        if self.data:
            result["data"] = self.data

        return result


class EventLogger:
    """
    Logger zdarzeń.

    Zbiera wszystkie zdarzenia i może je zapisać do pliku JSON.

    Attributes:
        events (List[GameEvent]): Lista wszystkich zdarzeń
        metadata (Dict): Metadane (seed, timestamp)

    Example:
        >>> logger = EventLogger(seed=12345)
        >>> logger.log_spell_built("Arcane Bolt", base="arcane_bolt", modifiers=[], wave=1, power=0)
        >>> logger.get_event_count()
        1
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            seed: Ziarno losowości (do metadanych)
            clock: Źródło czasu (wstrzykiwane w testach)
        """
        self.events: List[GameEvent] = []
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "seed": seed,
            "timestamp": datetime.now().isoformat(),
        }
        self._clock = clock
        self._started = clock()

    # ─────────────────────────────────────────────────────────────────────────
    # LOGOWANIE OGÓLNE
    # ─────────────────────────────────────────────────────────────────────────

    def log(self, event: GameEvent) -> None:
        self.events.append(event)

    def log_event(
        self,
        event_type: EventType,
        unit_id: Optional[str] = None,
        target_id: Optional[str] = None,
        **data: Any,
    ) -> GameEvent:
        """
        Tworzy i loguje zdarzenie ze znacznikiem czasu.

        Args:
            event_type: Typ zdarzenia
            unit_id: ID jednostki
            target_id: ID celu
            **data: Dodatkowe dane

        Returns:
            GameEvent: Utworzone zdarzenie
        """
        event = GameEvent(
            time=self._clock() - self._started,
            event_type=event_type,
            unit_id=unit_id,
            target_id=target_id,
            data=dict(data),
        )
        self.log(event)
        return event

    # ─────────────────────────────────────────────────────────────────────────
    # POMOCNICZE METODY LOGOWANIA
    # ─────────────────────────────────────────────────────────────────────────

    def log_spell_built(
        self,
        name: str,
        base: str,
        modifiers: List[str],
        wave: int,
        power: float,
    ) -> None:
        """Loguje zbudowanie spella."""
        self.log_event(
            EventType.SPELL_BUILT,
            name=name,
            base=base,
            modifiers=list(modifiers),
            wave=wave,
            power=power,
        )

    def log_spell_cast(
        self,
        unit_id: str,
        slot: int,
        spell: str,
        mana_cost: float,
        damage: float,
    ) -> None:
        """Loguje cast spella."""
        self.log_event(
            EventType.SPELL_CAST,
            unit_id=unit_id,
            slot=slot,
            spell=spell,
            mana_cost=round(mana_cost, 2),
            damage=round(damage, 2),
        )

    def log_spell_rejected(self, unit_id: str, slot: int, reason: str) -> None:
        self.log_event(EventType.SPELL_REJECTED, unit_id=unit_id, slot=slot, reason=reason)

    def log_projectile_spawn(
        self,
        projectile_id: int,
        trajectory: str,
        speed: float,
        piercing: bool = False,
    ) -> None:
        """Loguje wystrzelenie pocisku."""
        self.log_event(
            EventType.PROJECTILE_SPAWN,
            projectile_id=projectile_id,
            trajectory=trajectory,
            speed=round(speed, 2),
            piercing=piercing,
        )

    def log_projectile_hit(self, projectile_id: int, target_id: str, impact: List[float]) -> None:
        self.log_event(
            EventType.PROJECTILE_HIT,
            target_id=target_id,
            projectile_id=projectile_id,
            impact=impact,
        )

    def log_damage(
        self,
        unit_id: str,
        damage: int,
        damage_type: str,
        hp_after: int,
        source: Optional[str] = None,
    ) -> None:
        """Loguje otrzymanie obrażeń."""
        self.log_event(
            EventType.UNIT_DAMAGE,
            unit_id=unit_id,
            source=source,
            damage=damage,
            damage_type=damage_type,
            hp_after=hp_after,
        )

    def log_death(self, unit_id: str) -> None:
        self.log_event(EventType.UNIT_DEATH, unit_id=unit_id)

    def log_knockback(self, target_id: str, strength: float) -> None:
        self.log_event(EventType.KNOCKBACK, target_id=target_id, strength=round(strength, 2))

    def log_bounce(self, remaining: int, target_id: Optional[str]) -> None:
        self.log_event(EventType.BOUNCE, target_id=target_id, remaining=remaining)

    def log_wave_scaled(self, unit_id: str, wave: int, stats: Dict[str, float]) -> None:
        self.log_event(EventType.WAVE_SCALED, unit_id=unit_id, wave=wave, stats=stats)

    def log_relic_picked(self, unit_id: str, relic: str) -> None:
        self.log_event(EventType.RELIC_PICKED, unit_id=unit_id, relic=relic)

    def log_relic_fired(self, unit_id: str, relic: str, effect: str, amount: int) -> None:
        self.log_event(EventType.RELIC_FIRED, unit_id=unit_id, relic=relic, effect=effect, amount=amount)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializuje cały log do słownika.

        Returns:
            Dict: Pełny log w formacie dla JSON
        """
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }

    def save(self, filepath: str) -> None:
        """
        Zapisuje log do pliku JSON.

        Args:
            filepath: Ścieżka do pliku
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Zwraca log jako string JSON (indent=None = compact)."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def get_event_count(self) -> int:
        return len(self.events)

    def get_events_by_type(self, event_type: EventType) -> List[GameEvent]:
        """Filtruje zdarzenia po typie."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_for_unit(self, unit_id: str) -> List[GameEvent]:
        """Filtruje zdarzenia dla jednostki."""
        return [e for e in self.events if e.unit_id == unit_id]
