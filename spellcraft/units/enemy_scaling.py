"""
Skalowanie spawnów przeciwników falą.

Pola wpisu spawnu są formułami RPN ewaluowanymi jako INT ze
zmiennymi `base` (bazowa wartość przeciwnika) i `wave`.

FORMAT enemies.yaml:
═══════════════════════════════════════════════════════════════════

    enemies:
      zombie:
        hp: 20
        speed: 5
        sprite: 0

    levels:
      Easy:
        waves: 10
        spawns:
          - enemy: "zombie"
            count: "5 wave +"
            hp: "base wave 5 * +"
            speed: "base"
            delay: "2"
            sequence: [1, 2]
            location: "random"

REGUŁY:
═══════════════════════════════════════════════════════════════════

    count  - fallback 0
    hp     - fallback hp przeciwnika   (brak pola = hp przeciwnika)
    speed  - fallback speed przeciwnika, potem clamp do [1, 20]
    delay  - fallback 2                (brak pola = 2)
    sequence - tylko wpisy > 0       (brak takich = [1])

    Samo planowanie w czasie (odliczanie, fale) jest poza silnikiem;
    tu powstaje tylko plan liczbowy.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..combat.damage import Hittable, Team
from ..core.rng import GameRNG
from ..core.rpn import safe_evaluate
from ..core.vector import Vec2

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 20
DEFAULT_DELAY = 2


def positive_sizes(sequence) -> List[int]:
    """Dodatnie rozmiary paczek; brak takich = [1]."""
    return [n for n in sequence if n > 0] or [1]


@dataclass
class EnemyDefinition:
    """Bazowe statystyki przeciwnika."""
    name: str
    hp: int = 20
    speed: int = 5
    sprite: int = 0

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "EnemyDefinition":
        return cls(
            name=name,
            hp=int(data.get("hp", 20)),
            speed=int(data.get("speed", 5)),
            sprite=int(data.get("sprite", 0)),
        )


@dataclass
class SpawnPlan:
    """
    Rozwiązany wpis spawnu dla konkretnej fali.

    Attributes:
        enemy: Nazwa przeciwnika
        count: Ile sztuk
        hp: HP każdej sztuki
        speed: Prędkość (po clampie)
        delay: Odstęp między paczkami (s)
        sequence: Rozmiary kolejnych paczek (cyklicznie)
        location: Nazwa punktu spawnu
    """
    enemy: str
    count: int
    hp: int
    speed: int
    delay: int = DEFAULT_DELAY
    sequence: List[int] = field(default_factory=lambda: [1])
    location: str = "random"

    def batches(self) -> List[int]:
        """
        Rozmiary paczek aż do wyczerpania `count`.

        Example:
            >>> SpawnPlan("zombie", count=5, hp=20, speed=5, sequence=[1, 2]).batches()
            [1, 2, 1, 1]
        """
        result: List[int] = []
        spawned = 0
        index = 0
        sizes = positive_sizes(self.sequence)
        while spawned < self.count:
            batch = min(sizes[index % len(sizes)], self.count - spawned)
            result.append(batch)
            spawned += batch
            index += 1
        return result

    def create_units(
        self,
        rng: Optional[GameRNG] = None,
        center: Optional[Vec2] = None,
        spread: float = 10.0,
    ) -> List[Hittable]:
        """Tworzy cele drużyny MONSTERS rozrzucone wokół `center`."""
        rng = rng or GameRNG()
        center = center or Vec2()
        return [
            Hittable(
                f"{self.enemy}_{i + 1}",
                Team.MONSTERS,
                hp=self.hp,
                position=center + Vec2(rng.uniform(-spread, spread), rng.uniform(-spread, spread)),
            )
            for i in range(self.count)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enemy": self.enemy,
            "count": self.count,
            "hp": self.hp,
            "speed": self.speed,
            "delay": self.delay,
            "sequence": list(self.sequence),
            "location": self.location,
        }


def resolve_spawn(spawn: Mapping[str, Any], enemy: EnemyDefinition, wave: int) -> SpawnPlan:
    """
    Rozwiązuje formuły wpisu spawnu.

    Args:
        spawn: Wpis z levels.<poziom>.spawns
        enemy: Definicja przeciwnika
        wave: Numer fali

    Returns:
        SpawnPlan: Plan liczbowy
    """
    hp_vars = {"base": enemy.hp, "wave": wave}
    count = max(0, safe_evaluate(spawn.get("count"), hp_vars, 0))

    hp = enemy.hp
    if spawn.get("hp") is not None:
        hp = safe_evaluate(spawn["hp"], hp_vars, enemy.hp)

    speed = enemy.speed
    if spawn.get("speed") is not None:
        speed = safe_evaluate(spawn["speed"], {"base": enemy.speed, "wave": wave}, enemy.speed)
    speed = min(MAX_SPEED, max(MIN_SPEED, speed))

    delay = DEFAULT_DELAY
    if spawn.get("delay") is not None:
        delay = safe_evaluate(spawn["delay"], hp_vars, DEFAULT_DELAY)

    raw_sequence = [int(n) for n in spawn.get("sequence") or []]
    sequence = positive_sizes(raw_sequence)
    if raw_sequence and sequence != raw_sequence:
        logger.warning(
            "Spawn of '%s' has non-positive sequence entries %s, using %s",
            enemy.name, raw_sequence, sequence,
        )

    return SpawnPlan(
        enemy=enemy.name,
        count=count,
        hp=hp,
        speed=speed,
        delay=delay,
        sequence=sequence,
        location=spawn.get("location", "random"),
    )


def plan_wave(
    level: Mapping[str, Any],
    enemies: Mapping[str, EnemyDefinition],
    wave: int,
) -> List[SpawnPlan]:
    """
    Plan całej fali poziomu.

    Wpis z nieznanym przeciwnikiem jest pomijany (z ostrzeżeniem).
    """
    plans: List[SpawnPlan] = []
    for spawn in level.get("spawns", []):
        enemy = enemies.get(spawn.get("enemy"))
        if enemy is None:
            logger.warning("Spawn references unknown enemy '%s', skipping", spawn.get("enemy"))
            continue
        plans.append(resolve_spawn(spawn, enemy, wave))
    return plans


def load_enemy_definitions(raw: Mapping[str, Mapping[str, Any]]) -> Dict[str, EnemyDefinition]:
    return {name: EnemyDefinition.from_dict(name, data or {}) for name, data in raw.items()}
