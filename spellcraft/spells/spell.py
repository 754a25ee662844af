"""
Spell - bazowa klasa wszystkich spelli (liści i modyfikatorów).

Spell łączy:
- Tożsamość (nazwa, ikona, opis)
- Cztery statystyki (damage, mana, cooldown, speed) liczone jako
  StatBlock.apply(base, mods)
- Asynchroniczną aktywację (korutyna asyncio)

STATYSTYKI:
═══════════════════════════════════════════════════════════════════

    effective = StatBlock.apply(base, own_mods + activation_mods)

    Liść (spell bazowy) ma własne wartości base_* (z katalogu lub
    domyślne 10 / 10 / 1 / 8). Modyfikator NIE ma własnej bazy -
    deleguje do inner i dokłada swoje modyfikatory (patrz
    modifiers.py).

KONTEKST AKTYWACJI:
═══════════════════════════════════════════════════════════════════

    Każda aktywacja niesie własny, niemutowalny CastContext:

        mods        - modyfikatory wszystkich warstw nad liściem
        trajectory  - wymuszona trajektoria (None = trajektoria liścia)
        hit_hooks   - dodatkowe efekty trafienia (knockback, bounce)

    Warstwa modyfikatora tworzy kontekst dla inner:
        child.mods = own_mods + caller.mods

    Nic nie jest wstrzykiwane do zapisanych stosów ani z nich
    czyszczone, więc nakładające się aktywacje tego samego spella
    (np. druga aktywacja w trakcie opóźnienia Doublera) nie mogą
    sobie nawzajem zepsuć statystyk.

MASZYNA STANÓW:
═══════════════════════════════════════════════════════════════════

    IDLE ──activate()──> ACTIVATING ──(korutyna skończona)──> COOLING_DOWN
      ^                                                            │
      └──────────────────(now >= last_cast + cooldown)─────────────┘

    activate() poza stanem IDLE zwraca False i nic nie zmienia.

ANULOWANIE:
═══════════════════════════════════════════════════════════════════

    Aktywacje w locie zawsze dobiegają końca - wyrzucenie spella
    (nagroda, podmiana slotu) ich nie przerywa. Jeśli task asyncio
    zostanie anulowany z zewnątrz, CancelledError leci dalej;
    licznik aktywacji jest zwalniany w `finally`, a sprzątania
    statystyk nie ma, bo nic nie było mutowane.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum, auto
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

from ..combat.damage import Damage, DamageType
from ..core.errors import InvalidCompositionStateError
from ..core.rng import GameRNG
from ..core.rpn import Expression, safe_evaluate_float
from ..core.vector import Vec2
from .projectile import OnHit
from .stat_block import EMPTY_STAT_BLOCK, STATS, StatBlock

if TYPE_CHECKING:
    from ..combat.arena import Arena
    from ..combat.damage import Hittable
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)


def formula_vars(power: float, wave: int) -> Dict[str, float]:
    """
    Zmienne dostępne w każdej formule spella.

    Example:
        >>> formula_vars(power=5, wave=3)
        {'power': 5, 'wave': 3}
    """
    return {"power": power, "wave": wave}


# ═══════════════════════════════════════════════════════════════════════════
# TRAFIENIE
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Impact:
    """
    Opis trafienia przekazywany do hooków.

    Attributes:
        spell: Liść, który wystrzelił pocisk
        target: Trafiony cel
        position: Punkt trafienia
        damage: Obrażenia tej aktywacji (przed zaokrągleniem)
        speed: Prędkość pocisku tej aktywacji
        context: Kontekst aktywacji
    """
    spell: "Spell"
    target: "Hittable"
    position: Vec2
    damage: float
    speed: float
    context: "CastContext"


HitHook = Callable[[Impact], None]


@dataclass(frozen=True)
class CastContext:
    """Niemutowalny stan jednej aktywacji, przekazywany w dół łańcucha."""
    mods: StatBlock = EMPTY_STAT_BLOCK
    trajectory: Optional[str] = None
    hit_hooks: Tuple[HitHook, ...] = ()

    def with_mods(self, own: StatBlock) -> CastContext:
        """Najpierw modyfikatory warstwy, potem te od wywołującego."""
        return replace(self, mods=own.merged(self.mods))

    def override_trajectory(self, trajectory: str) -> CastContext:
        return replace(self, trajectory=trajectory)

    def append_trajectory(self, trajectory: str) -> CastContext:
        """Dokleja trajektorię ("spiraling" -> "spiraling+homing")."""
        if not self.trajectory:
            return replace(self, trajectory=trajectory)
        return replace(self, trajectory=f"{self.trajectory}+{trajectory}")

    def with_hook(self, hook: HitHook) -> CastContext:
        return replace(self, hit_hooks=self.hit_hooks + (hook,))


class SpellState(Enum):
    """Stan spella w danej chwili."""
    IDLE = auto()
    ACTIVATING = auto()
    COOLING_DOWN = auto()


# ═══════════════════════════════════════════════════════════════════════════
# SPELL
# ═══════════════════════════════════════════════════════════════════════════

class Spell(ABC):
    """
    Bazowa klasa spella.

    Attributes:
        owner: Caster (źródło pozycji, drużyny, areny)
        mods: Stałe modyfikatory tej warstwy
        last_cast: Czas ostatniej aktywacji (None = nigdy)
        definition: Surowa definicja z katalogu (do refresh())
        variables: Zmienne użyte przy ostatnim rozwiązaniu formuł
    """

    key: str = ""
    default_name: str = "Spell"
    default_description: str = ""
    damage_type: DamageType = DamageType.ARCANE
    trajectory: str = "straight"

    def __init__(self, owner: Optional["SpellCaster"] = None):
        self.owner = owner
        self.mods: StatBlock = EMPTY_STAT_BLOCK
        self.last_cast: Optional[float] = None
        self.definition: Dict[str, Any] = {}
        self.variables: Dict[str, float] = {}
        self.resolved: Dict[str, float] = {}

        self.name = self.default_name
        self.description = self.default_description
        self.icon = 0
        self.sprite = 0

        self.base_damage: float = 10
        self.base_mana: float = 10
        self.base_cooldown: float = 1
        self.base_speed: float = 8

        self._in_flight = 0

    # ─────────────────────────────────────────────────────────────────────────
    # TOŻSAMOŚĆ
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def icon_index(self) -> int:
        return self.icon

    @property
    def leaf(self) -> "Spell":
        return self

    def chain(self) -> List["Spell"]:
        """Warstwy od zewnętrznej do liścia."""
        return [self]

    def bind_owner(self, owner: Optional["SpellCaster"]) -> None:
        """Przypisuje castera wszystkim warstwom łańcucha."""
        for layer in self.chain():
            layer.owner = owner

    @property
    def rng(self) -> GameRNG:
        if self.owner is not None:
            return self.owner.rng
        return GameRNG()

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def resolve_stat(self, stat: str, extra: StatBlock = EMPTY_STAT_BLOCK) -> float:
        """
        Efektywna wartość statystyki.

        Args:
            stat: "damage", "mana", "cooldown" lub "speed"
            extra: Modyfikatory aktywacji doklejane po własnych
        """
        if stat not in STATS:
            raise ValueError(f"Unknown stat '{stat}'")
        return StatBlock.apply(getattr(self, f"base_{stat}"), getattr(self.mods.merged(extra), stat))

    @property
    def damage(self) -> float:
        return self.resolve_stat("damage")

    @property
    def mana(self) -> float:
        return self.resolve_stat("mana")

    @property
    def cooldown(self) -> float:
        return self.resolve_stat("cooldown")

    @property
    def speed(self) -> float:
        return self.resolve_stat("speed")

    def is_ready(self, now: float) -> bool:
        if self.last_cast is None:
            return True
        return now >= self.last_cast + self.cooldown

    def state(self, now: float) -> SpellState:
        """ACTIVATING ma pierwszeństwo przed COOLING_DOWN."""
        if self._in_flight > 0:
            return SpellState.ACTIVATING
        if not self.is_ready(now):
            return SpellState.COOLING_DOWN
        return SpellState.IDLE

    # ─────────────────────────────────────────────────────────────────────────
    # AKTYWACJA
    # ─────────────────────────────────────────────────────────────────────────

    async def activate(self, origin: Vec2, target: Vec2, now: float) -> bool:
        """
        Aktywuje spell, jeśli jest w stanie IDLE.

        Args:
            origin: Punkt startu
            target: Punkt celowania
            now: Aktualny czas gry (do cooldownu)

        Returns:
            bool: False jeśli aktywacja została odrzucona
        """
        current = self.state(now)
        if current is not SpellState.IDLE:
            logger.debug("%s not cast: %s", self.display_name, current.name)
            return False

        self.last_cast = now
        await self.try_cast(origin, target)
        return True

    async def try_cast(
        self,
        origin: Vec2,
        target: Vec2,
        context: Optional[CastContext] = None,
    ) -> None:
        """Rzuca spell bez sprawdzania stanu (wywoływane przez warstwy wyżej)."""
        self._in_flight += 1
        try:
            await self._cast(origin, target, context or CastContext())
        finally:
            self._in_flight -= 1

    @abstractmethod
    async def _cast(self, origin: Vec2, target: Vec2, context: CastContext) -> None:
        ...

    # ─────────────────────────────────────────────────────────────────────────
    # ŚWIAT
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def arena(self) -> "Arena":
        if self.owner is None or self.owner.arena is None:
            raise InvalidCompositionStateError(
                f"{self.display_name} has no owner in an arena and cannot be cast"
            )
        return self.owner.arena

    def make_hit_handler(
        self,
        context: CastContext,
        damage: float,
        speed: float,
        run_hooks: bool = True,
    ) -> OnHit:
        """
        Callback trafienia: obrażenia dla przeciwnej drużyny + hooki.

        Args:
            context: Kontekst aktywacji (hooki)
            damage: Obrażenia (zaokrąglane przy zadaniu)
            speed: Prędkość pocisku (przekazywana do hooków)
            run_hooks: False dla pocisków wtórnych
        """
        def on_hit(target: "Hittable", impact: Vec2) -> None:
            if self.owner is None or target.team == self.owner.team:
                return
            self.arena.apply_damage(
                target,
                Damage(round(damage), self.damage_type),
                source=self.display_name,
            )
            if not run_hooks:
                return
            info = Impact(self, target, impact, damage, speed, context)
            for hook in context.hit_hooks:
                hook(info)

        return on_hit

    def emit(
        self,
        origin: Vec2,
        direction: Vec2,
        context: CastContext,
        damage: Optional[float] = None,
        speed: Optional[float] = None,
        lifetime: Optional[float] = None,
        piercing: bool = False,
        trajectory: Optional[str] = None,
        run_hooks: bool = True,
    ) -> None:
        """
        Wystrzeliwuje jeden pocisk tej aktywacji.

        Domyślnie obrażenia i prędkość są liczone z kontekstu,
        a trajektoria to wymuszona z kontekstu lub własna.
        """
        if damage is None:
            damage = self.resolve_stat("damage", context.mods)
        if speed is None:
            speed = self.resolve_stat("speed", context.mods)
        self.arena.projectiles.create_projectile(
            self.sprite,
            context.trajectory or trajectory or self.trajectory,
            origin,
            direction,
            speed,
            self.make_hit_handler(context, damage, speed, run_hooks),
            lifetime=lifetime,
            piercing=piercing,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # FORMUŁY
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve(self, name: str, expression: Expression, fallback: float) -> float:
        """
        Rozwiązuje formułę (safe) i zapamiętuje wynik pod `name`.

        Brak pola -> fallback bez ostrzeżenia. Wcześniej rozwiązane
        pola są dostępne jako zmienne w kolejnych formułach.
        """
        if expression is None:
            value = fallback
        else:
            scope = dict(self.variables)
            scope.update(self.resolved)
            value = safe_evaluate_float(expression, scope, fallback)
        self.resolved[name] = value
        return value

    def load_attributes(self, data: Mapping[str, Any], variables: Mapping[str, float]) -> None:
        """
        Rozwiązuje pola wspólne z definicji katalogu.

        Args:
            data: Definicja (może być pusta - wtedy wartości domyślne)
            variables: Zmienne formuł (power, wave)
        """
        self.definition = dict(data)
        self.variables = dict(variables)
        self.resolved = {}

        self.name = data.get("name", self.name)
        self.description = data.get("description", self.description)
        self.icon = int(data.get("icon", self.icon))

        damage = data.get("damage") or {}
        self.base_damage = self._resolve("damage", damage.get("amount"), self.base_damage)
        self.damage_type = DamageType.parse(damage.get("type"), self.damage_type)
        self.base_mana = self._resolve("mana_cost", data.get("mana_cost"), self.base_mana)
        self.base_cooldown = self._resolve("cooldown", data.get("cooldown"), self.base_cooldown)

        projectile = data.get("projectile") or {}
        self.base_speed = self._resolve("speed", projectile.get("speed"), self.base_speed)
        self.trajectory = projectile.get("trajectory", self.trajectory)
        self.sprite = int(projectile.get("sprite", self.sprite))

        logger.debug(
            "%s resolved: damage=%.2f mana=%.2f cooldown=%.2f speed=%.2f",
            self.key, self.base_damage, self.base_mana, self.base_cooldown, self.base_speed,
        )

    def refresh(self, variables: Mapping[str, float]) -> None:
        """Ponownie rozwiązuje formuły z zapisanej definicji (np. nowa fala)."""
        self.load_attributes(self.definition, variables)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        leaf = self.leaf
        return {
            "key": self.key,
            "name": self.display_name,
            "icon": self.icon_index,
            "base": leaf.key,
            "modifiers": [layer.key for layer in self.chain()[:-1]],
            "damage": round(self.damage, 2),
            "mana_cost": round(self.mana, 2),
            "cooldown": round(self.cooldown, 2),
            "speed": round(self.speed, 2),
            "trajectory": leaf.trajectory,
            "damage_type": leaf.damage_type.name.lower(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name!r})"
