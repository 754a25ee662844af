"""
Pociski emitowane przez spelle.

Silnik NIE symuluje ruchu ani kolizji pocisków - to zadanie
zewnętrznego silnika gry. Spelle oddają pocisk do "ujścia"
(ProjectileSink), a ujście wywołuje callback on_hit, gdy pocisk
w coś trafi.

TRAJEKTORIE:
═══════════════════════════════════════════════════════════════════

    straight   - lot po prostej
    homing     - śledzi najbliższego wroga
    spiraling  - lot spiralą

    Trajektorie można składać znakiem "+":
        "spiraling+homing" - spirala, która dodatkowo namierza

    Nieznana nazwa -> ostrzeżenie i "straight".

INTERFEJS UJŚCIA:
═══════════════════════════════════════════════════════════════════

    create_projectile(sprite, trajectory, origin, direction,
                      speed, on_hit, lifetime=None, piercing=False)

    on_hit(target: Hittable, impact: Vec2) -> None

    ProjectileManager to implementacja rejestrująca: trzyma listę
    pocisków w locie, a trafienie rozstrzyga się przez resolve_hit()
    (wywołuje Arena albo test).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import itertools
import logging
from typing import Callable, List, Optional, Protocol, TYPE_CHECKING

from ..core.vector import Vec2

if TYPE_CHECKING:
    from ..combat.damage import Hittable
    from ..events.event_logger import EventLogger

logger = logging.getLogger(__name__)

OnHit = Callable[["Hittable", Vec2], None]

TRAJECTORIES = ("straight", "homing", "spiraling")
DEFAULT_TRAJECTORY = "straight"


def normalize_trajectory(name: Optional[str]) -> str:
    """
    Waliduje nazwę trajektorii (również złożonej "a+b").

    Example:
        >>> normalize_trajectory("Spiraling+homing")
        'spiraling+homing'
        >>> normalize_trajectory("zigzag")
        'straight'
    """
    if not name:
        logger.warning("Projectile trajectory empty, defaulting to %s", DEFAULT_TRAJECTORY)
        return DEFAULT_TRAJECTORY

    parts = []
    for part in str(name).lower().split("+"):
        part = part.strip()
        if part not in TRAJECTORIES:
            logger.warning("Unknown trajectory '%s', defaulting to %s", part, DEFAULT_TRAJECTORY)
            part = DEFAULT_TRAJECTORY
        parts.append(part)
    return "+".join(parts)


class ProjectileSink(Protocol):
    """Cokolwiek, co przyjmuje pociski od spelli."""

    def create_projectile(
        self,
        sprite: int,
        trajectory: str,
        origin: Vec2,
        direction: Vec2,
        speed: float,
        on_hit: OnHit,
        lifetime: Optional[float] = None,
        piercing: bool = False,
    ) -> None:
        ...


@dataclass(eq=False)
class Projectile:
    """
    Pocisk w locie.

    Attributes:
        id: Kolejny numer pocisku
        sprite: Indeks sprite'a (z katalogu)
        trajectory: Znormalizowana nazwa trajektorii
        origin: Punkt startu
        direction: Kierunek (jednostkowy)
        speed: Prędkość
        on_hit: Callback trafienia
        lifetime: Czas życia w sekundach (None = do trafienia)
        piercing: Czy przebija cele (nie znika po trafieniu)

        active: Czy pocisk jest jeszcze w locie
        hits: Liczba trafień
    """
    id: int
    sprite: int
    trajectory: str
    origin: Vec2
    direction: Vec2
    speed: float
    on_hit: OnHit
    lifetime: Optional[float] = None
    piercing: bool = False

    active: bool = True
    hits: int = 0

    def hit(self, target: "Hittable", impact: Optional[Vec2] = None) -> bool:
        """
        Rozstrzyga trafienie.

        Args:
            target: Trafiony cel
            impact: Punkt trafienia (domyślnie pozycja celu)

        Returns:
            bool: False jeśli pocisk już nie był aktywny
        """
        if not self.active:
            return False

        self.hits += 1
        if not self.piercing:
            self.active = False
        self.on_hit(target, impact if impact is not None else target.position)
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sprite": self.sprite,
            "trajectory": self.trajectory,
            "origin": [round(self.origin.x, 2), round(self.origin.y, 2)],
            "direction": [round(self.direction.x, 3), round(self.direction.y, 3)],
            "speed": round(self.speed, 2),
            "lifetime": self.lifetime,
            "piercing": self.piercing,
            "active": self.active,
        }


@dataclass
class ProjectileManager:
    """
    Rejestrujące ujście pocisków.

    Attributes:
        projectiles: Wszystkie wystrzelone pociski (w kolejności)
        event_logger: Opcjonalny logger zdarzeń
    """
    projectiles: List[Projectile] = field(default_factory=list)
    event_logger: Optional["EventLogger"] = None
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def create_projectile(
        self,
        sprite: int,
        trajectory: str,
        origin: Vec2,
        direction: Vec2,
        speed: float,
        on_hit: OnHit,
        lifetime: Optional[float] = None,
        piercing: bool = False,
    ) -> None:
        """Rejestruje nowy pocisk w locie."""
        projectile = Projectile(
            id=next(self._ids),
            sprite=sprite,
            trajectory=normalize_trajectory(trajectory),
            origin=origin,
            direction=direction.normalized(),
            speed=speed,
            on_hit=on_hit,
            lifetime=lifetime,
            piercing=piercing,
        )
        self.projectiles.append(projectile)
        logger.debug(
            "Projectile #%d spawned (%s, speed=%.2f)",
            projectile.id, projectile.trajectory, speed,
        )
        if self.event_logger:
            self.event_logger.log_projectile_spawn(
                projectile.id, projectile.trajectory, speed, piercing
            )

    def resolve_hit(
        self,
        projectile: Projectile,
        target: "Hittable",
        impact: Optional[Vec2] = None,
    ) -> bool:
        """Trafia cel pociskiem i loguje trafienie."""
        if not projectile.active:
            return False
        point = impact if impact is not None else target.position
        if self.event_logger:
            self.event_logger.log_projectile_hit(
                projectile.id, target.id, [round(point.x, 2), round(point.y, 2)]
            )
        return projectile.hit(target, point)

    def active(self) -> List[Projectile]:
        """Pociski wciąż w locie."""
        return [p for p in self.projectiles if p.active]

    def expire(self, projectile: Projectile) -> None:
        """Pocisk skończył lot bez trafienia (lifetime, wyjście z mapy)."""
        projectile.active = False

    def get_active_count(self) -> int:
        return len(self.active())

    def clear(self) -> None:
        self.projectiles.clear()
