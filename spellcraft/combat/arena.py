"""
Arena - rejestr celów i rozstrzyganie trafień.

Arena łączy trzy rzeczy, których spelle potrzebują od świata gry:
- ujście pocisków (ProjectileManager)
- zapytanie "najbliższy wróg" (closest_enemy)
- aktualny numer fali (zmienna `wave` w formułach)

Prawdziwa gra podmienia Arenę na własną integrację z silnikiem
fizyki. W testach, CLI i API Arena rozstrzyga trafienia
deterministycznie: każdy pocisk trafia wroga leżącego przed nim
z najmniejszym odchyleniem od kierunku lotu (pocisk przebijający -
wszystkich wrogów przed sobą, od najbliższego).

Przykład użycia:
    >>> arena = Arena(wave=3)
    >>> arena.add(Hittable("slime_1", Team.MONSTERS, hp=50, position=Vec2(5, 0)))
    >>> arena.closest_enemy(Vec2(0, 0), Team.PLAYER).id
    'slime_1'
"""

from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional, Protocol

from ..core.vector import Vec2
from ..events.event_logger import EventLogger
from ..spells.projectile import Projectile, ProjectileManager
from .damage import Damage, Hittable, Team

logger = logging.getLogger(__name__)


class TargetQuery(Protocol):
    """Zapytanie o najbliższy ważny cel przeciwnej drużyny."""

    def closest_enemy(
        self,
        origin: Vec2,
        team: Team,
        exclude: Optional[Hittable] = None,
        max_range: Optional[float] = None,
    ) -> Optional[Hittable]:
        ...


class Arena:
    """
    Świat gry widziany przez silnik spelli.

    Attributes:
        wave (int): Numer aktualnej fali
        units (List[Hittable]): Wszystkie cele (żywe i martwe)
        projectiles (ProjectileManager): Ujście pocisków
        event_logger (Optional[EventLogger]): Logger zdarzeń
        death_listeners (List[Callable]): Wołane po śmierci każdej jednostki areny
    """

    HIT_RADIUS = 0.5
    # cos kąta, poniżej którego cel nie jest "przed" pociskiem
    MIN_ALIGNMENT = 1e-9

    def __init__(
        self,
        wave: int = 1,
        event_logger: Optional[EventLogger] = None,
    ):
        self.wave = wave
        self.units: List[Hittable] = []
        self.event_logger = event_logger
        self.projectiles = ProjectileManager(event_logger=event_logger)
        self.death_listeners: List[Callable[[Hittable], None]] = []

    # ─────────────────────────────────────────────────────────────────────────
    # JEDNOSTKI
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, unit: Hittable) -> Hittable:
        """Dodaje cel do areny (i podpina log śmierci)."""
        self.units.append(unit)
        unit.on_death.append(self._on_unit_death)
        return unit

    def add_all(self, units: Iterable[Hittable]) -> None:
        for unit in units:
            self.add(unit)

    def _on_unit_death(self, unit: Hittable) -> None:
        logger.info("%s died", unit.id)
        if self.event_logger:
            self.event_logger.log_death(unit.id)
        for listener in list(self.death_listeners):
            listener(unit)

    def get_living_units(self, team: Optional[Team] = None) -> List[Hittable]:
        return [
            u for u in self.units
            if u.is_alive() and (team is None or u.team == team)
        ]

    def get_enemies_of(self, team: Team) -> List[Hittable]:
        return [u for u in self.units if u.is_alive() and u.team != team]

    # ─────────────────────────────────────────────────────────────────────────
    # TARGETING
    # ─────────────────────────────────────────────────────────────────────────

    def closest_enemy(
        self,
        origin: Vec2,
        team: Team,
        exclude: Optional[Hittable] = None,
        max_range: Optional[float] = None,
    ) -> Optional[Hittable]:
        """
        Zwraca najbliższego żywego wroga drużyny `team`.

        Args:
            origin: Punkt odniesienia
            team: Drużyna pytającego (szukamy przeciwnej)
            exclude: Cel pomijany (np. poprzednio trafiony)
            max_range: Maksymalna odległość (None = bez limitu)

        Returns:
            Najbliższy wróg lub None
        """
        candidates = [
            u for u in self.get_enemies_of(team)
            if u is not exclude
            and (max_range is None or origin.distance(u.position) <= max_range)
        ]
        if not candidates:
            return None
        # Remis -> kolejność dodania (stabilne min)
        return min(candidates, key=lambda u: origin.distance(u.position))

    # ─────────────────────────────────────────────────────────────────────────
    # OBRAŻENIA
    # ─────────────────────────────────────────────────────────────────────────

    def apply_damage(self, target: Hittable, damage: Damage, source: Optional[str] = None) -> int:
        """Zadaje obrażenia i loguje je."""
        dealt = target.damage(damage)
        logger.debug("%s took %d %s damage (hp=%d)", target.id, dealt, damage.damage_type.name, target.hp)
        if self.event_logger:
            self.event_logger.log_damage(
                target.id, dealt, damage.damage_type.name, target.hp, source=source
            )
        return dealt

    # ─────────────────────────────────────────────────────────────────────────
    # ROZSTRZYGANIE TRAFIEŃ
    # ─────────────────────────────────────────────────────────────────────────

    def impact_point(self, projectile: Projectile, target: Hittable) -> Vec2:
        """Punkt na obwodzie celu od strony nadlatującego pocisku."""
        towards_origin = (projectile.origin - target.position).normalized()
        return target.position + towards_origin * self.HIT_RADIUS

    def strike(self, projectile: Projectile, target: Hittable, impact: Optional[Vec2] = None) -> bool:
        """Trafia konkretny cel konkretnym pociskiem."""
        if impact is None:
            impact = self.impact_point(projectile, target)
        return self.projectiles.resolve_hit(projectile, target, impact)

    def targets_ahead(self, projectile: Projectile, hostile_to: Team) -> List[Hittable]:
        """
        Żywi wrogowie przed pociskiem, od najlepiej wycelowanego.

        Cel, z którego pocisk wyleciał (start na jego obwodzie, np.
        odłamek albo odbicie), jest pomijany. Pocisk bez kierunku
        widzi wszystkich wrogów, od najbliższego.
        """
        origin = projectile.origin
        direction = projectile.direction
        ahead = []
        for unit in self.get_enemies_of(hostile_to):
            offset = unit.position - origin
            distance = offset.length()
            if distance <= self.HIT_RADIUS + 1e-6:
                continue
            if direction.length() == 0:
                ahead.append((0.0, distance, unit))
                continue
            alignment = offset.dot(direction) / distance
            if alignment <= self.MIN_ALIGNMENT:
                continue
            ahead.append((-alignment, distance, unit))
        ahead.sort(key=lambda entry: (entry[0], entry[1]))
        return [unit for _, _, unit in ahead]

    def resolve_pending(self, hostile_to: Team, max_rounds: int = 32) -> int:
        """
        Rozstrzyga wszystkie pociski w locie.

        Każdy pocisk trafia pierwszego celu z targets_ahead().
        Pocisk przebijający trafia wszystkie cele przed sobą, od
        najbliższego. Pocisk bez celu wygasa. Trafienia mogą tworzyć
        nowe pociski (odłamki, odbicia) - stąd pętla rund.

        Args:
            hostile_to: Drużyna, która wystrzeliła pociski
            max_rounds: Limit rund (ochrona przed nieskończonym łańcuchem)

        Returns:
            int: Liczba rozstrzygniętych trafień
        """
        hits = 0
        for _ in range(max_rounds):
            pending = self.projectiles.active()
            if not pending:
                break
            for projectile in pending:
                targets = self.targets_ahead(projectile, hostile_to)
                if projectile.piercing:
                    targets.sort(key=lambda u: projectile.origin.distance(u.position))
                    for victim in targets:
                        if victim.is_alive() and self.strike(projectile, victim):
                            hits += 1
                    self.projectiles.expire(projectile)
                    continue

                if not targets:
                    self.projectiles.expire(projectile)
                    continue
                if self.strike(projectile, targets[0]):
                    hits += 1
        else:
            logger.warning("Arena.resolve_pending hit the round limit (%d)", max_rounds)
        return hits
