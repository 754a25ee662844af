"""
Triggery reliktów.

TYPY TRIGGERÓW:
═══════════════════════════════════════════════════════════════════════════

    take-damage  - ciało castera straciło HP (Hittable.on_damage)
    on-kill      - zginęła jednostka areny z przeciwnej drużyny
                   (Arena.death_listeners)

subscribe(caster) podpina callback, unsubscribe() go odpina.
Callback woła `fire` przekazane przy tworzeniu (Relic.fire).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Type, TYPE_CHECKING

from ..core.errors import RelicDefinitionError

if TYPE_CHECKING:
    from ..combat.arena import Arena
    from ..combat.damage import Hittable
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)


class RelicTrigger(ABC):
    """
    Źródło zdarzeń odpalających relikt.

    Attributes:
        fire (Callable[[], Any]): Akcja reliktu
        caster (Optional[SpellCaster]): Caster, do którego podpięto trigger
    """

    kind = ""

    def __init__(self, fire: Callable[[], Any]):
        self.fire = fire
        self.caster: Optional["SpellCaster"] = None

    @abstractmethod
    def subscribe(self, caster: "SpellCaster") -> None:
        ...

    @abstractmethod
    def unsubscribe(self) -> None:
        ...


class DamageTrigger(RelicTrigger):
    kind = "take-damage"

    def subscribe(self, caster: "SpellCaster") -> None:
        self.caster = caster
        caster.body.on_damage.append(self._on_damage)

    def unsubscribe(self) -> None:
        if self.caster is not None and self._on_damage in self.caster.body.on_damage:
            self.caster.body.on_damage.remove(self._on_damage)
        self.caster = None

    def _on_damage(self, unit: "Hittable", amount: int) -> None:
        self.fire()


class KillTrigger(RelicTrigger):
    kind = "on-kill"

    def __init__(self, fire: Callable[[], Any]):
        super().__init__(fire)
        self._arena: Optional["Arena"] = None

    def subscribe(self, caster: "SpellCaster") -> None:
        self.caster = caster
        if caster.arena is None:
            logger.warning("%s has no arena, on-kill relic will never fire", caster.id)
            return
        self._arena = caster.arena
        self._arena.death_listeners.append(self._on_death)

    def unsubscribe(self) -> None:
        if self._arena is not None and self._on_death in self._arena.death_listeners:
            self._arena.death_listeners.remove(self._on_death)
        self._arena = None
        self.caster = None

    def _on_death(self, unit: "Hittable") -> None:
        if self.caster is not None and unit.team != self.caster.team:
            self.fire()


RELIC_TRIGGERS: Dict[str, Type[RelicTrigger]] = {
    "take-damage": DamageTrigger,
    "on-kill": KillTrigger,
}


def create_trigger(relic_name: str, data: Mapping[str, Any], fire: Callable[[], Any]) -> RelicTrigger:
    """
    Tworzy trigger z wpisu `trigger` reliktu.

    Raises:
        RelicDefinitionError: Nieznany typ triggera
    """
    kind = data.get("type")
    trigger_cls = RELIC_TRIGGERS.get(kind)
    if trigger_cls is None:
        raise RelicDefinitionError(relic_name, "trigger", kind)
    return trigger_cls(fire)
