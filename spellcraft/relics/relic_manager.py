"""
RelicManager - pula reliktów, oferty po fali i wybór gracza.

ODPOWIEDZIALNOŚCI:
═══════════════════════════════════════════════════════════════════════════

    1. Ładowanie definicji z relics.yaml (wadliwy wpis = błąd w logu,
       wpis pominięty)
    2. Oferta co 3 fale: do 3 losowych reliktów, których gracz
       jeszcze nie ma
    3. pick(): relikt trafia do posiadanych i podpina się do castera
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, TYPE_CHECKING

from ..core.errors import RelicDefinitionError
from ..core.rng import GameRNG
from .relic import Relic

if TYPE_CHECKING:
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)


class RelicManager:
    """
    Zarządza reliktami gracza.

    Attributes:
        rng (GameRNG): Losowość ofert
        relics (Dict[str, Relic]): Wszystkie załadowane relikty
        owned (List[Relic]): Relikty wybrane przez gracza (kolejność wyboru)
    """

    OFFER_EVERY = 3
    OFFER_SIZE = 3

    def __init__(self, rng: Optional[GameRNG] = None):
        self.rng = rng or GameRNG()
        self.relics: Dict[str, Relic] = {}
        self.owned: List[Relic] = []

    def load_relics(self, relics_data: Mapping[str, Mapping]) -> int:
        """
        Ładuje definicje reliktów.

        Args:
            relics_data: Słownik relic_id -> definicja

        Returns:
            int: Liczba załadowanych reliktów
        """
        loaded = 0
        for relic_id, data in relics_data.items():
            try:
                self.relics[relic_id] = Relic.from_dict(relic_id, data or {})
            except RelicDefinitionError as exc:
                logger.error("Skipping relic '%s': %s", relic_id, exc)
                continue
            loaded += 1
        logger.info("RelicManager loaded %d relics", loaded)
        return loaded

    def get_relic(self, relic_id: str) -> Optional[Relic]:
        return self.relics.get(relic_id)

    def offer(self, wave: int) -> List[Relic]:
        """
        Oferta po zakończeniu fali `wave`.

        Returns:
            List[Relic]: Pusta lista, gdy fala nie jest wielokrotnością 3
                albo gracz ma już wszystko
        """
        if wave <= 0 or wave % self.OFFER_EVERY != 0:
            return []
        candidates = [relic for relic in self.relics.values() if relic not in self.owned]
        return self.rng.sample(candidates, self.OFFER_SIZE)

    def pick(self, relic_id: str, caster: "SpellCaster") -> bool:
        """
        Gracz wybiera relikt.

        Returns:
            bool: False dla nieznanego lub już posiadanego reliktu
        """
        relic = self.relics.get(relic_id)
        if relic is None:
            logger.warning("Unknown relic '%s'", relic_id)
            return False
        if relic in self.owned:
            return False

        self.owned.append(relic)
        relic.init(caster)
        logger.info("%s picked relic %s", caster.id, relic.name)
        if caster.arena and caster.arena.event_logger:
            caster.arena.event_logger.log_relic_picked(caster.id, relic.name)
        return True

    def end_all(self) -> None:
        """Zdejmuje efekty i odpina triggery wszystkich posiadanych reliktów."""
        for relic in self.owned:
            relic.end()
