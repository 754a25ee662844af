"""
Klasy gracza - formuły statystyk skalowanych falą.

Każda klasa definiuje formuły RPN dla pięciu statystyk; jedyną
zmienną jest `wave`. Statystyki są przeliczane na starcie każdej
fali (SpellCaster.scale_for_wave).

UŻYCIE:
═══════════════════════════════════════════════════════════════════

    # W classes.yaml
    classes:
      mage:
        name: "Mage"
        sprite: 0
        health: "95 wave 5 * +"
        mana: "90 wave 10 * +"
        mana_regeneration: "10 wave +"
        spellpower: "wave 10 *"
        speed: "5"

    # W kodzie
    loader = PlayerClassLoader(ConfigLoader("data/"))
    stats = loader.get_class("mage").stats_for_wave(3)

KLASY DOSTĘPNE:
═══════════════════════════════════════════════════════════════════

    mage        - zbalansowany
    warlock     - więcej many i spellpower, mniej HP
    battlemage  - dużo HP, wolniejsza regeneracja many

Nieznana klasa -> DEFAULT_CLASS (formuły domyślne). Znana klasa bez
danego pola -> 0 dla tego pola.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Optional

from ..core.config_loader import ConfigLoader
from ..core.rpn import safe_evaluate_float

logger = logging.getLogger(__name__)

CLASS_STATS = ("health", "mana", "mana_regeneration", "spellpower", "speed")

DEFAULT_FORMULAS: Dict[str, str] = {
    "health": "95 wave 5 * +",
    "mana": "90 wave 10 * +",
    "mana_regeneration": "10 wave +",
    "spellpower": "wave 10 *",
    "speed": "5",
}

DEFAULT_FALLBACKS: Dict[str, float] = {
    "health": 95.0,
    "mana": 90.0,
    "mana_regeneration": 10.0,
    "spellpower": 0.0,
    "speed": 5.0,
}


@dataclass
class PlayerClass:
    """
    Definicja klasy gracza.

    Attributes:
        id: Identyfikator klasy (np. "warlock")
        name: Nazwa wyświetlana
        sprite: Indeks sprite'a gracza
        description: Opis klasy
        formulas: Formuły RPN per statystyka
        fallbacks: Wartości przy błędnej formule
    """
    id: str
    name: str
    sprite: int = 0
    description: str = ""
    formulas: Dict[str, str] = field(default_factory=dict)
    fallbacks: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, class_id: str, data: Dict[str, Any]) -> "PlayerClass":
        """
        Tworzy PlayerClass ze słownika (YAML).

        Args:
            class_id: ID klasy
            data: Dane z YAML
        """
        return cls(
            id=class_id,
            name=data.get("name", class_id.title()),
            sprite=int(data.get("sprite", 0)),
            description=data.get("description", ""),
            formulas={
                stat: str(data[stat]) for stat in CLASS_STATS if data.get(stat) is not None
            },
        )

    def stats_for_wave(self, wave: int) -> Dict[str, float]:
        """
        Ewaluuje formuły dla danej fali.

        Args:
            wave: Numer fali

        Returns:
            Dict: statystyka -> wartość (wszystkie z CLASS_STATS)

        Example:
            >>> DEFAULT_CLASS.stats_for_wave(2)["health"]
            105.0
        """
        variables = {"wave": wave}
        result: Dict[str, float] = {}
        for stat in CLASS_STATS:
            expression = self.formulas.get(stat)
            fallback = self.fallbacks.get(stat, 0.0)
            if expression is None:
                result[stat] = fallback
                continue
            result[stat] = safe_evaluate_float(expression, variables, fallback)
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sprite": self.sprite,
            "description": self.description,
            "formulas": dict(self.formulas),
        }


# Klasa używana, gdy wybranej klasy nie ma w danych
DEFAULT_CLASS = PlayerClass(
    id="default",
    name="Default",
    description="Built-in stat formulas",
    formulas=dict(DEFAULT_FORMULAS),
    fallbacks=dict(DEFAULT_FALLBACKS),
)


class PlayerClassLoader:
    """
    Loader klas gracza (classes.yaml przez ConfigLoader).

    Attributes:
        config: Źródło definicji
        _classes: Cache wczytanych klas
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        self.config = config or ConfigLoader()
        self._classes: Dict[str, PlayerClass] = {}
        self._loaded = False

    def _load_classes(self) -> None:
        if self._loaded:
            return
        for class_id, data in self.config.load_class_definitions().items():
            self._classes[class_id] = PlayerClass.from_dict(class_id, data or {})
        self._loaded = True

    def get_class(self, class_id: Optional[str]) -> PlayerClass:
        """
        Zwraca klasę po ID.

        Returns:
            PlayerClass: Klasa lub DEFAULT_CLASS jeśli nie znaleziono
        """
        self._load_classes()
        if class_id is None:
            return DEFAULT_CLASS
        player_class = self._classes.get(class_id)
        if player_class is None:
            logger.warning("Unknown player class '%s', using default formulas", class_id)
            return DEFAULT_CLASS
        return player_class

    def get_sprite_index(self, class_id: str) -> int:
        self._load_classes()
        player_class = self._classes.get(class_id)
        return player_class.sprite if player_class else 0

    def get_all_classes(self) -> Dict[str, PlayerClass]:
        self._load_classes()
        return self._classes.copy()

    def reload(self) -> None:
        """Przeładowuje klasy z pliku."""
        self.config.reload()
        self._classes.clear()
        self._loaded = False
