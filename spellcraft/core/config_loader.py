"""
Loader konfiguracji i katalog definicji spelli.

System data-driven wymaga ładowania definicji z plików YAML:
- spells.yaml: spelle bazowe i modyfikatory (formuły RPN)
- classes.yaml: klasy gracza (formuły statystyk per fala)
- enemies.yaml: przeciwnicy i spawny (formuły liczników)
- relics.yaml: relikty (trigger + efekt, kwoty jako formuły RPN)

FORMAT spells.yaml:
═══════════════════════════════════════════════════════════════════

    spells:
      arcane_bolt:
        name: "Arcane Bolt"
        description: "Fires a single bolt."
        icon: 0
        damage:
          amount: "25 power 5 / +"
          type: "arcane"
        mana_cost: "10"
        cooldown: "2"
        projectile:
          trajectory: "straight"
          speed: "8 power 50 / +"
          sprite: 0

      damage_amp:
        name: "damage-amplified"
        damage_multiplier: "1.5"
        mana_multiplier: "1.5"

KATALOG:
═══════════════════════════════════════════════════════════════════

    SpellCatalog to jawnie tworzony obiekt przekazywany do
    SpellBuilder. Nie ma globalnego stanu - testy mogą mieć
    wiele niezależnych katalogów.

    Brak klucza NIE jest błędem krytycznym: lookup() zwraca None,
    a wywołujący loguje ostrzeżenie i używa wartości domyślnych.

Użycie:
    >>> loader = ConfigLoader("data/")
    >>> catalog = loader.load_spell_catalog()
    >>> catalog.lookup("arcane_bolt")["name"]
    'Arcane Bolt'
"""

from __future__ import annotations
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import yaml

from .errors import MissingCatalogEntryError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# KATALOG
# ═══════════════════════════════════════════════════════════════════════════

class SpellCatalog:
    """
    Niemutowalny (z zewnątrz) zbiór definicji spelli i modyfikatorów.

    Attributes:
        _entries (Dict[str, Dict]): Mapa klucz -> surowa definicja
    """

    def __init__(self, entries: Optional[Mapping[str, Dict[str, Any]]] = None):
        self._entries: Dict[str, Dict[str, Any]] = copy.deepcopy(dict(entries or {}))

    def lookup(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Zwraca kopię definicji lub None, jeśli klucza brak.

        Args:
            key: Klucz (np. "arcane_bolt", "doubler")
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        return copy.deepcopy(entry)

    def require(self, key: str) -> Dict[str, Any]:
        """
        Jak lookup(), ale brak klucza jest błędem.

        Raises:
            MissingCatalogEntryError: Jeśli klucz nie istnieje
        """
        entry = self.lookup(key)
        if entry is None:
            raise MissingCatalogEntryError(key)
        return entry

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def items(self) -> Iterator[tuple]:
        for key in self._entries:
            yield key, self.lookup(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SpellCatalog({len(self)} entries)"


# ═══════════════════════════════════════════════════════════════════════════
# LOADER
# ═══════════════════════════════════════════════════════════════════════════

class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML (leniwie, z cache).

    Attributes:
        data_path (Path): Ścieżka do folderu data/
        _spells (Dict): Cache definicji spelli
        _classes (Dict): Cache klas gracza
        _enemies (Dict): Cache przeciwników i spawnów
        _relics (Dict): Cache definicji reliktów
    """

    def __init__(self, data_path: str = "data/"):
        """
        Args:
            data_path: Ścieżka do folderu z plikami YAML
        """
        self.data_path = Path(data_path)
        self._spells: Optional[Dict] = None
        self._classes: Optional[Dict] = None
        self._enemies: Optional[Dict] = None
        self._relics: Optional[Dict] = None

    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> Dict:
        """
        Wczytuje plik YAML.

        Brak pliku jest logowany jako błąd i daje pusty słownik -
        gra ma działać na wbudowanych wartościach domyślnych.
        """
        filepath = self.data_path / filename
        if not filepath.exists():
            logger.error("ConfigLoader: %s not found", filepath)
            return {}
        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    # ─────────────────────────────────────────────────────────────────────────
    # SPELLE
    # ─────────────────────────────────────────────────────────────────────────

    def _get_all_spells_raw(self) -> Dict:
        if self._spells is None:
            data = self._load_yaml("spells.yaml")
            self._spells = data.get("spells", {})
            logger.info("ConfigLoader loaded %d spell definitions", len(self._spells))
        return self._spells

    def load_spell_catalog(self) -> SpellCatalog:
        """
        Tworzy nowy katalog z definicji w spells.yaml.

        Returns:
            SpellCatalog: Niezależna instancja (każde wywołanie = nowa)
        """
        return SpellCatalog(self._get_all_spells_raw())

    # ─────────────────────────────────────────────────────────────────────────
    # KLASY GRACZA
    # ─────────────────────────────────────────────────────────────────────────

    def load_class_definitions(self) -> Dict[str, Dict]:
        """Zwraca kopię definicji klas z classes.yaml."""
        if self._classes is None:
            data = self._load_yaml("classes.yaml")
            self._classes = data.get("classes", {})
        return copy.deepcopy(self._classes)

    # ─────────────────────────────────────────────────────────────────────────
    # PRZECIWNICY
    # ─────────────────────────────────────────────────────────────────────────

    def _get_enemies_raw(self) -> Dict:
        if self._enemies is None:
            self._enemies = self._load_yaml("enemies.yaml")
        return self._enemies

    def load_enemy_definitions(self) -> Dict[str, Dict]:
        """Zwraca mapę nazwa -> definicja przeciwnika (hp, speed, sprite)."""
        return copy.deepcopy(self._get_enemies_raw().get("enemies", {}))

    def load_levels(self) -> Dict[str, Dict]:
        """Zwraca mapę nazwa poziomu -> {waves, spawns}."""
        return copy.deepcopy(self._get_enemies_raw().get("levels", {}))

    # ─────────────────────────────────────────────────────────────────────────
    # RELIKTY
    # ─────────────────────────────────────────────────────────────────────────

    def load_relic_definitions(self) -> Dict[str, Dict]:
        """Zwraca kopię mapy id -> definicja reliktu z relics.yaml."""
        if self._relics is None:
            data = self._load_yaml("relics.yaml")
            self._relics = data.get("relics", {})
            logger.info("ConfigLoader loaded %d relic definitions", len(self._relics))
        return copy.deepcopy(self._relics)

    def reload(self) -> None:
        """
        Czyści cache i wymusza ponowne wczytanie plików.

        Przydatne podczas edycji plików YAML w runtime.
        """
        self._spells = None
        self._classes = None
        self._enemies = None
        self._relics = None
