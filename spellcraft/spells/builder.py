"""
SpellBuilder - losowe składanie spelli z katalogu.

ALGORYTM:
═══════════════════════════════════════════════════════════════════

    1. wave <= 1  →  zwykły arcane_bolt, bez losowania
                     (gwarantowany spell startowy)

    2. Spell bazowy: losowo (jednostajnie) z BASE_SPELLS

    3. Liczba modyfikatorów:
           rng.random() < 0.3   →  2
           w przeciwnym razie   →  losowo z {0, 1}

       P(2) = 0.30, P(0) = 0.35, P(1) = 0.35

    4. Rodzaje modyfikatorów: losowo Z POWTÓRZENIAMI z MODIFIER_SPELLS

    5. Poprawka kolejności (indeks 0 = najbardziej wewnętrzny):
           doubler  → przenieś na indeks 1
           splitter → przenieś na indeks 1 (doubler ląduje dalej)

    6. Owijanie od środka: base → mods[0] → mods[1] → ...

    Każdy etap rozwiązuje swoje pola z wpisu katalogu. Brak wpisu
    to ostrzeżenie i wartości domyślne - nigdy błąd.

NIEZALEŻNOŚĆ:
═══════════════════════════════════════════════════════════════════

    Każde wywołanie build() tworzy nowe instancje. Spell startowy i
    każda oferta nagrody mają własne, niewspółdzielone łańcuchy.

Przykład:
    >>> builder = SpellBuilder(catalog, rng=GameRNG(42))
    >>> spell = builder.build(caster, BuildContext(power=5, wave=3))
    >>> len(spell.chain()) <= 3
    True
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

from ..core.config_loader import SpellCatalog
from ..core.errors import InvalidCompositionStateError
from ..core.rng import GameRNG
from ..events.event_logger import EventLogger
from .base_spells import BASE_SPELLS
from .modifiers import MODIFIER_SPELLS, ModifierSpell
from .spell import Spell, formula_vars

if TYPE_CHECKING:
    from ..units.spell_caster import SpellCaster

logger = logging.getLogger(__name__)

STARTER_SPELL = "arcane_bolt"

TWO_MODIFIERS_CHANCE = 0.3
MAX_MODIFIERS = 2

REPEAT_MODIFIER = "doubler"
SPLIT_MODIFIER = "splitter"
FIXUP_POSITION = 1


@dataclass(frozen=True)
class BuildContext:
    """
    Kontekst składania spella.

    Attributes:
        power: Spell power castera
        wave: Numer fali (poziom trudności)
    """
    power: float = 0
    wave: int = 1

    def variables(self) -> Dict[str, float]:
        return formula_vars(self.power, self.wave)


class SpellBuilder:
    """
    Składa spelle z katalogu.

    Attributes:
        catalog: Katalog definicji (jawnie przekazany, bez globali)
        rng: Źródło losowości (seed = powtarzalne buildy)
        event_logger: Opcjonalny logger zdarzeń
    """

    def __init__(
        self,
        catalog: SpellCatalog,
        rng: Optional[GameRNG] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        self.catalog = catalog
        self.rng = rng or GameRNG()
        self.event_logger = event_logger

    # ─────────────────────────────────────────────────────────────────────────
    # BUILD
    # ─────────────────────────────────────────────────────────────────────────

    def build(self, owner: Optional["SpellCaster"], context: BuildContext) -> Spell:
        """
        Losuje i składa spell.

        Args:
            owner: Caster nowego spella
            context: power i wave

        Returns:
            Spell: Nowy, niezależny łańcuch
        """
        if context.wave <= 1:
            spell = self.assemble(owner, STARTER_SPELL, [], context)
        else:
            base_key = self.rng.choice(list(BASE_SPELLS))
            spell = self.assemble(owner, base_key, self.roll_modifiers(), context)

        logger.info("Built spell '%s' (wave=%d, power=%s)", spell.display_name, context.wave, context.power)
        if self.event_logger:
            self.event_logger.log_spell_built(
                spell.display_name,
                base=spell.leaf.key,
                modifiers=[layer.key for layer in spell.chain()[:-1]],
                wave=context.wave,
                power=context.power,
            )
        return spell

    def roll_modifier_count(self) -> int:
        if self.rng.random() < TWO_MODIFIERS_CHANCE:
            return MAX_MODIFIERS
        return self.rng.choice([0, 1])

    def roll_modifiers(self) -> List[str]:
        """Losuje klucze modyfikatorów (z powtórzeniami) i poprawia kolejność."""
        keys = list(MODIFIER_SPELLS)
        chosen = [self.rng.choice(keys) for _ in range(self.roll_modifier_count())]
        return self.apply_ordering_fixups(chosen)

    @staticmethod
    def apply_ordering_fixups(keys: Sequence[str]) -> List[str]:
        """
        Przenosi doubler, a potem splitter na indeks 1.

        Dosłowna dwukrokowa relokacja: pierwsze wystąpienie klucza
        jest wyjmowane i wstawiane na FIXUP_POSITION (na krótszej
        liście - na koniec). Splitter idzie drugi, więc przy obu
        wygrywa pozycję 1.

        Example:
            >>> SpellBuilder.apply_ordering_fixups(["doubler", "homing"])
            ['homing', 'doubler']
            >>> SpellBuilder.apply_ordering_fixups(["splitter", "doubler"])
            ['doubler', 'splitter']
        """
        result = list(keys)
        for key in (REPEAT_MODIFIER, SPLIT_MODIFIER):
            if key in result:
                result.remove(key)
                result.insert(FIXUP_POSITION, key)
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # SKŁADANIE
    # ─────────────────────────────────────────────────────────────────────────

    def assemble(
        self,
        owner: Optional["SpellCaster"],
        base_key: str,
        modifier_keys: Sequence[str],
        context: BuildContext,
    ) -> Spell:
        """
        Deterministycznie składa łańcuch z podanych kluczy.

        Args:
            owner: Caster
            base_key: Klucz spella bazowego
            modifier_keys: Klucze modyfikatorów, od najbardziej wewnętrznego
            context: power i wave

        Raises:
            InvalidCompositionStateError: Nieznany klucz bazy lub modyfikatora
        """
        base_cls = BASE_SPELLS.get(base_key)
        if base_cls is None:
            raise InvalidCompositionStateError(f"Unknown base spell '{base_key}'")

        variables = context.variables()
        spell: Spell = base_cls(owner)
        spell.load_attributes(self._definition(base_key), variables)

        for key in modifier_keys:
            spell = self.wrap(spell, key, context)
        return spell

    def wrap(self, inner: Spell, key: str, context: BuildContext) -> ModifierSpell:
        """Owija spell jednym modyfikatorem i rozwiązuje jego pola."""
        modifier_cls = MODIFIER_SPELLS.get(key)
        if modifier_cls is None:
            raise InvalidCompositionStateError(f"Unknown modifier '{key}'")
        modifier = modifier_cls(inner)
        modifier.load_attributes(self._definition(key), context.variables())
        return modifier

    def _definition(self, key: str) -> Dict:
        entry = self.catalog.lookup(key)
        if entry is None:
            logger.warning("Spell catalog has no entry '%s', using built-in defaults", key)
            return {}
        return entry


def describe_spell(spell: Spell) -> str:
    """
    Opis na ekran nagrody: opisy modyfikatorów (od zewnętrznego),
    potem opis spella bazowego.
    """
    lines = [layer.description for layer in spell.chain() if layer.description]
    return "\n".join(lines)
