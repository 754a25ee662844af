"""
Generator liczb losowych (RNG) dla budowania i castowania spelli.

Losowość pojawia się w trzech miejscach:
- SpellBuilder: wybór bazowego spella, liczby i rodzaju modyfikatorów
- Splitter: drobny rozrzut (±2°) kierunku obu pocisków
- BounceModifier: losowy kierunek odbicia, gdy brak celu w zasięgu

Każdy z tych komponentów dostaje instancję GameRNG z zewnątrz.
W testach podajemy stały seed, dzięki czemu skład spella jest
powtarzalny. W grze seed może być None (losowy).

Przykład użycia:
    >>> rng = GameRNG(seed=12345)
    >>> rng.choice(["arcane_bolt", "railgun"])
    'railgun'
    >>> rng.roll_chance(0.3)
    False

Ważne:
    NIE używaj globalnego modułu random w silniku - zawsze
    instancji GameRNG przekazanej do komponentu.
"""

from __future__ import annotations
import math
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')


class GameRNG:
    """
    Generator losowości opakowujący random.Random.

    Attributes:
        seed (Optional[int]): Ziarno użyte do inicjalizacji (None = losowe)
        _rng (random.Random): Wewnętrzny generator

    Example:
        >>> rng1 = GameRNG(42)
        >>> rng2 = GameRNG(42)
        >>> rng1.random() == rng2.random()
        True
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Ziarno losowości. Ten sam seed = te same wyniki.
        """
        self.seed = seed
        self._rng = random.Random(seed)

    # ─────────────────────────────────────────────────────────────────────────
    # PODSTAWOWE METODY
    # ─────────────────────────────────────────────────────────────────────────

    def random(self) -> float:
        """Zwraca losową liczbę z przedziału [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Zwraca losową liczbę całkowitą z przedziału [a, b] (włącznie)."""
        return self._rng.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        """Zwraca losową liczbę z przedziału [a, b]."""
        return self._rng.uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        """
        Wybiera losowy element z sekwencji (rozkład jednostajny).

        Raises:
            IndexError: Jeśli sekwencja jest pusta
        """
        return self._rng.choice(seq)

    def choices(self, seq: Sequence[T], k: int = 1) -> List[T]:
        """Wybiera k elementów z powtórzeniami."""
        return self._rng.choices(seq, k=k)

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        """
        Wybiera k unikalnych elementów (k > len(seq) = wszystkie, przetasowane).

        Args:
            seq: Sekwencja do wyboru z
            k: Ile elementów wybrać
        """
        items = list(seq)
        return self._rng.sample(items, min(k, len(items)))

    # ─────────────────────────────────────────────────────────────────────────
    # METODY SPECYFICZNE DLA GRY
    # ─────────────────────────────────────────────────────────────────────────

    def roll_chance(self, chance: float) -> bool:
        """
        Rzuca kością na szansę (0.0 - 1.0).

        Example:
            >>> rng.roll_chance(0.3)  # 30% szansy
            True  # lub False
        """
        return self.random() < chance

    def unit_vector(self) -> Tuple[float, float]:
        """Losowy kierunek na płaszczyźnie (wektor o długości 1)."""
        angle = self.uniform(0.0, 2.0 * math.pi)
        return (math.cos(angle), math.sin(angle))

    def fork(self) -> "GameRNG":
        """
        Tworzy nowy RNG z seedem bazowanym na aktualnym stanie.

        Przydatne, gdy podsystem (np. castowanie) nie powinien
        przesuwać głównej sekwencji losowości buildera.
        """
        return GameRNG(self.randint(0, 2**31 - 1))

    def __repr__(self) -> str:
        return f"GameRNG(seed={self.seed})"
