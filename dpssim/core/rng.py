"""
Deterministyczny generator liczb losowych (RNG).

Symulacja DPS musi być powtarzalna - ten sam seed
musi zawsze dawać ten sam log obrażeń. To pozwala na:
- Porównywanie buildów na identycznej sekwencji critów
- Debugowanie
- Testy jednostkowe

Jedynym źródłem losowości w symulacji są rzuty na crit
(CritTracker), więc każdy tracker dostaje swoją instancję GameRNG.

Przykład użycia:
    >>> rng = GameRNG(seed=12345)
    >>> rng.random() < 0.25   # rzut na 25% szansy
    False
    >>> rng.fork()             # pod-generator dla osobnej jednostki
    GameRNG(seed=...)

Ważne:
    NIGDY nie używaj random.random() bezpośrednio w symulacji!
    Zawsze używaj instancji GameRNG przekazanej do symulacji.
"""

from __future__ import annotations
import random
from typing import Optional


class GameRNG:
    """
    Deterministyczny generator losowości dla symulacji.

    Opakowuje random.Random z konkretnym seedem.
    Bez seeda losuje go z systemowego źródła, ale zapamiętuje,
    więc każdy przebieg da się odtworzyć.

    Attributes:
        seed (int): Ziarno użyte do inicjalizacji
        _rng (random.Random): Wewnętrzny generator

    Example:
        >>> rng1 = GameRNG(42)
        >>> rng2 = GameRNG(42)
        >>> rng1.random() == rng2.random()
        True
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.SystemRandom().randint(0, 2**31 - 1)
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

    def fork(self) -> "GameRNG":
        """
        Tworzy nowy RNG z seedem bazowanym na aktualnym stanie.

        Symulacja forkuje swój generator dla crit trackera jednostki,
        żeby kolejne rozszerzenia losowości nie przesuwały sekwencji critów.

        Returns:
            GameRNG: Nowy generator
        """
        return GameRNG(self.randint(0, 2**31 - 1))

    def __repr__(self) -> str:
        return f"GameRNG(seed={self.seed})"
