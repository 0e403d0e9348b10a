
"""
dice.py
Defines dice rolling utilities and the DiceSet owned by each player.
Related modules:
- engine.py: Rerolls every surviving DiceSet at round start and removes dice on lost challenges.
- rules.py: Counts matches across several DiceSets.
"""

import random
from typing import Iterable, Iterator, List, Tuple

from .errors import EmptySetError

FACES: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)
WILD_FACE = 1


def roll_die(rng: random.Random) -> int:
    """
    Roll a single six-sided die using the provided random number generator.
    Args:
        rng (random.Random): RNG instance.
    Returns:
        int: Die face (1-6).
    """
    return rng.randint(1, 6)


def roll_n(n: int, rng: random.Random) -> List[int]:
    """
    Roll n six-sided dice using the provided RNG.
    Args:
        n (int): Number of dice to roll.
        rng (random.Random): RNG instance.
    Returns:
        list[int]: List of die faces.
    """
    return [roll_die(rng) for _ in range(n)]


def count_face(dice: Iterable[int], face: int, wild_rule: bool = False) -> int:
    """
    Count dice that support a bid on `face`.
    Args:
        dice (iterable): Die faces.
        face (int): Declared face value.
        wild_rule (bool): If True, ones also count for any face other than one.
    Returns:
        int: Number of matching dice.
    """
    if wild_rule and face != WILD_FACE:
        return sum(1 for d in dice if d == face or d == WILD_FACE)
    return sum(1 for d in dice if d == face)


class DiceSet:
    """
    A player's private hand of dice.
    The size only ever shrinks, one die per lost challenge.
    Args:
        size (int): Number of dice the hand starts with.
        rng (random.Random): RNG owned by the game; used by reroll().
        values (iterable|None): Explicit faces, mainly for tests. Defaults to all ones until rerolled.
    """
    def __init__(self, size: int, rng: random.Random, values=None):
        self._rng = rng
        if values is None:
            self._values = [WILD_FACE] * size
        else:
            self._values = list(values)
            if len(self._values) != size:
                raise ValueError("values must contain exactly size dice")
            if any(v not in FACES for v in self._values):
                raise ValueError("dice faces must be between 1 and 6")

    def reroll(self) -> None:
        """Replace every die with a fresh uniform face."""
        self._values = roll_n(len(self._values), self._rng)

    def remove_one(self) -> None:
        """
        Remove exactly one die from the hand.
        Raises:
            EmptySetError: If the hand is already empty.
        """
        if not self._values:
            raise EmptySetError("cannot remove a die from an empty set")
        self._values.pop()

    def count_matching(self, face: int, wild_rule: bool = False) -> int:
        """Count dice in this hand supporting a bid on `face` (see count_face)."""
        return count_face(self._values, face, wild_rule)

    def is_empty(self) -> bool:
        return not self._values

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._values))

    def __repr__(self) -> str:
        return f"DiceSet({self._values!r})"
