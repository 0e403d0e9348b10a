
"""
rules.py
Defines helper functions for Liar's Dice rules, including counting matches and wild ones logic.
Related modules:
- engine.py: Uses count_matches to resolve challenges.
- dice.py: count_face / DiceSet.count_matching hold the single wild-ones counting rule.
"""

from typing import Dict, Iterable, Mapping, Union

from .dice import DiceSet, count_face

Hand = Union[DiceSet, Iterable[int]]


def count_matches(all_dice: Mapping[int, Hand], face: int, ones_wild: bool = False) -> int:
    """
    Count the number of dice matching a given face across all players.
    Args:
        all_dice (dict): Mapping of player_id to dice (a DiceSet or any iterable of faces).
        face (int): Face value to count.
        ones_wild (bool): If True, ones count as wild for non-one faces.
    Returns:
        int: Total count of matching dice.
    """
    total = 0
    for dice in all_dice.values():
        if isinstance(dice, DiceSet):
            total += dice.count_matching(face, ones_wild)
        else:
            total += count_face(dice, face, ones_wild)
    return total


def reveal(all_dice: Mapping[int, Iterable[int]]) -> Dict[int, tuple]:
    """Freeze every hand into a tuple for publication after a challenge."""
    return {pid: tuple(dice) for pid, dice in all_dice.items()}


def max_challenges(starting_dice: int, num_players: int) -> int:
    """
    Upper bound on challenges in one game: every die but the winner's last one is lost.
    Equals starting_dice * num_players - (num_players - 1) for two players.
    """
    return starting_dice * num_players - 1
