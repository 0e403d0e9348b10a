
"""
probability.py
Pure functions estimating how likely a bid is to be true.
The hidden dice are modelled as independent draws, so the number of hidden matches is
Binomial(n, p) with p = 1/6, or 2/6 when ones are wild and the declared face is not one.
Related modules:
- agents/: Strategies compare these values against their thresholds.
- dice.py: DiceSet.count_matching gives the known part of the count.
"""

import math
from typing import Iterable, Union

from .bid import Bid
from .dice import DiceSet, WILD_FACE, count_face

Hand = Union[DiceSet, Iterable[int]]


def success_probability(face: int, wild_rule: bool = False) -> float:
    """
    Chance that one unseen die counts toward a bid on `face`.
    """
    if wild_rule and face != WILD_FACE:
        return 2.0 / 6.0
    return 1.0 / 6.0


def _log_binomial_pmf(n: int, k: int, log_p: float, log_q: float) -> float:
    log_coeff = math.lgamma(n + 1) - math.lgamma(k + 1) - math.lgamma(n - k + 1)
    return log_coeff + k * log_p + (n - k) * log_q


def binomial_tail(n: int, k: int, p: float) -> float:
    """
    P(X >= k) for X ~ Binomial(n, p).
    Terms are evaluated in log space so large n never overflows the binomial coefficient.
    The shorter side of the distribution is summed and complemented when that is cheaper.
    Args:
        n (int): Number of trials (unknown dice).
        k (int): Required successes.
        p (float): Per-trial success probability.
    Returns:
        float: Tail probability clamped to [0, 1].
    """
    if k <= 0:
        return 1.0
    if k > n:
        return 0.0
    if p <= 0.0:
        return 0.0
    if p >= 1.0:
        return 1.0
    log_p = math.log(p)
    log_q = math.log1p(-p)
    if k > n * p:
        total = math.fsum(math.exp(_log_binomial_pmf(n, i, log_p, log_q)) for i in range(k, n + 1))
    else:
        below = math.fsum(math.exp(_log_binomial_pmf(n, i, log_p, log_q)) for i in range(0, k))
        total = 1.0 - below
    return min(1.0, max(0.0, total))


def known_matching(own_dice: Hand, face: int, wild_rule: bool = False) -> int:
    """Count the querying player's own dice that support a bid on `face`."""
    if isinstance(own_dice, DiceSet):
        return own_dice.count_matching(face, wild_rule)
    return count_face(own_dice, face, wild_rule)


def bid_is_plausible(bid: Bid, own_dice: Hand, total_unknown_dice: int, wild_rule: bool = False) -> float:
    """
    Probability that `bid` is true from the point of view of a player holding `own_dice`.
    Args:
        bid (Bid): The bid to evaluate.
        own_dice (DiceSet|iterable): The player's own dice (already known).
        total_unknown_dice (int): Dice held by everyone else.
        wild_rule (bool): If True, ones are wild for faces other than one.
    Returns:
        float: P(matches among unknown dice >= quantity - known matches).
    """
    need = max(0, bid.quantity - known_matching(own_dice, bid.face, wild_rule))
    if need <= 0:
        return 1.0
    if need > total_unknown_dice:
        return 0.0
    return binomial_tail(total_unknown_dice, need, success_probability(bid.face, wild_rule))


def expected_count(face: int, own_dice: Hand, total_unknown_dice: int, wild_rule: bool = False) -> float:
    """Expected total number of dice showing `face` given the player's own hand."""
    return (known_matching(own_dice, face, wild_rule)
            + total_unknown_dice * success_probability(face, wild_rule))


def public_plausibility(bid: Bid, total_dice: int, wild_rule: bool = False) -> float:
    """
    Plausibility of `bid` with every die hidden, the same value for every observer.
    Used to group decisions by how believable the answered bid looked from the table.
    """
    return bid_is_plausible(bid, (), total_dice, wild_rule)
