import logging
from typing import Optional

from liars_dice.agents import register_agent
from liars_dice.agents.base import AIStrategy
from liars_dice.core.actions import Challenge, RaiseBid
from liars_dice.core.bid import Bid, legal_raises
from liars_dice.core.dice import FACES
from liars_dice.core.probability import expected_count

logger = logging.getLogger(__name__)


class ProbabilityStrategy(AIStrategy):
    """
    Base class for the threshold-driven tiers. Provides the decision rule; subclasses tune it.
    Decision rule:
        - No standing bid: open on the face with the highest expected count, at the largest
          quantity whose plausibility stays at or above the safety margin.
        - Standing bid less plausible than the challenge threshold: challenge.
        - Otherwise: the smallest legal raise whose plausibility stays at or above the safety margin.
          Raise order tries higher faces before higher quantities, so the cheaper raise wins ties.
        - No safe raise: take the most plausible raise only if it is at least as likely to hold
          as the challenge is to succeed, else challenge.
    Hooks:
        - challenge_threshold(view) / safety_margin(view): thresholds for this decision.
        - raise_margin(view, bid): margin a particular bid must clear (defaults to safety_margin).
        - opening_bid(view): the bid placed when nothing stands.
    """

    def challenge_threshold(self, view) -> float:
        return self.params.challenge_threshold

    def safety_margin(self, view) -> float:
        return self.params.safety_margin

    def raise_margin(self, view, bid: Bid) -> float:
        """Minimum plausibility for placing `bid`; the safety margin unless a tier prices bids individually."""
        return self.safety_margin(view)

    def decide(self, view):
        current = view.current_bid
        if current is None:
            opening = self.opening_bid(view)
            logger.debug("%s opens with %s", type(self).__name__, opening)
            return RaiseBid.from_bid(opening)

        p = self.plausibility(current, view)
        threshold = self.challenge_threshold(view)
        if self.call_liar_deterministic(view) or p < threshold:
            logger.debug("%s challenges %s (p=%.3f < %.3f)", type(self).__name__, current, p, threshold)
            return Challenge()

        raise_bid = self.choose_raise(view, p)
        if raise_bid is None:
            logger.debug("%s challenges %s, no acceptable raise (p=%.3f)", type(self).__name__, current, p)
            return Challenge()
        logger.debug("%s raises %s -> %s (p=%.3f)", type(self).__name__, current, raise_bid, p)
        return RaiseBid.from_bid(raise_bid)

    def choose_raise(self, view, current_plausibility: float) -> Optional[Bid]:
        """
        Pick the raise to make over the standing bid, or None to challenge instead.
        """
        fallback, fallback_p = None, -1.0
        for candidate in legal_raises(view.current_bid, view.total_dice):
            candidate_p = self.plausibility(candidate, view)
            if candidate_p >= self.raise_margin(view, candidate):
                return self.maybe_bluff(candidate, view)
            if candidate_p > fallback_p:
                fallback, fallback_p = candidate, candidate_p
        if fallback is not None and fallback_p >= 1.0 - current_plausibility:
            return fallback
        return None

    def best_face(self, view) -> int:
        """Face with the highest expected total count; ties go to the higher face."""
        return max(FACES, key=lambda f: (expected_count(f, view.my_dice, view.unknown_dice, view.ones_wild), f))

    def opening_bid(self, view) -> Bid:
        face = self.best_face(view)
        quantity = 1
        for q in range(2, view.total_dice + 1):
            candidate = Bid(q, face)
            if self.plausibility(candidate, view) < self.raise_margin(view, candidate):
                break
            quantity = q
        return self.maybe_bluff(Bid(quantity, face), view)

    def maybe_bluff(self, bid: Bid, view) -> Bid:
        """
        With probability bluff_rate, claim one die more than the safe choice (when the dice allow it).
        """
        if self.params.bluff_rate > 0 and bid.quantity < view.total_dice:
            if self.rng.random() < self.params.bluff_rate:
                return Bid(bid.quantity + 1, bid.face)
        return bid


@register_agent("novice")
class NoviceStrategy(ProbabilityStrategy):
    """
    NoviceStrategy:
    - Challenges only bids that look quite unlikely (threshold 0.25).
    - Opens by claiming exactly what it holds of its best face, ignoring the unseen dice.
    - Bluffs now and then (15%), one die above its safe raise.
    """
    def opening_bid(self, view) -> Bid:
        face = self.best_face(view)
        quantity = max(1, self.my_count_of_face(view.my_dice, face, view.ones_wild))
        return self.maybe_bluff(Bid(min(quantity, view.total_dice), face), view)


@register_agent("balanced")
class BalancedStrategy(ProbabilityStrategy):
    """
    BalancedStrategy: the plain decision rule with middle-of-the-road thresholds (0.35 / 0.45) and no bluffing.
    """
    pass


@register_agent("aggressive")
class AggressiveStrategy(ProbabilityStrategy):
    """
    AggressiveStrategy:
    - Challenges readily (threshold 0.45).
    - Accepts thin raises (safety margin 0.30) and bluffs 10% of the time.
    """
    pass
