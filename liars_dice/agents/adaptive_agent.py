"""
adaptive_agent.py
The Adaptive tier: the threshold rule of ProbabilityStrategy, with thresholds shifted by what
the bid history says about the other players.
Related modules:
- heuristic_agent.py: Decision rule.
- core/history.py: Prefix tendencies, per-level tendencies and revealed bluffs, read through the view's HistoryReader.
- core/probability.py: public_plausibility places a bid in its plausibility level.
"""

import logging
from typing import Tuple

from liars_dice.agents import register_agent
from liars_dice.agents.heuristic_agent import ProbabilityStrategy
from liars_dice.core.bid import Bid
from liars_dice.core.history import BluffTendency, Tendency, plausibility_level
from liars_dice.core.probability import public_plausibility

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@register_agent("adaptive")
class AdaptiveStrategy(ProbabilityStrategy):
    """
    AdaptiveStrategy:
    - Challenge threshold: follows how often the bidder of the standing bid was caught bluffing
      when challenged. A revealed liar raises it, a bidder whose challenged bids held lowers it.
      How often a player raises says nothing about honesty and is not used here.
    - Raise margin: follows how often the next opponent challenged bids as plausible as the one
      about to be placed (same plausibility level). An opponent who challenges a lot lowers it.
      Without enough samples at that level, the opponent's tendency at the deepest supported
      prefix of this round's bids is used, backing off toward the root.
    - Every shift is weighted by n / (n + prior_weight) and clamped to [min_bound, max_bound].
      Fewer than min_samples observations leave the base value unchanged.
    """

    def _weight(self, sample_size: int) -> float:
        return sample_size / (sample_size + self.params.prior_weight)

    def _shift(self, base: float, rate: float, sample_size: int, sign: float) -> float:
        # rates are centred on 0.5 and scaled to [-1, 1]
        bias = (rate - 0.5) * 2.0
        shifted = base + sign * self.params.adapt_rate * self._weight(sample_size) * bias
        return _clamp(shifted, self.params.min_bound, self.params.max_bound)

    def opponent_tendency(self, view) -> Tendency:
        opponent = view.next_player
        if opponent == view.player_id:
            return Tendency()
        _, tendency = view.history.longest_supported_prefix(
            view.round_bids, actor=opponent, min_samples=self.params.min_samples)
        return tendency

    def answer_tendency(self, view, bid: Bid) -> Tendency:
        """The next opponent's decisions when answering bids at the plausibility level of `bid`."""
        opponent = view.next_player
        if opponent == view.player_id:
            return Tendency()
        level = plausibility_level(public_plausibility(bid, view.total_dice, view.ones_wild))
        tendency = view.history.query_level(opponent, level)
        if tendency.sample_size >= self.params.min_samples:
            return tendency
        return self.opponent_tendency(view)

    def bluff_tendency(self, view) -> BluffTendency:
        bid = view.current_bid
        if bid is None or bid.player is None or bid.player == view.player_id:
            return BluffTendency()
        tendency = view.history.bluff_tendency(bid.player)
        if tendency.sample_size < self.params.min_samples:
            return BluffTendency()
        return tendency

    def challenge_threshold(self, view) -> float:
        base = self.params.challenge_threshold
        bluffs = self.bluff_tendency(view)
        if bluffs.sample_size == 0:
            return base
        threshold = self._shift(base, bluffs.bluff_rate, bluffs.sample_size, +1.0)
        logger.debug("adaptive threshold vs bidder %d: n=%d bluff_rate=%.2f -> %.3f",
                     view.current_bid.player, bluffs.sample_size, bluffs.bluff_rate, threshold)
        return threshold

    def safety_margin(self, view) -> float:
        base = self.params.safety_margin
        tendency = self.opponent_tendency(view)
        if tendency.sample_size == 0:
            return base
        return self._shift(base, tendency.challenge_rate, tendency.sample_size, -1.0)

    def raise_margin(self, view, bid: Bid) -> float:
        base = self.params.safety_margin
        tendency = self.answer_tendency(view, bid)
        if tendency.sample_size == 0:
            return base
        margin = self._shift(base, tendency.challenge_rate, tendency.sample_size, -1.0)
        logger.debug("adaptive margin for %s vs player %d: n=%d challenge_rate=%.2f -> %.3f",
                     bid, view.next_player, tendency.sample_size, tendency.challenge_rate, margin)
        return margin

    def adapted_thresholds(self, view) -> Tuple[float, float]:
        """
        Returns:
            tuple: (challenge_threshold, safety_margin) for this decision, before any per-bid pricing.
        """
        return self.challenge_threshold(view), self.safety_margin(view)
