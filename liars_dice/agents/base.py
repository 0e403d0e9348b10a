import random
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from liars_dice.core.actions import Action
from liars_dice.core.bid import Bid
from liars_dice.core.config import DEFAULT_STRATEGY_PARAMS, StrategyParams
from liars_dice.core.probability import bid_is_plausible, known_matching


class AIStrategy(ABC):
    """
    Abstract base class for all Liar's Dice AI strategies.
    Strategies must implement decide(view), which receives a PlayerView of the game state and returns an Action.
    They only read the view and never keep it after returning.
    Common strategy utilities live here for reuse.
    """
    difficulty: Optional[str] = None

    def __init__(self, params: Optional[StrategyParams] = None, rng: Optional[random.Random] = None):
        if params is None:
            params = DEFAULT_STRATEGY_PARAMS.get(self.difficulty, StrategyParams())
        params.validate()
        self.params = params
        self.rng = rng if rng is not None else random.Random()

    @abstractmethod
    def decide(self, view) -> Action:
        """
        Given a player-specific view, return the next Action to take.
        Args:
            view (PlayerView): Own dice, current bid, dice counts and read-only history.
        Returns:
            Action: RaiseBid or Challenge. With no standing bid only RaiseBid is legal.
        """
        raise NotImplementedError

    def my_count_of_face(self, my_dice: Iterable[int], face: int, ones_wild: bool = False) -> int:
        """
        Count how many dice of a given face the agent holds, wild ones included when the rule applies.
        """
        return known_matching(my_dice, face, ones_wild)

    def plausibility(self, bid: Bid, view) -> float:
        """Probability that `bid` is true from this player's point of view."""
        return bid_is_plausible(bid, view.my_dice, view.unknown_dice, view.ones_wild)

    def call_liar_deterministic(self, view) -> bool:
        """
        True if the standing bid cannot be true even when every unseen die matches.
        """
        last_bid = view.current_bid
        if last_bid is None:
            return False
        my_count = self.my_count_of_face(view.my_dice, last_bid.face, view.ones_wild)
        return my_count + view.unknown_dice < last_bid.quantity

    def __repr__(self):
        return f"{type(self).__name__}({self.params})"
