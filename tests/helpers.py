"""Shared builders for the test modules."""
import random

from liars_dice.core.dice import DiceSet
from liars_dice.core.history import BidHistory, HistoryReader
from liars_dice.core.state import PlayerView


def set_hands(engine, *hands):
    """Replace every seat's dice with the given faces and refresh the dice count of the round."""
    for player, faces in zip(engine.state.players, hands):
        player.dice = DiceSet(len(faces), engine.rng, values=faces)
    engine.state.round.total_dice = engine.state.dice_in_play()


def make_view(my_dice, current_bid=None, dice_counts=(5, 5), ones_wild=False, round_bids=None,
              player_id=0, next_player=1, history=None):
    if round_bids is None:
        round_bids = () if current_bid is None else (current_bid,)
    return PlayerView(
        player_id=player_id,
        my_dice=tuple(my_dice),
        current_bid=current_bid,
        round_bids=tuple(round_bids),
        dice_counts=tuple(dice_counts),
        ones_wild=ones_wild,
        round_index=1,
        next_player=next_player,
        history=HistoryReader(history if history is not None else BidHistory()),
    )


def seeded(seed=0):
    return random.Random(seed)
