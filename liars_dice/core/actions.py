
"""
actions.py
Defines the base Action type and concrete action classes for the Liar's Dice game engine.
Actions represent moves that players can make (raising the bid or challenging it).
Related modules:
- bid.py: RaiseBid.to_bid builds the Bid the engine validates.
- engine.py: Consumes Action objects to update game state.
- agents/: Strategies return these from decide().
"""

from dataclasses import dataclass

from .bid import Bid


class Action:
    """
    Base class for all game actions. Subclassed by RaiseBid and Challenge.
    """
    pass


@dataclass(frozen=True)
class RaiseBid(Action):
    """
    Represents a bid action: a player claims there are at least 'quantity' dice showing 'face_value'.
    Used for opening bids as well as raises.
    Args:
        quantity (int): Number of dice claimed.
        face_value (int): Face claimed (1-6).
    """
    quantity: int
    face_value: int

    def to_bid(self, player: int = None) -> Bid:
        return Bid(self.quantity, self.face_value, player)

    @classmethod
    def from_bid(cls, bid: Bid) -> 'RaiseBid':
        return cls(bid.quantity, bid.face)


@dataclass(frozen=True)
class Challenge(Action):
    """
    Represents the action of challenging the previous bid.
    No arguments; triggers a reveal and resolution in the engine.
    """
    pass
