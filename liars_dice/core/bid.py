
"""
bid.py
Defines the Bid model for Liar's Dice, including validation and ordering logic.
Related modules:
- actions.py: RaiseBid actions are turned into Bids by the engine.
- engine.py: Validates and compares bids to enforce game rules.
- history.py: Indexes bid paths by Bid.key.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from .dice import FACES
from .errors import InvalidBidError


@dataclass(frozen=True)
class Bid:
    """
    Represents a bid in Liar's Dice: a claim about the quantity and face value of dice.
    The bidder's seat is carried along but takes no part in equality or ordering.
    Args:
        quantity (int): Number of dice claimed.
        face (int): Face value claimed (1-6).
        player (int|None): Seat of the player who placed the bid.
    """
    quantity: int
    face: int
    player: Optional[int] = field(default=None, compare=False)

    @property
    def key(self) -> Tuple[int, int]:
        return (self.quantity, self.face)

    def validate(self, total_dice: int) -> None:
        """
        Validates the bid against the dice currently in play.
        Args:
            total_dice (int): Sum of every surviving player's dice.
        Raises:
            InvalidBidError: If face or quantity is out of bounds.
        """
        # bool is a subclass of int; True must not pass as quantity 1
        if any(not isinstance(v, int) or isinstance(v, bool) for v in (self.quantity, self.face)):
            raise InvalidBidError("quantity and face must be integers")
        if self.face not in FACES:
            raise InvalidBidError(f"face must be between 1 and 6, got {self.face}")
        if self.quantity < 1:
            raise InvalidBidError(f"quantity must be at least 1, got {self.quantity}")
        if self.quantity > total_dice:
            raise InvalidBidError(
                f"quantity {self.quantity} exceeds the {total_dice} dice in play")

    def is_higher_than(self, other: Optional['Bid']) -> bool:
        """
        Checks if this bid is strictly higher than another bid, per game rules.
        Wildness affects counting only, so ones compare as plain numbers here.
        Args:
            other (Bid): The previous bid to compare against (or None).
        Returns:
            bool: True if this bid is higher, False otherwise.
        """
        if other is None:
            return True
        if self.quantity != other.quantity:
            return self.quantity > other.quantity
        return self.face > other.face

    def __str__(self) -> str:
        return f"{self.quantity}x{self.face}"


def legal_raises(current: Optional[Bid], total_dice: int) -> Iterator[Bid]:
    """
    Yield every bid that legally follows `current`, smallest first.
    Within a quantity faces ascend, so a face increase is always offered before a quantity increase.
    Args:
        current (Bid|None): Standing bid, or None for an opening bid.
        total_dice (int): Dice in play; caps the quantity.
    Yields:
        Bid: Candidate bids in raise order.
    """
    start_q = 1 if current is None else current.quantity
    for q in range(start_q, total_dice + 1):
        for f in FACES:
            candidate = Bid(q, f)
            if candidate.is_higher_than(current):
                yield candidate
