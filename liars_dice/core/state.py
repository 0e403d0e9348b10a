
"""
state.py
Defines all game state dataclasses for Liar's Dice: PlayerState, RoundState, GameState,
plus the read-only PlayerView and Observation snapshots handed out by the engine.
Related modules:
- engine.py: Mutates and reads GameState during play.
- bid.py: Used in round bid lists and current_bid.
- history.py: GameState owns the game's BidHistory.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .bid import Bid
from .config import GameConfig
from .dice import DiceSet
from .history import BidHistory, HistoryReader


class Phase(Enum):
    AWAITING_BID = "AwaitingBid"
    BID_ACTIVE = "BidActive"
    CHALLENGE_RESOLVING = "ChallengeResolving"
    ROUND_COMPLETE = "RoundComplete"
    GAME_OVER = "GameOver"


@dataclass
class PlayerState:
    """
    Stores state for a single seat.
    Fields:
        player_id (int): Seat index, also the turn order.
        dice (DiceSet): Player's dice (hidden from everyone else until a challenge).
        is_ai (bool): True when a strategy plays this seat.
        eliminated (bool): Set once, when the last die is lost.
        strategy (AIStrategy|None): Decision maker for AI seats.
        name (str|None): Display name.
    """
    player_id: int
    dice: DiceSet
    is_ai: bool = False
    eliminated: bool = False
    strategy: Any = None
    name: Optional[str] = None

    @property
    def num_dice(self) -> int:
        return len(self.dice)


@dataclass
class RoundState:
    """
    One round: bids until a single challenge.
    Fields:
        round_index (int): Round number, starting at 1.
        bids (list[Bid]): Accepted bids in order.
        current_player (int): Seat to act.
        total_dice (int): Dice held by every surviving player.
    """
    round_index: int
    current_player: int
    total_dice: int
    bids: List[Bid] = field(default_factory=list)

    @property
    def current_bid(self) -> Optional[Bid]:
        return self.bids[-1] if self.bids else None


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of a challenge, published once the dice are revealed.
    Fields:
        round_index (int): Round that was resolved.
        bid (Bid): The challenged bid.
        challenger (int): Seat that challenged.
        bidder (int): Seat that placed the bid.
        revealed (dict): Seat -> dice faces at the moment of the challenge.
        actual (int): Dice supporting the bid.
        loser (int): Seat that lost a die.
        eliminated (bool): True if the loser ran out of dice.
    """
    round_index: int
    bid: Bid
    challenger: int
    bidder: int
    revealed: Dict[int, Tuple[int, ...]]
    actual: int
    loser: int
    eliminated: bool

    @property
    def bid_was_true(self) -> bool:
        return self.actual >= self.bid.quantity


@dataclass(frozen=True)
class Observation:
    """
    Public snapshot for renderers and loggers. Never contains the dice of an unresolved round.
    """
    round_index: int
    phase: Phase
    current_player: int
    current_bid: Optional[Bid]
    bids: Tuple[Bid, ...]
    dice_counts: Tuple[int, ...]
    eliminated: Tuple[bool, ...]
    winner: Optional[int]
    last_resolution: Optional[Resolution]

    @property
    def total_dice(self) -> int:
        return sum(self.dice_counts)


@dataclass(frozen=True)
class PlayerView:
    """
    What one player may legitimately see when deciding.
    Fields:
        player_id (int): The deciding seat.
        my_dice (tuple): Own dice faces.
        current_bid (Bid|None): Standing bid.
        round_bids (tuple): Bids of this round so far, the path used for history lookups.
        dice_counts (tuple): Dice per seat (0 for eliminated seats).
        ones_wild (bool): Wild rule flag.
        round_index (int): Current round number.
        next_player (int): Seat that will respond to this player's bid.
        history (HistoryReader): Read-only opponent statistics.
    """
    player_id: int
    my_dice: Tuple[int, ...]
    current_bid: Optional[Bid]
    round_bids: Tuple[Bid, ...]
    dice_counts: Tuple[int, ...]
    ones_wild: bool
    round_index: int
    next_player: int
    history: HistoryReader

    @property
    def total_dice(self) -> int:
        return sum(self.dice_counts)

    @property
    def unknown_dice(self) -> int:
        return self.total_dice - len(self.my_dice)


@dataclass
class GameState:
    """
    Composite state for the entire game: config, players, current round and history.
    Fields:
        config (GameConfig): Game configuration.
        players (list[PlayerState]): Seats in turn order.
        round (RoundState): Current round.
        history (BidHistory): Decisions across the whole game.
        phase (Phase): State machine phase.
        winner (int|None): Last surviving seat once the game is over.
        last_resolution (Resolution|None): Most recent challenge outcome.
    """
    config: GameConfig
    players: List[PlayerState]
    round: RoundState
    history: BidHistory = field(default_factory=BidHistory)
    phase: Phase = Phase.AWAITING_BID
    winner: Optional[int] = None
    last_resolution: Optional[Resolution] = None

    def active_players(self) -> List[PlayerState]:
        return [p for p in self.players if not p.eliminated]

    def dice_in_play(self) -> int:
        return sum(p.num_dice for p in self.players if not p.eliminated)

    def is_terminal(self) -> bool:
        return self.phase is Phase.GAME_OVER
