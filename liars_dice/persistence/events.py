
"""
events.py
Defines the GameEvent dataclass for event-sourced recording of game actions and state changes.
Used by recorder.py and engine.py to publish every transition to renderers and loggers.
Payloads only ever carry public information; dice appear only in DiceRevealed, after a challenge.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

ROUND_STARTED = "RoundStarted"
BID_PLACED = "BidPlaced"
CHALLENGE_MADE = "ChallengeMade"
DICE_REVEALED = "DiceRevealed"
DIE_LOST = "DieLost"
PLAYER_ELIMINATED = "PlayerEliminated"
ROUND_ENDED = "RoundEnded"
GAME_OVER = "GameOver"


@dataclass
class GameEvent:
    """
    Represents a single event in the game (e.g., round started, bid placed, die lost).
    Fields:
        game_id (str): Unique game identifier.
        event_type (str): Type of event (e.g., 'BidPlaced').
        payload (dict): Event-specific data.
        round_index (int): Round the event belongs to.
        player (int|None): Seat that acted, when the event is a player action.
    """
    game_id: str
    event_type: str
    payload: Dict[str, Any]
    round_index: int = 0
    player: Optional[int] = None

    def get(self, key: str, default: Any = None) -> Any:
        """Dict-style access to the payload, with 'type' mapping to event_type."""
        if key == "type":
            return self.event_type
        return self.payload.get(key, default)
