
"""
engine.py
Implements the GameEngine class, which manages game state, applies actions, enforces rules, and emits events.
Related modules:
- config.py: GameConfig is used to configure the engine.
- state.py: GameState, PlayerState, RoundState hold all game data; PlayerView and Observation are handed out.
- actions.py: Actions are applied to update state.
- bid.py: Bid validation and ordering.
- rules.py: Helpers for counting dice matches and wild ones logic.
- history.py: Every accepted decision is recorded in the game's BidHistory.
- agents/: Strategies play the AI seats.
"""

import datetime
import hashlib
import logging
import os
import random
from typing import Dict, List, Mapping, Optional

from liars_dice.agents import create_strategy
from liars_dice.persistence import events as ev
from liars_dice.persistence.events import GameEvent
from liars_dice.persistence.recorder import InMemoryRecorder

from .actions import Action, Challenge, RaiseBid
from .bid import Bid
from .config import GameConfig
from .dice import DiceSet
from .errors import (
    EmptySetError,
    IllegalMoveError,
    InvalidBidError,
    InvalidConfigurationError,
    InvalidStateError,
    LiarsDiceError,
    LogicError,
)
from .history import HistoryReader, Outcome, plausibility_level
from .probability import public_plausibility
from .rules import count_matches, reveal
from .state import GameState, Observation, Phase, PlayerState, PlayerView, Resolution, RoundState

logger = logging.getLogger(__name__)

# phases in which no player action is accepted
_CLOSED_PHASES = (Phase.CHALLENGE_RESOLVING, Phase.ROUND_COMPLETE, Phase.GAME_OVER)


def generate_game_id(seed: Optional[int]) -> str:
    timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
    raw_id = f"game_{timestamp}_{os.getpid()}_{seed}"
    return hashlib.sha256(raw_id.encode()).hexdigest()[:16]


class GameEngine:
    """
    Main state machine for Liar's Dice. Manages game state, applies actions, enforces legality, and emits events.
    Players interact through submit_bid/challenge (or apply_action); AI seats are played by play_ai_turn.
    The engine is not thread-safe; drive it from a single control loop.
    """
    def __init__(self, config: GameConfig, strategies: Optional[Mapping[int, object]] = None,
                 game_id: Optional[str] = None):
        """
        Validate the configuration, seat the players and start round 1.
        Args:
            config (GameConfig): Game configuration.
            strategies (dict|None): Seat -> strategy instance, replacing the default strategy of an AI seat.
            game_id (str|None): Identifier stamped on every event.
        Raises:
            InvalidConfigurationError: If the configuration or strategy overrides are invalid.
        """
        config.validate()
        self.config = config
        self.rng = random.Random(config.rng_seed)
        self.game_id = game_id or generate_game_id(config.rng_seed)
        self.recorder = InMemoryRecorder()
        # public snapshots after every transition, safe to hand to renderers
        self.turn_log: List[Observation] = []
        self._fault: Optional[LiarsDiceError] = None

        strategies = dict(strategies or {})
        players = []
        for pid in range(config.num_players):
            tier = config.seat_difficulty(pid)
            strategy = None
            if tier is not None:
                strategy = strategies.pop(pid, None)
                if strategy is None:
                    # each AI gets its own RNG derived from the game seed
                    strategy = create_strategy(tier, config.params_for(tier),
                                               rng=random.Random(self.rng.getrandbits(32)))
            players.append(PlayerState(
                player_id=pid,
                dice=DiceSet(config.starting_dice, self.rng),
                is_ai=tier is not None,
                strategy=strategy,
                name=f"{tier.title()} AI {pid}" if tier else f"Player {pid}",
            ))
        if strategies:
            raise InvalidConfigurationError(
                f"strategies given for non-AI seats: {sorted(strategies)}")

        self.state = GameState(
            config=config,
            players=players,
            round=RoundState(round_index=0, current_player=0, total_dice=0),
        )
        self.history_reader = HistoryReader(self.state.history)
        self.start_new_round(leader=0)

    # Events

    def _emit(self, event_type: str, payload: Dict, player: Optional[int] = None) -> None:
        """
        Internal: Record an event for later retrieval.
        """
        self.recorder.record(GameEvent(
            game_id=self.game_id,
            event_type=event_type,
            payload=payload,
            round_index=self.state.round.round_index,
            player=player,
        ))

    def pop_events(self) -> List[GameEvent]:
        """
        Return all events emitted since the last call.
        Returns:
            list[GameEvent]: Events in emission order.
        """
        return self.recorder.drain()

    def get_events(self) -> List[GameEvent]:
        """
        Return all events emitted so far (does not clear).
        """
        return self.recorder.events()

    def _snapshot(self) -> Observation:
        snap = self.observe()
        self.turn_log.append(snap)
        return snap

    # Queries

    @property
    def current_player(self) -> int:
        return self.state.round.current_player

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def halted(self) -> bool:
        return self._fault is not None

    def is_terminal(self) -> bool:
        """
        Returns True once a single player is left.
        """
        return self.state.is_terminal()

    def _next_active(self, player_id: int) -> int:
        n = len(self.state.players)
        for step in range(1, n + 1):
            candidate = (player_id + step) % n
            if not self.state.players[candidate].eliminated:
                return candidate
        return player_id

    def _dice_counts(self):
        return tuple(0 if p.eliminated else p.num_dice for p in self.state.players)

    def get_view(self, player_id: int) -> PlayerView:
        """
        Get a player-specific view of the game state (public info + own dice).
        Args:
            player_id (int): Seat index.
        Returns:
            PlayerView: Everything that player may legitimately see.
        """
        p = self.state.players[player_id]
        rnd = self.state.round
        return PlayerView(
            player_id=player_id,
            my_dice=p.dice.values,
            current_bid=rnd.current_bid,
            round_bids=tuple(rnd.bids),
            dice_counts=self._dice_counts(),
            ones_wild=self.config.ones_wild,
            round_index=rnd.round_index,
            next_player=self._next_active(player_id),
            history=self.history_reader,
        )

    def observe(self) -> Observation:
        """
        Public snapshot of the game. Hidden dice only appear inside last_resolution, for rounds already resolved.
        """
        rnd = self.state.round
        return Observation(
            round_index=rnd.round_index,
            phase=self.state.phase,
            current_player=rnd.current_player,
            current_bid=rnd.current_bid,
            bids=tuple(rnd.bids),
            dice_counts=self._dice_counts(),
            eliminated=tuple(p.eliminated for p in self.state.players),
            winner=self.state.winner,
            last_resolution=self.state.last_resolution,
        )

    @property
    def last_resolution(self) -> Optional[Resolution]:
        return self.state.last_resolution

    # Round lifecycle

    def start_new_round(self, leader: int) -> None:
        """
        Start a new round: reroll surviving dice, clear the bid and hand the lead to `leader`.
        Args:
            leader (int): Seat that opens the round; must not be eliminated.
        """
        for p in self.state.active_players():
            p.dice.reroll()
        self.state.round = RoundState(
            round_index=self.state.round.round_index + 1,
            current_player=leader,
            total_dice=self.state.dice_in_play(),
        )
        self.state.phase = Phase.AWAITING_BID
        logger.info("Round %d started: leader=%d, dice in play=%d",
                    self.state.round.round_index, leader, self.state.round.total_dice)
        self._emit(ev.ROUND_STARTED, {
            "round": self.state.round.round_index,
            "leader": leader,
            "dice_counts": self._dice_counts(),
        })
        self._snapshot()

    def _check_open(self) -> None:
        if self._fault is not None:
            raise InvalidStateError(f"game halted after a fatal error: {self._fault}")
        if self.state.phase in _CLOSED_PHASES:
            raise InvalidStateError(f"no action accepted in phase {self.state.phase.value}")

    def _answer_level(self, bid: Optional[Bid]) -> Optional[int]:
        """Plausibility level of the bid a decision answers, as the table sees it; None when opening."""
        if bid is None:
            return None
        return plausibility_level(public_plausibility(bid, self.state.round.total_dice, self.config.ones_wild))

    def _halt(self, error: LiarsDiceError) -> None:
        self._fault = error
        logger.error("Game %s halted in phase %s: %s", self.game_id, self.state.phase.value, error)

    # Actions

    def submit_bid(self, quantity: int, face: int) -> Bid:
        """
        Place a bid for the player whose turn it is.
        Args:
            quantity (int): Number of dice claimed.
            face (int): Face value claimed.
        Returns:
            Bid: The accepted bid.
        Raises:
            InvalidBidError: If the bid is malformed or does not raise the current bid.
            InvalidStateError: If the engine does not accept actions right now.
        """
        self._check_open()
        rnd = self.state.round
        bidder = rnd.current_player
        bid = Bid(quantity, face, bidder)
        bid.validate(rnd.total_dice)
        current = rnd.current_bid
        if not bid.is_higher_than(current):
            raise InvalidBidError(f"bid {bid} is not higher than the current bid {current}")

        self.state.history.record(rnd.bids, Outcome.RAISED, bidder, level=self._answer_level(current))
        rnd.bids.append(bid)
        self.state.phase = Phase.BID_ACTIVE
        rnd.current_player = self._next_active(bidder)
        logger.debug("Player %d bids %s", bidder, bid)
        self._emit(ev.BID_PLACED, {"bid": bid.key}, player=bidder)
        self._snapshot()
        return bid

    def challenge(self) -> Resolution:
        """
        Challenge the standing bid for the player whose turn it is, reveal all dice and resolve.
        The round then completes: either the game ends or the loser leads the next round.
        Returns:
            Resolution: Revealed dice and who lost a die.
        Raises:
            InvalidStateError: If there is no bid to challenge or actions are not accepted.
        """
        self._check_open()
        if self.state.phase is Phase.AWAITING_BID:
            raise InvalidStateError("there is no bid to challenge yet")
        rnd = self.state.round
        challenger = rnd.current_player
        bid = rnd.current_bid
        bidder = bid.player

        self.state.history.record(rnd.bids, Outcome.CHALLENGED, challenger, level=self._answer_level(bid))
        self.state.phase = Phase.CHALLENGE_RESOLVING
        logger.debug("Player %d challenges %s placed by player %d", challenger, bid, bidder)
        self._emit(ev.CHALLENGE_MADE, {"bid": bid.key, "bidder": bidder}, player=challenger)

        hands = {p.player_id: p.dice for p in self.state.active_players()}
        actual = count_matches(hands, bid.face, self.config.ones_wild)
        revealed = reveal(hands)
        loser = challenger if actual >= bid.quantity else bidder
        loser_state = self.state.players[loser]
        try:
            loser_state.dice.remove_one()
        except EmptySetError as exc:
            self._halt(exc)
            raise
        if loser_state.dice.is_empty():
            loser_state.eliminated = True

        resolution = Resolution(
            round_index=rnd.round_index,
            bid=bid,
            challenger=challenger,
            bidder=bidder,
            revealed=revealed,
            actual=actual,
            loser=loser,
            eliminated=loser_state.eliminated,
        )
        self.state.last_resolution = resolution
        self.state.history.record_showdown(bidder, resolution.bid_was_true)
        self.state.phase = Phase.ROUND_COMPLETE
        logger.info("Round %d resolved: %s vs actual %d, player %d loses a die (%d left)",
                    rnd.round_index, bid, actual, loser, loser_state.num_dice)
        self._emit(ev.DICE_REVEALED, {"all_dice": revealed, "actual": actual})
        self._emit(ev.DIE_LOST, {"remaining": loser_state.num_dice}, player=loser)
        if loser_state.eliminated:
            logger.info("Player %d eliminated", loser)
            self._emit(ev.PLAYER_ELIMINATED, {}, player=loser)
        self._emit(ev.ROUND_ENDED, {
            "challenger": challenger,
            "bidder": bidder,
            "loser": loser,
            "match_count": actual,
            "was_true": resolution.bid_was_true,
        })
        self._complete_round(loser)
        return resolution

    def _complete_round(self, loser: int) -> None:
        survivors = self.state.active_players()
        if len(survivors) == 1:
            self.state.phase = Phase.GAME_OVER
            self.state.winner = survivors[0].player_id
            logger.info("Game %s over: player %d wins after %d rounds",
                        self.game_id, self.state.winner, self.state.round.round_index)
            self._emit(ev.GAME_OVER, {"winner": self.state.winner}, player=self.state.winner)
            self._snapshot()
            return
        leader = loser
        if self.state.players[loser].eliminated:
            leader = self._next_active(loser)
        self.start_new_round(leader)

    def apply_action(self, player_id: int, action: Action):
        """
        Apply an action for the given player.
        Args:
            player_id (int): Seat index of the acting player.
            action (Action): RaiseBid or Challenge.
        Returns:
            Bid|Resolution: Result of submit_bid or challenge.
        Raises:
            InvalidStateError: If it is not that player's turn or actions are not accepted.
            InvalidBidError: If a RaiseBid is rejected.
            IllegalMoveError: If the action type is unknown.
        """
        self._check_open()
        if player_id != self.state.round.current_player:
            raise InvalidStateError(
                f"it is player {self.state.round.current_player}'s turn, not player {player_id}'s")
        if isinstance(action, RaiseBid):
            return self.submit_bid(action.quantity, action.face_value)
        if isinstance(action, Challenge):
            return self.challenge()
        raise IllegalMoveError(f"Unknown action: {action!r}")

    def decide_ai_action(self, player_id: Optional[int] = None) -> Action:
        """
        Ask an AI seat's strategy for its decision without applying it.
        The computation only reads a PlayerView, so it may run on a worker thread.
        """
        self._check_open()
        if player_id is None:
            player_id = self.state.round.current_player
        player = self.state.players[player_id]
        if not player.is_ai or player.strategy is None:
            raise InvalidStateError(f"player {player_id} is not controlled by an AI")
        return player.strategy.decide(self.get_view(player_id))

    def apply_ai_action(self, player_id: int, action: Action):
        """
        Apply a decision produced by an AI strategy. A rejected decision is a bug in the strategy:
        it is reported as LogicError and the game halts.
        """
        try:
            return self.apply_action(player_id, action)
        except IllegalMoveError as exc:
            error = LogicError(
                f"AI strategy for player {player_id} produced an invalid action: {exc}",
                phase=self.state.phase.value,
                player_id=player_id,
                action=action,
            )
            self._halt(error)
            raise error from exc

    def play_ai_turn(self) -> Action:
        """
        Let the AI whose turn it is decide and apply its action.
        Returns:
            Action: The applied action.
        """
        player_id = self.state.round.current_player
        action = self.decide_ai_action(player_id)
        self.apply_ai_action(player_id, action)
        return action

    def run_ai_turns(self, max_turns: Optional[int] = None) -> List[Action]:
        """
        Play AI turns until a human must act, the game ends, or max_turns actions were taken.
        """
        taken = []
        while not self.is_terminal() and self.state.players[self.current_player].is_ai:
            if max_turns is not None and len(taken) >= max_turns:
                break
            taken.append(self.play_ai_turn())
        return taken

    def timeout_action(self, player_id: int) -> Action:
        """
        Default action for a player who did not answer in time: challenge a standing bid,
        otherwise open with the lowest possible bid.
        """
        if player_id != self.state.round.current_player:
            raise InvalidStateError(f"player {player_id} is not the player to act")
        if self.state.phase is Phase.BID_ACTIVE:
            return Challenge()
        return RaiseBid(1, 1)
