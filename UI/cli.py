import argparse
import logging
import queue
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from liars_dice.core.actions import Action, Challenge, RaiseBid
from liars_dice.core.config import DIFFICULTIES, GameConfig
from liars_dice.core.engine import GameEngine
from liars_dice.core.errors import IllegalMoveError, InvalidConfigurationError, LiarsDiceError
from liars_dice.persistence import events as ev
from liars_dice.persistence.events import GameEvent

logger = logging.getLogger("liars_dice.cli")


class HumanInput:
    """
    Reads lines from stdin on a background thread so the game loop can wait with a timeout.
    Once a prompt times out, lines typed before the next prompt answer the expired one and are discarded.
    """
    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.stdin
        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._closed = False
        self._expired = False
        self._thread = threading.Thread(target=self._pump, daemon=True)
        self._thread.start()

    def _pump(self):
        for line in self._stream:
            self._lines.put(line)
        self._lines.put(None)

    def _discard_pending(self) -> int:
        dropped = 0
        while True:
            try:
                line = self._lines.get_nowait()
            except queue.Empty:
                return dropped
            if line is None:
                self._closed = True
                return dropped
            dropped += 1

    def read(self, prompt: str, timeout: Optional[float]) -> Optional[str]:
        """
        Returns:
            str|None: The line typed, or None on timeout.
        Raises:
            EOFError: If stdin was closed.
        """
        if self._expired:
            dropped = self._discard_pending()
            if dropped:
                logger.debug("Discarded %d late line(s) after a timeout", dropped)
            self._expired = False
        if self._closed:
            raise EOFError
        print(prompt, end="", flush=True)
        try:
            line = self._lines.get(timeout=timeout)
        except queue.Empty:
            self._expired = True
            return None
        if line is None:
            self._closed = True
            raise EOFError
        return line.strip()


def parse_action(text: str) -> Optional[Action]:
    """
    Parse 'c' / 'challenge' or 'b <quantity> <face>' / '<quantity> <face>'.
    Returns:
        Action or None: The parsed action, or None if the text is not understood.
    """
    parts = text.lower().split()
    if not parts:
        return None
    if parts[0] in ("c", "challenge", "liar"):
        return Challenge()
    if parts[0] in ("b", "bid"):
        parts = parts[1:]
    if len(parts) != 2:
        return None
    try:
        return RaiseBid(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def print_state(engine: GameEngine, player_id: int):
    """
    Print the public state and the human player's own dice.
    """
    obs = engine.observe()
    view = engine.get_view(player_id)
    print(f"\n=== ROUND {obs.round_index} ===")
    counts = ", ".join(f"P{pid}:{n}" for pid, n in enumerate(obs.dice_counts))
    print(f"Dice in play: {obs.total_dice} ({counts})")
    print(f"Your dice: {view.my_dice}")
    if obs.current_bid is None:
        print("No bids yet.")
    else:
        print(f"Current bid: {obs.current_bid.quantity} x {obs.current_bid.face} (by player {obs.current_bid.player})")


def print_event(event: GameEvent):
    if event.event_type == ev.BID_PLACED:
        quantity, face = event.payload["bid"]
        print(f"Player {event.player} bids {quantity} x {face}")
    elif event.event_type == ev.CHALLENGE_MADE:
        print(f"Player {event.player} challenges!")
    elif event.event_type == ev.DICE_REVEALED:
        for pid, dice in sorted(event.payload["all_dice"].items()):
            print(f"  Player {pid} dice: {dice}")
        print(f"  Matching dice: {event.payload['actual']}")
    elif event.event_type == ev.DIE_LOST:
        print(f"Player {event.player} loses a die ({event.payload['remaining']} left)")
    elif event.event_type == ev.PLAYER_ELIMINATED:
        print(f"Player {event.player} is eliminated")
    elif event.event_type == ev.GAME_OVER:
        print(f"\n*** Player {event.payload['winner']} wins the game! ***")


def show_rules(config: GameConfig):
    """
    Print the current game rules and configuration to the terminal.
    """
    print("\n=== GAME RULES ===")
    print(f"Players: {config.num_players} ({config.num_humans} human)")
    print(f"AI tiers: {', '.join(config.ai_difficulties) or 'none'}")
    print(f"Dice per player: {config.starting_dice}")
    print(f"Ones wild: {config.ones_wild}")
    print("Enter 'b <quantity> <face>' to bid, 'c' to challenge.")


def play(config: GameConfig, timeout: Optional[float] = None) -> int:
    """
    Play a full game in the terminal until one player is left.
    Args:
        config (GameConfig): Game configuration.
        timeout (float|None): Seconds a human has to answer; on timeout the engine's default action is applied.
    Returns:
        int: The winning seat.
    """
    engine = GameEngine(config)
    engine.recorder.subscribe(print_event)
    human_input = HumanInput() if config.num_humans else None
    show_rules(config)

    with ThreadPoolExecutor(max_workers=1) as pool:
        while not engine.is_terminal():
            pid = engine.current_player
            if engine.state.players[pid].is_ai:
                # decisions are pure reads of a view; compute them off the game loop
                action = pool.submit(engine.decide_ai_action, pid).result()
                engine.apply_ai_action(pid, action)
                continue

            print_state(engine, pid)
            line = human_input.read(f"Player {pid}> ", timeout)
            if line is None:
                action = engine.timeout_action(pid)
                print(f"\nTime is up, playing {action}")
            else:
                action = parse_action(line)
                if action is None:
                    print("Not understood. Use 'b <quantity> <face>' or 'c'.")
                    continue
            try:
                engine.apply_action(pid, action)
            except IllegalMoveError as e:
                print(f"Illegal move: {e}")
    return engine.state.winner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Liar's Dice against AI opponents")
    parser.add_argument('--players', type=int, default=2, help='Number of seats (humans take the first ones)')
    parser.add_argument('--ai', type=str, default='balanced',
                        help=f'Comma-separated AI tiers, one per AI seat ({", ".join(DIFFICULTIES)})')
    parser.add_argument('--dice', type=int, default=5, help='Dice per player')
    parser.add_argument('--wild', action='store_true', help='Ones are wild')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for a reproducible game')
    parser.add_argument('--timeout', type=float, default=None, help='Seconds a human has to answer')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Logging level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    tiers = tuple(t.strip().lower() for t in args.ai.split(',') if t.strip())
    config = GameConfig(num_players=args.players, ai_difficulties=tiers, starting_dice=args.dice,
                        ones_wild=args.wild, rng_seed=args.seed)
    print("Welcome to Liar's Dice (CLI)")
    try:
        play(config, timeout=args.timeout)
    except InvalidConfigurationError as e:
        print(f"Invalid configuration: {e}")
        return 2
    except (KeyboardInterrupt, EOFError):
        print("\nExiting play loop.")
        return 1
    except LiarsDiceError as e:
        logger.error("Game aborted: %s", e)
        return 3
    return 0


if __name__ == "__main__":
    sys.exit(main())
