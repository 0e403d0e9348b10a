import unittest
from liars_dice.agents.base import AIStrategy
from liars_dice.core.actions import Challenge, RaiseBid
from liars_dice.core.bid import Bid
from liars_dice.core.config import GameConfig
from liars_dice.core.engine import GameEngine
from liars_dice.core.errors import InvalidBidError, InvalidStateError, LogicError
from liars_dice.core.history import PLAUSIBILITY_LEVELS, BluffTendency, Outcome, plausibility_level
from liars_dice.core.probability import public_plausibility
from liars_dice.core.rules import max_challenges
from liars_dice.core.state import Phase
from liars_dice.persistence import events as ev
from tests.helpers import set_hands


def human_game(num_players=2, starting_dice=5, ones_wild=False, seed=1):
    return GameEngine(GameConfig(num_players=num_players, ai_difficulties=(),
                                 starting_dice=starting_dice, ones_wild=ones_wild, rng_seed=seed))


class AlwaysChallenge(AIStrategy):
    def decide(self, view):
        return Challenge()


class TestEngineFlow(unittest.TestCase):
    def test_full_round_challenge(self):
        engine = human_game()
        # player0 makes a valid bid
        engine.apply_action(0, RaiseBid(1, 2))
        self.assertEqual(engine.phase, Phase.BID_ACTIVE)
        # player1 challenges
        engine.apply_action(1, Challenge())
        ev_list = engine.get_events()
        # expect RoundEnded event present and a fresh round
        self.assertTrue(any(e.get('type') == 'RoundEnded' for e in ev_list))
        self.assertEqual(engine.state.round.round_index, 2)
        self.assertEqual(engine.phase, Phase.AWAITING_BID)

    def test_bidder_loses_when_bid_is_false(self):
        # 2 players, 10 dice, six threes claimed but only five exist
        engine = human_game()
        set_hands(engine, [3, 3, 3, 2, 2], [3, 3, 4, 5, 6])
        engine.submit_bid(6, 3)
        resolution = engine.challenge()
        self.assertEqual(resolution.actual, 5)
        self.assertEqual(resolution.loser, 0)
        self.assertEqual(engine.state.players[0].num_dice, 4)
        self.assertEqual(engine.state.players[1].num_dice, 5)
        # the loser leads the next round
        self.assertEqual(engine.current_player, 0)

    def test_challenger_loses_on_exact_count(self):
        engine = human_game()
        set_hands(engine, [3, 3, 3, 2, 2], [3, 3, 4, 5, 6])
        engine.submit_bid(5, 3)
        resolution = engine.challenge()
        self.assertEqual(resolution.loser, 1)
        self.assertTrue(resolution.bid_was_true)
        self.assertEqual(engine.current_player, 1)

    def test_wild_ones_count_at_resolution(self):
        engine = human_game(ones_wild=True)
        set_hands(engine, [1, 1, 3, 2, 2], [3, 4, 4, 5, 6])
        engine.submit_bid(4, 3)
        resolution = engine.challenge()
        self.assertEqual(resolution.actual, 4)
        self.assertEqual(resolution.loser, 1)

    def test_bid_must_raise(self):
        engine = human_game()
        engine.submit_bid(3, 4)
        for quantity, face in ((3, 4), (3, 3), (2, 6), (0, 5), (4, 7), (11, 2)):
            with self.assertRaises(InvalidBidError):
                engine.submit_bid(quantity, face)
        # nothing changed
        self.assertEqual([b.key for b in engine.state.round.bids], [(3, 4)])
        self.assertEqual(engine.current_player, 1)
        self.assertEqual(len(engine.state.history), 1)
        engine.submit_bid(3, 5)
        engine.submit_bid(4, 1)
        self.assertEqual([b.key for b in engine.state.round.bids], [(3, 4), (3, 5), (4, 1)])

    def test_boolean_bid_is_rejected(self):
        engine = human_game()
        with self.assertRaises(InvalidBidError):
            engine.submit_bid(True, 3)
        self.assertEqual(engine.state.round.bids, [])
        self.assertEqual(engine.phase, Phase.AWAITING_BID)

    def test_challenge_without_bid_is_rejected(self):
        engine = human_game()
        with self.assertRaises(InvalidStateError):
            engine.challenge()
        self.assertEqual(engine.state.round.bids, [])
        self.assertEqual(engine.phase, Phase.AWAITING_BID)

    def test_wrong_player_is_rejected(self):
        engine = human_game()
        with self.assertRaises(InvalidStateError):
            engine.apply_action(1, RaiseBid(1, 2))
        self.assertEqual(engine.state.round.bids, [])

    def test_eliminated_player_is_skipped(self):
        engine = human_game(num_players=3)
        set_hands(engine, [4, 4, 4, 4, 4], [2], [4, 4, 4, 4, 4])
        engine.submit_bid(1, 4)       # player 0
        engine.submit_bid(1, 6)       # player 1, false
        resolution = engine.challenge()  # player 2
        self.assertEqual(resolution.loser, 1)
        self.assertTrue(resolution.eliminated)
        self.assertTrue(engine.state.players[1].eliminated)
        self.assertEqual(engine.observe().dice_counts, (5, 0, 5))
        # next seat after the eliminated loser leads, and the order skips them
        self.assertEqual(engine.current_player, 2)
        engine.submit_bid(1, 2)
        self.assertEqual(engine.current_player, 0)
        engine.submit_bid(1, 3)
        self.assertEqual(engine.current_player, 2)
        self.assertEqual(engine.state.round.total_dice, 10)

    def test_game_over_and_closed_engine(self):
        engine = human_game(starting_dice=1)
        set_hands(engine, [2], [5])
        engine.submit_bid(2, 2)
        engine.challenge()
        self.assertEqual(engine.phase, Phase.GAME_OVER)
        self.assertTrue(engine.is_terminal())
        self.assertEqual(engine.state.winner, 1)
        self.assertTrue(any(e.event_type == ev.GAME_OVER for e in engine.get_events()))
        with self.assertRaises(InvalidStateError):
            engine.submit_bid(1, 1)
        with self.assertRaises(InvalidStateError):
            engine.challenge()

    def test_history_records_each_decision(self):
        engine = human_game()
        engine.submit_bid(1, 2)
        engine.challenge()
        history = engine.state.history
        self.assertEqual(history.query_exact([], actor=0).raise_rate, 1.0)
        self.assertEqual(history.query_exact([(1, 2)], actor=1).challenge_rate, 1.0)
        self.assertEqual(len(history), 2)

    def test_challenge_records_showdown_and_answer_level(self):
        engine = human_game()
        set_hands(engine, [2, 2, 3, 4, 5], [2, 6, 6, 6, 6])
        engine.submit_bid(1, 2)
        resolution = engine.challenge()
        self.assertTrue(resolution.bid_was_true)
        history = engine.state.history
        self.assertEqual(history.bluff_tendency(0), BluffTendency(bluff_rate=0.0, sample_size=1))
        self.assertEqual(history.bluff_tendency(1).sample_size, 0)
        # 1x2 among ten hidden dice is a likely bid, so the challenge lands in the top level
        level = plausibility_level(public_plausibility(Bid(1, 2), 10))
        self.assertEqual(level, PLAUSIBILITY_LEVELS - 1)
        self.assertEqual(history.query_level(1, level).challenge_rate, 1.0)
        # the opening bid answered nothing
        self.assertEqual(sum(history.query_level(0, lv).sample_size for lv in range(PLAUSIBILITY_LEVELS)), 0)

    def test_false_bid_counts_as_bluff(self):
        engine = human_game()
        set_hands(engine, [2, 2, 3, 4, 5], [2, 6, 6, 6, 6])
        engine.submit_bid(4, 2)
        engine.submit_bid(5, 2)
        engine.challenge()
        self.assertEqual(engine.state.history.bluff_tendency(1), BluffTendency(bluff_rate=1.0, sample_size=1))

    def test_timeout_action(self):
        engine = human_game()
        self.assertEqual(engine.timeout_action(0), RaiseBid(1, 1))
        engine.apply_action(0, engine.timeout_action(0))
        self.assertEqual(engine.timeout_action(1), Challenge())
        with self.assertRaises(InvalidStateError):
            engine.timeout_action(0)

    def test_invalid_ai_action_halts_game(self):
        cfg = GameConfig(ai_difficulties=("balanced", "balanced"))
        engine = GameEngine(cfg, strategies={0: AlwaysChallenge()})
        with self.assertRaises(LogicError) as ctx:
            engine.play_ai_turn()
        self.assertEqual(ctx.exception.player_id, 0)
        self.assertEqual(ctx.exception.action, Challenge())
        self.assertTrue(engine.halted)
        with self.assertRaises(InvalidStateError):
            engine.submit_bid(1, 2)

    def test_play_ai_turn_requires_ai_seat(self):
        engine = human_game()
        with self.assertRaises(InvalidStateError):
            engine.play_ai_turn()


class TestAIGames(unittest.TestCase):
    """
    Whole games between AI tiers: bids always rise, every challenge costs exactly one die,
    and the game ends within the challenge bound.
    """

    def play(self, tiers, starting_dice=5, ones_wild=False, seed=3):
        cfg = GameConfig(num_players=len(tiers), ai_difficulties=tiers, starting_dice=starting_dice,
                         ones_wild=ones_wild, rng_seed=seed)
        engine = GameEngine(cfg)
        engine.run_ai_turns()
        return engine

    def test_two_player_game_ends_within_bound(self):
        for seed in range(5):
            engine = self.play(("balanced", "adaptive"), seed=seed)
            self.assertTrue(engine.is_terminal())
            rounds = engine.get_events()
            challenges = [e for e in rounds if e.event_type == ev.ROUND_ENDED]
            self.assertLessEqual(len(challenges), max_challenges(5, 2))
            self.assertLessEqual(len(challenges), 5 * 2 - (2 - 1))
            self.assertGreaterEqual(len(challenges), 5)

    def test_each_challenge_removes_one_die(self):
        engine = self.play(("novice", "aggressive", "adaptive"), ones_wild=True, seed=8)
        starts = [e for e in engine.get_events() if e.event_type == ev.ROUND_STARTED]
        totals = [sum(e.payload["dice_counts"]) for e in starts]
        for before, after in zip(totals, totals[1:]):
            self.assertEqual(before - after, 1)
        winner = engine.state.winner
        self.assertFalse(engine.state.players[winner].eliminated)
        self.assertEqual(sum(1 for p in engine.state.players if not p.eliminated), 1)
        challenges = len(engine.recorder.events(ev.ROUND_ENDED))
        self.assertLessEqual(challenges, max_challenges(5, 3))

    def test_accepted_bids_strictly_increase(self):
        engine = self.play(("novice", "balanced", "aggressive", "adaptive"), seed=12)
        by_round = {}
        for e in engine.get_events():
            if e.event_type == ev.BID_PLACED:
                by_round.setdefault(e.round_index, []).append(e.payload["bid"])
        self.assertTrue(by_round)
        for bids in by_round.values():
            for prev, nxt in zip(bids, bids[1:]):
                self.assertGreater(nxt, prev)

    def test_same_seed_same_game(self):
        a = self.play(("novice", "aggressive"), seed=21)
        b = self.play(("novice", "aggressive"), seed=21)
        trace = lambda engine: [(e.event_type, e.player, e.round_index, str(e.payload)) for e in engine.get_events()]
        self.assertEqual(trace(a), trace(b))
        self.assertEqual(a.state.winner, b.state.winner)

    def test_history_grows_with_every_action(self):
        engine = self.play(("balanced", "balanced"), seed=2)
        actions = [e for e in engine.get_events() if e.event_type in (ev.BID_PLACED, ev.CHALLENGE_MADE)]
        self.assertEqual(len(engine.state.history), len(actions))


if __name__ == '__main__':
    unittest.main()
