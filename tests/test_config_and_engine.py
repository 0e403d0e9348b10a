import unittest
from liars_dice.agents.adaptive_agent import AdaptiveStrategy
from liars_dice.agents.heuristic_agent import BalancedStrategy, NoviceStrategy
from liars_dice.core.config import GameConfig, StrategyParams
from liars_dice.core.engine import GameEngine
from liars_dice.core.errors import InvalidConfigurationError
from liars_dice.core.state import Phase


class TestConfigAndEngine(unittest.TestCase):
    """
    Tests around how `GameConfig` is validated and interpreted by the engine:
      - every player starts with `starting_dice` dice,
      - humans take the first seats and AI tiers the remaining ones,
      - invalid combinations fail construction with InvalidConfigurationError.
    """

    def test_default_per_player_dice(self):
        cfg = GameConfig(starting_dice=5)
        engine = GameEngine(cfg)
        p0, p1 = engine.state.players
        self.assertEqual(p0.num_dice, 5)
        self.assertEqual(p1.num_dice, 5)
        self.assertEqual(engine.state.round.total_dice, 10)

    def test_starting_dice_affects_all_players(self):
        cfg = GameConfig(num_players=3, ai_difficulties=("balanced",), starting_dice=3)
        engine = GameEngine(cfg)
        self.assertEqual([p.num_dice for p in engine.state.players], [3, 3, 3])

    def test_seating_humans_then_ai(self):
        cfg = GameConfig(num_players=3, ai_difficulties=("novice", "adaptive"))
        engine = GameEngine(cfg)
        p0, p1, p2 = engine.state.players
        self.assertFalse(p0.is_ai)
        self.assertIsNone(p0.strategy)
        self.assertIsInstance(p1.strategy, NoviceStrategy)
        self.assertIsInstance(p2.strategy, AdaptiveStrategy)

    def test_initial_state(self):
        engine = GameEngine(GameConfig())
        self.assertEqual(engine.phase, Phase.AWAITING_BID)
        self.assertEqual(engine.state.round.round_index, 1)
        self.assertEqual(engine.current_player, 0)
        self.assertIsNone(engine.state.round.current_bid)

    def test_invalid_configurations(self):
        bad = [
            GameConfig(num_players=1, ai_difficulties=()),
            GameConfig(num_players=0, ai_difficulties=()),
            GameConfig(starting_dice=0),
            GameConfig(starting_dice=-2),
            GameConfig(num_players=2, ai_difficulties=("balanced", "balanced", "novice")),
            GameConfig(ai_difficulties=("grandmaster",)),
            GameConfig(strategy_params={"balanced": StrategyParams(challenge_threshold=1.5)}),
            GameConfig(strategy_params={"expert": StrategyParams()}),
        ]
        for cfg in bad:
            with self.assertRaises(InvalidConfigurationError, msg=str(cfg)):
                GameEngine(cfg)

    def test_configuration_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            GameConfig(starting_dice=0).validate()

    def test_strategy_params_override(self):
        params = StrategyParams(challenge_threshold=0.2, safety_margin=0.6)
        engine = GameEngine(GameConfig(strategy_params={"balanced": params}))
        self.assertIs(engine.state.players[1].strategy.params, params)

    def test_strategy_instances_for_ai_seats(self):
        custom = BalancedStrategy()
        engine = GameEngine(GameConfig(), strategies={1: custom})
        self.assertIs(engine.state.players[1].strategy, custom)
        with self.assertRaises(InvalidConfigurationError):
            GameEngine(GameConfig(), strategies={0: BalancedStrategy()})

    def test_same_seed_same_dice(self):
        a = GameEngine(GameConfig(rng_seed=7))
        b = GameEngine(GameConfig(rng_seed=7))
        self.assertEqual([p.dice.values for p in a.state.players],
                         [p.dice.values for p in b.state.players])


if __name__ == '__main__':
    unittest.main()
