
"""
config.py
Defines the GameConfig dataclass, which centralizes all rule options and numeric constraints for the Liar's Dice engine,
and StrategyParams, the tunable thresholds of the AI difficulty tiers.
Related modules:
- engine.py: Uses GameConfig to seat players and enforce game rules.
- agents/: Strategies read their StrategyParams.
"""

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional, Tuple

from .errors import InvalidConfigurationError

DIFFICULTIES: Tuple[str, ...] = ("novice", "balanced", "aggressive", "adaptive")


@dataclass(frozen=True)
class StrategyParams:
    """
    Tunable numbers behind an AI difficulty tier.
    Fields:
        challenge_threshold (float): Challenge when the standing bid's plausibility is below this.
        safety_margin (float): A raise is safe when its own plausibility is at least this.
        bluff_rate (float): Chance to bid one quantity step above the safe choice.
        adapt_rate (float): Adaptive only. Largest shift applied to the thresholds.
        prior_weight (float): Adaptive only. Pseudo-samples the observed rates are blended against.
        min_samples (int): Adaptive only. Samples a history prefix needs before it is trusted.
        min_bound (float): Lower clamp for adapted thresholds.
        max_bound (float): Upper clamp for adapted thresholds.
    """
    challenge_threshold: float = 0.35
    safety_margin: float = 0.45
    bluff_rate: float = 0.0
    adapt_rate: float = 0.3
    prior_weight: float = 5.0
    min_samples: int = 3
    min_bound: float = 0.05
    max_bound: float = 0.95

    def validate(self) -> None:
        for name in ("challenge_threshold", "safety_margin", "bluff_rate", "adapt_rate",
                     "min_bound", "max_bound"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.min_bound > self.max_bound:
            raise InvalidConfigurationError("min_bound must not exceed max_bound")
        if self.prior_weight <= 0:
            raise InvalidConfigurationError("prior_weight must be positive")
        if self.min_samples < 1:
            raise InvalidConfigurationError("min_samples must be at least 1")

    def with_overrides(self, **changes) -> 'StrategyParams':
        return replace(self, **changes)


DEFAULT_STRATEGY_PARAMS: Dict[str, StrategyParams] = {
    "novice": StrategyParams(challenge_threshold=0.25, safety_margin=0.50, bluff_rate=0.15),
    "balanced": StrategyParams(challenge_threshold=0.35, safety_margin=0.45),
    "aggressive": StrategyParams(challenge_threshold=0.45, safety_margin=0.30, bluff_rate=0.10),
    "adaptive": StrategyParams(challenge_threshold=0.35, safety_margin=0.45),
}


@dataclass(frozen=True)
class GameConfig:
    """
    Centralizes all rule options and numeric constraints for a Liar's Dice game.
    Human players take the first seats, AI players the remaining ones in the order given.
    Fields:
        num_players (int): Number of seats (default 2).
        ai_difficulties (tuple): Difficulty tier of each AI seat.
        starting_dice (int): Dice per player at the start of the game.
        ones_wild (bool): If True, ones count toward any other declared face.
        rng_seed (int|None): Seed for deterministic games.
        strategy_params (dict|None): Per-tier StrategyParams overriding the defaults.
    """
    num_players: int = 2
    ai_difficulties: Tuple[str, ...] = ("balanced",)
    starting_dice: int = 5
    ones_wild: bool = False
    rng_seed: Optional[int] = 69
    strategy_params: Optional[Mapping[str, StrategyParams]] = None

    def validate(self) -> None:
        """
        Check the roster and rule options.
        Raises:
            InvalidConfigurationError: If the combination cannot form a game.
        """
        if not isinstance(self.num_players, int) or self.num_players < 2:
            raise InvalidConfigurationError(f"a game needs at least 2 players, got {self.num_players}")
        if len(self.ai_difficulties) > self.num_players:
            raise InvalidConfigurationError(
                f"{len(self.ai_difficulties)} AI players do not fit in {self.num_players} seats")
        for tier in self.ai_difficulties:
            if tier not in DIFFICULTIES:
                raise InvalidConfigurationError(f"unknown AI difficulty: {tier!r}")
        if not isinstance(self.starting_dice, int) or self.starting_dice <= 0:
            raise InvalidConfigurationError(f"starting_dice must be positive, got {self.starting_dice}")
        for tier, params in (self.strategy_params or {}).items():
            if tier not in DIFFICULTIES:
                raise InvalidConfigurationError(f"strategy_params given for unknown difficulty {tier!r}")
            params.validate()

    @property
    def num_humans(self) -> int:
        return self.num_players - len(self.ai_difficulties)

    @property
    def total_dice(self) -> int:
        return self.num_players * self.starting_dice

    def params_for(self, tier: str) -> StrategyParams:
        overrides = self.strategy_params or {}
        if tier in overrides:
            return overrides[tier]
        return DEFAULT_STRATEGY_PARAMS[tier]

    def seat_difficulty(self, player_id: int) -> Optional[str]:
        """Difficulty of the AI in `player_id`'s seat, or None for a human seat."""
        offset = player_id - self.num_humans
        if 0 <= offset < len(self.ai_difficulties):
            return self.ai_difficulties[offset]
        return None
