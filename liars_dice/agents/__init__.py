"""
Central strategy registry and registration decorator for Liar's Dice AI tiers.
Use @register_agent("name") above your strategy class to make it available to the engine and CLI.
All strategy modules in this directory are imported here to ensure registration occurs.
"""

AGENT_MAP = {}

def register_agent(name):
	"""
	Decorator to register a strategy class under a given difficulty name.
	Usage:
		@register_agent("balanced")
		class BalancedStrategy(ProbabilityStrategy): ...
	"""
	def decorator(cls):
		AGENT_MAP[name] = cls
		cls.difficulty = name
		return cls
	return decorator


def create_strategy(name, params=None, rng=None):
	"""
	Instantiate the strategy registered under `name`.
	Args:
		name (str): Difficulty tier (novice, balanced, aggressive, adaptive).
		params (StrategyParams|None): Thresholds; the tier defaults when None.
		rng (random.Random|None): RNG used for bluffing.
	Raises:
		ValueError: If the name is unknown.
	"""
	name = name.lower()
	if name not in AGENT_MAP:
		raise ValueError(f"Unknown agent: {name}")
	return AGENT_MAP[name](params=params, rng=rng)

# Automatically import all strategy modules in this directory to ensure registration decorators run
import importlib
import os
import pkgutil

_this_dir = os.path.dirname(__file__)
_pkg_name = __name__
for _, modname, ispkg in pkgutil.iter_modules([_this_dir]):
	if not ispkg and modname not in ("__init__", "base"):
		importlib.import_module(f"{_pkg_name}.{modname}")
