
"""
history.py
Prefix-indexed store of bidding decisions, used to estimate opponent tendencies.
Nodes live in a flat arena (a list) and refer to their children by index, keyed by the
(quantity, face) of the next bid. Every record updates the aggregate counters of each node
on its path, so a prefix query only walks the prefix.
Related modules:
- engine.py: Records one decision per accepted action and the revealed truth of every challenged bid.
- agents/adaptive_agent.py: Reads tendencies through HistoryReader.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .bid import Bid

BidKey = Tuple[int, int]
PathItem = Union[Bid, BidKey]


class Outcome(Enum):
    RAISED = "raised"
    CHALLENGED = "challenged"


@dataclass(frozen=True)
class Tendency:
    """
    Aggregated behaviour at a decision point.
    Fields:
        raise_rate (float): Share of decisions that raised.
        challenge_rate (float): Share of decisions that challenged.
        sample_size (int): Number of decisions aggregated.
    """
    raise_rate: float = 0.0
    challenge_rate: float = 0.0
    sample_size: int = 0


@dataclass(frozen=True)
class BluffTendency:
    """
    Revealed outcomes of one player's challenged bids.
    Fields:
        bluff_rate (float): Share of challenged bids that turned out false.
        sample_size (int): Number of challenged bids revealed.
    """
    bluff_rate: float = 0.0
    sample_size: int = 0


PLAUSIBILITY_LEVELS = 5


def plausibility_level(p: float) -> int:
    """Bucket a probability into one of PLAUSIBILITY_LEVELS equal-width levels."""
    return max(0, min(PLAUSIBILITY_LEVELS - 1, int(p * PLAUSIBILITY_LEVELS)))


@dataclass
class _Counts:
    raised: int = 0
    challenged: int = 0

    def add(self, outcome: Outcome) -> None:
        if outcome is Outcome.RAISED:
            self.raised += 1
        else:
            self.challenged += 1

    def merge(self, other: '_Counts') -> None:
        self.raised += other.raised
        self.challenged += other.challenged

    @property
    def total(self) -> int:
        return self.raised + self.challenged


@dataclass
class _Node:
    children: Dict[BidKey, int] = field(default_factory=dict)
    # decisions taken exactly at this path, per actor
    here: Dict[int, _Counts] = field(default_factory=dict)
    # decisions taken at this path or any extension of it, per actor
    subtree: Dict[int, _Counts] = field(default_factory=dict)


def _key(item: PathItem) -> BidKey:
    if isinstance(item, Bid):
        return item.key
    quantity, face = item
    return (int(quantity), int(face))


def _tendency(counts: Iterable[_Counts]) -> Tendency:
    total = _Counts()
    for c in counts:
        total.merge(c)
    if total.total == 0:
        return Tendency()
    return Tendency(
        raise_rate=total.raised / total.total,
        challenge_rate=total.challenged / total.total,
        sample_size=total.total,
    )


class BidHistory:
    """
    Append-only trie of bid paths. Cleared only by reset().
    Alongside the trie it keeps two flat tables: decisions per (actor, plausibility level of the
    bid being answered), and the revealed truth of each player's challenged bids.
    """
    ROOT = 0

    def __init__(self):
        self._nodes: List[_Node] = [_Node()]
        self._levels: Dict[Tuple[int, int], _Counts] = {}
        # actor -> [true bids, bluffs]
        self._showdowns: Dict[int, List[int]] = {}
        self._records = 0

    def record(self, path: Sequence[PathItem], outcome: Outcome, actor: int,
               level: Optional[int] = None) -> None:
        """
        Record that `actor` took `outcome` after the bids in `path`.
        Args:
            path (sequence): Bids (or (quantity, face) pairs) leading up to the decision.
            outcome (Outcome): RAISED or CHALLENGED.
            actor (int): Seat of the deciding player.
            level (int|None): plausibility_level of the bid being answered; None for an opening bid.
        """
        if not isinstance(outcome, Outcome):
            raise TypeError(f"outcome must be an Outcome, got {outcome!r}")
        node_index = self.ROOT
        self._bump(self._nodes[node_index].subtree, actor, outcome)
        for item in path:
            node_index = self._child(node_index, _key(item), create=True)
            self._bump(self._nodes[node_index].subtree, actor, outcome)
        self._bump(self._nodes[node_index].here, actor, outcome)
        if level is not None:
            self._levels.setdefault((actor, level), _Counts()).add(outcome)
        self._records += 1

    def record_showdown(self, bidder: int, bid_was_true: bool) -> None:
        """Record the revealed truth of a challenged bid placed by `bidder`."""
        tally = self._showdowns.setdefault(bidder, [0, 0])
        tally[0 if bid_was_true else 1] += 1

    def query_tendency(self, path_prefix: Sequence[PathItem], actor: Optional[int] = None) -> Tendency:
        """
        Aggregate every recorded decision whose path starts with `path_prefix`.
        Args:
            path_prefix (sequence): Leading bids to match.
            actor (int|None): Restrict to one player's decisions; None aggregates everyone.
        Returns:
            Tendency: Rates and sample size (all zero for an unknown prefix).
        """
        node_index = self._find(path_prefix)
        if node_index is None:
            return Tendency()
        return self._read(self._nodes[node_index].subtree, actor)

    def query_exact(self, path: Sequence[PathItem], actor: Optional[int] = None) -> Tendency:
        """Decisions taken exactly at `path`, excluding longer paths."""
        node_index = self._find(path)
        if node_index is None:
            return Tendency()
        return self._read(self._nodes[node_index].here, actor)

    def longest_supported_prefix(self, path: Sequence[PathItem], actor: Optional[int] = None,
                                 min_samples: int = 1) -> Tuple[int, Tendency]:
        """
        Walk down `path` and return the deepest prefix with at least `min_samples` decisions.
        Returns:
            tuple: (prefix length, Tendency at that prefix). (0, root tendency) when nothing deeper qualifies,
            and (0, Tendency()) when even the root has fewer than `min_samples` decisions.
        """
        node_index = self.ROOT
        root = self._read(self._nodes[node_index].subtree, actor)
        if root.sample_size < min_samples:
            return 0, Tendency()
        best = (0, root)
        for depth, item in enumerate(path, start=1):
            child = self._child(node_index, _key(item), create=False)
            if child is None:
                break
            node_index = child
            tendency = self._read(self._nodes[node_index].subtree, actor)
            if tendency.sample_size < min_samples:
                break
            best = (depth, tendency)
        return best

    def query_level(self, actor: int, level: int) -> Tendency:
        """Decisions `actor` took when answering bids at the given plausibility level."""
        counts = self._levels.get((actor, level))
        return _tendency([counts] if counts is not None else [])

    def bluff_tendency(self, actor: int) -> BluffTendency:
        """How often `actor`'s bids were false when challenged."""
        true_bids, bluffs = self._showdowns.get(actor, (0, 0))
        total = true_bids + bluffs
        if total == 0:
            return BluffTendency()
        return BluffTendency(bluff_rate=bluffs / total, sample_size=total)

    def actors(self) -> List[int]:
        return sorted(self._nodes[self.ROOT].subtree)

    def reset(self) -> None:
        self._nodes = [_Node()]
        self._levels = {}
        self._showdowns = {}
        self._records = 0

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return self._records

    # internals

    def _child(self, node_index: int, key: BidKey, create: bool) -> Optional[int]:
        children = self._nodes[node_index].children
        child = children.get(key)
        if child is None and create:
            child = len(self._nodes)
            self._nodes.append(_Node())
            children[key] = child
        return child

    def _find(self, path: Sequence[PathItem]) -> Optional[int]:
        node_index = self.ROOT
        for item in path:
            node_index = self._child(node_index, _key(item), create=False)
            if node_index is None:
                return None
        return node_index

    @staticmethod
    def _bump(table: Dict[int, _Counts], actor: int, outcome: Outcome) -> None:
        table.setdefault(actor, _Counts()).add(outcome)

    @staticmethod
    def _read(table: Dict[int, _Counts], actor: Optional[int]) -> Tendency:
        if actor is None:
            return _tendency(table.values())
        counts = table.get(actor)
        return _tendency([counts] if counts is not None else [])


class HistoryReader:
    """
    Read-only facade handed to strategies so they cannot record or reset.
    """
    __slots__ = ("_history",)

    def __init__(self, history: BidHistory):
        self._history = history

    def query_tendency(self, path_prefix, actor=None) -> Tendency:
        return self._history.query_tendency(path_prefix, actor)

    def query_exact(self, path, actor=None) -> Tendency:
        return self._history.query_exact(path, actor)

    def longest_supported_prefix(self, path, actor=None, min_samples=1):
        return self._history.longest_supported_prefix(path, actor, min_samples)

    def query_level(self, actor, level) -> Tendency:
        return self._history.query_level(actor, level)

    def bluff_tendency(self, actor) -> BluffTendency:
        return self._history.bluff_tendency(actor)

    def __len__(self) -> int:
        return len(self._history)
