# FluentSearch Levenshtein - Distance Builder
# ===========================================
"""
Per-record Levenshtein distances between source fields and targets.

levenshtein_distance_of(f1, f2).compared_to(t1, t2) yields, for each
record, the distances in the order

    [d(f1, t1), d(f1, t2), d(f2, t1), d(f2, t2)]

i.e. index i*T + j holds (sources[i], targets[j]). Targets are literal
strings or field selectors. A None value on either side compares as "".
Every upstream record produces exactly one result; nothing is filtered.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import pandas as pd

from ..errors import InvalidArgumentError
from ..expressions import Call, Constant, FieldAccessor, Lambda, Node, unify
from ..sequence import LazySequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevenshteinDistance:
    """Distances computed for one record."""
    item: Any
    distances: Tuple[int, ...]

    @property
    def minimum_distance(self) -> int:
        return min(self.distances)

    @property
    def maximum_distance(self) -> int:
        return max(self.distances)

    @property
    def distance(self) -> int:
        """The first distance; the only one when comparing one field to one target."""
        return self.distances[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item,
            "distances": list(self.distances),
            "minimum_distance": self.minimum_distance,
            "maximum_distance": self.maximum_distance,
        }


def distance_node(source: Node, target: Node) -> Node:
    """levenshtein(coalesce(source, ''), coalesce(target, ''))"""
    empty = Constant("")
    return Call("levenshtein", (
        Call("coalesce", (source, empty)),
        Call("coalesce", (target, empty)),
    ))


class DistanceBuilder:
    """
    Holds the source fields of a distance computation until targets are given.

    Created by SearchChain.levenshtein_distance_of().
    """

    def __init__(self, chain, sources: Sequence[FieldAccessor]):
        if not sources:
            raise InvalidArgumentError("fields", "at least one source field is required")
        self.chain = chain
        self.sources = tuple(unify(s, chain.parameter) for s in sources)

    def compared_to(self, *targets) -> "DistanceSequence":
        """
        Compare every source field with every target.

        Args:
            *targets: Literal strings and/or field selectors

        Raises:
            InvalidArgumentError: if no targets are given or a target is None
        """
        if not targets:
            raise InvalidArgumentError("targets", "at least one comparison target is required")

        parameter = self.chain.parameter
        target_nodes: List[Node] = []
        for target in targets:
            if target is None:
                raise InvalidArgumentError("targets", "comparison targets must not be None")
            if isinstance(target, str):
                target_nodes.append(Constant(target))
            else:
                target_nodes.append(unify(FieldAccessor.of(target), parameter).body)

        columns = [
            Lambda(parameter, distance_node(source.body, target))
            for source in self.sources
            for target in target_nodes
        ]
        logger.debug(
            f"Distance stage: {len(self.sources)} sources x {len(target_nodes)} targets"
        )
        return DistanceSequence(self.chain, tuple(columns))

    def __repr__(self) -> str:
        return f"DistanceBuilder({', '.join(s.label for s in self.sources)})"


class DistanceSequence(LazySequence):
    """Lazy sequence of LevenshteinDistance results, in upstream order."""

    def __init__(self, chain, columns: Tuple[Lambda, ...]):
        self.chain = chain
        self.columns = columns

    def __iter__(self) -> Iterator[LevenshteinDistance]:
        chain = self.chain
        rows = chain.source.project(chain.predicate, self.columns, chain.settings)
        for record, values in rows:
            if all(condition(record) for condition in chain.post_filters):
                yield LevenshteinDistance(item=record, distances=tuple(int(v) for v in values))

    def to_frame(self) -> pd.DataFrame:
        """
        Materialize as a DataFrame with one row per record.

        Columns: ``item``, ``distance_0`` .. ``distance_<n-1>``,
        ``minimum_distance`` and ``maximum_distance``.
        """
        rows = []
        for result in self:
            row = {"item": result.item}
            for i, value in enumerate(result.distances):
                row[f"distance_{i}"] = value
            row["minimum_distance"] = result.minimum_distance
            row["maximum_distance"] = result.maximum_distance
            rows.append(row)

        columns = ["item"] + [f"distance_{i}" for i in range(len(self.columns))]
        columns += ["minimum_distance", "maximum_distance"]
        return pd.DataFrame(rows, columns=columns)
