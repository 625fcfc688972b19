"""Bipartite graphs and maximum matchings (Hopcroft–Karp)."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .types import MatcherError

__all__ = ["Node", "Edge", "EdgeSet", "BipartiteGraph", "new_bipartite_graph", "odd"]


def odd(n: int) -> bool:
    """Return whether ``n`` is odd; negative numbers never are."""
    return math.fmod(n, 2.0) == 1.0


@dataclass(frozen=True)
class Node:
    """A graph vertex: a numeric id and the value it stands for."""

    id: int
    value: Any = None


@dataclass(frozen=True)
class Edge:
    """An edge between two node ids."""

    node1: int
    node2: int


class EdgeSet(list):
    """An ordered collection of edges."""

    def free(self, node: Node) -> bool:
        """Return whether no edge touches ``node``."""
        return all(node.id not in (e.node1, e.node2) for e in self)

    def contains(self, edge: Edge) -> bool:
        """Return whether ``edge`` is in the set."""
        return edge in self

    def find_by_nodes(self, node1: Node, node2: Node) -> Edge | None:
        """Return the edge joining the two nodes, in either direction."""
        for e in self:
            if (e.node1, e.node2) in ((node1.id, node2.id), (node2.id, node1.id)):
                return e
        return None

    def symmetric_difference(self, other: Iterable[Edge]) -> EdgeSet:
        """Return the edges that are in exactly one of the two sets."""
        include: dict[Edge, bool] = {e: True for e in self}
        for e in other:
            include[e] = not include.get(e, False)
        return EdgeSet(e for e, keep in include.items() if keep)


@dataclass
class BipartiteGraph:
    """A graph whose edges all run from a left node to a right node."""

    left: list[Node]
    right: list[Node]
    edges: EdgeSet
    _index: dict[tuple[int, int], Edge] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        for e in self.edges:
            self._index.setdefault((e.node1, e.node2), e)

    def _edge_between(self, a: Node, b: Node) -> Edge | None:
        edge = self._index.get((a.id, b.id))
        if edge is None:
            edge = self._index.get((b.id, a.id))
        return edge

    def free_left_right(self, edges: Iterable[Edge]) -> tuple[list[Any], list[Any]]:
        """Return the values of left and right nodes untouched by ``edges``."""
        touched = {node_id for e in edges for node_id in (e.node1, e.node2)}
        left_values = [n.value for n in self.left if n.id not in touched]
        right_values = [n.value for n in self.right if n.id not in touched]
        return left_values, right_values

    def largest_matching(self) -> EdgeSet:
        """Return a maximum-cardinality matching of the graph."""
        matching = EdgeSet()
        paths = self._maximal_disjoint_slap_collection(matching)
        while paths:
            for path in paths:
                matching = matching.symmetric_difference(path)
            paths = self._maximal_disjoint_slap_collection(matching)
        return matching

    def _maximal_disjoint_slap_collection(self, matching: EdgeSet) -> list[list[Edge]]:
        matched_edges = set(matching)
        matched_nodes = {node_id for e in matching for node_id in (e.node1, e.node2)}
        layers = self._create_slap_guide_layers(matched_edges, matched_nodes)
        if not layers:
            return []

        used: set[int] = set()
        result: list[list[Edge]] = []
        for start in layers[-1]:
            slap = self._find_slap(start, [], len(layers) - 1, matched_edges, layers, used)
            if slap is not None:
                for e in slap:
                    used.add(e.node1)
                    used.add(e.node2)
                result.append(slap)
        return result

    def _find_slap(
        self,
        current: Node,
        slap: list[Edge],
        level: int,
        matched_edges: set[Edge],
        layers: Sequence[list[Node]],
        used: set[int],
    ) -> list[Edge] | None:
        used.add(current.id)
        if level == 0:
            return list(slap)

        for nxt in layers[level - 1]:
            if nxt.id in used:
                continue
            edge = self._edge_between(current, nxt)
            if edge is None:
                continue
            if (edge in matched_edges) == odd(level):
                continue
            slap.append(edge)
            found = self._find_slap(nxt, slap, level - 1, matched_edges, layers, used)
            if found is not None:
                return found
            slap.pop()

        used.discard(current.id)
        return None

    def _create_slap_guide_layers(
        self, matched_edges: set[Edge], matched_nodes: set[int]
    ) -> list[list[Node]]:
        current = [n for n in self.left if n.id not in matched_nodes]
        if not current:
            return []
        used = {n.id for n in current}
        layers = [current]

        done = False
        while not done:
            last, current = current, []
            if odd(len(layers)):
                for left_node in last:
                    for right_node in self.right:
                        if right_node.id in used:
                            continue
                        edge = self._edge_between(left_node, right_node)
                        if edge is None or edge in matched_edges:
                            continue
                        current.append(right_node)
                        used.add(right_node.id)
                        if right_node.id not in matched_nodes:
                            done = True
            else:
                for right_node in last:
                    for left_node in self.left:
                        if left_node.id in used:
                            continue
                        edge = self._edge_between(left_node, right_node)
                        if edge is None or edge not in matched_edges:
                            continue
                        current.append(left_node)
                        used.add(left_node.id)

            if not current:
                return []
            layers.append(current)

        return layers


def new_bipartite_graph(
    left_values: Sequence[Any],
    right_values: Sequence[Any],
    neighbours: Callable[[Any, Any], bool],
) -> BipartiteGraph:
    """Build a graph joining each left/right value pair for which ``neighbours`` is true.

    Raises :class:`MatcherError` if ``neighbours`` raises.
    """
    left = [Node(i, v) for i, v in enumerate(left_values)]
    right = [Node(j + len(left), v) for j, v in enumerate(right_values)]

    edges = EdgeSet()
    for left_node in left:
        for right_node in right:
            try:
                adjacent = neighbours(left_node.value, right_node.value)
            except Exception as exc:
                raise MatcherError(
                    f"error determining adjacency for {left_node.value} and "
                    f"{right_node.value}: {exc}"
                ) from exc
            if adjacent:
                edges.append(Edge(left_node.id, right_node.id))

    return BipartiteGraph(left, right, edges)