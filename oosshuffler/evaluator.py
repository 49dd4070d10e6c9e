from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from .graph import RequirementGraph
from .nodes import Difficulty

logger = logging.getLogger(__name__)


def fixpoint(
    graph: RequirementGraph,
    state: Collection[str],
    mode: Difficulty,
    scope: Collection[int] | None = None,
) -> bytearray:
    """Compute the least fixpoint of the graph for one state.

    Every vertex starts out false and only atoms present in ``state`` are
    seeded true. Truth then propagates upwards: an "or" vertex turns true with
    its first true child, an "and" vertex once all of its children are true,
    and a gated vertex never turns true outside hard mode. Each vertex flips at
    most once, so cycles settle without any special casing; a cycle with no
    grounded way in stays false.

    If ``scope`` is given, only those vertices take part. It must be closed
    under children, e.g. the result of ``graph.vertex_closure()``.
    """
    hard = mode is Difficulty.HARD
    kinds = graph.kinds
    gated = graph.gated
    parents = graph.parents

    if scope is None:
        in_scope = None
        atoms = [graph.atom_index[a] for a in state if a in graph.atom_index]
    else:
        in_scope = bytearray(len(kinds))
        for v in scope:
            in_scope[v] = 1
        atoms = [
            graph.atom_index[a]
            for a in state
            if a in graph.atom_index and in_scope[graph.atom_index[a]]
        ]

    truth = bytearray(len(kinds))
    pending = [len(cs) for cs in graph.children]
    queue = []
    for v in atoms:
        if not truth[v]:
            truth[v] = 1
            queue.append(v)

    while queue:
        v = queue.pop()
        for p in parents[v]:
            if truth[p]:
                continue
            if in_scope is not None and not in_scope[p]:
                continue
            if gated[p] and not hard:
                continue
            if kinds[p] == "and":
                pending[p] -= 1
                if pending[p]:
                    continue
            truth[p] = 1
            queue.append(p)
    return truth


def resolve(graph: RequirementGraph, name: str) -> int | None:
    v = graph.vertex(name)
    if v is None:
        logger.debug("%r is not in the graph, treating it as an atom", name)
    return v


def satisfied(
    graph: RequirementGraph,
    root: str,
    state: Collection[str],
    mode: Difficulty = Difficulty.NORMAL,
) -> bool:
    """Return whether ``root`` holds for the given state and difficulty."""
    v = resolve(graph, root)
    if v is None:
        return root in state
    truth = fixpoint(graph, state, mode, graph.vertex_closure([v]))
    return bool(truth[v])


def satisfied_all(
    graph: RequirementGraph,
    roots: Iterable[str],
    state: Collection[str],
    mode: Difficulty = Difficulty.NORMAL,
) -> dict[str, bool]:
    """Check several roots against one state with a single fixpoint pass."""
    roots = list(roots)
    vertices = {r: resolve(graph, r) for r in roots}
    scope = graph.vertex_closure(v for v in vertices.values() if v is not None)
    truth = fixpoint(graph, state, mode, scope)
    return {
        r: (r in state) if v is None else bool(truth[v]) for r, v in vertices.items()
    }


def reachable(
    graph: RequirementGraph,
    state: Collection[str],
    mode: Difficulty = Difficulty.NORMAL,
) -> frozenset[str]:
    """Return the names of every node that holds for the given state."""
    truth = fixpoint(graph, state, mode)
    return frozenset(name for name, v in graph.index.items() if truth[v])


class Evaluator:
    """Answers repeated queries against one graph and difficulty.

    The fixpoint for the most recent state is kept and reused until a
    different state is passed in. Instances hold mutable memo state and
    should not be shared between threads; the graph itself can be.
    """

    def __init__(self, graph: RequirementGraph, mode: Difficulty = Difficulty.NORMAL):
        self.graph = graph
        self.mode = mode
        self._state: frozenset[str] | None = None
        self._truth: bytearray | None = None

    def _solve(self, state: Iterable[str]) -> tuple[frozenset[str], bytearray]:
        snapshot = frozenset(state)
        if self._truth is None or snapshot != self._state:
            self._truth = fixpoint(self.graph, snapshot, self.mode)
            self._state = snapshot
        return snapshot, self._truth

    def clear(self) -> None:
        self._state = None
        self._truth = None

    def _lookup(self, root: str, snapshot: frozenset[str], truth: bytearray) -> bool:
        v = resolve(self.graph, root)
        if v is None:
            return root in snapshot
        return bool(truth[v])

    def satisfied(self, root: str, state: Iterable[str]) -> bool:
        snapshot, truth = self._solve(state)
        return self._lookup(root, snapshot, truth)

    def satisfied_all(
        self, roots: Iterable[str], state: Iterable[str]
    ) -> dict[str, bool]:
        snapshot, truth = self._solve(state)
        return {r: self._lookup(r, snapshot, truth) for r in roots}

    def reachable(self, state: Iterable[str]) -> frozenset[str]:
        _, truth = self._solve(state)
        return frozenset(name for name, v in self.graph.index.items() if truth[v])
