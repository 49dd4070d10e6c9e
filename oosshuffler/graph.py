from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union

from typing_extensions import TypeAlias

from .nodes import (
    BASE_KIND,
    FUNC_NAMES,
    HARD_KINDS,
    ConstructionError,
    Expr,
    Node,
    Or,
)

logger = logging.getLogger(__name__)

LogicTable: TypeAlias = Union[Mapping[str, Expr], Iterable[tuple[str, Expr]]]


@dataclass(frozen=True, eq=False)
class RequirementGraph:
    """Read-only requirement graph, compiled to vertex indices.

    Every named node, every inline combinator and every atom gets a vertex.
    ``kinds`` holds the plain boolean rule of each vertex ("atom", "and" or
    "or") and ``gated`` whether it only holds under hard difficulty.
    """

    nodes: Mapping[str, Node]
    atoms: frozenset[str]
    ops: tuple[str, ...]
    kinds: tuple[str, ...]
    gated: tuple[bool, ...]
    names: tuple[str | None, ...]
    children: tuple[tuple[int, ...], ...]
    parents: tuple[tuple[int, ...], ...]
    index: Mapping[str, int]
    atom_index: Mapping[str, int]

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def __getitem__(self, name: str) -> Node:
        return self.nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def vertex(self, name: str) -> int | None:
        # names resolve to a node first, then to an atom
        if name in self.index:
            return self.index[name]
        return self.atom_index.get(name)

    def vertex_closure(self, starts: Iterable[int]) -> set[int]:
        result = set()
        stack = list(starts)
        while stack:
            v = stack.pop()
            if v in result:
                continue
            result.add(v)
            stack.extend(c for c in self.children[v] if c not in result)
        return result

    def dependencies(self, name: str) -> frozenset[str]:
        """Return the named nodes and atoms that ``name`` transitively refers to."""
        v = self.vertex(name)
        if v is None:
            return frozenset()
        closure = self.vertex_closure(self.children[v])
        return frozenset(self.names[x] for x in closure if self.names[x] is not None)

    def unresolved_atoms(self, known_atoms: Iterable[str]) -> frozenset[str]:
        return self.atoms - frozenset(known_atoms)


def table_entries(table: LogicTable) -> Iterator[tuple[str, Expr]]:
    if isinstance(table, Mapping):
        yield from table.items()
    else:
        yield from table


def check_expr(expr: Any, owner: str, nodes: Collection[str]) -> None:
    if isinstance(expr, str):
        if not expr:
            raise ConstructionError("empty reference", owner)
        return
    if not isinstance(expr, Node):
        raise ConstructionError(f"malformed child {expr!r}", owner)
    if expr.kind == "atom":
        if not isinstance(expr.name, str) or not expr.name:
            raise ConstructionError(f"malformed atom name {expr.name!r}", owner)
        if expr.name in nodes:
            raise ConstructionError(
                f"atom {expr.name!r} collides with a node of the same name", owner
            )
        return
    if expr.kind not in FUNC_NAMES:
        raise ConstructionError(f"unknown combinator {expr.kind!r}", owner)
    if not expr.children:
        raise ConstructionError(f"{FUNC_NAMES[expr.kind]}() has no children", owner)
    if expr.kind == "hard" and len(expr.children) != 1:
        raise ConstructionError(
            f"Hard() takes exactly one child, got {len(expr.children)}", owner
        )
    for child in expr.children:
        check_expr(child, owner, nodes)


class GraphCompiler:
    def __init__(self, nodes: Mapping[str, Node]):
        self.nodes = nodes
        self.ops: list[str] = []
        self.names: list[str | None] = []
        self.children: list[tuple[int, ...]] = []
        self.index: dict[str, int] = {}
        self.atom_index: dict[str, int] = {}

    def alloc(self, op: str, name: str | None) -> int:
        self.ops.append(op)
        self.names.append(name)
        self.children.append(())
        return len(self.ops) - 1

    def atom(self, name: str) -> int:
        if name not in self.atom_index:
            self.atom_index[name] = self.alloc("atom", name)
        return self.atom_index[name]

    def ref(self, expr: Expr) -> int:
        if isinstance(expr, str):
            if expr in self.index:
                return self.index[expr]
            return self.atom(expr)
        if expr.kind == "atom":
            return self.atom(expr.name)
        v = self.alloc(expr.kind, None)
        self.fill(v, expr.children)
        return v

    def fill(self, v: int, children: Iterable[Expr]) -> None:
        # duplicate children would be counted twice by the evaluator
        self.children[v] = tuple(dict.fromkeys(self.ref(c) for c in children))

    def compile(self) -> RequirementGraph:
        # named nodes first so that forward references resolve
        for name, body in self.nodes.items():
            op = "or" if body.kind == "atom" else body.kind
            self.index[name] = self.alloc(op, name)
        for name, body in self.nodes.items():
            children = (body,) if body.kind == "atom" else body.children
            self.fill(self.index[name], children)

        parents: list[list[int]] = [[] for _ in self.ops]
        for v, cs in enumerate(self.children):
            for c in cs:
                parents[c].append(v)

        return RequirementGraph(
            nodes=MappingProxyType(dict(self.nodes)),
            atoms=frozenset(self.atom_index),
            ops=tuple(self.ops),
            kinds=tuple("atom" if op == "atom" else BASE_KIND[op] for op in self.ops),
            gated=tuple(op in HARD_KINDS for op in self.ops),
            names=tuple(self.names),
            children=tuple(self.children),
            parents=tuple(tuple(p) for p in parents),
            index=MappingProxyType(self.index),
            atom_index=MappingProxyType(self.atom_index),
        )


def build_graph(
    *tables: LogicTable,
    known_atoms: Iterable[str] | None = None,
    strict: bool = False,
) -> RequirementGraph:
    """Merge logic tables into a validated, immutable requirement graph.

    Node bodies may refer to any node by name regardless of declaration order.
    A bare string body is an alias for ``Or(name)``. Referenced names with no
    node of their own become atoms; if ``known_atoms`` is given, atoms outside
    it are reported as a warning, or raised as a ConstructionError if
    ``strict`` is set.
    """
    nodes: dict[str, Node] = {}
    for table in tables:
        for name, body in table_entries(table):
            if not isinstance(name, str) or not name:
                raise ConstructionError(f"invalid node name {name!r}")
            if name in nodes:
                raise ConstructionError("duplicate node name", name)
            if isinstance(body, str):
                body = Or(body)
            nodes[name] = body

    for name, body in nodes.items():
        check_expr(body, name, nodes)

    graph = GraphCompiler(nodes).compile()
    logger.debug(
        "Compiled %d nodes, %d atoms into %d vertices",
        len(graph.nodes),
        len(graph.atoms),
        len(graph.ops),
    )

    if known_atoms is not None:
        missing = sorted(graph.unresolved_atoms(known_atoms))
        if missing:
            if strict:
                raise ConstructionError(f"unresolved atoms: {', '.join(missing)}")
            logger.warning(
                "Atoms with no node and no known source: %s", ", ".join(missing)
            )
    return graph


def draw_graph(graph: RequirementGraph, roots: Iterable[str] | None = None):
    try:
        import graphviz
    except ImportError:
        return None

    if roots is None:
        vertices = range(len(graph.ops))
    else:
        starts = [graph.vertex(r) for r in roots]
        vertices = sorted(graph.vertex_closure(v for v in starts if v is not None))

    g = graphviz.Digraph(edge_attr={"fontsize": "12"}, graph_attr={"rankdir": "LR"})
    for v in vertices:
        op = graph.ops[v]
        if op == "atom":
            g.node(f"v{v}", label=graph.names[v], shape="ellipse")
            continue
        label = FUNC_NAMES[op]
        if graph.names[v] is not None:
            label = f"{graph.names[v]}\n{label}"
            fillcolor = "khaki"
        else:
            fillcolor = "lightgray"
        if graph.gated[v]:
            fillcolor = "salmon"
        g.node(
            f"v{v}",
            label=label,
            shape="rectangle",
            style="filled, rounded",
            fillcolor=fillcolor,
        )
    for v in vertices:
        for c in graph.children[v]:
            g.edge(f"v{v}", f"v{c}")
    return g
