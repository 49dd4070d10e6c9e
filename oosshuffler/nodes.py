from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from typing_extensions import TypeAlias

NodeKind = Literal["atom", "and", "or", "hard", "hard_and", "hard_or"]

HARD_KINDS: frozenset[str] = frozenset({"hard", "hard_and", "hard_or"})

# hard forms gate the whole group, so each one is evaluated as its plain
# counterpart behind a difficulty check
BASE_KIND: dict[str, str] = {
    "and": "and",
    "or": "or",
    "hard": "and",
    "hard_and": "and",
    "hard_or": "or",
}

FUNC_NAMES: dict[str, str] = {
    "atom": "Atom",
    "and": "And",
    "or": "Or",
    "hard": "Hard",
    "hard_and": "HardAnd",
    "hard_or": "HardOr",
}


class Difficulty(Enum):
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def from_name(cls, name: str) -> Difficulty:
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {name!r}, expected one of: "
                + ", ".join(d.value for d in cls)
            ) from None


class ConstructionError(Exception):
    """Raised when a set of logic tables can't be turned into a graph."""

    def __init__(self, message: str, node: str | None = None):
        self.node = node
        if node is not None:
            message = f"node {node!r}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class Node:
    kind: NodeKind
    children: tuple[Expr, ...] = ()
    name: str | None = None

    @property
    def is_hard(self) -> bool:
        return self.kind in HARD_KINDS

    def __str__(self):
        if self.kind == "atom":
            return f"Atom({self.name!r})"
        args = ", ".join(
            repr(c) if isinstance(c, str) else str(c) for c in self.children
        )
        return f"{FUNC_NAMES[self.kind]}({args})"


# a child is either a reference by name or an inline combinator
Expr: TypeAlias = Union[str, Node]


def Atom(name: str) -> Node:
    return Node("atom", name=name)


def And(*children: Expr) -> Node:
    return Node("and", tuple(children))


def Or(*children: Expr) -> Node:
    return Node("or", tuple(children))


def Hard(*children: Expr) -> Node:
    # exactly one child; arity is checked when the graph is built
    return Node("hard", tuple(children))


def HardAnd(*children: Expr) -> Node:
    return Node("hard_and", tuple(children))


def HardOr(*children: Expr) -> Node:
    return Node("hard_or", tuple(children))
