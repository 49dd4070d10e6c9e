"""Tests for fixpoint evaluation of requirement graphs."""

import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

from oosshuffler.evaluator import (
    Evaluator,
    fixpoint,
    reachable,
    satisfied,
    satisfied_all,
)
from oosshuffler.graph import build_graph
from oosshuffler.nodes import And, Difficulty, Hard, HardAnd, HardOr, Or

NORMAL = Difficulty.NORMAL
HARD = Difficulty.HARD

ATOMS = ["a", "b", "c", "d"]


def all_states(atoms=ATOMS):
    for n in range(len(atoms) + 1):
        for combo in itertools.combinations(atoms, n):
            yield frozenset(combo)


def naive_truth(graph, name, state, mode):
    """Reference evaluator: recompute every named node in rounds until stable."""

    def value(expr, beliefs):
        if isinstance(expr, str):
            if expr in graph.nodes:
                return beliefs[expr]
            return expr in state
        if expr.kind == "atom":
            return expr.name in state
        if expr.is_hard and mode is not HARD:
            return False
        results = [value(c, beliefs) for c in expr.children]
        if expr.kind in ("and", "hard", "hard_and"):
            return all(results)
        return any(results)

    beliefs = {n: False for n in graph.nodes}
    for _ in range(len(beliefs) + 1):
        updated = {n: value(body, beliefs) for n, body in graph.nodes.items()}
        if updated == beliefs:
            break
        beliefs = updated
    if name in beliefs:
        return beliefs[name]
    return name in state


@pytest.fixture
def tangled_graph():
    """Cycles, shared nodes and hard gates over the atoms a-d."""
    return build_graph(
        {
            "p": Or("a", "q"),
            "q": Or("b", "p"),
            "r": And("c", "s"),
            "s": And("d", "r"),
            "t": Or(And("p", "c"), Hard("d")),
            "u": HardAnd("t", "q"),
            "v": Or("u", HardOr("a", "r")),
            "w": And("v", Or("s", "d")),
            "x": Or("x", "w", And("a", "b", "c", "d")),
            "y": "t",
        }
    )


def test_or_scenario():
    graph = build_graph({"kill": Or("sword", "bombs")})
    assert satisfied(graph, "kill", {"bombs"}, NORMAL)
    assert not satisfied(graph, "kill", set(), NORMAL)


def test_hard_scenario():
    graph = build_graph({"pit": Hard("shovel")})
    assert not satisfied(graph, "pit", {"shovel"}, NORMAL)
    assert satisfied(graph, "pit", {"shovel"}, HARD)
    assert not satisfied(graph, "pit", set(), HARD)


def test_and_scenario():
    graph = build_graph({"frypolar": And("bracelet", "mystery seeds")})
    assert not satisfied(graph, "frypolar", {"bracelet"})
    assert satisfied(graph, "frypolar", {"bracelet", "mystery seeds"})


def test_mutual_cycle():
    graph = build_graph({"A": Or("atom1", "B"), "B": Or("atom2", "A")})
    assert satisfied(graph, "A", {"atom2"})
    assert satisfied(graph, "B", {"atom2"})
    assert satisfied(graph, "A", {"atom1"})
    assert satisfied(graph, "B", {"atom1"})
    assert not satisfied(graph, "A", set())
    assert not satisfied(graph, "B", set())


def test_ungrounded_cycles_stay_false():
    graph = build_graph(
        {
            "A": Or("B"),
            "B": Or("A"),
            "self": Or("self"),
            "C": And("x", "D"),
            "D": And("y", "C"),
        }
    )
    state = {"x", "y"}
    assert reachable(graph, state, HARD) == frozenset()
    for name in graph:
        assert not satisfied(graph, name, state, HARD)


def test_self_reference_with_grounding():
    graph = build_graph({"a": Or("a", "b")})
    assert satisfied(graph, "a", {"b"})
    assert not satisfied(graph, "a", set())


def test_long_ring():
    table = {f"n{i}": Or(f"n{(i + 1) % 200}") for i in range(200)}
    table["n150"] = Or("n151", "ground")
    graph = build_graph(table)
    assert reachable(graph, {"ground"}) == frozenset(table)
    assert reachable(graph, set()) == frozenset()


def test_duplicate_children():
    graph = build_graph({"a": And("b", "b", "c")})
    assert not satisfied(graph, "a", {"b"})
    assert satisfied(graph, "a", {"b", "c"})


def test_hard_and_gates_the_group():
    graph = build_graph({"n": HardAnd("a", "b")})
    assert not satisfied(graph, "n", {"a", "b"}, NORMAL)
    assert satisfied(graph, "n", {"a", "b"}, HARD)
    assert not satisfied(graph, "n", {"a"}, HARD)


def test_hard_or_gates_the_group():
    graph = build_graph({"n": HardOr("a", "b")})
    assert not satisfied(graph, "n", {"a", "b"}, NORMAL)
    assert satisfied(graph, "n", {"b"}, HARD)
    assert not satisfied(graph, "n", set(), HARD)


@pytest.mark.parametrize("mode", [NORMAL, HARD])
@pytest.mark.parametrize("state", list(all_states(["a", "b"])))
def test_hard_forms_match_wrapped_forms(mode, state):
    graph = build_graph(
        {
            "hard and": HardAnd("a", "b"),
            "wrapped and": Hard(And("a", "b")),
            "hard or": HardOr("a", "b"),
            "wrapped or": Hard(Or("a", "b")),
        }
    )
    assert satisfied(graph, "hard and", state, mode) == satisfied(
        graph, "wrapped and", state, mode
    )
    assert satisfied(graph, "hard or", state, mode) == satisfied(
        graph, "wrapped or", state, mode
    )


def test_nested_hard_branch():
    graph = build_graph({"remove bush": Or("sword", HardOr("ember seeds", "bombs"))})
    assert not satisfied(graph, "remove bush", {"bombs"}, NORMAL)
    assert satisfied(graph, "remove bush", {"bombs"}, HARD)
    assert satisfied(graph, "remove bush", {"sword"}, NORMAL)


def test_unknown_root_is_an_atom():
    graph = build_graph({"a": Or("b")})
    assert satisfied(graph, "unknown", {"unknown"})
    assert not satisfied(graph, "unknown", {"b"})
    assert satisfied(graph, "b", {"b"})


def test_node_names_in_state_are_ignored():
    graph = build_graph({"jump": Or("feather L-1", "feather L-2")})
    assert not satisfied(graph, "jump", {"jump"})


@pytest.mark.parametrize("mode", [NORMAL, HARD])
@pytest.mark.parametrize("state", list(all_states()))
def test_matches_naive_iteration(tangled_graph, mode, state):
    expected = {n for n in tangled_graph if naive_truth(tangled_graph, n, state, mode)}
    assert reachable(tangled_graph, state, mode) == expected
    for name in tangled_graph:
        assert satisfied(tangled_graph, name, state, mode) == (name in expected)


@pytest.mark.parametrize("mode", [NORMAL, HARD])
def test_monotonic_in_state(tangled_graph, mode):
    states = list(all_states())
    results = {s: reachable(tangled_graph, s, mode) for s in states}
    for small, large in itertools.product(states, states):
        if small <= large:
            assert results[small] <= results[large]


def test_hard_only_adds_options(tangled_graph):
    for state in all_states():
        assert reachable(tangled_graph, state, NORMAL) <= reachable(
            tangled_graph, state, HARD
        )


def test_idempotent(tangled_graph):
    nodes = dict(tangled_graph.nodes)
    state = {"a", "c", "d"}
    first = satisfied_all(tangled_graph, list(tangled_graph), state, HARD)
    second = satisfied_all(tangled_graph, list(tangled_graph), state, HARD)
    assert first == second
    assert dict(tangled_graph.nodes) == nodes


def test_state_is_not_mutated(tangled_graph):
    state = {"a", "b"}
    reachable(tangled_graph, state, HARD)
    satisfied(tangled_graph, "w", state, HARD)
    assert state == {"a", "b"}


def test_satisfied_all(tangled_graph):
    state = {"b", "c", "d"}
    roots = ["p", "r", "u", "w", "missing"]
    result = satisfied_all(tangled_graph, roots, state, HARD)
    assert list(result) == roots
    for root in roots:
        assert result[root] == satisfied(tangled_graph, root, state, HARD)
    assert satisfied_all(tangled_graph, [], state) == {}


def test_scoped_fixpoint_ignores_outside_vertices(tangled_graph):
    p = tangled_graph.index["p"]
    scope = tangled_graph.vertex_closure([p])
    truth = fixpoint(tangled_graph, {"a", "c"}, HARD, scope)
    assert truth[p]
    assert not truth[tangled_graph.index["t"]]


def test_evaluator_matches_functions(tangled_graph):
    evaluator = Evaluator(tangled_graph, HARD)
    for state in all_states():
        assert evaluator.reachable(state) == reachable(tangled_graph, state, HARD)
        for name in tangled_graph:
            assert evaluator.satisfied(name, state) == satisfied(
                tangled_graph, name, state, HARD
            )


def test_evaluator_memo_follows_state():
    graph = build_graph({"kill onox": And("sword", "jump")})
    evaluator = Evaluator(graph)
    inventory = {"sword"}
    assert not evaluator.satisfied("kill onox", inventory)
    inventory.add("jump")
    assert evaluator.satisfied("kill onox", inventory)
    inventory.discard("sword")
    assert not evaluator.satisfied("kill onox", inventory)


def test_evaluator_reuses_fixpoint():
    graph = build_graph({"a": Or("b")})
    evaluator = Evaluator(graph)
    evaluator.satisfied("a", {"b"})
    truth = evaluator._truth
    evaluator.satisfied("a", ["b"])
    assert evaluator._truth is truth
    evaluator.clear()
    assert evaluator._truth is None
    assert evaluator.satisfied_all(["a", "b", "c"], {"b"}) == {
        "a": True,
        "b": True,
        "c": False,
    }


def test_evaluator_mode():
    graph = build_graph({"pit": Hard("shovel")})
    assert not Evaluator(graph).satisfied("pit", {"shovel"})
    assert Evaluator(graph, HARD).satisfied("pit", {"shovel"})


def test_concurrent_queries(tangled_graph):
    states = list(all_states())
    expected = [reachable(tangled_graph, s, HARD) for s in states]

    def run(state):
        return Evaluator(tangled_graph, HARD).reachable(state)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(run, states))
    assert results == expected
