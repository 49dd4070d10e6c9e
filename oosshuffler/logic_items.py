from __future__ import annotations

from .nodes import And, HardAnd, Node, Or

# inventory atoms are treasure names as the item tracker reports them.
# "<seed> tree" means a tree of that type can be harvested.
SEED_TYPES = ["ember", "scent", "gale", "mystery", "pegasus"]

TREASURE_ATOMS: frozenset[str] = frozenset(
    {
        "sword L-1",
        "sword L-2",
        "boomerang L-1",
        "boomerang L-2",
        "slingshot L-1",
        "slingshot L-2",
        "feather L-1",
        "feather L-2",
        "shield L-1",
        "shield L-2",
        "shield L-3",
        "satchel",
        "rod",
        "bombs",
        "bracelet",
        "shovel",
        "magnet gloves",
        "fool's ore",
        "flippers",
        "strange flute",
        "energy ring",
        "fist ring",
        "expert's ring",
        "toss ring",
        *(f"{seed} tree" for seed in SEED_TYPES),
    }
)


def seed_nodes(seed: str) -> dict[str, Node]:
    return {
        f"{seed} satchel": And("satchel", f"{seed} tree"),
        f"{seed} slingshot": And("slingshot", f"{seed} satchel"),
        f"{seed} seeds": Or(f"{seed} satchel", f"{seed} slingshot"),
    }


ITEM_NODES: dict[str, Node] = {
    "sword": Or("sword L-1", "sword L-2"),
    "boomerang": Or("boomerang L-1", "boomerang L-2"),
    "slingshot": Or("slingshot L-1", "slingshot L-2"),
    "shield": Or("shield L-1", "shield L-2", "shield L-3"),
    "jump": Or("feather L-1", "feather L-2"),
    # pegasus seeds stretch a L-1 jump over two-tile gaps, with practice
    "long jump": Or("feather L-2", HardAnd("feather L-1", "pegasus satchel")),
    "beams": And("sword", "energy ring"),
    "punch": Or("fist ring", "expert's ring"),
    "any slingshot": Or(*(f"{seed} slingshot" for seed in SEED_TYPES)),
}
for _seed in SEED_TYPES:
    ITEM_NODES.update(seed_nodes(_seed))
