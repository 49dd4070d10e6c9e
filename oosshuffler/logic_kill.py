from __future__ import annotations

from .nodes import And, Hard, HardAnd, HardOr, Node, Or

# which items defeat which enemies, assuming the player is already in the room.
# obstacles that can be cleared several ways (bushes, flowers, pots,
# mushrooms) live here too.
#
# mystery seeds only count as a kill option where ember, scent and gale seeds
# would all work. enemies sharing a room with something throwable just get
# "bracelet" as one more option. animal companions are ignored, they only
# exist in some regions.

# checklist for new entries:
# - sword, beams, boomerang L-1/L-2, rod
# - seeds (satchel, then slingshot)
# - bombs, thrown objects, magnet ball, fool's ore, punch
# - pushing into pits: sword, beams, shield, boomerangs, seeds, rod, bombs,
#   shovel, thrown objects, fool's ore, punch. not the magnet ball, that
#   just kills anything pittable

KILL_NODES: dict[str, Node] = {
    "gale seed weapon": And("gale seeds", Or("slingshot", HardAnd("satchel", "jump"))),
    "gale boomerang": And("gale satchel", "boomerang"),  # stun, then drop
    "slingshot kill normal": And("slingshot", "seed kill normal"),
    "jump kill normal": And("jump", "kill normal"),
    "jump pit normal": And("jump", "pit kill normal"),
    # roughly in route order, prereqs first
    "seed kill normal": Or(
        "ember seeds",
        "scent seeds",
        "gale seed weapon",
        "gale boomerang",
        "mystery seeds",
    ),
    "pop maku bubble": Or(
        "sword", "rod", "seed kill normal", "pegasus slingshot", "bombs", "fool's ore"
    ),
    # safe: areas where the wrong side of a bush can't softlock you
    "remove bush safe": Or(
        "sword", "boomerang L-2", "bracelet", "ember seeds", "gale slingshot", "bombs"
    ),
    "remove bush": Or(
        "sword",
        "boomerang L-2",
        "bracelet",
        HardOr("ember seeds", "gale slingshot", "bombs"),
    ),
    "kill normal": Or(
        "sword", "bombs", "beams", "seed kill normal", "fool's ore", "punch"
    ),
    "pit kill normal": Or(
        "sword",
        "beams",
        "shield",
        "scent seeds",
        "rod",
        "bombs",
        Hard("shovel"),
        "fool's ore",
        "punch",
    ),
    "kill stalfos": Or("kill normal", "rod"),
    "kill stalfos (throw)": Or("kill stalfos", "bracelet"),
    "hit lever": Or(
        "sword",
        "boomerang",
        "rod",
        "ember seeds",
        "scent seeds",
        "any slingshot",
        "fool's ore",
        "punch",
        "shovel",
    ),
    "kill goriya bros": Or("sword", "bombs", "fool's ore", "punch"),
    "kill goriya": Or("kill normal"),
    "kill goriya (pit)": Or("kill goriya", "pit kill normal"),
    "kill aquamentus": Or(
        "sword", "beams", "scent seeds", "bombs", "fool's ore", "punch"
    ),
    "hit far switch": Or("beams", "boomerang", "bombs", "any slingshot"),
    "toss bombs": And("bombs", "toss ring"),
    "kill rope": Or("kill normal"),
    "kill hardhat (pit, throw)": Or(
        "gale seed weapon",
        "sword",
        "beams",
        "boomerang",
        "shield",
        "scent seeds",
        "rod",
        "bombs",
        Hard("shovel"),
        "fool's ore",
        "bracelet",
    ),
    "kill moblin (gap, throw)": Or(
        "sword",
        "beams",
        "scent seeds",
        "slingshot kill normal",
        "bombs",
        "fool's ore",
        "punch",
        "jump kill normal",
        "jump pit normal",
    ),
    "kill zol": Or("kill normal"),
    "remove pot": Or("sword L-2", "bracelet"),
    "kill facade": Or("bombs"),
    "flip spiked beetle": Or("shield", "shovel"),
    "damage spiked beetle (throw)": Or(
        "sword", "bombs", "beams", "seed kill normal", "bracelet", "fool's ore"
    ),
    "flip kill spiked beetle (throw)": And(
        "flip spiked beetle", "damage spiked beetle (throw)"
    ),
    "gale kill spiked beetle": And("gale seed weapon"),
    "kill spiked beetle (throw)": Or(
        "flip kill spiked beetle (throw)", "gale kill spiked beetle"
    ),
    "kill mimic": Or("kill normal"),
    "damage omuai": Or("sword", "bombs", "scent seeds", "fool's ore", "punch"),
    "kill omuai": And("damage omuai", "bracelet"),
    "damage mothula": Or("sword", "bombs", "scent seeds", "fool's ore", "punch"),
    "kill mothula": And("damage mothula", "jump"),  # not survivable without feather
    "remove flower": Or(
        "sword", "boomerang L-2", HardOr("ember seeds", "gale slingshot", "bombs")
    ),
    "damage agunima": Or("sword", "scent seeds", "bombs", "fool's ore", "punch"),
    "kill agunima": And("ember seeds", "damage agunima"),
    "hit very far lever": Or("boomerang L-2", "any slingshot"),
    "hit lever gap": Or("sword", "boomerang", "rod", "any slingshot", "fool's ore"),
    "jump hit lever": And("jump", "hit lever gap"),
    "long jump hit lever": And("long jump", "hit lever"),
    "hit far lever": Or(
        "jump hit lever", "long jump hit lever", "boomerang", "any slingshot"
    ),
    "kill gohma": And(Or("scent seeds", "ember seeds"), Or("slingshot", Hard("start"))),
    "remove mushroom": Or("boomerang L-2", "bracelet"),
    "kill moldorm": Or("sword", "bombs", "punch", "scent seeds", "fool's ore"),
    "kill iron mask": Or("kill normal"),
    "kill armos": Or(
        "sword", "bombs", "beams", "boomerang L-2", "scent seeds", "fool's ore"
    ),
    "kill gibdo": Or("kill normal", "boomerang L-2", "rod"),
    "kill darknut": Or(
        "sword", "bombs", "beams", "scent seeds", "fool's ore", "punch"
    ),
    "kill darknut (pit)": Or(
        "sword",
        "bombs",
        "beams",
        "scent seeds",
        "fool's ore",
        "punch",
        "shield",
        "rod",
        Hard("shovel"),
    ),
    "kill syger": Or("sword", "bombs", "scent seeds", "fool's ore", "punch"),
    "break crystal": Or("sword", "bombs", "punch", "bracelet"),
    "kill hardhat (magnet)": Or("magnet gloves", "gale seed weapon"),
    "kill vire": Or("sword", "bombs", "fool's ore", "punch"),
    "finish manhandla": Or("sword", "bombs", "any slingshot", "fool's ore"),
    "kill manhandla": And("boomerang L-2", "finish manhandla"),
    "kill wizzrobe": Or("kill normal"),
    "kill magunesu": Or("sword", "fool's ore", "punch"),  # bombs don't work
    "kill poe sister": Or(
        "sword", "beams", "ember seeds", "scent seeds", "bombs", "fool's ore", "punch"
    ),
    "kill darknut (across pit)": Or(
        Or("beams", "toss bombs", "scent slingshot", "magnet gloves"),
        And("feather L-2", "kill darknut (pit)"),
    ),
    "kill gleeok": Or("sword", "beams", "bombs", "fool's ore", "punch"),
    "kill frypolar": Or(And("bracelet", "mystery seeds"), "ember seeds"),
    "kill medusa head": Or("sword", "fool's ore"),
    "kill floormaster": Or("kill normal"),
    "kill onox": And("sword", "jump"),
}
