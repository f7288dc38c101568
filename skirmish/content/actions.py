# skirmish/content/actions.py
ACTIONS = {
    "attack": {
        "name": "Attack",
        "target": "enemy",
        "energy_cost": 0,
        "base_damage": (5, 15),
    },
    "defend": {
        "name": "Defend",
        "target": "self",
        "energy_cost": 0,
        "effect": {"kind": "defense", "magnitude": 5, "duration": 2},
    },
    "cast": {
        "name": "Cast",
        "target": None,  # taken from the spell
    },
}

SPELLS = {
    "fireball": {
        "name": "Fireball",
        "target": "enemy",
        "energy_cost": 15,
        "base_damage": (10, 20),
    },
    "heal": {
        "name": "Heal",
        "target": "any",
        "energy_cost": 20,
        "base_healing": (10, 20),
    },
    "ignite": {
        "name": "Ignite",
        "target": "enemy",
        "energy_cost": 10,
        "debuff": {"kind": "dot", "magnitude": 4, "duration": 3},
    },
}
