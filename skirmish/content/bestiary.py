# skirmish/content/bestiary.py
BESTIARY = {
    "goblin": {
        "name": "Goblin",
        "stats": {"health": 100, "max_health": 100, "energy": 30, "max_energy": 30,
                  "strength": 8, "defense": 3, "speed": 12},
    },
    "orc": {
        "name": "Orc",
        "stats": {"health": 140, "max_health": 140, "energy": 20, "max_energy": 20,
                  "strength": 12, "defense": 6, "speed": 8},
    },
    "cultist": {
        "name": "Cultist",
        "stats": {"health": 80, "max_health": 80, "energy": 60, "max_energy": 60,
                  "strength": 6, "defense": 2, "speed": 10},
    },
}

DEFAULT_NPC = "goblin"

# Multipliers applied after difficulty scaling.
CATEGORIES = {
    "normal": {"max_health": 1.0, "strength": 1.0, "defense": 1.0},
    "elite": {"max_health": 2.0, "strength": 1.5, "defense": 1.0},
    "boss": {"max_health": 5.0, "strength": 2.0, "defense": 1.5},
}
