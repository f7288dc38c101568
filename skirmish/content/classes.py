# skirmish/content/classes.py
CLASSES = {
    "warrior": {
        "name": "Warrior",
        "stat_mods": {"strength": 5, "defense": 3, "max_health": 20},
    },
    "mage": {
        "name": "Mage",
        "stat_mods": {"max_energy": 30},
    },
    "healer": {
        "name": "Healer",
        "stat_mods": {"max_energy": 20},
    },
}
