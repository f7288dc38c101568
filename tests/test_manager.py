import pytest

from fakes import make_arena
from skirmish.engine.config import CombatConfig
from skirmish.engine.errors import ActorNotFound, CombatAlreadyActive, InvalidCombatTarget, RoomNotFound
from skirmish.engine.roster import npc_entry


@pytest.fixture
def arena():
    manager, registry, transport, scheduler, clock = make_arena()
    registry.join("p1", "Alice", "room-1", "warrior")
    registry.join("p2", "Bob", "room-1")
    return manager, registry, transport, scheduler, clock


def test_initiate_broadcasts_start_and_attaches_session(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p1")

    assert registry.active_session("room-1") is session
    room_id, event, payload = transport.events[0]
    assert (room_id, event) == ("room-1", "combatStarted")
    snap = payload["session"]
    assert snap["status"] == "active"
    assert [p["kind"] for p in snap["participants"]] == ["human", "human", "ai"]
    alice = snap["participants"][0]
    assert alice["name"] == "Alice"
    assert alice["stats"]["maxHealth"] == 120
    assert alice["actionPoints"] == {"max": 3, "rechargeInterval": 3.0, "available": 3,
                                     "progress": [1.0, 1.0, 1.0]}


def test_targets_limit_the_roster(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p2", targets=[
        {"type": "npc", "name": "Boss Orc", "template": "orc", "category": "boss"},
    ])
    assert [p.id for p in session.participants if p.kind.value == "human"] == ["p2"]
    boss = session.npcs()[0]
    assert boss.name == "Boss Orc"
    assert boss.stats.max_health == 700
    assert boss.stats.health == 700


def test_player_targets_join_the_fight(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p2", targets=[{"type": "player", "id": "p1"}])
    assert [p.id for p in session.participants][:2] == ["p2", "p1"]
    assert len(session.npcs()) == 1


def test_initiate_errors(arena):
    manager, registry, transport, scheduler, clock = arena
    with pytest.raises(RoomNotFound):
        manager.initiate_combat("nowhere", "p1")
    with pytest.raises(ActorNotFound):
        manager.initiate_combat("room-1", "stranger")

    manager.initiate_combat("room-1", "p1")
    with pytest.raises(CombatAlreadyActive):
        manager.initiate_combat("room-1", "p1")


def test_client_errors_go_to_the_requester_only(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p1")
    npc_id = session.npcs()[0].id
    transport.events.clear()

    assert manager.handle_action("room-1", "ghost", {"actionKind": "attack", "targetId": npc_id}) is None
    assert transport.errors == [("ghost", "Actor not found")]
    assert transport.events == []
    assert session.log == []

    manager.handle_initiate("room-1", "p2", {})
    assert transport.errors[-1] == ("p2", "Combat already in progress")

    manager.handle_action(None, "p9", {"actionKind": "attack"})
    assert transport.errors[-1] == ("p9", "No active combat")


def test_action_broadcasts_update_then_end(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p1")
    npc_id = session.npcs()[0].id

    manager.handle_action("room-1", "p1", {"actionKind": "attack", "targetId": npc_id,
                                            "actionParams": {"damage": 20}})
    room_id, event, payload = transport.events[-1]
    assert event == "combatUpdate"
    assert payload["session"]["log"][-1]["result"]["targetHealth"] == 80

    manager.handle_action("room-1", "p2", {"actionKind": "attack", "targetId": npc_id,
                                            "actionParams": {"damage": 80}})
    room_id, event, payload = transport.events[-1]
    assert event == "combatEnded"
    assert payload["winner"] == "players"
    assert payload["session"]["status"] == "completed"
    assert registry.active_session("room-1") is None
    assert transport.names().count("combatEnded") == 1


def test_new_combat_after_the_last_one_ended(arena):
    manager, registry, transport, scheduler, clock = arena
    first = manager.initiate_combat("room-1", "p1")
    manager.submit_action("room-1", "p1", "attack", first.npcs()[0].id, {"damage": 500})
    second = manager.initiate_combat("room-1", "p1")
    assert second.id != first.id
    assert registry.active_session("room-1") is second


def test_rooms_are_independent(arena):
    manager, registry, transport, scheduler, clock = arena
    registry.join("p3", "Cara", "room-2")
    one = manager.initiate_combat("room-1", "p1")
    two = manager.initiate_combat("room-2", "p3")

    manager.submit_action("room-2", "p3", "attack", two.npcs()[0].id, {"damage": 500})
    assert registry.active_session("room-2") is None
    assert registry.active_session("room-1") is one
    assert manager.room_lock("room-1") is not manager.room_lock("room-2")


def test_snapshot_log_tail():
    manager, registry, transport, scheduler, clock = make_arena(config=CombatConfig(log_tail=2, action_points=5))
    registry.join("p1", "Alice", "room-1")
    session = manager.initiate_combat("room-1", "p1")
    npc_id = session.npcs()[0].id
    for _ in range(4):
        manager.submit_action("room-1", "p1", "attack", npc_id, {"damage": 1})
    snap = manager.snapshot(session)
    assert len(snap["log"]) == 2
    assert snap["logLength"] == 4


def test_config_from_flask_mapping():
    config = CombatConfig.from_mapping({"SKIRMISH_RECHARGE_INTERVAL": "1.5", "SKIRMISH_ACTION_POINTS": 4})
    assert config.recharge_interval == 1.5
    assert config.action_points == 4
    assert config.npc_tick_interval == CombatConfig().npc_tick_interval


@pytest.mark.parametrize(
    "target,message",
    [
        ({"type": "npc", "difficulty": -1}, "difficulty must be a positive number"),
        ({"type": "npc", "difficulty": "hard"}, "difficulty must be a positive number"),
        ({"type": "npc", "difficulty": float("nan")}, "difficulty must be a positive number"),
        ({"type": "npc", "stats": {"health": "lots"}}, "NPC stats must be numbers"),
        ({"type": "npc", "stats": [1, 2]}, "NPC stats must be an object"),
        ({"type": "npc", "template": "dragon"}, "Unknown NPC template 'dragon'"),
        ({"type": "npc", "category": ["boss"]}, "Unknown NPC category '['boss']'"),
    ],
)
def test_bad_npc_targets_are_reported_to_the_requester(arena, target, message):
    manager, registry, transport, scheduler, clock = arena
    assert manager.handle_initiate("room-1", "p1", {"targets": [target]}) is None
    assert transport.errors == [("p1", message)]
    assert transport.events == []
    assert registry.active_session("room-1") is None
    assert scheduler.live() == []


def test_tiny_npcs_still_start_alive():
    for target in ({"difficulty": 0.001}, {"stats": {"maxHealth": 0}}, {"stats": {"health": 0}}):
        stats = npc_entry(target)["stats"]
        assert stats.max_health == 1
        assert stats.health == 1
        assert stats.strength >= 0 and stats.defense >= 0


def test_fight_needs_a_living_participant_on_each_side(arena):
    manager, registry, transport, scheduler, clock = arena
    registry.get_room("room-1").members["p1"].stats.health = 0

    with pytest.raises(InvalidCombatTarget):
        manager.initiate_combat("room-1", "p1", targets=[{"type": "npc"}])
    assert registry.active_session("room-1") is None
    assert scheduler.live() == []
    assert transport.events == []


def test_npc_ids_never_shadow_participants(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p1", targets=[
        {"type": "player", "id": "p2"},
        {"type": "npc", "id": "p1"},
        {"type": "npc", "id": "boss"},
        {"type": "npc", "id": "boss"},
    ])
    ids = [p.id for p in session.participants]
    assert len(set(ids)) == len(ids) == 5
    assert ids[:2] == ["p1", "p2"]
    assert ids.count("boss") == 1 and ids[3] == "boss"


def test_malformed_ids_are_rejected_cleanly(arena):
    manager, registry, transport, scheduler, clock = arena
    manager.handle_initiate("room-1", "p1", {"initiatorId": ["p1"]})
    assert transport.errors == [("p1", "Initiator not found")]

    session = manager.initiate_combat("room-1", "p1", targets=[{"type": "player", "id": {"sid": "p2"}}])
    assert [p.id for p in session.participants if p.kind.value == "human"] == ["p1"]


def test_unhashable_action_kind_becomes_a_client_error(arena):
    manager, registry, transport, scheduler, clock = arena
    session = manager.initiate_combat("room-1", "p1")
    transport.events.clear()

    assert manager.handle_action("room-1", "p1", {"actionKind": ["attack"], "targetId": None}) is None
    assert transport.errors == [("p1", "Invalid action type")]
    assert transport.events == []
    assert session.log == []
