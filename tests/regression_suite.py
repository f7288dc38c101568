"""Scenario regression suite for the skirmish combat engine.

Each scenario drives a full room through the manager with a fake clock and
manual timers, then checks the session invariants after every action.
"""

from __future__ import annotations

from typing import List, Tuple

from fakes import make_arena
from skirmish.engine.models import Faction, SessionStatus, StatusEffect


def _assert_invariants(session, prior_log_len: int, expected_new: int) -> None:
    assert len(session.log) == prior_log_len + expected_new, "each accepted action appends exactly one record"
    for p in session.participants:
        assert 0 <= p.stats.health <= p.stats.max_health, f"health out of range for {p.id}"
        assert 0 <= p.stats.energy <= p.stats.max_energy, f"energy out of range for {p.id}"
        for fx in p.buffs + p.debuffs:
            assert fx.duration >= 1, f"expired effect still attached to {p.id}: {fx.kind}"
        assert len(p.action_points.last_used) == p.action_points.capacity


def make_room(*players, targets=None):
    manager, registry, transport, scheduler, clock = make_arena()
    for sid, name, class_id in players:
        registry.join(sid, name, "regression", class_id)
    session = manager.initiate_combat("regression", players[0][0], targets)
    return manager, registry, transport, scheduler, clock, session


def act(manager, session, actor_id, kind, target_id, params=None):
    prior = len(session.log)
    outcome = manager.submit_action("regression", actor_id, kind, target_id, params or {})
    _assert_invariants(session, prior, 1)
    return outcome


def scenario_players_win_with_fixed_damage() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", None))
    npc = session.npcs()[0]

    healths = []
    for _ in range(3):
        act(manager, session, "p1", "attack", npc.id, {"damage": 20})
        healths.append(npc.stats.health)
    assert healths == [80, 60, 40]

    clock.advance(manager.config.recharge_interval)
    act(manager, session, "p1", "attack", npc.id, {"damage": 20})
    outcome = act(manager, session, "p1", "attack", npc.id, {"damage": 20})
    assert outcome.ended and outcome.winner == Faction.PLAYERS
    assert session.status == SessionStatus.COMPLETED
    assert transport.names().count("combatEnded") == 1
    assert scheduler.live() == []
    return True


def scenario_wasted_cast_still_costs_a_slot() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", None))
    alice = session.participant("p1")
    alice.stats.energy = 10
    npc = session.npcs()[0]

    outcome = act(manager, session, "p1", "cast", npc.id, {"spellId": "fireball", "manaCost": 20})
    assert outcome.record.result["success"] is False
    assert alice.stats.energy == 10
    assert npc.stats.health == npc.stats.max_health
    assert len(alice.available_action_point_slots(clock())) == 2
    assert transport.names()[-1] == "combatUpdate"
    return True


def scenario_humans_and_npcs_share_the_window() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", "warrior"), ("p2", "Bob", "healer"))
    npc = session.npcs()[0]

    # no turn order: everyone can act inside the same instant
    act(manager, session, "p1", "attack", npc.id, {"damage": 5})
    act(manager, session, "p2", "defend", "p2")
    assert scheduler.fire_all() == [True]
    act(manager, session, "p2", "attack", npc.id, {"damage": 5})
    assert [r.actor_id for r in session.log] == ["p1", "p2", npc.id, "p2"]
    return True


def scenario_npc_focuses_the_weakest_player() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", None), ("p2", "Bob", None))
    session.participant("p2").stats.health = 30

    assert scheduler.fire_all() == [True]
    assert session.log[-1].target_id == "p2"
    return True


def scenario_ignite_burns_out() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(
        ("p1", "Alice", None),
        targets=[{"type": "npc", "stats": {"health": 100, "defense": 0, "energy": 0}}],
    )
    npc = session.npcs()[0]
    act(manager, session, "p1", "cast", npc.id, {"spellId": "ignite"})

    burned = []
    for _ in range(3):
        scheduler.fire_all()
        tick = session.log[-1].result.get("statusTick", {})
        burned.append(tick.get("effectDamage", 0))
    assert burned == [4, 4, 4]
    assert npc.debuffs == []
    return True


def scenario_defend_softens_random_hits() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", None))
    alice = session.participant("p1")
    alice.add_buff(StatusEffect(kind="defense", magnitude=100, duration=5))

    for _ in range(3):
        scheduler.fire_all()
    assert [r.result["damage"] for r in session.log] == [1, 1, 1]
    assert alice.stats.health == alice.stats.max_health - 3
    return True


def scenario_teardown_stops_npcs() -> bool:
    manager, registry, transport, scheduler, clock, session = make_room(("p1", "Alice", None))
    handles = manager.timers_for("regression")
    manager.teardown_room("regression")
    assert all(h.cancelled for h in handles)
    assert scheduler.fire_all() == []
    assert registry.active_session("regression") is None
    return True


SCENARIOS = [
    scenario_players_win_with_fixed_damage,
    scenario_wasted_cast_still_costs_a_slot,
    scenario_humans_and_npcs_share_the_window,
    scenario_npc_focuses_the_weakest_player,
    scenario_ignite_burns_out,
    scenario_defend_softens_random_hits,
    scenario_teardown_stops_npcs,
]


def run_all() -> List[Tuple[str, bool, str]]:
    results: List[Tuple[str, bool, str]] = []
    for scenario in SCENARIOS:
        try:
            scenario()
            results.append((scenario.__name__, True, ""))
        except AssertionError as exc:
            results.append((scenario.__name__, False, str(exc)))
    return results
