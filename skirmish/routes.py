# skirmish/routes.py
from flask import Blueprint, current_app, jsonify

skirmish_bp = Blueprint("skirmish", __name__, url_prefix="/skirmish")


@skirmish_bp.route("/rooms/<room_id>")
def room_state(room_id):
    ext = current_app.extensions["skirmish"]
    registry, manager = ext["registry"], ext["manager"]
    room = registry.get_room(room_id)
    if room is None:
        return jsonify({"error": "Room not found"}), 404

    with manager.room_lock(room_id):
        session = registry.active_session(room_id)
        snapshot = manager.snapshot(session) if session else None
    return jsonify({
        "roomId": room_id,
        "players": registry.players_payload(room_id),
        "inCombat": snapshot is not None,
        "session": snapshot,
    })
