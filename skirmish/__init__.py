# skirmish/__init__.py
import time

from .engine.config import CombatConfig
from .engine.manager import CombatManager
from .routes import skirmish_bp
from .sockets import SocketIOScheduler, SocketIOTransport, register_socket_handlers
from .state import RoomRegistry


def init_skirmish(app, socketio, scheduler=None, clock=time.time, policy=None):
    """Wire the combat engine into a Flask app + SocketIO server. Returns the manager."""
    registry = RoomRegistry()
    manager = CombatManager(
        registry,
        SocketIOTransport(socketio, registry),
        scheduler or SocketIOScheduler(socketio),
        config=CombatConfig.from_mapping(app.config),
        clock=clock,
        policy=policy,
    )
    app.extensions["skirmish"] = {"registry": registry, "manager": manager}
    app.register_blueprint(skirmish_bp)
    register_socket_handlers(socketio, registry, manager)
    return manager
