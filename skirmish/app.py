# skirmish/app.py
import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_socketio import SocketIO

from . import init_skirmish
from .log import setup_logging

logger = logging.getLogger(__name__)


def create_app(config=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "change-me-in-prod")
    app.config.update(config or {})

    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=app.config.get("SKIRMISH_ASYNC_MODE"))
    init_skirmish(app, socketio)
    return app, socketio


def main():
    load_dotenv()
    setup_logging(getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))
    app, socketio = create_app()
    port = int(os.environ.get("PORT", 3000))
    logger.info("Server running on port %d", port)
    kwargs = {"allow_unsafe_werkzeug": True} if socketio.async_mode == "threading" else {}
    socketio.run(app, host="0.0.0.0", port=port, **kwargs)


if __name__ == "__main__":
    main()
