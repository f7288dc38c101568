# skirmish/log.py
import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int = logging.INFO) -> None:
    """Root logger with rich console output; the Socket.IO stack is kept at WARNING."""
    handler = RichHandler(
        console=Console(width=120),
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])

    for noisy in ("engineio", "socketio", "werkzeug"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
