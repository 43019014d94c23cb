import logging

from app.core import config

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing to stderr at the configured level."""
    root = logging.getLogger("app")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(config.LOG_LEVEL)
    if not name.startswith("app"):
        name = f"app.{name}"
    return logging.getLogger(name)
