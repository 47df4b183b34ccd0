"""
Configuration des logs applicatifs.
setup_logging() configure le logger racine une seule fois (console).
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure le logger racine si aucun handler n'est encore attaché."""
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
