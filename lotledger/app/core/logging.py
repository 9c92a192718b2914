from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_HANDLER_NAME = "lotledger"


def configure_logging(level: str = "INFO") -> None:
    """
    Installe un handler unique sur le logger racine "lotledger".
    Idempotent: un second appel ne fait que changer le niveau.
    """
    root = logging.getLogger("lotledger")
    root.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
