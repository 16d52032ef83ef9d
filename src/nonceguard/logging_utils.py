from __future__ import annotations

import logging

from .config import LOG_LEVEL


def configure_logging(level: str | int | None = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
